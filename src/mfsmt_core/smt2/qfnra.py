# src/mfsmt_core/smt2/qfnra.py
"""
Typed constructors for the QF_NRA (quantifier-free nonlinear real arithmetic)
fragment of SMT-LIB 2.

All builders return plain `SExpression` trees and perform no validation beyond
structural well-formedness. Operands may be given as expressions or as plain
Python numbers, which are wrapped in `RealLiteral`.
"""
import logging
from numbers import Real
from typing import Union

from .expressions import EMPTY_ARGUMENTS, ParenList, RealLiteral, SExpression, Symbol

logger = logging.getLogger(__name__)

Operand = Union[SExpression, float, int]

DECLARE_FUN = "declare-fun"
ASSERT = "assert"
LOGIC_NAME = "QF_NRA"
REAL_SORT = "Real"


def as_expr(operand: Operand) -> SExpression:
    """Wraps a plain number as a RealLiteral; passes expressions through."""
    if isinstance(operand, SExpression):
        return operand
    if isinstance(operand, Real) and not isinstance(operand, bool):
        return RealLiteral(float(operand))
    raise TypeError(f"Cannot use {type(operand).__name__} value {operand!r} as an SMT2 operand.")


def _form(keyword: str, *operands: Operand) -> ParenList:
    return ParenList([Symbol(keyword)] + [as_expr(op) for op in operands])


# --- Directives ---

def use_qfnra() -> ParenList:
    """(set-logic QF_NRA), the one logic-selection directive at program start."""
    return ParenList([Symbol("set-logic"), Symbol(LOGIC_NAME)])


def check_sat() -> ParenList:
    return ParenList([Symbol("check-sat")])


def exit_solver() -> ParenList:
    return ParenList([Symbol("exit")])


# --- Declarations ---

def declare_real_variable(symbol: Symbol) -> ParenList:
    """(declare-fun <symbol> () Real)"""
    if not isinstance(symbol, Symbol):
        raise TypeError(f"Only symbols can be declared, got {type(symbol).__name__}.")
    return ParenList([Symbol(DECLARE_FUN), symbol, EMPTY_ARGUMENTS, Symbol(REAL_SORT)])


# --- Assertions ---

def _assert(relation: str, lhs: Operand, rhs: Operand) -> ParenList:
    return ParenList([Symbol(ASSERT), _form(relation, lhs, rhs)])


def assert_equal(lhs: Operand, rhs: Operand) -> ParenList:
    return _assert("=", lhs, rhs)


def assert_greater(lhs: Operand, rhs: Operand) -> ParenList:
    return _assert(">", lhs, rhs)


def assert_greater_equal(lhs: Operand, rhs: Operand) -> ParenList:
    return _assert(">=", lhs, rhs)


def assert_less_than(lhs: Operand, rhs: Operand) -> ParenList:
    return _assert("<", lhs, rhs)


def assert_less_equal(lhs: Operand, rhs: Operand) -> ParenList:
    return _assert("<=", lhs, rhs)


# --- Arithmetic ---

def add(*terms: Operand) -> ParenList:
    if len(terms) < 2:
        raise ValueError("'+' needs at least two terms.")
    return _form("+", *terms)


def subtract(lhs: Operand, rhs: Operand) -> ParenList:
    return _form("-", lhs, rhs)


def multiply(*factors: Operand) -> ParenList:
    if len(factors) < 2:
        raise ValueError("'*' needs at least two factors.")
    return _form("*", *factors)


def divide(numerator: Operand, denominator: Operand) -> ParenList:
    return _form("/", numerator, denominator)


def square(term: Operand) -> ParenList:
    return multiply(term, term)
