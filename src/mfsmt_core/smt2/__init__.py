# src/mfsmt_core/smt2/__init__.py
from .expressions import (
    EMPTY_ARGUMENTS,
    EmptyArgumentList,
    ParenList,
    RealLiteral,
    SExpression,
    Symbol,
)
from . import names, qfnra
from .exceptions import SymbolNamingError

__all__ = [
    # Expression model
    "SExpression",
    "Symbol",
    "RealLiteral",
    "ParenList",
    "EmptyArgumentList",
    "EMPTY_ARGUMENTS",
    # Builders
    "names",
    "qfnra",
    # Exceptions
    "SymbolNamingError",
]
