# tests/test_qfnra.py
import pytest

from mfsmt_core.smt2 import RealLiteral, Symbol, qfnra

X = Symbol("x")
Y = Symbol("y")


def test_declare_real_variable():
    assert qfnra.declare_real_variable(X).to_smt2() == "(declare-fun x () Real)"


def test_only_symbols_can_be_declared():
    with pytest.raises(TypeError):
        qfnra.declare_real_variable(RealLiteral(1.0))


def test_directives():
    assert qfnra.use_qfnra().to_smt2() == "(set-logic QF_NRA)"
    assert qfnra.check_sat().to_smt2() == "(check-sat)"
    assert qfnra.exit_solver().to_smt2() == "(exit)"


@pytest.mark.parametrize("builder, op", [
    (qfnra.assert_equal, "="),
    (qfnra.assert_greater, ">"),
    (qfnra.assert_greater_equal, ">="),
    (qfnra.assert_less_than, "<"),
    (qfnra.assert_less_equal, "<="),
])
def test_assertions_wrap_a_binary_relation(builder, op):
    assert builder(X, Y).to_smt2() == f"(assert ({op} x y))"


def test_plain_numbers_are_wrapped_as_literals():
    assert qfnra.assert_less_than(X, 0.04).to_smt2() == "(assert (< x 0.04))"
    assert qfnra.assert_greater(X, 0).to_smt2() == "(assert (> x 0.0))"
    assert qfnra.multiply(-1.0, X).to_smt2() == "(* (- 1.0) x)"


def test_arithmetic_helpers():
    assert qfnra.add(X, Y, 1.0).to_smt2() == "(+ x y 1.0)"
    assert qfnra.subtract(X, Y).to_smt2() == "(- x y)"
    assert qfnra.multiply(X, Y).to_smt2() == "(* x y)"
    assert qfnra.divide(X, 2.0).to_smt2() == "(/ x 2.0)"
    assert qfnra.square(qfnra.subtract(X, Y)).to_smt2() == "(* (- x y) (- x y))"


def test_variadic_helpers_need_two_operands():
    with pytest.raises(ValueError):
        qfnra.add(X)
    with pytest.raises(ValueError):
        qfnra.multiply(X)


def test_non_numeric_operands_are_rejected():
    with pytest.raises(TypeError):
        qfnra.as_expr("x")
    with pytest.raises(TypeError):
        qfnra.as_expr(True)
