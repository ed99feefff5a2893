# tests/test_expressions.py
import io
import math

import pytest

from mfsmt_core.smt2 import EMPTY_ARGUMENTS, ParenList, RealLiteral, Symbol


# --- Symbols ---

def test_symbol_renders_verbatim():
    assert Symbol("in0_pos_x").to_smt2() == "in0_pos_x"
    assert Symbol("declare-fun").to_smt2() == "declare-fun"
    assert str(Symbol(">=")) == ">="


@pytest.mark.parametrize("bad_name", ["", "1abc", "a b", "a(b", "a|b", 'say"hi'])
def test_symbol_rejects_names_that_are_not_simple_symbols(bad_name):
    with pytest.raises(ValueError):
        Symbol(bad_name)


def test_symbols_compare_structurally():
    assert Symbol("x") == Symbol("x")
    assert hash(Symbol("x")) == hash(Symbol("x"))
    assert Symbol("x") != Symbol("y")


# --- Real literals ---

@pytest.mark.parametrize("value, expected", [
    (0.04, "0.04"),
    (1, "1.0"),
    (0.0, "0.0"),
    (-0.0, "0.0"),
    (2000.0, "2000.0"),
    (-2.5, "(- 2.5)"),
    (1e-20, "0.00000000000000000001"),
    (1e20, "100000000000000000000.0"),
    (0.0872664626, "0.0872664626"),
])
def test_real_literal_uses_fixed_point_decimal(value, expected):
    assert RealLiteral(value).to_smt2() == expected


def test_pi_literal_round_trips_to_full_precision():
    text = RealLiteral(math.pi).to_smt2()
    assert text == "3.141592653589793"
    assert float(text) == math.pi


def test_real_literal_never_uses_exponent_notation():
    for value in (1.5e-12, 6.02e23, 123456789.125, 1e-300):
        text = RealLiteral(value).to_smt2()
        assert "e" not in text.lower()
        assert "." in text
        assert float(text) == value


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_real_literal_rejects_non_finite_values(value):
    with pytest.raises(ValueError):
        RealLiteral(value)


def test_real_literal_rejects_booleans():
    with pytest.raises(TypeError):
        RealLiteral(True)


def test_real_literal_normalises_ints_to_float():
    assert RealLiteral(3) == RealLiteral(3.0)


# --- Forms ---

def test_paren_list_renders_nested_children():
    expr = ParenList([Symbol("assert"), ParenList([Symbol(">"), Symbol("x"), RealLiteral(0.0)])])
    assert expr.to_smt2() == "(assert (> x 0.0))"


def test_paren_list_cannot_be_empty():
    with pytest.raises(ValueError):
        ParenList([])


def test_paren_list_children_must_be_expressions():
    with pytest.raises(TypeError):
        ParenList([Symbol("+"), "x", 1.0])


def test_paren_list_is_an_immutable_value():
    children = [Symbol("a"), RealLiteral(1.0)]
    first = ParenList(children)
    children.append(Symbol("b"))
    assert first == ParenList([Symbol("a"), RealLiteral(1.0)])
    assert hash(first) == hash(ParenList(iter([Symbol("a"), RealLiteral(1.0)])))
    assert len({first, ParenList([Symbol("a"), RealLiteral(1.0)])}) == 1


def test_paren_list_head_and_form_keyword():
    form = ParenList([Symbol("assert"), Symbol("x")])
    assert form.head == Symbol("assert")
    assert form.is_form("assert")
    assert not form.is_form("declare-fun")
    assert not ParenList([RealLiteral(1.0)]).is_form("assert")


def test_iter_symbols_walks_depth_first():
    expr = ParenList([Symbol("+"), Symbol("a"), ParenList([Symbol("*"), Symbol("b"), RealLiteral(2.0)])])
    assert [s.name for s in expr.iter_symbols()] == ["+", "a", "*", "b"]


def test_empty_argument_list_renders_as_unit():
    assert EMPTY_ARGUMENTS.to_smt2() == "()"
    assert list(EMPTY_ARGUMENTS.iter_symbols()) == []


def test_write_streams_the_rendering():
    stream = io.StringIO()
    ParenList([Symbol("check-sat")]).write(stream)
    assert stream.getvalue() == "(check-sat)"
