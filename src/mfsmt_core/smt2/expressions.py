# src/mfsmt_core/smt2/expressions.py
"""
The symbolic-expression model used as the universal intermediate representation
for solver programs.

Every constraint generator produces trees of these immutable value types:

*   `Symbol` - an opaque atom (a variable name or an operator keyword).
*   `RealLiteral` - a finite real number rendered in exact, locale-independent
    decimal notation.
*   `ParenList` - an ordered, non-empty tuple of child expressions, written as a
    single parenthesized form.
*   `EmptyArgumentList` - the `()` sort list of a declaration; never a form.

Expressions compare and hash structurally, so two independently built trees for
the same constraint are interchangeable.
"""
from __future__ import annotations

import decimal
import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, TextIO, Tuple

logger = logging.getLogger(__name__)

# SMT-LIB 2 simple symbols: no whitespace, parentheses, quotes or '|', no leading digit.
_SIMPLE_SYMBOL_REGEX = re.compile(r"^(?![0-9])[A-Za-z0-9~!@$%^&*_+=<>.?/\-]+$")


class SExpression(ABC):
    """Abstract base of the expression model."""

    @abstractmethod
    def to_smt2(self) -> str:
        """Renders this expression in SMT-LIB 2 concrete syntax."""
        pass

    @abstractmethod
    def iter_symbols(self) -> Iterator[Symbol]:
        """Yields every Symbol in this tree, depth first, left to right."""
        pass

    def write(self, stream: TextIO) -> None:
        stream.write(self.to_smt2())

    def __str__(self) -> str:
        return self.to_smt2()


@dataclass(frozen=True)
class Symbol(SExpression):
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not _SIMPLE_SYMBOL_REGEX.match(self.name):
            raise ValueError(f"'{self.name}' is not a valid SMT2 simple symbol.")

    def to_smt2(self) -> str:
        return self.name

    def iter_symbols(self) -> Iterator[Symbol]:
        yield self


@dataclass(frozen=True)
class RealLiteral(SExpression):
    """
    A real-valued constant.

    Rendering uses the shortest decimal string that round-trips the float
    (Python's repr), expanded to fixed-point notation so no exponent ever
    reaches the solver. Negative values are written as `(- <magnitude>)`, the
    only sign form SMT-LIB 2 accepts for reals.
    """
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool):
            raise TypeError("Boolean values cannot be used as real literals.")
        as_float = float(self.value)
        if not math.isfinite(as_float):
            raise ValueError(f"Real literal must be finite, got {self.value!r}.")
        object.__setattr__(self, 'value', as_float)

    def to_smt2(self) -> str:
        magnitude = format(decimal.Decimal(repr(abs(self.value))), 'f')
        if '.' not in magnitude:
            magnitude += '.0'
        if math.copysign(1.0, self.value) < 0 and self.value != 0.0:
            return f"(- {magnitude})"
        return magnitude

    def iter_symbols(self) -> Iterator[Symbol]:
        return iter(())


@dataclass(frozen=True)
class ParenList(SExpression):
    exprs: Tuple[SExpression, ...]

    def __init__(self, exprs: Iterable[SExpression]):
        children = tuple(exprs)
        if not children:
            raise ValueError("A parenthesized form must contain at least one expression.")
        for child in children:
            if not isinstance(child, SExpression):
                raise TypeError(f"ParenList children must be SExpressions, got {type(child).__name__}.")
        object.__setattr__(self, 'exprs', children)

    @property
    def head(self) -> SExpression:
        return self.exprs[0]

    def is_form(self, keyword: str) -> bool:
        """True if this form's first child is the Symbol `keyword`."""
        return isinstance(self.head, Symbol) and self.head.name == keyword

    def to_smt2(self) -> str:
        return "(" + " ".join(expr.to_smt2() for expr in self.exprs) + ")"

    def iter_symbols(self) -> Iterator[Symbol]:
        for expr in self.exprs:
            yield from expr.iter_symbols()


@dataclass(frozen=True)
class EmptyArgumentList(SExpression):
    """
    The empty sort list `()` in `(declare-fun f () Real)`.

    It is not a form: it has no head and is never classified as a declaration,
    assertion or directive.
    """

    def to_smt2(self) -> str:
        return "()"

    def iter_symbols(self) -> Iterator[Symbol]:
        return iter(())


EMPTY_ARGUMENTS = EmptyArgumentList()
