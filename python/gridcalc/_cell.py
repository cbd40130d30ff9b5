"""Cell variants and parsing of user-entered text into cells."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from gridcalc.calc._errors import CalcError
from gridcalc.calc._lexer import INT64_MAX, INT64_MIN
from gridcalc.calc._parser import FORMULA_MARKER, CompiledExpression, compile_formula


class Empty:
    """A cell with nothing in it. Use the ``EMPTY`` singleton."""

    __slots__ = ()

    @property
    def value(self) -> None:
        return None

    @property
    def entry(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = Empty()


@dataclass(frozen=True)
class Value:
    """An integer entered directly."""

    number: int

    @property
    def value(self) -> int:
        return self.number

    @property
    def entry(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class Text:
    """Free text; never has a numeric value."""

    text: str

    @property
    def value(self) -> None:
        return None

    @property
    def entry(self) -> str:
        return self.text


@dataclass(frozen=True)
class Formula:
    """A compiled formula plus the outcome cached when it was inserted.

    The expression is shared; ``result`` belongs to this cell alone and
    stays ``NOT_EXECUTED`` until a Sheet stores the cell.
    """

    expression: CompiledExpression
    result: int | CalcError = CalcError.NOT_EXECUTED

    @property
    def value(self) -> int | None:
        return None if isinstance(self.result, CalcError) else self.result

    @property
    def entry(self) -> str:
        return self.expression.text


Cell = Union[Empty, Value, Text, Formula]

_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_entry(
    text: str,
    compiled_cache: dict[str, CompiledExpression] | None = None,
) -> Cell:
    """Turn entered text into a cell.

    ``""`` is empty, ``=...`` is a formula, a signed 64-bit integer is a
    value and anything else is text.  Formulas whose text is already in
    *compiled_cache* reuse the cached expression.
    """
    if not text:
        return EMPTY
    if text.startswith(FORMULA_MARKER):
        if compiled_cache is None:
            return Formula(compile_formula(text))
        expression = compiled_cache.get(text)
        if expression is None:
            expression = compiled_cache[text] = compile_formula(text)
        return Formula(expression)
    if _INT_RE.fullmatch(text):
        number = int(text)
        if INT64_MIN <= number <= INT64_MAX:
            return Value(number)
    return Text(text)
