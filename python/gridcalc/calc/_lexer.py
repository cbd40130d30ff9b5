"""Formula tokenizer: lazy token stream over the text after ``=``."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from gridcalc._utils import COLUMN_LABELS, Position

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# ---------------------------------------------------------------------------
# Token types
# ---------------------------------------------------------------------------


class Op(enum.Enum):
    """Binary arithmetic operators.

    ``precedence`` follows the lower-binds-tighter convention: ``*`` and
    ``/`` (3) bind tighter than ``+`` and ``-`` (4).
    """

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def precedence(self) -> int:
        return 3 if self in (Op.MUL, Op.DIV) else 4

    def __repr__(self) -> str:
        return f"Op({self.value!r})"


@dataclass(frozen=True)
class Number:
    """Integer literal."""

    value: int


@dataclass(frozen=True)
class CellRef:
    """Reference to another cell."""

    position: Position


class Invalid:
    """Lexical error marker. Use the ``INVALID`` singleton."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "INVALID"


INVALID = Invalid()

Token = Union[Number, CellRef, Op, Invalid]

_OPERATORS = {op.value: op for op in Op}
_DIGITS_RE = re.compile(r"[0-9]+")
_SPACE_RE = re.compile(r"\s*")


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


def tokenize(text: str) -> Iterator[Token]:
    """Yield tokens from *text* (a formula body without the leading ``=``).

    Numbers are maximal runs of ASCII digits; a literal that doesn't fit a
    signed 64-bit integer yields ``INVALID``.  A cell reference is one
    uppercase column letter immediately followed by a single row digit
    ``1``-``9``, so ``A12`` lexes as ``A1`` then ``2``.  Anything else
    yields ``INVALID``; the stream keeps going after it.
    """
    pos = 0
    length = len(text)
    while True:
        pos = _SPACE_RE.match(text, pos).end()
        if pos >= length:
            return
        ch = text[pos]

        m = _DIGITS_RE.match(text, pos)
        if m:
            pos = m.end()
            value = int(m.group())
            yield Number(value) if value <= INT64_MAX else INVALID
            continue

        if ch in _OPERATORS:
            pos += 1
            yield _OPERATORS[ch]
            continue

        if ch in COLUMN_LABELS:
            digit = text[pos + 1] if pos + 1 < length else ""
            pos += 2
            if digit in ("1", "2", "3", "4", "5", "6", "7", "8", "9"):
                yield CellRef(Position(COLUMN_LABELS.index(ch), int(digit) - 1))
            else:
                yield INVALID
            continue

        pos += 1
        yield INVALID


class Lexer:
    """Re-iterable token stream over a formula body.

    Each ``iter()`` starts again from the beginning of the text::

        lexer = Lexer("A1 + 2")
        list(lexer) == list(lexer)
    """

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __iter__(self) -> Iterator[Token]:
        return tokenize(self.text)

    def __repr__(self) -> str:
        return f"Lexer({self.text!r})"
