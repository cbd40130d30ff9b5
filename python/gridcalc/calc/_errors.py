"""Typed error values cached as a formula cell's result."""

from __future__ import annotations

import enum
from typing import Any


class CalcError(enum.Enum):
    """Failure outcome of compiling or executing one formula.

    Errors are values, not exceptions: they are cached in the cell that
    produced them and never abort the rest of the sheet.  The set of kinds
    is fixed; ``CalcError("#DIV/0!")`` looks a kind up by its code.
    """

    COMPILE = "#COMPILE!"
    NOT_IMPLEMENTED = "#NOTIMPL!"
    OUT_OF_STACK = "#STACK!"
    DIV0 = "#DIV/0!"
    NOT_EXECUTED = "#PENDING!"
    CYCLIC = "#CYCLE!"
    CELL_NOT_FOUND = "#REF!"
    OVERFLOW = "#NUM!"

    @property
    def code(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


def is_error(val: Any) -> bool:
    """Return True if *val* is a CalcError."""
    return isinstance(val, CalcError)
