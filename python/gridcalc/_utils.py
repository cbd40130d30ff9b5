"""Grid addressing helpers: ``Position`` and A1 label conversion."""

from __future__ import annotations

import re
from typing import NamedTuple

COLUMN_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_A1_RE = re.compile(r"([A-Z])([1-9][0-9]*)")


class Position(NamedTuple):
    """0-based (column, row) coordinate of a grid cell."""

    column: int
    row: int

    @classmethod
    def from_a1(cls, label: str) -> Position:
        """``"B3"`` -> ``Position(1, 2)``."""
        return cls(*a1_to_colrow(label))

    def to_a1(self) -> str:
        return colrow_to_a1(self.column, self.row)


def a1_to_colrow(label: str) -> tuple[int, int]:
    """Convert an A1 label to 0-based ``(column, row)``.

    Only single-letter column labels are valid; the row part is 1-based.
    """
    m = _A1_RE.fullmatch(label.strip().upper())
    if m is None:
        raise ValueError(f"Invalid cell label: {label!r}")
    return COLUMN_LABELS.index(m.group(1)), int(m.group(2)) - 1


def colrow_to_a1(column: int, row: int) -> str:
    if not 0 <= column < len(COLUMN_LABELS) or row < 0:
        raise ValueError(f"Position out of addressable range: ({column}, {row})")
    return f"{COLUMN_LABELS[column]}{row + 1}"


def as_position(key: Position | tuple[int, int] | str) -> Position:
    """Normalize an A1 label or a ``(column, row)`` pair to a Position."""
    if isinstance(key, str):
        return Position.from_a1(key)
    column, row = key
    if column < 0 or row < 0:
        raise ValueError(f"Negative position: ({column}, {row})")
    return Position(column, row)
