"""Sheet construction settings."""

from __future__ import annotations

from dataclasses import dataclass

from gridcalc._utils import COLUMN_LABELS


@dataclass(frozen=True)
class SheetConfig:
    """Fixed extents of a Sheet.

    Formulas can only address columns ``A``-``Z`` and rows ``1``-``9``;
    taller sheets are allowed, their lower rows just can't be referenced.
    """

    columns: int = 10
    rows: int = 30
    column_width: int = 7

    def __post_init__(self) -> None:
        if not 1 <= self.columns <= len(COLUMN_LABELS):
            raise ValueError(
                f"columns must be between 1 and {len(COLUMN_LABELS)}, got {self.columns}"
            )
        if self.rows < 1:
            raise ValueError(f"rows must be positive, got {self.rows}")
        if self.column_width < 1:
            raise ValueError(f"column_width must be positive, got {self.column_width}")
