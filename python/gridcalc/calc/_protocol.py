"""CellSource protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gridcalc._utils import Position
    from gridcalc.calc._errors import CalcError


@runtime_checkable
class CellSource(Protocol):
    """Anything the evaluator can read cell values from."""

    def value(self, position: Position) -> int | None:
        """Current numeric value of the cell at *position*, if it has one."""
        ...


@dataclass(frozen=True)
class CellDelta:
    """A single formula cell's result change from recalculation."""

    position: Position
    old_value: int | CalcError
    new_value: int | CalcError
    formula: str  # the formula text that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Result of re-evaluating the formulas downstream of changed cells."""

    changed: tuple[Position, ...]  # cells the recalculation started from
    deltas: tuple[CellDelta, ...]  # formula cells whose result changed
    evaluated_cells: int = 0  # formula cells re-executed

    @property
    def propagated_cells(self) -> int:
        return len(self.deltas)
