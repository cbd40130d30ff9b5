"""Sheet: the fixed-size cell grid and its single insertion path."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from typing import Any, Union

from gridcalc._cell import EMPTY, Cell, Empty, Formula, Text, Value, parse_entry
from gridcalc._config import SheetConfig
from gridcalc._utils import Position, as_position
from gridcalc.calc._errors import CalcError
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._lexer import INT64_MAX, INT64_MIN
from gridcalc.calc._parser import CompiledExpression, compile_formula
from gridcalc.calc._protocol import CellDelta, RecalcResult

logger = logging.getLogger(__name__)

Key = Union[Position, tuple[int, int], str]


class _Column:
    __slots__ = ("width", "cells")

    def __init__(self, width: int, rows: int) -> None:
        self.width = width
        self.cells: list[Cell] = [EMPTY] * rows


class Sheet:
    """A fixed-size grid of cells plus the dependency graph of its formulas.

    Usage::

        sheet = Sheet()
        sheet["A1"] = 5
        sheet["B1"] = "=A1*2"
        sheet.value("B1")  # 10
    """

    __slots__ = ("_config", "_columns", "_graph", "_compiled_cache")

    def __init__(self, config: SheetConfig | None = None) -> None:
        self._config = config or SheetConfig()
        self._columns = [
            _Column(self._config.column_width, self._config.rows)
            for _ in range(self._config.columns)
        ]
        self._graph = DependencyGraph()
        # formula text -> shared compiled expression
        self._compiled_cache: dict[str, CompiledExpression] = {}

    @property
    def config(self) -> SheetConfig:
        return self._config

    @property
    def dimensions(self) -> tuple[int, int]:
        """``(columns, rows)``."""
        return self._config.columns, self._config.rows

    @property
    def graph(self) -> DependencyGraph:
        return self._graph

    def __contains__(self, key: Key) -> bool:
        try:
            column, row = as_position(key)
        except ValueError:
            return False
        return column < self._config.columns and row < self._config.rows

    def _checked(self, key: Key) -> Position:
        pos = as_position(key)
        if pos not in self:
            raise IndexError(
                f"Position {pos} outside sheet of {self._config.columns}x{self._config.rows}"
            )
        return pos

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def cell(self, key: Key) -> Cell:
        """Return the cell at *key* (an A1 label or ``(column, row)``)."""
        column, row = self._checked(key)
        return self._columns[column].cells[row]

    def __getitem__(self, key: Key) -> Cell:
        """``sheet['A1']`` -> Cell."""
        return self.cell(key)

    def __setitem__(self, key: Key, value: Any) -> None:
        """``sheet['A1'] = 42`` - shorthand for building and inserting a cell.

        Accepts an int, entry text (parsed like typed input), None (clears
        the cell) or a ready-made Cell.
        """
        if isinstance(value, (Empty, Value, Text, Formula)):
            cell = value
        elif value is None:
            cell = EMPTY
        elif isinstance(value, str):
            cell = parse_entry(value, self._compiled_cache)
        elif isinstance(value, int) and not isinstance(value, bool):
            if not INT64_MIN <= value <= INT64_MAX:
                raise ValueError(f"Value does not fit a 64-bit integer: {value}")
            cell = Value(value)
        else:
            raise TypeError(f"Unsupported cell value: {value!r}")
        self.insert(cell, key)

    def value(self, key: Key) -> int | None:
        """Current numeric value of a cell, if it has one.

        Positions outside the sheet have no value rather than raising, so a
        formula referencing them resolves to ``CELL_NOT_FOUND``.
        """
        pos = as_position(key)
        if pos not in self:
            return None
        return self._columns[pos.column].cells[pos.row].value

    def entry(self, key: Key) -> str:
        """Text that reproduces the cell when entered again."""
        return self.cell(key).entry

    def compile(self, text: str) -> CompiledExpression:
        """Compile formula text, sharing one expression per distinct text."""
        expression = self._compiled_cache.get(text)
        if expression is None:
            expression = self._compiled_cache[text] = compile_formula(text)
        return expression

    def column_width(self, column: int) -> int:
        return self._columns[self._checked((column, 0)).column].width

    def set_column_width(self, column: int, width: int) -> None:
        if width < 1:
            raise ValueError(f"width must be positive, got {width}")
        self._columns[self._checked((column, 0)).column].width = width

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def insert(self, cell: Cell, key: Key) -> None:
        """Store *cell* at *key*, registering and evaluating formulas.

        Edges left by the cell previously stored here are dropped first.  A
        formula that would close a circular reference is stored with
        ``CYCLIC`` and registers nothing; otherwise its references are
        registered and it is executed against the sheet.  Formulas that
        read this position are not re-evaluated; see :meth:`recalculate`.
        """
        if not isinstance(cell, (Empty, Value, Text, Formula)):
            raise TypeError(f"Unsupported cell: {cell!r}")
        pos = self._checked(key)
        self._graph.clear_dependencies(pos)

        if isinstance(cell, Formula):
            refs = cell.expression.references
            if self._graph.would_cycle(pos, refs):
                logger.debug("Circular reference rejected at %s: %s", pos.to_a1(), cell.expression)
                cell = dataclasses.replace(cell, result=CalcError.CYCLIC)
            else:
                for ref in refs:
                    self._graph.add_dependency(ref, pos)
                result = cell.expression.execute(self)
                if isinstance(result, CalcError):
                    logger.debug("Formula %s at %s failed: %s", cell.expression, pos.to_a1(), result)
                cell = dataclasses.replace(cell, result=result)

        self._columns[pos.column].cells[pos.row] = cell

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def recalculate(self, changed: Key | list[Key]) -> RecalcResult:
        """Re-execute every formula downstream of *changed*, in dependency order.

        Insertion never does this on its own; call it after updating cells
        that other formulas read.
        """
        if isinstance(changed, (str, tuple)):
            roots = (self._checked(changed),)
        else:
            roots = tuple(self._checked(k) for k in changed)

        affected = self._graph.affected_cells(roots)
        deltas: list[CellDelta] = []
        for pos in affected:
            cell = self._columns[pos.column].cells[pos.row]
            if not isinstance(cell, Formula):
                continue
            result = cell.expression.execute(self)
            if result != cell.result:
                deltas.append(CellDelta(
                    position=pos,
                    old_value=cell.result,
                    new_value=result,
                    formula=cell.expression.text,
                ))
                self._columns[pos.column].cells[pos.row] = dataclasses.replace(cell, result=result)

        return RecalcResult(
            changed=roots,
            deltas=tuple(deltas),
            evaluated_cells=len(affected),
        )

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter_cells(self) -> Iterator[tuple[Position, Cell]]:
        """Yield ``(position, cell)`` for every non-empty cell, column by column."""
        for c, column in enumerate(self._columns):
            for r, cell in enumerate(column.cells):
                if not isinstance(cell, Empty):
                    yield Position(c, r), cell

    def __repr__(self) -> str:
        columns, rows = self.dimensions
        return f"<Sheet {columns}x{rows}>"
