"""Dependency graph for formula cells: cycle checks and evaluation ordering."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from gridcalc._utils import Position


class DependencyGraph:
    """Tracks which formula cells read which cells.

    ``dependents`` holds the reverse edges used for cycle detection and
    recalculation; ``dependencies`` holds each formula cell's forward edges
    so they can be dropped when the cell is overwritten.
    """

    __slots__ = ("dependencies", "dependents")

    def __init__(self) -> None:
        # formula cell -> set of cells it reads from
        self.dependencies: dict[Position, set[Position]] = {}
        # cell -> formula cells that read from it (reverse edges)
        self.dependents: dict[Position, list[Position]] = {}

    def add_dependency(self, target: Position, depender: Position) -> None:
        """Record that the formula at *depender* reads *target*."""
        self.dependents.setdefault(target, []).append(depender)
        self.dependencies.setdefault(depender, set()).add(target)

    def remove_dependency(self, target: Position, depender: Position) -> None:
        """Drop one ``target -> depender`` edge.

        Raises KeyError if no such edge is registered.
        """
        readers = self.dependents.get(target)
        if not readers or depender not in readers:
            raise KeyError(f"{depender} does not depend on {target}")
        readers.remove(depender)
        if not readers:
            del self.dependents[target]
        if depender not in readers:
            deps = self.dependencies[depender]
            deps.discard(target)
            if not deps:
                del self.dependencies[depender]

    def clear_dependencies(self, depender: Position) -> None:
        """Drop every edge registered for the formula at *depender*."""
        for target in self.dependencies.pop(depender, set()):
            readers = self.dependents.get(target, [])
            readers[:] = [r for r in readers if r != depender]
            if not readers:
                self.dependents.pop(target, None)

    def would_cycle(self, position: Position, references: Iterable[Position]) -> bool:
        """Would committing a formula at *position* reading *references* close a loop?

        Walks outward from *position* along the "depends on me" edges.  The
        new edges would run from each reference to *position*, so reaching a
        reference (or *position* itself) means a circular chain.
        """
        refs = set(references)
        if position in refs:
            return True

        visited: set[Position] = set()
        pending: list[Position] = list(self.dependents.get(position, ()))
        while pending:
            cell = pending.pop()
            if cell == position or cell in refs:
                return True
            if cell in visited:
                continue
            visited.add(cell)
            for dep in self.dependents.get(cell, ()):
                if dep not in visited:
                    pending.append(dep)

        return False

    def topological_order(self) -> list[Position]:
        """Return formula cells with dependencies in evaluation order (Kahn's algorithm).

        Raises ValueError if a circular reference is detected.
        """
        formula_cells = set(self.dependencies)
        if not formula_cells:
            return []

        # Only count deps that are themselves formula cells
        in_degree: dict[Position, int] = {
            cell: len(self.dependencies[cell] & formula_cells) for cell in formula_cells
        }

        queue: deque[Position] = deque(
            sorted(cell for cell in formula_cells if in_degree[cell] == 0)
        )
        order: list[Position] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in self.dependents.get(cell, ()):
                if dep in formula_cells:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(formula_cells):
            missing = sorted(formula_cells - set(order))
            raise ValueError(f"Circular reference detected involving: {missing}")

        return order

    def affected_cells(self, changed: Iterable[Position]) -> list[Position]:
        """Find all formula cells downstream of *changed*, in evaluation order."""
        changed = set(changed)
        affected: set[Position] = set()
        queue: deque[Position] = deque(changed)
        visited: set[Position] = set(changed)

        while queue:
            cell = queue.popleft()
            for dep in self.dependents.get(cell, ()):
                if dep not in visited:
                    visited.add(dep)
                    affected.add(dep)
                    queue.append(dep)

        return [c for c in self.topological_order() if c in affected]
