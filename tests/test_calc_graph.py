"""Tests for gridcalc.calc dependency graph, cycle checks and ordering."""

from __future__ import annotations

import pytest

from gridcalc._utils import Position
from gridcalc.calc._graph import DependencyGraph


def P(label: str) -> Position:
    return Position.from_a1(label)


def _graph(*edges: tuple[str, str]) -> DependencyGraph:
    """Build a graph from ``(target, depender)`` label pairs."""
    g = DependencyGraph()
    for target, depender in edges:
        g.add_dependency(P(target), P(depender))
    return g


class TestEdges:
    def test_add_dependency(self) -> None:
        g = _graph(("A1", "B1"))
        assert g.dependents[P("A1")] == [P("B1")]
        assert g.dependencies[P("B1")] == {P("A1")}

    def test_multiple_dependents(self) -> None:
        g = _graph(("A1", "B1"), ("A1", "C1"))
        assert g.dependents[P("A1")] == [P("B1"), P("C1")]

    def test_remove_dependency(self) -> None:
        g = _graph(("A1", "B1"), ("A2", "B1"))
        g.remove_dependency(P("A1"), P("B1"))
        assert P("A1") not in g.dependents
        assert g.dependencies[P("B1")] == {P("A2")}

    def test_remove_last_dependency(self) -> None:
        g = _graph(("A1", "B1"))
        g.remove_dependency(P("A1"), P("B1"))
        assert g.dependents == {}
        assert g.dependencies == {}

    def test_remove_missing_edge(self) -> None:
        g = _graph(("A1", "B1"))
        with pytest.raises(KeyError):
            g.remove_dependency(P("A1"), P("C1"))

    def test_clear_dependencies(self) -> None:
        g = _graph(("A1", "C1"), ("B1", "C1"), ("A1", "D1"))
        g.clear_dependencies(P("C1"))
        assert g.dependents == {P("A1"): [P("D1")]}
        assert g.dependencies == {P("D1"): {P("A1")}}

    def test_clear_unknown_cell(self) -> None:
        g = _graph(("A1", "B1"))
        g.clear_dependencies(P("Z9"))
        assert g.dependents == {P("A1"): [P("B1")]}


class TestWouldCycle:
    def test_empty_graph(self) -> None:
        assert not DependencyGraph().would_cycle(P("A1"), [P("B1")])

    def test_self_reference(self) -> None:
        assert DependencyGraph().would_cycle(P("A1"), [P("A1")])

    def test_direct_cycle(self) -> None:
        """B1 reads A1, so A1 reading B1 closes a loop."""
        g = _graph(("A1", "B1"))
        assert g.would_cycle(P("A1"), [P("B1")])

    def test_transitive_cycle(self) -> None:
        """B1 reads A1, C1 reads B1: A1 reading C1 closes a loop."""
        g = _graph(("A1", "B1"), ("B1", "C1"))
        assert g.would_cycle(P("A1"), [P("C1")])

    def test_diamond_is_not_a_cycle(self) -> None:
        g = _graph(("A1", "B1"), ("A1", "C1"))
        assert not g.would_cycle(P("D1"), [P("B1"), P("C1")])

    def test_unrelated_reference(self) -> None:
        g = _graph(("A1", "B1"), ("B1", "C1"))
        assert not g.would_cycle(P("A1"), [P("D1")])

    def test_no_references(self) -> None:
        g = _graph(("A1", "B1"))
        assert not g.would_cycle(P("A1"), [])

    def test_does_not_modify_graph(self) -> None:
        g = _graph(("A1", "B1"))
        g.would_cycle(P("A1"), [P("B1")])
        assert g.dependents == {P("A1"): [P("B1")]}
        assert g.dependencies == {P("B1"): {P("A1")}}


class TestTopologicalOrder:
    def test_empty(self) -> None:
        assert DependencyGraph().topological_order() == []

    def test_linear_chain(self) -> None:
        """B1=A1+1, C1=B1*2"""
        g = _graph(("A1", "B1"), ("B1", "C1"))
        assert g.topological_order() == [P("B1"), P("C1")]

    def test_diamond(self) -> None:
        """A1 feeds B1 and C1, both feed D1."""
        g = _graph(("A1", "B1"), ("A1", "C1"), ("B1", "D1"), ("C1", "D1"))
        order = g.topological_order()
        assert order.index(P("B1")) < order.index(P("D1"))
        assert order.index(P("C1")) < order.index(P("D1"))

    def test_circular_detection(self) -> None:
        g = _graph(("B1", "A1"), ("A1", "B1"))
        with pytest.raises(ValueError, match="Circular reference"):
            g.topological_order()


class TestAffectedCells:
    def test_single_change(self) -> None:
        g = _graph(("A1", "B1"), ("B1", "C1"))
        assert g.affected_cells({P("A1")}) == [P("B1"), P("C1")]

    def test_diamond_propagation(self) -> None:
        g = _graph(("A1", "B1"), ("A1", "C1"), ("B1", "D1"), ("C1", "D1"))
        affected = g.affected_cells({P("A1")})
        assert len(affected) == 3
        assert affected[-1] == P("D1")

    def test_unrelated_cells_not_affected(self) -> None:
        g = _graph(("A1", "B1"), ("C1", "D1"))
        affected = g.affected_cells({P("A1")})
        assert affected == [P("B1")]

    def test_change_unreferenced_cell(self) -> None:
        g = _graph(("A1", "B1"))
        assert g.affected_cells({P("Z9")}) == []
