"""Tests for DependencyGraph and graph algorithms."""

import pytest

from wiregen._graph import CycleError, DependencyGraph, find_cycle, topological_sort


class TestTopologicalSort:
    """Tests for the topological_sort algorithm."""

    def test_empty_graph(self) -> None:
        assert topological_sort({}) == []

    def test_single_node(self) -> None:
        assert topological_sort({"a": []}) == ["a"]

    def test_linear_chain(self) -> None:
        # a -> b -> c (c depends on b, b depends on a)
        assert topological_sort({"a": ["b"], "b": ["c"], "c": []}) == ["a", "b", "c"]

    def test_diamond_dependency(self) -> None:
        # a -> b, a -> c, b -> d, c -> d
        assert topological_sort({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}) == ["a", "b", "c", "d"]

    def test_stable_for_independent_nodes(self) -> None:
        assert topological_sort({"z": [], "m": [], "a": []}) == ["z", "m", "a"]
        assert topological_sort({"b": ["c"], "a": ["c"], "c": []}) == ["b", "a", "c"]

    def test_ready_nodes_are_taken_first_in_first_out(self) -> None:
        # c and d become ready in that order and must keep it
        assert topological_sort({"a": ["c"], "b": ["d"], "c": [], "d": []}) == ["a", "b", "c", "d"]

    def test_cycle_detection(self) -> None:
        with pytest.raises(CycleError, match="Cycle"):
            topological_sort({"a": ["b"], "b": ["a"]})

    def test_cycle_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({"a": ["a"]})

    def test_cycle_error_lists_unordered_nodes(self) -> None:
        with pytest.raises(CycleError) as exc_info:
            topological_sort({"root": ["a"], "a": ["b"], "b": ["a"]})
        assert set(exc_info.value.nodes) == {"a", "b"}

    def test_works_with_integers(self) -> None:
        assert topological_sort({1: [2], 2: [3], 3: []}) == [1, 2, 3]


class TestFindCycle:
    """Tests for the find_cycle algorithm."""

    def test_acyclic(self) -> None:
        assert find_cycle({"a": ["b"], "b": ["c"], "c": []}) is None

    def test_two_node_cycle(self) -> None:
        assert find_cycle({"a": ["b"], "b": ["a"]}) == ["a", "b", "a"]

    def test_self_loop(self) -> None:
        assert find_cycle({"a": ["a"]}) == ["a", "a"]

    def test_cycle_behind_acyclic_prefix(self) -> None:
        assert find_cycle({"x": ["a"], "a": ["b"], "b": ["c"], "c": ["a"]}) == ["a", "b", "c", "a"]


class TestDependencyGraphConstruction:
    """Tests for DependencyGraph construction."""

    def test_empty_graph(self) -> None:
        graph = DependencyGraph.from_edges([])
        assert graph.nodes == ()
        assert len(graph) == 0

    def test_single_edge(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert graph.nodes == ("a", "b")
        assert len(graph) == 2

    def test_duplicate_edges_are_ignored(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("a", "b")])
        assert graph.predecessors("b") == ("a",)

    def test_extra_nodes(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")], nodes=["z"])
        assert graph.nodes == ("z", "a", "b")
        assert graph.predecessors("z") == ()

    def test_contains(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert "a" in graph
        assert "b" in graph
        assert "c" not in graph


class TestDependencyGraphQueries:
    """Tests for DependencyGraph query methods."""

    def test_predecessors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "c"), ("b", "c")])
        assert graph.predecessors("c") == ("a", "b")
        assert graph.predecessors("a") == ()
        assert graph.predecessors("nonexistent") == ()

    def test_successors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("a", "c")])
        assert graph.successors("a") == ("b", "c")
        assert graph.successors("b") == ()

    def test_roots_and_leaves(self) -> None:
        graph = DependencyGraph.from_edges([("a", "c"), ("b", "c"), ("c", "d")])
        assert graph.roots() == ("a", "b")
        assert graph.leaves() == ("d",)

    def test_ancestors_diamond(self) -> None:
        # a -> b -> d, a -> c -> d
        graph = DependencyGraph.from_edges([("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")])
        assert graph.ancestors("d") == frozenset({"a", "b", "c"})
        assert graph.ancestors("a") == frozenset()

    def test_descendants_branching(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")])
        assert graph.descendants("a") == frozenset({"b", "c", "d"})
        assert graph.descendants("d") == frozenset()


class TestDependencyGraphOrderAndCycles:
    """Tests for ordering and cycle queries."""

    def test_topological_order_linear(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        assert graph.topological_order() == ["a", "b", "c"]

    def test_has_cycle(self) -> None:
        assert DependencyGraph.from_edges([("a", "b"), ("b", "c")]).has_cycle() is False
        assert DependencyGraph.from_edges([("a", "b"), ("b", "a")]).has_cycle() is True

    def test_find_cycle(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c"), ("c", "a")])
        assert graph.find_cycle() == ["a", "b", "c", "a"]

    def test_validate(self) -> None:
        assert DependencyGraph.from_edges([("a", "b")]).validate() == []
        errors = DependencyGraph.from_edges([("a", "b"), ("b", "a")]).validate()
        assert errors == ["Graph contains a cycle: a -> b -> a"]


class TestDependencyGraphSubgraph:
    """Tests for subgraph extraction."""

    def test_subgraph_keeps_internal_edges(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c"), ("c", "d")])
        sub = graph.subgraph({"b", "c"})
        assert sub.nodes == ("b", "c")
        assert sub.predecessors("c") == ("b",)

    def test_subgraph_removes_external_edges(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        sub = graph.subgraph({"b", "c"})
        assert sub.predecessors("b") == ()

    def test_subgraph_empty(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert graph.subgraph(set()).nodes == ()
