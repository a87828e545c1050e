"""Immutable dependency DAG shared by the IR graph and namespace files."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ._algorithms import find_cycle, topological_sort


@dataclass(frozen=True, slots=True)
class DependencyGraph[T]:
    """Edges between nodes of any hashable type, pointing from a dependency to its dependent.

    ``IRGraph`` builds one over arena ids to check that nodes form a DAG;
    ``NamespaceBuilder`` builds one over instance names to order the build
    functions of a generated file.

    Neighbours are tuples in first-seen order, so every query, including
    ``topological_order``, gives the same answer for the same input.

    Attributes:
        _predecessors: Node -> the nodes it depends on.
        _successors: Node -> the nodes depending on it.

    """

    _predecessors: dict[T, tuple[T, ...]] = field(default_factory=dict)
    _successors: dict[T, tuple[T, ...]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]], nodes: Iterable[T] = ()) -> DependencyGraph[T]:
        """Create a graph from ``(dependency, dependent)`` pairs.

        Args:
            edges: Pairs where the second element depends on the first.
                Repeated pairs count once.
            nodes: Nodes to include even when no edge mentions them. They are
                ordered before the nodes first seen in ``edges``.

        Example:
            >>> graph = DependencyGraph.from_edges([("db", "users"), ("users", "frontend")])
            >>> graph.predecessors("users")
            ('db',)

        """
        # Insertion-ordered dicts used as ordered sets
        preds: dict[T, dict[T, None]] = {}
        succs: dict[T, dict[T, None]] = {}

        def touch(node: T) -> None:
            preds.setdefault(node, {})
            succs.setdefault(node, {})

        for node in nodes:
            touch(node)
        for dependency, dependent in edges:
            touch(dependency)
            touch(dependent)
            preds[dependent][dependency] = None
            succs[dependency][dependent] = None

        return cls(
            _predecessors={node: tuple(deps) for node, deps in preds.items()},
            _successors={node: tuple(deps) for node, deps in succs.items()},
        )

    @property
    def nodes(self) -> tuple[T, ...]:
        return tuple(self._predecessors)

    def predecessors(self, node: T) -> tuple[T, ...]:
        """Direct dependencies of ``node``; empty for unknown nodes."""
        return self._predecessors.get(node, ())

    def successors(self, node: T) -> tuple[T, ...]:
        """Direct dependents of ``node``; empty for unknown nodes."""
        return self._successors.get(node, ())

    def roots(self) -> tuple[T, ...]:
        """Nodes without dependencies."""
        return tuple(node for node in self.nodes if not self._predecessors[node])

    def leaves(self) -> tuple[T, ...]:
        """Nodes nothing depends on."""
        return tuple(node for node in self.nodes if not self._successors[node])

    def _reachable(self, start: T, step: Callable[[T], tuple[T, ...]]) -> frozenset[T]:
        seen: set[T] = set()
        pending = list(step(start))
        while pending:
            node = pending.pop()
            if node in seen:
                continue
            seen.add(node)
            pending.extend(step(node))
        return frozenset(seen)

    def ancestors(self, node: T) -> frozenset[T]:
        """Everything ``node`` depends on, directly or not."""
        return self._reachable(node, self.predecessors)

    def descendants(self, node: T) -> frozenset[T]:
        """Everything that depends on ``node``, directly or not."""
        return self._reachable(node, self.successors)

    def topological_order(self) -> list[T]:
        """Order the nodes so that each comes after its dependencies.

        Raises:
            CycleError: If some nodes depend on each other.

        """
        return topological_sort(self._successors)

    def find_cycle(self) -> list[T] | None:
        """Return one cycle as a closed path ``[a, b, a]``, or None."""
        return find_cycle(self._successors)

    def has_cycle(self) -> bool:
        return self.find_cycle() is not None

    def subgraph(self, nodes: Iterable[T]) -> DependencyGraph[T]:
        """Restrict the graph to ``nodes``, dropping edges that leave the set."""
        keep = set(nodes)
        return DependencyGraph(
            _predecessors={
                node: tuple(dep for dep in deps if dep in keep)
                for node, deps in self._predecessors.items()
                if node in keep
            },
            _successors={
                node: tuple(dep for dep in deps if dep in keep)
                for node, deps in self._successors.items()
                if node in keep
            },
        )

    def validate(self) -> list[str]:
        """Describe what makes the graph unusable; an empty list means it is a DAG."""
        cycle = self.find_cycle()
        if cycle is None:
            return []
        return [f"Graph contains a cycle: {' -> '.join(str(node) for node in cycle)}"]

    def __len__(self) -> int:
        return len(self._predecessors)

    def __contains__(self, node: object) -> bool:
        return node in self._predecessors
