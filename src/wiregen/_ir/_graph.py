"""The IR graph: an arena of named nodes forming a DAG."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wiregen._errors import DuplicateNodeError, GraphConstructionError, GraphCycleError, GraphFrozenError
from wiregen._graph import DependencyGraph

from ._capability import check_capabilities

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ._node import IRNode

logger = logging.getLogger(__name__)


def closure(nodes: Iterable[IRNode]) -> list[IRNode]:
    """Collect the nodes and everything they transitively reference.

    Arguments and contained nodes are both followed. The result is
    deduplicated by identity and ordered dependencies-first: every node comes
    after all of its arguments and contained nodes. Among independent nodes,
    the order of ``nodes`` and of each node's children is preserved.

    Raises:
        GraphCycleError: If a node (transitively) references itself.

    """
    order: list[IRNode] = []
    done: set[int] = set()
    path: list[IRNode] = []

    def visit(node: IRNode) -> None:
        if id(node) in done:
            return
        if any(entry is node for entry in path):
            cycle = [entry.name for entry in path[path.index(node) :]] + [node.name]
            msg = "Node references itself"
            raise GraphCycleError(msg, cycle)
        path.append(node)
        for child in node.children:
            visit(child)
        path.pop()
        done.add(id(node))
        order.append(node)

    for node in nodes:
        visit(node)
    return order


class IRGraph:
    """A namespace of uniquely named IR nodes.

    Nodes live in an arena: each gets a stable integer id in insertion order
    and edges are kept as id lists. A node can only reference nodes that were
    added before it, and the graph must be frozen before compilation.

    Example:
        >>> graph = IRGraph("app")
        >>> db = graph.add(ConfigValue("db_addr", "localhost:27017"))
        >>> svc = graph.add(WorkflowService("users", ..., args=[db]))
        >>> graph.freeze()

    """

    def __init__(self, name: str = "root") -> None:
        self.name = name
        self._nodes: list[IRNode] = []
        self._index: dict[str, int] = {}
        self._frozen = False

    def add[N: IRNode](self, node: N) -> N:
        """Add a node to the namespace.

        Adding the same instance twice is a no-op.

        Returns:
            The node, so construction and registration can be chained.

        Raises:
            GraphFrozenError: If the graph has been frozen.
            DuplicateNodeError: If another node already has this name.
            MissingCapabilityError: If the node's capability set is invalid.
            GraphConstructionError: If the node references a node that is not
                in this graph.

        """
        if self._frozen:
            msg = f"Cannot add '{node.name}' to frozen graph '{self.name}'"
            raise GraphFrozenError(msg, (self.name, node.name))

        existing = self._index.get(node.name)
        if existing is not None:
            if self._nodes[existing] is node:
                return node
            msg = f"A node named '{node.name}' already exists in '{self.name}'"
            raise DuplicateNodeError(msg, (self.name, node.name))

        check_capabilities(node)

        for child in node.children:
            if self.id_of(child) is None:
                msg = f"'{node.name}' references '{child.name}', which has not been added to '{self.name}'"
                raise GraphConstructionError(msg, (self.name, node.name, child.name))

        self._index[node.name] = len(self._nodes)
        self._nodes.append(node)
        logger.debug("Added %r to graph '%s'", node, self.name)
        return node

    def id_of(self, node: IRNode) -> int | None:
        """Return the arena id of this exact node instance, or None."""
        idx = self._index.get(node.name)
        if idx is not None and self._nodes[idx] is node:
            return idx
        return None

    def get(self, name: str) -> IRNode:
        """Get a node by name.

        Raises:
            KeyError: If no node has this name.

        """
        return self._nodes[self._index[name]]

    @property
    def nodes(self) -> tuple[IRNode, ...]:
        """All nodes in insertion order."""
        return tuple(self._nodes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def edges(self) -> list[tuple[int, int]]:
        """Return (child_id, parent_id) pairs: the parent depends on the child."""
        edges: list[tuple[int, int]] = []
        for parent_id, node in enumerate(self._nodes):
            for child in node.children:
                child_id = self.id_of(child)
                if child_id is None:
                    msg = f"'{node.name}' references '{child.name}', which is not in '{self.name}'"
                    raise GraphConstructionError(msg, (self.name, node.name, child.name))
                edges.append((child_id, parent_id))
        return edges

    def dependency_graph(self) -> DependencyGraph[int]:
        """Build the dependency graph over arena ids."""
        return DependencyGraph.from_edges(self.edges(), nodes=range(len(self._nodes)))

    def freeze(self) -> None:
        """Validate the DAG invariant and forbid further additions.

        Freezing an already frozen graph is a no-op.

        Raises:
            GraphCycleError: If the argument/contained relation has a cycle.

        """
        if self._frozen:
            return
        cycle = self.dependency_graph().find_cycle()
        if cycle is not None:
            # Edges point from child to parent, so reverse to read "parent -> child"
            names = [self._nodes[idx].name for idx in reversed(cycle)]
            msg = f"Graph '{self.name}' contains a cycle"
            raise GraphCycleError(msg, names)
        self._frozen = True
        logger.debug("Froze graph '%s' with %d nodes", self.name, len(self._nodes))

    def closure(self, roots: Iterable[IRNode | str]) -> list[IRNode]:
        """Transitive closure of the given nodes (or node names), dependencies first."""
        return closure(self.get(root) if isinstance(root, str) else root for root in roots)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[IRNode]:
        return iter(self._nodes)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._index
        return any(node is item for node in self._nodes)

    def __str__(self) -> str:
        # Only print top-level nodes; contained nodes are printed inside their owner
        owned = {id(child) for node in self._nodes for child in node.contained}
        return "\n".join(str(node) for node in self._nodes if id(node) not in owned)
