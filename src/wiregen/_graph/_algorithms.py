"""Graph algorithms for dependency graph operations."""

from collections import deque
from collections.abc import Collection, Hashable, Mapping


class CycleError(ValueError):
    """Raised when a graph that must be acyclic contains a cycle.

    Attributes:
        nodes: The nodes that could not be ordered (every cycle plus whatever
            depends on one), in the order they were first seen.

    """

    def __init__(self, nodes: list[object]) -> None:
        self.nodes = nodes
        super().__init__(f"Cycle detected in graph involving {len(nodes)} node(s)")


def topological_sort[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph topologically (dependencies before dependents).

    Given a graph represented as a mapping from nodes to their successors
    (nodes that depend on them), return nodes in an order where each node
    appears before all nodes that depend on it.

    The sort is stable: among nodes whose dependencies are all satisfied, the
    one seen first in ``successors`` comes first. Generated files are ordered
    with this, so the output must not depend on hash order.

    Args:
        successors: Mapping from node to collection of nodes that depend on it.
            An edge (a -> b) means "b depends on a".

    Returns:
        List of nodes in topological order.

    Raises:
        CycleError: If the graph contains a cycle.

    Example:
        >>> # a -> b -> c means c depends on b, b depends on a
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']

    """
    # dict keeps first-seen order, which is what makes the result stable
    indegree: dict[T, int] = {}
    for node, deps in successors.items():
        indegree.setdefault(node, 0)
        for dep in deps:
            indegree[dep] = indegree.get(dep, 0) + 1

    ready = deque(node for node, deg in indegree.items() if deg == 0)
    order: list[T] = []

    while ready:
        node = ready.popleft()
        order.append(node)
        for successor in successors.get(node, ()):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                ready.append(successor)

    if len(order) != len(indegree):
        ordered = set(order)
        raise CycleError([node for node in indegree if node not in ordered])

    return order


def find_cycle[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T] | None:
    """Find one cycle in the graph.

    Args:
        successors: Mapping from node to the nodes that depend on it.

    Returns:
        The cycle as a closed path (first node repeated at the end), or None
        if the graph is acyclic.

    Example:
        >>> find_cycle({"a": ["b"], "b": ["a"]})
        ['a', 'b', 'a']

    """
    done: set[T] = set()
    for start in successors:
        if start in done:
            continue
        path: list[T] = [start]
        on_path: set[T] = {start}
        stack = [iter(successors.get(start, ()))]
        while stack:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if nxt in on_path:
                return [*path[path.index(nxt) :], nxt]
            if nxt not in done:
                path.append(nxt)
                on_path.add(nxt)
                stack.append(iter(successors.get(nxt, ())))
    return None
