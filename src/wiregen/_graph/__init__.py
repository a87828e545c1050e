"""Dependency DAG utilities.

- DependencyGraph[T]: immutable graph of "depends on" edges over any hashable node
- topological_sort: stable dependencies-first ordering
- find_cycle: one closed cycle path, for error messages
"""

from ._algorithms import CycleError, find_cycle, topological_sort
from ._dependency_graph import DependencyGraph

__all__ = ["CycleError", "DependencyGraph", "find_cycle", "topological_sort"]
