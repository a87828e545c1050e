"""Runtime support for generated processes.

Generated namespace files register build functions with a ``Graph``;
``Graph.build()`` returns a ``Container`` that constructs instances lazily,
memoizes them, and runs every ``Runnable`` instance as a supervised
background task sharing one cancellation ``Context``.
"""

from ._container import BuildFunc, Container, Graph
from ._context import Context, Runnable, TaskGroup, TaskOutcome, is_runnable
from ._errors import DependencyCycleError, RuntimeContainerError, UnknownInstanceError
from ._serve import serve

__all__ = [
    "BuildFunc",
    "Container",
    "Context",
    "DependencyCycleError",
    "Graph",
    "Runnable",
    "RuntimeContainerError",
    "TaskGroup",
    "TaskOutcome",
    "UnknownInstanceError",
    "is_runnable",
    "serve",
]
