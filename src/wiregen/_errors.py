"""Error hierarchy for graph construction and compilation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class WiregenError(Exception):
    """Base class for all compile-time errors raised by wiregen."""


# =============================================================================
# Graph construction
# =============================================================================


class GraphConstructionError(WiregenError):
    """The IR graph could not be assembled.

    Attributes:
        node_path: Names leading to the offending node, outermost first.

    """

    def __init__(self, message: str, node_path: Sequence[str] = ()) -> None:
        self.node_path = tuple(node_path)
        if self.node_path:
            message = f"{message} (at {' -> '.join(self.node_path)})"
        super().__init__(message)


class DuplicateNodeError(GraphConstructionError):
    """A node name is already taken in the namespace."""


class MissingCapabilityError(GraphConstructionError):
    """A node claims a capability without its prerequisite or its method."""


class GraphCycleError(GraphConstructionError):
    """The argument/contained relation is not acyclic."""


class GraphFrozenError(GraphConstructionError):
    """The graph was modified after it was frozen for compilation."""


# =============================================================================
# Builders
# =============================================================================


class BuilderError(WiregenError):
    """A builder scope rejected a mutation."""


class ModuleVersionConflictError(BuilderError):
    """The same module or requirement was declared with two different versions."""

    def __init__(self, name: str, existing: str, requested: str) -> None:
        self.name = name
        self.existing = existing
        self.requested = requested
        super().__init__(f"Conflicting versions for '{name}': '{existing}' is already declared, got '{requested}'")


class ModuleExistsError(BuilderError):
    """A module directory is already claimed by a different module."""


class WorkspaceError(BuilderError):
    """The output workspace directory cannot be used."""


# =============================================================================
# Compilation
# =============================================================================


class CompilationError(WiregenError):
    """A capability handler failed while a builder was visiting a node.

    Attributes:
        node_name: Name of the node whose handler failed.
        compile_pass: The compilation pass that was running.
        scope_path: Path of the builder scope, outermost first.

    """

    def __init__(self, node_name: str, compile_pass: str, scope_path: str, cause: BaseException) -> None:
        self.node_name = node_name
        self.compile_pass = compile_pass
        self.scope_path = scope_path
        super().__init__(f"{compile_pass} failed for node '{node_name}' in {scope_path}: {cause}")
