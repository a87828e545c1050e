"""Visit-once dispatch shared by every builder scope."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum, auto
from typing import TYPE_CHECKING, ClassVar

from wiregen._errors import CompilationError
from wiregen._ir import CAPABILITY_METHODS, Capability, supports

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wiregen._ir import IRNode

logger = logging.getLogger(__name__)


class CompilePass(StrEnum):
    """Compilation passes, in the order they run within a scope."""

    REQUIRE_PACKAGES = auto()  # Manifest is complete before any source is written
    GENERATE_INTERFACES = auto()  # Types exist before bodies reference them
    GENERATE_FUNCS = auto()
    ADD_INSTANTIATION = auto()  # Constructors exist before snippets call them
    ADD_TO_WORKSPACE = auto()


PASS_CAPABILITIES: dict[CompilePass, Capability] = {
    CompilePass.REQUIRE_PACKAGES: Capability.REQUIRES_PACKAGE,
    CompilePass.GENERATE_INTERFACES: Capability.GENERATES_INTERFACES,
    CompilePass.GENERATE_FUNCS: Capability.GENERATES_FUNCS,
    CompilePass.ADD_INSTANTIATION: Capability.INSTANTIABLE,
    CompilePass.ADD_TO_WORKSPACE: Capability.PROVIDES_MODULE,
}


class BuilderScope(ABC):
    """A builder scope with its own visited-set.

    ``visit`` marks each unseen node as visited *before* invoking any of its
    capability methods, so a handler that re-enters ``visit`` with nodes
    already being processed terminates. The visited-set belongs to this
    scope only: the same node is visited once per scope it takes part in.

    Subclasses set ``passes`` to the passes they understand.
    """

    passes: ClassVar[tuple[CompilePass, ...]] = ()

    def __init__(self) -> None:
        self._visited: set[str] = set()

    @property
    @abstractmethod
    def scope_path(self) -> str:
        """Human-readable location of this scope, outermost first."""

    def visited(self, name: str) -> bool:
        """Check whether a node name has already been visited in this scope."""
        return name in self._visited

    def mark_visited(self, name: str) -> bool:
        """Mark a node name as visited.

        Returns:
            True if the name was not visited before.

        """
        if name in self._visited:
            return False
        self._visited.add(name)
        return True

    def visit(self, nodes: Iterable[IRNode]) -> None:
        """Dispatch every not-yet-visited node to this scope's passes.

        All passes run over the whole batch of fresh nodes in pass order: the
        first pass finishes for every node before the second one starts.
        Unsupported capabilities are skipped.

        Raises:
            CompilationError: If a capability method fails. The error names the
                innermost failing node, pass and scope.

        """
        fresh = [node for node in nodes if self.mark_visited(node.name)]
        if not fresh:
            return
        for compile_pass in self.passes:
            capability = PASS_CAPABILITIES[compile_pass]
            for node in fresh:
                if supports(node, capability):
                    self._dispatch(node, compile_pass, capability)

    def _dispatch(self, node: IRNode, compile_pass: CompilePass, capability: Capability) -> None:
        logger.debug("%s: %s(%s)", self.scope_path, compile_pass, node.name)
        handler = getattr(node, CAPABILITY_METHODS[capability])
        try:
            handler(self)
        except CompilationError:
            raise
        except Exception as e:
            raise CompilationError(node.name, compile_pass, self.scope_path, e) from e
