"""Runnable Python processes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wiregen._ir import Capability, IRNode, clean_name, closure, supports

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wiregen._builder import ModuleBuilder, WorkspaceBuilder

logger = logging.getLogger(__name__)

PLUGIN = "process"


class Process(IRNode):
    """A runnable process containing other nodes.

    When compiled, the process contributes a module named
    ``<module prefix>-<clean name>`` to the workspace. It runs the module
    passes over everything its contained nodes reference, then writes
    ``<clean name>/main.py``, whose ``main()`` builds the runtime container
    and gets every contained instance.

    Example:
        >>> frontend = Process("frontend", contained=[greeting_prefix, greeter])
        >>> # python -m frontend.main

    """

    capabilities = frozenset({Capability.PROVIDES_MODULE})
    kind = "Process"

    __slots__ = ()

    def __init__(self, name: str, contained: Iterable[IRNode], args: Iterable[IRNode] = ()) -> None:
        super().__init__(name, args=args, contained=contained)

    @property
    def proc_name(self) -> str:
        return clean_name(self.name)

    def add_to_workspace(self, builder: WorkspaceBuilder) -> ModuleBuilder:
        config = builder.config
        module = builder.create_module(config.module_name(self.proc_name), config.module_version)
        nodes = closure(self.contained)
        logger.debug("Process %s contains %d node(s)", self.name, len(nodes))

        module.visit(nodes)

        namespace = module.create_namespace(self.proc_name, "main.py")
        namespace.visit(nodes)
        entrypoints = [node.name for node in self.contained if supports(node, Capability.INSTANTIABLE)]
        namespace.finish(entrypoints, plugin=PLUGIN)
        return module
