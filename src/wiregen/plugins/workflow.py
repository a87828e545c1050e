"""Services implemented by hand-written application modules."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from wiregen._ir import Capability, IRNode, clean_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wiregen._builder import LocalModule, ModuleBuilder, NamespaceBuilder, WorkspaceBuilder
    from wiregen._codegen import Constructor, ServiceInterface


class WorkflowService(IRNode):
    """A service whose implementation lives in an existing local module.

    The module is copied into the workspace as-is, every module that uses the
    service requires it, and the instance is built by calling ``constructor``
    with the instances of ``args``.

    Example:
        >>> greeter = WorkflowService(
        ...     "greeter",
        ...     module_path="workflow",
        ...     interface=ServiceInterface(name="Greeter", package="greeter.service", methods=(...)),
        ...     constructor=Constructor(package="greeter.service", name="new_greeter", arguments=(...)),
        ...     args=[greeting_prefix],
        ... )

    """

    capabilities = frozenset(
        {
            Capability.INSTANTIABLE,
            Capability.SERVICE,
            Capability.REQUIRES_PACKAGE,
            Capability.PROVIDES_MODULE,
        },
    )
    kind = "WorkflowService"

    __slots__ = ("constructor", "interface", "module_path", "module_short_name")

    def __init__(
        self,
        name: str,
        *,
        module_path: Path | str,
        interface: ServiceInterface,
        constructor: Constructor,
        args: Iterable[IRNode] = (),
        module_short_name: str | None = None,
    ) -> None:
        super().__init__(name, args=args)
        self.module_path = Path(module_path)
        self.interface = interface
        self.constructor = constructor
        self.module_short_name = module_short_name or clean_name(self.module_path.resolve().name)

    def add_to_workspace(self, builder: WorkspaceBuilder) -> LocalModule:
        return builder.add_local_module(self.module_short_name, self.module_path)

    def add_requirements(self, builder: ModuleBuilder) -> None:
        local = self.add_to_workspace(builder.workspace)
        builder.require(local.name, local.version)

    def get_interface(self, builder: ModuleBuilder | NamespaceBuilder) -> ServiceInterface:
        return self.interface

    def add_instantiation(self, builder: NamespaceBuilder) -> None:
        builder.declare_constructor(self.name, self.constructor, self.args)
