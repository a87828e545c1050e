"""Capability contracts that IR nodes opt into."""

from __future__ import annotations

from enum import StrEnum, auto
from typing import TYPE_CHECKING, Literal, Protocol, overload

from wiregen._errors import MissingCapabilityError

if TYPE_CHECKING:
    from wiregen._builder import ModuleBuilder, NamespaceBuilder, WorkspaceBuilder
    from wiregen._codegen import ServiceInterface

    from ._node import IRNode


class Capability(StrEnum):
    """A code-generation behaviour that a node type may support."""

    INSTANTIABLE = auto()  # Emits a build function into a namespace file
    SERVICE = auto()  # Exposes a callable interface to other nodes
    GENERATES_INTERFACES = auto()  # Writes type/interface declarations
    GENERATES_FUNCS = auto()  # Writes function and method bodies
    REQUIRES_PACKAGE = auto()  # Declares third-party requirements
    PROVIDES_MODULE = auto()  # Contributes a whole module to the workspace


# Method each capability obliges the node to define
CAPABILITY_METHODS: dict[Capability, str] = {
    Capability.INSTANTIABLE: "add_instantiation",
    Capability.SERVICE: "get_interface",
    Capability.GENERATES_INTERFACES: "generate_interfaces",
    Capability.GENERATES_FUNCS: "generate_funcs",
    Capability.REQUIRES_PACKAGE: "add_requirements",
    Capability.PROVIDES_MODULE: "add_to_workspace",
}

CAPABILITY_PREREQUISITES: dict[Capability, frozenset[Capability]] = {
    Capability.SERVICE: frozenset({Capability.INSTANTIABLE}),
}


class Instantiable(Protocol):
    """Node that can declare how to build its instance at runtime."""

    def add_instantiation(self, builder: NamespaceBuilder) -> None: ...


class Service(Instantiable, Protocol):
    """Instantiable node whose instance exposes methods to other nodes."""

    def get_interface(self, builder: ModuleBuilder | NamespaceBuilder) -> ServiceInterface: ...


class GeneratesInterfaces(Protocol):
    """Node that writes struct/interface declarations into a module."""

    def generate_interfaces(self, builder: ModuleBuilder) -> None: ...


class GeneratesFuncs(Protocol):
    """Node that writes function bodies into a module."""

    def generate_funcs(self, builder: ModuleBuilder) -> None: ...


class RequiresPackage(Protocol):
    """Node that adds requirements to the manifest of the module it lives in."""

    def add_requirements(self, builder: ModuleBuilder) -> None: ...


class ProvidesModule(Protocol):
    """Node that contributes a whole module to the workspace."""

    def add_to_workspace(self, builder: WorkspaceBuilder) -> None: ...


def supports(node: IRNode, capability: Capability) -> bool:
    """Check whether the node's type declares the capability."""
    return capability in type(node).capabilities


@overload
def as_capability(node: IRNode, capability: Literal[Capability.INSTANTIABLE]) -> Instantiable | None: ...
@overload
def as_capability(node: IRNode, capability: Literal[Capability.SERVICE]) -> Service | None: ...
@overload
def as_capability(
    node: IRNode, capability: Literal[Capability.GENERATES_INTERFACES]
) -> GeneratesInterfaces | None: ...
@overload
def as_capability(node: IRNode, capability: Literal[Capability.GENERATES_FUNCS]) -> GeneratesFuncs | None: ...
@overload
def as_capability(node: IRNode, capability: Literal[Capability.REQUIRES_PACKAGE]) -> RequiresPackage | None: ...
@overload
def as_capability(node: IRNode, capability: Literal[Capability.PROVIDES_MODULE]) -> ProvidesModule | None: ...
def as_capability(node: IRNode, capability: Capability) -> object | None:
    """Return the node as a handle for the capability, or None if unsupported.

    "Not supported" is not an error: most nodes implement only a few
    capabilities, and callers skip the ones that are missing.

    Example:
        >>> handle = as_capability(node, Capability.INSTANTIABLE)
        >>> if handle is not None:
        ...     handle.add_instantiation(builder)

    """
    if supports(node, capability):
        return node
    return None


def check_capabilities(node: IRNode) -> None:
    """Validate the capability set declared by the node's type.

    Raises:
        MissingCapabilityError: If a declared capability lacks a prerequisite
            capability or the method it obliges the node to define.

    """
    declared = type(node).capabilities
    for capability in sorted(declared):
        missing = CAPABILITY_PREREQUISITES.get(capability, frozenset()) - declared
        if missing:
            names = ", ".join(sorted(missing))
            msg = f"{type(node).__name__} declares '{capability}' but not its prerequisite(s): {names}"
            raise MissingCapabilityError(msg, (node.name,))
        method = CAPABILITY_METHODS[capability]
        if not callable(getattr(node, method, None)):
            msg = f"{type(node).__name__} declares '{capability}' but does not define {method}()"
            raise MissingCapabilityError(msg, (node.name,))
