"""Health-check wrapper around an existing service."""

from __future__ import annotations

from typing import TYPE_CHECKING

from wiregen._builder import NamespaceBuilder
from wiregen._codegen import (
    Constructor,
    Imports,
    Method,
    TypeName,
    Variable,
    render_header,
    render_health_check_handler,
    render_protocol,
)
from wiregen._errors import MissingCapabilityError
from wiregen._ir import Capability, IRNode, clean_name, supports

if TYPE_CHECKING:
    from wiregen._builder import ModuleBuilder
    from wiregen._codegen import ServiceInterface

PLUGIN = "healthcheck"

HEALTH_CHECK_METHOD = Method(name="health_check", returns=TypeName(name="str"))


def _camel(name: str) -> str:
    camel = "".join(part[:1].upper() + part[1:] for part in name.split("_"))
    return camel if camel.isidentifier() else f"_{camel}"


class HealthCheckWrapper(IRNode):
    """Wraps a service with a ``health_check()`` method.

    Generates two files in the ``healthcheck`` package of the module it is
    compiled into: ``<name>_healthcheck_iface.py`` declaring the extended
    interface as a ``Protocol``, and ``<name>_healthcheck.py`` with a handler
    class that forwards every call to the wrapped service.

    Raises:
        MissingCapabilityError: If ``wrapped`` is not a service.

    """

    capabilities = frozenset(
        {
            Capability.INSTANTIABLE,
            Capability.SERVICE,
            Capability.GENERATES_INTERFACES,
            Capability.GENERATES_FUNCS,
        },
    )
    kind = "HealthCheckWrapper"

    __slots__ = ()

    def __init__(self, name: str, wrapped: IRNode) -> None:
        if not supports(wrapped, Capability.SERVICE):
            actual = type(wrapped).__name__
            msg = f"Health-check wrapper '{name}' requires a service, but '{wrapped.name}' is a {actual}"
            raise MissingCapabilityError(msg, (name, wrapped.name))
        super().__init__(name, args=[wrapped])

    @property
    def wrapped(self) -> IRNode:
        return self.args[0]

    @property
    def _clean(self) -> str:
        return clean_name(self.name)

    def _package(self, builder: ModuleBuilder) -> str:
        return f"{builder.root_package}.healthcheck"

    def _handler_name(self) -> str:
        return f"{_camel(self._clean)}HealthCheckHandler"

    def _constructor_name(self) -> str:
        return f"new_{self._clean}_healthcheck"

    def _module_builder(self, builder: ModuleBuilder | NamespaceBuilder) -> ModuleBuilder:
        return builder.module if isinstance(builder, NamespaceBuilder) else builder

    def get_interface(self, builder: ModuleBuilder | NamespaceBuilder) -> ServiceInterface:
        module = self._module_builder(builder)
        wrapped = self.wrapped.get_interface(builder)
        return wrapped.extend(
            f"{_camel(self._clean)}HealthCheck",
            f"{self._package(module)}.{self._clean}_healthcheck_iface",
            HEALTH_CHECK_METHOD,
        )

    def generate_interfaces(self, builder: ModuleBuilder) -> None:
        package = builder.create_package(self._package(builder))
        text = render_protocol(self.get_interface(builder), Imports(), render_header(PLUGIN))
        builder.write_file(package, f"{self._clean}_healthcheck_iface.py", text)

    def generate_funcs(self, builder: ModuleBuilder) -> None:
        package = builder.create_package(self._package(builder))
        text = render_health_check_handler(
            header=render_header(PLUGIN),
            imports=Imports(reserved=[self._handler_name(), self._constructor_name()]),
            handler_name=self._handler_name(),
            constructor_name=self._constructor_name(),
            iface=self.get_interface(builder),
            wrapped=self.wrapped.get_interface(builder),
        )
        builder.write_file(package, f"{self._clean}_healthcheck.py", text)

    def add_instantiation(self, builder: NamespaceBuilder) -> None:
        constructor = Constructor(
            package=f"{self._package(builder.module)}.{self._clean}_healthcheck",
            name=self._constructor_name(),
            arguments=(Variable(name="service"),),
        )
        builder.declare_constructor(self.name, constructor, [self.wrapped])
