"""Literal configuration values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wiregen._ir import Capability, IRNode

if TYPE_CHECKING:
    from wiregen._builder import NamespaceBuilder


class ConfigValue(IRNode):
    """A named literal value, such as an address or a greeting.

    Only instantiable: the value is written straight into the namespace file
    of every process that uses it.
    """

    capabilities = frozenset({Capability.INSTANTIABLE})
    kind = "ConfigValue"

    __slots__ = ("value",)

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(name)
        self.value = value

    def add_instantiation(self, builder: NamespaceBuilder) -> None:
        builder.declare_value(self.name, self.value)
