"""Typed descriptions of generated Python code."""

from __future__ import annotations

import keyword
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict


def _check_identifier(value: str) -> str:
    if not value.isidentifier() or keyword.iskeyword(value):
        msg = f"'{value}' is not a valid Python identifier"
        raise ValueError(msg)
    return value


def _check_dotted_path(value: str) -> str:
    if value:
        for part in value.split("."):
            _check_identifier(part)
    return value


def _check_type_name(value: str) -> str:
    # "None" is a keyword but still a valid annotation
    if value == "None":
        return value
    return _check_identifier(value)


Identifier = Annotated[str, AfterValidator(_check_identifier)]
DottedPath = Annotated[str, AfterValidator(_check_dotted_path)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeName(_Frozen):
    """A type referenced from generated code.

    Attributes:
        package: Dotted import path of the module defining the type. Empty for
            builtins such as ``str`` or ``int``.
        name: The type's name inside that module.

    """

    package: DottedPath = ""
    name: Annotated[str, AfterValidator(_check_type_name)]

    @property
    def is_builtin(self) -> bool:
        return not self.package

    def __str__(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


class Variable(_Frozen):
    """A named, optionally typed argument."""

    name: Identifier
    type: TypeName | None = None


class Method(_Frozen):
    """A method on a service interface."""

    name: Identifier
    arguments: tuple[Variable, ...] = ()
    returns: TypeName | None = None


class ServiceInterface(_Frozen):
    """The callable surface of a service.

    Attributes:
        name: Class or protocol name of the interface.
        package: Dotted import path of the module that declares it.
        methods: Methods in declaration order.

    """

    name: Identifier
    package: DottedPath
    methods: tuple[Method, ...] = ()

    @property
    def type_name(self) -> TypeName:
        return TypeName(package=self.package, name=self.name)

    def extend(self, name: str, package: str, *methods: Method) -> ServiceInterface:
        """Copy this interface under a new name and package, appending methods."""
        return ServiceInterface(name=name, package=package, methods=self.methods + methods)


class Constructor(_Frozen):
    """A factory function that builds an instance.

    Attributes:
        package: Dotted import path of the module defining the function.
        name: Function name.
        arguments: Parameters, one per dependency node, in call order.

    """

    package: DottedPath
    name: Identifier
    arguments: tuple[Variable, ...] = ()
