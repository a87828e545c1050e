"""Import bookkeeping for a single generated file."""

from __future__ import annotations

import builtins
import keyword
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._types import TypeName


class Imports:
    """Tracks the modules a generated file imports and the alias for each.

    Every module is imported as ``import a.b.c as alias``. The alias is the last
    path segment unless that name is already taken by another module, is a
    keyword or builtin, or is reserved by the file itself; then a numeric
    suffix is appended (``c_2``, ``c_3``, ...).

    Example:
        >>> imports = Imports()
        >>> imports.add_package("users.handlers")
        'handlers'
        >>> imports.add_package("billing.handlers")
        'handlers_2'
        >>> imports.add_package("users.handlers")
        'handlers'

    """

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._aliases: dict[str, str] = {}
        self._taken: set[str] = set(reserved)

    def add_package(self, package: str) -> str:
        """Import a module and return the alias to use for it.

        Args:
            package: Dotted import path of the module.

        Returns:
            The alias; the same path always yields the same alias.

        """
        if not package:
            msg = "Cannot import an empty package path"
            raise ValueError(msg)
        if package in self._aliases:
            return self._aliases[package]

        short = package.rsplit(".", 1)[-1]
        alias = short
        suffix = 1
        while alias in self._taken or keyword.iskeyword(alias) or hasattr(builtins, alias):
            suffix += 1
            alias = f"{short}_{suffix}"

        self._aliases[package] = alias
        self._taken.add(alias)
        return alias

    def add_packages(self, *packages: str) -> list[str]:
        return [self.add_package(package) for package in packages]

    def add_type(self, type_name: TypeName) -> str:
        """Import the module defining a type and return how to spell the type.

        Builtin types are returned unqualified and need no import.
        """
        if type_name.is_builtin:
            return type_name.name
        return f"{self.add_package(type_name.package)}.{type_name.name}"

    def name_of(self, type_name: TypeName | None) -> str:
        """Like ``add_type``, but an unknown type is spelled ``object``."""
        if type_name is None:
            return "object"
        return self.add_type(type_name)

    def alias_of(self, package: str) -> str | None:
        return self._aliases.get(package)

    @property
    def packages(self) -> dict[str, str]:
        """Mapping from imported path to alias, in import order."""
        return dict(self._aliases)

    def render(self) -> str:
        """Render the import block, sorted by path."""
        lines = []
        for package, alias in sorted(self._aliases.items()):
            if alias == package:
                lines.append(f"import {package}")
            else:
                lines.append(f"import {package} as {alias}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._aliases)

    def __str__(self) -> str:
        return self.render()
