"""Module scope: one installable distribution in the workspace."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from wiregen._errors import BuilderError
from wiregen._ir import clean_name

from ._manifest import Manifest
from ._namespace import NamespaceBuilder
from ._scope import BuilderScope, CompilePass

if TYPE_CHECKING:
    from ._workspace import WorkspaceBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModuleInfo:
    """Metadata about a module of the workspace."""

    name: str
    version: str
    path: Path


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Metadata about an importable package inside a module.

    Attributes:
        name: Dotted import path, e.g. ``frontend.handlers``.
        short_name: Last segment of the import path.
        path: Directory of the package.

    """

    name: str
    short_name: str
    path: Path


class ModuleBuilder(BuilderScope):
    """Builder scope for a single module.

    Visiting a node here runs the ``add_requirements``, ``generate_interfaces``
    and ``generate_funcs`` passes, in that order, over the visited batch.
    """

    passes = (
        CompilePass.REQUIRE_PACKAGES,
        CompilePass.GENERATE_INTERFACES,
        CompilePass.GENERATE_FUNCS,
    )

    def __init__(self, workspace: WorkspaceBuilder, name: str, version: str, path: Path) -> None:
        super().__init__()
        self._workspace = workspace
        self._name = name
        self._version = version
        self._path = path
        self._manifest = Manifest(name, version, workspace.config.python_requires)
        self._packages: dict[str, PackageInfo] = {}
        self._namespaces: list[NamespaceBuilder] = []

    @property
    def scope_path(self) -> str:
        return f"{self._workspace.scope_path} > module {self._name}"

    def info(self) -> ModuleInfo:
        return ModuleInfo(name=self._name, version=self._version, path=self._path)

    @property
    def root_package(self) -> str:
        """Import name reserved for code shared across this module."""
        return clean_name(self._name)

    @property
    def workspace(self) -> WorkspaceBuilder:
        return self._workspace

    @property
    def manifest(self) -> Manifest:
        return self._manifest

    def require(self, name: str, version: str) -> None:
        """Add a requirement to this module's manifest.

        The version is checked against every other module of the workspace.
        A requirement on a local module of the workspace is resolved from its
        directory.

        Raises:
            ModuleVersionConflictError: If ``name`` is already required at a
                different version anywhere in the workspace.

        """
        self._workspace.check_requirement(name, version)
        self._manifest.require(name, version)
        local = self._workspace.get_local_module(name)
        if local is not None:
            self._manifest.add_local_source(name, local.path.relative_to(self._path, walk_up=True).as_posix())

    def create_package(self, name: str) -> PackageInfo:
        """Create a package, and any missing parent packages, in this module.

        Args:
            name: Dotted import path of the package.

        Returns:
            The package info. Creating an existing package returns it again.

        """
        if name in self._packages:
            return self._packages[name]
        segments = name.split(".")
        if not all(segment.isidentifier() for segment in segments):
            msg = f"Invalid package name: {name!r}"
            raise BuilderError(msg)

        path = self._path
        for segment in segments:
            path = path / segment
            path.mkdir(exist_ok=True)
            init = path / "__init__.py"
            if not init.exists():
                init.write_text("")

        info = PackageInfo(name=name, short_name=segments[-1], path=path)
        self._packages[name] = info
        logger.debug("Created package %s in %s", name, self._name)
        return info

    def create_namespace(self, package: str, file_name: str = "main.py") -> NamespaceBuilder:
        """Create a namespace file that declares instances for the runtime."""
        info = self.create_package(package)
        namespace = NamespaceBuilder(self, info, file_name)
        self._namespaces.append(namespace)
        return namespace

    def write_file(self, package: PackageInfo, file_name: str, text: str) -> Path:
        """Write a generated source file into a package.

        Raises:
            BuilderError: If the file was already generated.

        """
        path = package.path / file_name
        if path.exists():
            msg = f"Generated file {path} already exists"
            raise BuilderError(msg)
        path.write_text(text)
        logger.info("Generated %s", path)
        return path

    def finish(self) -> Path:
        """Write the module manifest."""
        top_level = sorted({name.split(".", 1)[0] for name in self._packages})
        return self._manifest.write(self._path, top_level)
