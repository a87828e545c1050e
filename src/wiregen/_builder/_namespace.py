"""Namespace scope: one generated file that declares runtime instances."""

from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wiregen._codegen import (
    Declaration,
    Imports,
    render_build_func,
    render_constructor_call,
    render_header,
    render_namespace_file,
    render_value_func,
)
from wiregen._codegen._render import INDENT
from wiregen._config import RUNTIME_PACKAGE, RUNTIME_VERSION
from wiregen._errors import BuilderError
from wiregen._graph import CycleError, DependencyGraph
from wiregen._ir import IRNode, clean_name

from ._scope import BuilderScope, CompilePass

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from wiregen._codegen import Constructor, TypeName

    from ._module import ModuleBuilder, PackageInfo

logger = logging.getLogger(__name__)

RUNTIME_IMPORT = "wiregen.runtime"

# Names the generated file defines itself
RESERVED_NAMES = ("build_graph", "main", "graph", "ctr")


@dataclass(frozen=True, slots=True)
class GraphInfo:
    """Metadata about a namespace file.

    Attributes:
        package: Dotted import path of the package holding the file.
        file_path: Path of the generated file.

    """

    package: str
    file_path: Path

    @property
    def import_path(self) -> str:
        return f"{self.package}.{self.file_path.stem}"


class NamespaceBuilder(BuilderScope):
    """Builder scope collecting instance declarations for one file.

    Visiting a node here invokes its ``add_instantiation`` capability. Nodes
    declare a build function per instance; ``finish`` writes them, ordered so
    that dependencies come first, together with a ``build_graph`` function
    registering them with the runtime.
    """

    passes = (CompilePass.ADD_INSTANTIATION,)

    def __init__(self, module: ModuleBuilder, package: PackageInfo, file_name: str = "main.py") -> None:
        super().__init__()
        self._module = module
        self._package = package
        self._file_path = package.path / file_name
        self._imports = Imports(reserved=RESERVED_NAMES)
        self._runtime_alias = self._imports.add_package(RUNTIME_IMPORT)
        self._declarations: dict[str, Declaration] = {}
        self._func_names: set[str] = set()
        self._finished = False
        module.require(RUNTIME_PACKAGE, RUNTIME_VERSION)

    @property
    def scope_path(self) -> str:
        return f"{self._module.scope_path} > namespace {self.info().import_path}"

    def info(self) -> GraphInfo:
        return GraphInfo(package=self._package.name, file_path=self._file_path)

    @property
    def module(self) -> ModuleBuilder:
        return self._module

    @property
    def runtime_alias(self) -> str:
        return self._runtime_alias

    # -------------------------------------------------------------------------
    # Imports
    # -------------------------------------------------------------------------

    def import_(self, package: str) -> str:
        """Import a module into the file and return its alias."""
        return self._imports.add_package(package)

    def import_type(self, type_name: TypeName) -> str:
        """Import the module defining a type and return how to spell it."""
        return self._imports.add_type(type_name)

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def _func_name_for(self, name: str) -> str:
        base = f"_build_{clean_name(name)}"
        func_name = base
        suffix = 1
        while func_name in self._func_names:
            suffix += 1
            func_name = f"{base}_{suffix}"
        self._func_names.add(func_name)
        return func_name

    def _add(self, name: str, func_name: str, source: str, dependencies: Sequence[IRNode | str]) -> Declaration:
        decl = Declaration(
            name=name,
            func_name=func_name,
            source=source,
            dependencies=tuple(dep.name if isinstance(dep, IRNode) else dep for dep in dependencies),
        )
        self._declarations[name] = decl
        logger.debug("Declared %s in %s", name, self.info().import_path)
        return decl

    def _check_new(self, name: str) -> None:
        if self._finished:
            msg = f"Namespace {self.info().import_path} is already finished"
            raise BuilderError(msg)
        if name in self._declarations:
            msg = f"Instance '{name}' is already declared in {self.info().import_path}"
            raise BuilderError(msg)

    def declare(self, name: str, body: str, dependencies: Sequence[IRNode | str] = ()) -> Declaration:
        """Declare an instance built by a hand-written function body.

        The body runs with the runtime container bound to ``ctr`` and must
        return the instance.

        Args:
            name: Instance name.
            body: Statements of the build function.
            dependencies: Nodes (or instance names) the body gets from ``ctr``.

        Raises:
            BuilderError: If ``name`` is already declared or ``body`` is blank.

        """
        self._check_new(name)
        code = textwrap.dedent(body).strip()
        if not code:
            msg = f"Build function body for {name} is empty"
            raise BuilderError(msg)
        func_name = self._func_name_for(name)
        statements = textwrap.indent(code, INDENT)
        return self._add(name, func_name, f"def {func_name}(ctr):\n{statements}", dependencies)

    def declare_constructor(self, name: str, constructor: Constructor, args: Sequence[IRNode]) -> Declaration:
        """Declare an instance built by calling a generated constructor.

        Each argument node's instance is fetched from the container and passed
        positionally.

        Raises:
            BuilderError: If ``name`` is already declared or the argument count
                does not match the constructor.

        """
        self._check_new(name)
        if len(args) != len(constructor.arguments):
            msg = (
                f"Constructor {constructor.package}.{constructor.name} takes "
                f"{len(constructor.arguments)} argument(s), got {len(args)}"
            )
            raise BuilderError(msg)
        func_name = self._func_name_for(name)
        call = render_constructor_call(constructor, self._imports)
        deps = [arg.name for arg in args]
        return self._add(name, func_name, render_build_func(func_name, call, deps), deps)

    def declare_value(self, name: str, value: Any) -> Declaration:
        """Declare an instance that is a literal value."""
        self._check_new(name)
        func_name = self._func_name_for(name)
        return self._add(name, func_name, render_value_func(func_name, value), ())

    def is_declared(self, name: str) -> bool:
        return name in self._declarations

    @property
    def declarations(self) -> list[Declaration]:
        """Declarations ordered so that each comes after those it depends on.

        Dependencies that are declared elsewhere do not affect the order.
        """
        graph = DependencyGraph.from_edges(
            [
                (dep, decl.name)
                for decl in self._declarations.values()
                for dep in decl.dependencies
                if dep in self._declarations
            ],
            nodes=self._declarations,
        )
        try:
            order = graph.topological_order()
        except CycleError as e:
            cycle = " -> ".join(graph.find_cycle() or [])
            msg = f"Declarations in {self.info().import_path} depend on each other: {cycle}"
            raise BuilderError(msg) from e
        return [self._declarations[name] for name in order]

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def finish(self, entrypoints: Sequence[str] = (), plugin: str = "namespace") -> Path:
        """Write the namespace file.

        Args:
            entrypoints: Instances to build and run when the file is executed.
            plugin: Name recorded in the generated-file header.

        Returns:
            Path of the written file.

        Raises:
            BuilderError: If an entrypoint is not declared in this file.

        """
        missing = [name for name in entrypoints if name not in self._declarations]
        if missing:
            msg = f"Entrypoints not declared in {self.info().import_path}: {', '.join(missing)}"
            raise BuilderError(msg)

        text = render_namespace_file(
            header=render_header(plugin),
            imports=self._imports,
            runtime_alias=self._runtime_alias,
            declarations=self.declarations,
            entrypoints=entrypoints,
        )
        path = self._module.write_file(self._package, self._file_path.name, text)
        self._finished = True
        return path
