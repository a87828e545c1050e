"""Compile architecture graphs into runnable Python workspaces."""

__all__ = [
    "BuilderError",
    "BuilderScope",
    "Capability",
    "CompilationError",
    "CompilationResult",
    "CompilePass",
    "CompilerConfig",
    "Constructor",
    "CycleError",
    "DependencyGraph",
    "DuplicateNodeError",
    "GraphConstructionError",
    "GraphCycleError",
    "GraphFrozenError",
    "GraphInfo",
    "IRGraph",
    "IRNode",
    "Imports",
    "Method",
    "MissingCapabilityError",
    "ModuleBuilder",
    "ModuleExistsError",
    "ModuleInfo",
    "ModuleVersionConflictError",
    "NamespaceBuilder",
    "PackageInfo",
    "ServiceInterface",
    "TypeName",
    "Variable",
    "WiregenError",
    "WorkspaceBuilder",
    "WorkspaceError",
    "WorkspaceInfo",
    "as_capability",
    "clean_name",
    "closure",
    "compile_graph",
    "supports",
]

from ._builder import (
    BuilderScope,
    CompilePass,
    GraphInfo,
    ModuleBuilder,
    ModuleInfo,
    NamespaceBuilder,
    PackageInfo,
    WorkspaceBuilder,
    WorkspaceInfo,
)
from ._codegen import Constructor, Imports, Method, ServiceInterface, TypeName, Variable
from ._compiler import CompilationResult, compile_graph
from ._config import CompilerConfig
from ._errors import (
    BuilderError,
    CompilationError,
    DuplicateNodeError,
    GraphConstructionError,
    GraphCycleError,
    GraphFrozenError,
    MissingCapabilityError,
    ModuleExistsError,
    ModuleVersionConflictError,
    WiregenError,
    WorkspaceError,
)
from ._graph import CycleError, DependencyGraph
from ._ir import Capability, IRGraph, IRNode, as_capability, clean_name, closure, supports
