"""Builder scopes driving code generation.

Three nested scopes each own a visited-set and a list of compile passes:

- WorkspaceBuilder: the output tree, visited for ``add_to_workspace``
- ModuleBuilder: one distribution, visited for requirements, interfaces and functions
- NamespaceBuilder: one generated file, visited for ``add_instantiation``
"""

from ._manifest import MANIFEST_FILE, Manifest
from ._module import ModuleBuilder, ModuleInfo, PackageInfo
from ._namespace import GraphInfo, NamespaceBuilder
from ._scope import PASS_CAPABILITIES, BuilderScope, CompilePass
from ._workspace import WORKSPACE_FILE, LocalModule, WorkspaceBuilder, WorkspaceInfo

__all__ = [
    "MANIFEST_FILE",
    "PASS_CAPABILITIES",
    "WORKSPACE_FILE",
    "BuilderScope",
    "CompilePass",
    "GraphInfo",
    "LocalModule",
    "Manifest",
    "ModuleBuilder",
    "ModuleInfo",
    "NamespaceBuilder",
    "PackageInfo",
    "WorkspaceBuilder",
    "WorkspaceInfo",
]
