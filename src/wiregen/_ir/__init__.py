"""Intermediate Representation (IR) module for wiregen.

The IR describes an architecture as a graph of named nodes before any code
is generated. A node lists the collaborators it is given (arguments) and
the children it owns (contained nodes), and opts into code-generation
capabilities through a closed, per-type capability set.

Key types:
- IRNode: Base class of every node
- Capability: Enum of code-generation contracts a node may support
- IRGraph: Arena of uniquely named nodes, validated as a DAG
- closure: Dependencies-first transitive closure of some nodes
"""

from ._capability import (
    CAPABILITY_METHODS,
    CAPABILITY_PREREQUISITES,
    Capability,
    GeneratesFuncs,
    GeneratesInterfaces,
    Instantiable,
    ProvidesModule,
    RequiresPackage,
    Service,
    as_capability,
    check_capabilities,
    supports,
)
from ._graph import IRGraph, closure
from ._node import IRNode, clean_name, pretty_print

__all__ = [
    "CAPABILITY_METHODS",
    "CAPABILITY_PREREQUISITES",
    "Capability",
    "GeneratesFuncs",
    "GeneratesInterfaces",
    "IRGraph",
    "IRNode",
    "Instantiable",
    "ProvidesModule",
    "RequiresPackage",
    "Service",
    "as_capability",
    "check_capabilities",
    "clean_name",
    "closure",
    "pretty_print",
    "supports",
]
