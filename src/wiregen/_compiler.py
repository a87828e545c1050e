"""Compiler driver: from a frozen IR graph to a workspace on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from wiregen._builder import ModuleInfo, WorkspaceBuilder, WorkspaceInfo

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from wiregen._config import CompilerConfig
    from wiregen._ir import IRGraph, IRNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompilationResult:
    """Outcome of a successful compilation.

    Attributes:
        workspace: The finalized workspace.
        roots: Names of the nodes compilation started from.
        nodes: Names of every node in the closure of the roots,
            dependencies first.

    """

    workspace: WorkspaceInfo
    roots: tuple[str, ...]
    nodes: tuple[str, ...]

    @property
    def path(self) -> Path:
        return self.workspace.path

    @property
    def modules(self) -> tuple[ModuleInfo, ...]:
        return self.workspace.modules


def compile_graph(graph: IRGraph, roots: Iterable[IRNode | str], config: CompilerConfig) -> CompilationResult:
    """Compile the given roots of an IR graph into a workspace.

    The graph is frozen first. Every node in the closure of the roots is then
    visited by a fresh workspace builder. Nodes that provide modules drive the
    module and namespace passes for the nodes they contain, so the driver
    itself only needs the entry points.

    Args:
        graph: The assembled IR graph.
        roots: Nodes, or node names, to realize.
        config: Output settings.

    Returns:
        Information about the generated workspace.

    Raises:
        GraphCycleError: If the graph is not a DAG.
        KeyError: If a root name is not in the graph.
        CompilationError: If any capability handler fails. Nothing is retried
            and the partially written workspace should be discarded.
        WorkspaceError: If the output directory cannot be used.

    """
    graph.freeze()
    root_nodes = [graph.get(root) if isinstance(root, str) else root for root in roots]
    nodes = graph.closure(root_nodes)
    logger.info(
        "Compiling %d node(s) reachable from %s into %s",
        len(nodes),
        ", ".join(node.name for node in root_nodes) or "<nothing>",
        config.output_dir,
    )

    workspace = WorkspaceBuilder(config)
    workspace.visit(nodes)
    info = workspace.finish()

    return CompilationResult(
        workspace=info,
        roots=tuple(node.name for node in root_nodes),
        nodes=tuple(node.name for node in nodes),
    )
