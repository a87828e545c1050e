"""Utilities to discover IR graphs in scripts and modules.

``get_module_data_from_path`` was adapted from `fastapi_cli.discover` of package `fastapi-cli` version 0.0.8 (77e6d1f).
"""

from __future__ import annotations

import importlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from wiregen._ir import IRGraph

from .config import ModuleSource, ScriptSource

if TYPE_CHECKING:
    from .config import GraphSource

logger = logging.getLogger(__name__)


@dataclass
class ModuleData:
    """Module data for a Python module."""

    module_import_str: str
    extra_sys_path: Path
    module_paths: list[Path]


def get_module_data_from_path(path: Path) -> ModuleData:
    """Get the import path of a Python file, walking up through packages."""
    use_path = path.resolve()
    module_path = use_path
    if use_path.is_file() and use_path.stem == "__init__":
        module_path = use_path.parent
    module_paths = [module_path]
    extra_sys_path = module_path.parent
    for parent in module_path.parents:
        if (parent / "__init__.py").is_file():
            module_paths.insert(0, parent)
            extra_sys_path = parent.parent
        else:
            break

    return ModuleData(
        module_import_str=".".join(p.stem for p in module_paths),
        extra_sys_path=extra_sys_path.resolve(),
        module_paths=module_paths,
    )


def load_graph_from_script(script_path: Path, graph_name: str | None = None) -> IRGraph:
    """Load an IR graph from a Python script path.

    Args:
        script_path: Path to the Python script building the graph
        graph_name: Name of the graph variable. If None, the first IRGraph found is used

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If no graph is found or the named variable doesn't exist
        TypeError: If the named variable is not an IRGraph

    """
    module_data = get_module_data_from_path(script_path)
    sys.path.insert(0, str(module_data.extra_sys_path))

    try:
        module = importlib.import_module(module_data.module_import_str)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    if graph_name:
        if not hasattr(module, graph_name):
            msg = f"Could not find graph '{graph_name}' in {module_data.module_import_str}"
            raise ValueError(msg)
        graph = getattr(module, graph_name)
        if not isinstance(graph, IRGraph):
            msg = f"'{graph_name}' in {module_data.module_import_str} is not an IRGraph"
            raise TypeError(msg)
        return graph

    for name in dir(module):
        obj = getattr(module, name)
        if isinstance(obj, IRGraph):
            logger.debug("Found graph: %s", name)
            return obj

    msg = "Could not find an IRGraph in module, try using --graph-var"
    raise ValueError(msg)


def load_graph_from_module_path(module_path: str) -> IRGraph:
    """Load an IR graph from a module path (e.g., 'examples.hello_app.wiring:graph').

    Raises:
        ValueError: If module path format is invalid
        TypeError: If the named variable is not an IRGraph

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, graph_name = module_path.split(":", 1)
    module = importlib.import_module(module_name)
    graph = getattr(module, graph_name)

    if not isinstance(graph, IRGraph):
        msg = f"'{graph_name}' in module '{module_name}' is not an IRGraph"
        raise TypeError(msg)

    return graph


def load_graph_from_source(source: GraphSource) -> IRGraph:
    """Load an IR graph from a configured source."""
    match source:
        case ScriptSource(script=script, name=name):
            return load_graph_from_script(script, name)
        case ModuleSource(module_path=module_path):
            return load_graph_from_module_path(module_path)


def load_graph(path: str, graph_name: str | None = None) -> IRGraph:
    """Load an IR graph from a command-line argument.

    ``module.path:variable`` is imported as a module; anything else is a script path.
    """
    if ":" in path:
        return load_graph_from_module_path(path)
    return load_graph_from_script(Path(path), graph_name)
