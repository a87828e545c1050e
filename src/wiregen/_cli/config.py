"""The ``[tool.wiregen]`` table of pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

PYPROJECT = "pyproject.toml"


class ConfigError(Exception):
    """Error in wiregen configuration."""


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """A wiring script, and optionally the name of its graph variable."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """An importable graph given as ``package.module:variable``."""

    module_path: str


GraphSource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class WiregenConfig:
    """Settings read from ``[tool.wiregen]``.

    Every field is optional; command-line options take precedence. Relative
    paths are resolved against ``project_root``, the directory holding the
    pyproject.toml they were read from.

    Example:
        .. code-block:: toml

            [tool.wiregen]
            graph = "examples.hello_app.wiring:graph"
            roots = ["frontend"]
            output = "build"
            module-prefix = "wiregen_gen"

    """

    graph: GraphSource | None = None
    roots: tuple[str, ...] = ()
    output: Path | None = None
    module_prefix: str | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Return the nearest pyproject.toml in ``start_dir`` or its parents.

    ``start_dir`` defaults to the working directory.
    """
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    return None


def _invalid(key: str, expected: str) -> ConfigError:
    return ConfigError(f"Invalid [tool.wiregen].{key}: expected {expected}")


def _resolve(value: str, project_root: Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else project_root / path


def _parse_graph_source(value: object, project_root: Path) -> GraphSource:
    """Parse ``graph = "module:var"`` or ``graph = { script = ..., name = ... }``."""
    match value:
        case str() if ":" in value:
            return ModuleSource(module_path=value)
        case str():
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        case dict():
            script = value.get("script")
            if not isinstance(script, str):
                raise _invalid("graph.script", "string path")
            name = value.get("name")
            if name is not None and not isinstance(name, str):
                raise _invalid("graph.name", "string")
            return ScriptSource(script=_resolve(script, project_root), name=name)
    msg = "Invalid [tool.wiregen].graph configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def _parse_roots(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(root, str) for root in value):
        raise _invalid("roots", "a list of node names")
    return tuple(value)


def _parse_section(section: dict[str, Any], project_root: Path) -> WiregenConfig:
    graph = _parse_graph_source(section["graph"], project_root) if "graph" in section else None
    roots = _parse_roots(section["roots"]) if "roots" in section else ()

    output = section.get("output")
    if output is not None and not isinstance(output, str):
        raise _invalid("output", "string path")

    module_prefix = section.get("module-prefix")
    if module_prefix is not None and (not isinstance(module_prefix, str) or not module_prefix):
        raise _invalid("module-prefix", "non-empty string")

    return WiregenConfig(
        graph=graph,
        roots=roots,
        output=_resolve(output, project_root) if output is not None else None,
        module_prefix=module_prefix,
        project_root=project_root,
    )


def load_config(pyproject_path: Path) -> WiregenConfig:
    """Read ``[tool.wiregen]`` from a pyproject.toml.

    A file without the table yields an empty configuration.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type.

    """
    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {pyproject_path}: {e}"
        raise ConfigError(msg) from e

    section = data.get("tool", {}).get("wiregen", {})
    return _parse_section(section, pyproject_path.parent)


def get_config() -> WiregenConfig:
    """Configuration of the project around the working directory, if any."""
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return WiregenConfig()
    return load_config(pyproject_path)
