"""Dependency manifest of a generated module."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import tomli_w

from wiregen._errors import ModuleVersionConflictError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_FILE = "pyproject.toml"


class Manifest:
    """Requirements of one module, keyed by distribution name.

    Requiring a name twice with the same version is a no-op; requiring it with
    a different version raises ``ModuleVersionConflictError``. Versions are not
    compared, so there is no silent upgrade or downgrade.
    """

    def __init__(self, name: str, version: str, python_requires: str = ">=3.12") -> None:
        self.name = name
        self.version = version
        self.python_requires = python_requires
        self._requirements: dict[str, str] = {}
        self._local_sources: dict[str, str] = {}

    def require(self, name: str, version: str) -> None:
        """Record a requirement.

        Raises:
            ModuleVersionConflictError: If ``name`` is already required at a
                different version.

        """
        existing = self._requirements.get(name)
        if existing is not None and existing != version:
            raise ModuleVersionConflictError(name, existing, version)
        self._requirements[name] = version

    def add_local_source(self, name: str, relative_path: str) -> None:
        """Point a requirement at a module that lives in the same workspace."""
        self._local_sources[name] = relative_path

    @property
    def requirements(self) -> dict[str, str]:
        return dict(self._requirements)

    def to_pyproject(self, packages: list[str] | None = None) -> dict[str, Any]:
        """Build the ``pyproject.toml`` document for this module.

        Args:
            packages: Top-level package directories to ship in the wheel.

        """
        data: dict[str, Any] = {
            "build-system": {
                "requires": ["hatchling"],
                "build-backend": "hatchling.build",
            },
            "project": {
                "name": self.name,
                "version": self.version,
                "requires-python": self.python_requires,
                "dependencies": [f"{name}=={version}" for name, version in sorted(self._requirements.items())],
            },
        }
        tool: dict[str, Any] = {}
        if packages:
            tool["hatch"] = {"build": {"targets": {"wheel": {"packages": sorted(packages)}}}}
        if self._local_sources:
            tool["uv"] = {
                "sources": {
                    name: {"path": path, "editable": True} for name, path in sorted(self._local_sources.items())
                },
            }
        if tool:
            data["tool"] = tool
        return data

    def write(self, module_dir: Path, packages: list[str] | None = None) -> Path:
        """Write the manifest into the module directory and return its path."""
        path = module_dir / MANIFEST_FILE
        with path.open("wb") as f:
            tomli_w.dump(self.to_pyproject(packages), f)
        logger.debug("Wrote manifest %s", path)
        return path
