"""Workspace scope: the whole output tree."""

from __future__ import annotations

import logging
import shutil
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import tomli_w

from wiregen._errors import ModuleExistsError, ModuleVersionConflictError, WorkspaceError
from wiregen._ir import clean_name

from ._manifest import MANIFEST_FILE
from ._module import ModuleBuilder, ModuleInfo
from ._scope import BuilderScope, CompilePass

if TYPE_CHECKING:
    from wiregen._config import CompilerConfig

logger = logging.getLogger(__name__)

WORKSPACE_FILE = "workspace.toml"

_COPY_IGNORE = shutil.ignore_patterns("__pycache__", "*.pyc", ".venv", ".git", "*.egg-info")


@dataclass(frozen=True, slots=True)
class WorkspaceInfo:
    """Metadata about the workspace being built.

    Attributes:
        path: Absolute path of the workspace directory.
        modules: Every module in the workspace, generated and local.

    """

    path: Path
    modules: tuple[ModuleInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class LocalModule:
    """A pre-existing module copied into the workspace."""

    name: str
    version: str
    path: Path
    source: Path


class WorkspaceBuilder(BuilderScope):
    """Root builder scope owning every module of the output.

    Visiting a node here invokes its ``add_to_workspace`` capability. The
    builder also pins requirement versions across all modules: two modules
    may not depend on different versions of the same distribution.

    Raises:
        WorkspaceError: If the output directory cannot be prepared.

    """

    passes = (CompilePass.ADD_TO_WORKSPACE,)

    def __init__(self, config: CompilerConfig) -> None:
        super().__init__()
        self.config = config
        self._path = config.output_dir.resolve()
        self._modules: dict[str, ModuleBuilder] = {}
        self._local_modules: dict[str, LocalModule] = {}
        self._dir_owners: dict[str, str] = {}
        self._requirements: dict[str, str] = {}
        self._prepare_output_dir()

    def _prepare_output_dir(self) -> None:
        path = self._path
        try:
            if path.exists():
                if not path.is_dir():
                    msg = f"Output path {path} exists and is not a directory"
                    raise WorkspaceError(msg)
                if any(path.iterdir()):
                    if not self.config.overwrite:
                        msg = f"Output directory {path} is not empty; enable overwrite to replace it"
                        raise WorkspaceError(msg)
                    logger.info("Removing existing output directory %s", path)
                    shutil.rmtree(path)
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Unable to create output directory {path}: {e}"
            raise WorkspaceError(msg) from e

    @property
    def scope_path(self) -> str:
        return f"workspace {self._path}"

    def info(self) -> WorkspaceInfo:
        modules = [module.info() for module in self._modules.values()]
        modules.extend(ModuleInfo(name=m.name, version=m.version, path=m.path) for m in self._local_modules.values())
        return WorkspaceInfo(path=self._path, modules=tuple(modules))

    @property
    def path(self) -> Path:
        return self._path

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    def _claim_dir(self, dir_name: str, module_name: str) -> Path:
        owner = self._dir_owners.get(dir_name)
        if owner is not None:
            msg = f"Cannot place module '{module_name}' in {dir_name}/: already used by module '{owner}'"
            raise ModuleExistsError(msg)
        self._dir_owners[dir_name] = module_name
        return self._path / dir_name

    def create_module(self, name: str, version: str) -> ModuleBuilder:
        """Create a module directory and its manifest builder.

        Creating a module that already exists with the same version returns
        the existing builder.

        Args:
            name: Distribution name of the module.
            version: Version of the module.

        Returns:
            The builder for the module.

        Raises:
            ModuleVersionConflictError: If the module exists with another version.
            ModuleExistsError: If the name or directory is taken by another module.

        """
        existing = self._modules.get(name)
        if existing is not None:
            if existing.info().version != version:
                raise ModuleVersionConflictError(name, existing.info().version, version)
            return existing
        if name in self._local_modules:
            msg = f"Module '{name}' is already provided as a local module"
            raise ModuleExistsError(msg)

        self.check_requirement(name, version)
        path = self._claim_dir(clean_name(name), name)
        path.mkdir()
        module = ModuleBuilder(self, name, version, path)
        self._modules[name] = module
        logger.info("Created module %s %s at %s", name, version, path)
        return module

    def get_module(self, name: str) -> ModuleBuilder | None:
        return self._modules.get(name)

    def add_local_module(self, short_name: str, module_src_path: Path | str) -> LocalModule:
        """Copy an existing module into the workspace.

        The source directory must contain a ``pyproject.toml`` declaring
        ``project.name`` and ``project.version``. Adding the same source twice
        under the same short name is a no-op.

        Args:
            short_name: Directory name to use inside the workspace.
            module_src_path: Directory of the module to copy.

        Returns:
            The copied module.

        Raises:
            WorkspaceError: If the source is not a valid module.
            ModuleExistsError: If the directory or name is taken.

        """
        src = Path(module_src_path).resolve()
        name, version = _read_module_identity(src)

        existing = self._local_modules.get(name)
        if existing is not None and existing.source == src and existing.path.name == clean_name(short_name):
            return existing
        if existing is not None or name in self._modules:
            msg = f"Module '{name}' already exists in the workspace"
            raise ModuleExistsError(msg)

        self.check_requirement(name, version)
        dest = self._claim_dir(clean_name(short_name), name)
        shutil.copytree(src, dest, ignore=_COPY_IGNORE)
        local = LocalModule(name=name, version=version, path=dest, source=src)
        self._local_modules[name] = local
        logger.info("Copied local module %s %s from %s", name, version, src)
        return local

    def get_local_module(self, name: str) -> LocalModule | None:
        """Get a local module of the workspace by distribution name."""
        return self._local_modules.get(name)

    def check_requirement(self, name: str, version: str) -> None:
        """Pin a distribution version for the whole workspace.

        Raises:
            ModuleVersionConflictError: If ``name`` is already pinned, required
                or provided at a different version.

        """
        local = self._local_modules.get(name)
        if local is not None and local.version != version:
            raise ModuleVersionConflictError(name, local.version, version)
        existing = self._requirements.get(name)
        if existing is not None and existing != version:
            raise ModuleVersionConflictError(name, existing, version)
        self._requirements[name] = version

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def finish(self) -> WorkspaceInfo:
        """Write every module manifest and the workspace index."""
        for module in self._modules.values():
            module.finish()

        info = self.info()
        index = {
            "workspace": {
                "modules": [
                    {"name": m.name, "version": m.version, "path": m.path.name}
                    for m in sorted(info.modules, key=lambda m: m.path.name)
                ],
            },
        }
        with (self._path / WORKSPACE_FILE).open("wb") as f:
            tomli_w.dump(index, f)
        logger.info("Workspace %s complete with %d module(s)", self._path, len(info.modules))
        return info


def _read_module_identity(src: Path) -> tuple[str, str]:
    manifest_path = src / MANIFEST_FILE
    if not manifest_path.is_file():
        msg = f"{src} is not a module: missing {MANIFEST_FILE}"
        raise WorkspaceError(msg)
    with manifest_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {manifest_path}: {e}"
            raise WorkspaceError(msg) from e

    project = data.get("project", {})
    name = project.get("name")
    version = project.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        msg = f"{manifest_path} must declare project.name and project.version"
        raise WorkspaceError(msg)
    return name, version
