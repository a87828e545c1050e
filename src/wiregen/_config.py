"""Compiler configuration threaded through the builders."""

from dataclasses import dataclass
from pathlib import Path

RUNTIME_PACKAGE = "wiregen"
RUNTIME_VERSION = "0.1.0"


@dataclass(slots=True, frozen=True)
class CompilerConfig:
    """Settings for one compilation.

    Attributes:
        output_dir: Workspace directory to generate into.
        module_prefix: Prefix of the distribution name of every generated
            module, e.g. ``wiregen_gen-frontend``.
        module_version: Version written into generated module manifests.
        overwrite: Allow generating into a non-empty output directory, whose
            contents are removed first.
        python_requires: ``requires-python`` of generated modules.

    """

    output_dir: Path
    module_prefix: str = "wiregen_gen"
    module_version: str = "0.1.0"
    overwrite: bool = False
    python_requires: str = ">=3.12"

    def module_name(self, short_name: str) -> str:
        """Distribution name of a generated module."""
        return f"{self.module_prefix}-{short_name}"
