"""Errors raised by the runtime container."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class RuntimeContainerError(Exception):
    """Base class for errors raised by the runtime container."""


class UnknownInstanceError(RuntimeContainerError, LookupError):
    """No build function is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown instance '{name}'")


class DependencyCycleError(RuntimeContainerError):
    """Building an instance (transitively) requires the instance itself.

    Attributes:
        path: Instance names along the cycle, ending with the repeated name.

    """

    def __init__(self, path: Sequence[str]) -> None:
        self.path = tuple(path)
        super().__init__(f"Dependency cycle while building: {' -> '.join(self.path)}")
