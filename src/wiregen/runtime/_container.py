"""Lazy, memoizing dependency-injection container."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ._context import Context, TaskGroup, is_runnable
from ._errors import DependencyCycleError, UnknownInstanceError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

type BuildFunc = Callable[[Container], Any]


class Graph:
    """Registry of build functions, keyed by instance name.

    Generated namespace files call ``define`` once per instance; ``build``
    then turns the registry into a container.

    Example:
        >>> graph = Graph()
        >>> graph.define("greeting", lambda ctr: "hello")
        >>> graph.build().get("greeting")
        'hello'

    """

    def __init__(self) -> None:
        self._build_funcs: dict[str, BuildFunc] = {}

    def define(self, name: str, build: BuildFunc) -> None:
        """Register how to build an instance. Redefining a name replaces it."""
        if name in self._build_funcs:
            logger.warning("Redefining %s; this might indicate a bad wiring graph", name)
        self._build_funcs[name] = build

    def build(self, context: Context | None = None) -> Container:
        """Create a container from the current definitions.

        Later calls to ``define`` do not affect the returned container.
        """
        return Container(dict(self._build_funcs), context or Context())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._build_funcs)

    def __contains__(self, name: object) -> bool:
        return name in self._build_funcs

    def __len__(self) -> int:
        return len(self._build_funcs)


class Container:
    """Builds named instances on first use and supervises runnable ones.

    ``get`` runs each build function at most once, even when called from
    several threads at the same time. A failed build is not cached, so a
    later ``get`` tries again. An instance whose ``run`` accepts a context is
    started as a background task right after it is built.
    """

    def __init__(self, build_funcs: dict[str, BuildFunc], context: Context) -> None:
        self._build_funcs = build_funcs
        self._built: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._build_locks: dict[str, threading.RLock] = {}
        self._local = threading.local()
        self._context = context
        self._tasks = TaskGroup(context)

    def _in_progress(self) -> list[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def get(self, name: str) -> Any:
        """Get an instance, building it and its dependencies if needed.

        Raises:
            UnknownInstanceError: If no build function is registered for ``name``.
            DependencyCycleError: If building ``name`` requires ``name`` itself.
            Exception: Whatever the build function raised.

        """
        with self._lock:
            if name in self._built:
                return self._built[name]
            build = self._build_funcs.get(name)
            if build is None:
                raise UnknownInstanceError(name)
            build_lock = self._build_locks.setdefault(name, threading.RLock())

        stack = self._in_progress()
        if name in stack:
            raise DependencyCycleError([*stack[stack.index(name) :], name])

        with build_lock:
            # Another thread may have finished the build while we waited
            with self._lock:
                if name in self._built:
                    return self._built[name]

            stack.append(name)
            try:
                value = build(self)
            except Exception:
                logger.error("Error building %s", name)
                raise
            finally:
                stack.pop()

            with self._lock:
                self._built[name] = value
            if isinstance(value, str):
                logger.info("Built %s (str) = %s", name, value)
            else:
                logger.info("Built %s (%s)", name, type(value).__name__)

            if is_runnable(value):
                logger.info("Running %s", name)
                self._tasks.spawn(name, value.run)
        return value

    @property
    def context(self) -> Context:
        return self._context

    @property
    def tasks(self) -> TaskGroup:
        return self._tasks

    def spawn(self, name: str, target: Callable[[Context], object]) -> threading.Thread:
        """Supervise extra background work alongside the runnable instances."""
        return self._tasks.spawn(name, target)

    def cancel(self, reason: str | None = None) -> bool:
        return self._context.cancel(reason)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every supervised task has returned."""
        return self._tasks.wait(timeout)

    def is_built(self, name: str) -> bool:
        with self._lock:
            return name in self._built

    @property
    def names(self) -> tuple[str, ...]:
        """Names with a registered build function."""
        return tuple(self._build_funcs)
