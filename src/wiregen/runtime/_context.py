"""Shared cancellation signal and supervised background tasks."""

from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class Context:
    """A cancellation signal shared by every task of a container.

    Cancellation is one-way and global: once cancelled, a context stays
    cancelled, and there is no way to cancel a single task.

    Example:
        >>> ctx = Context()
        >>> ctx.cancel("shutting down")
        True
        >>> ctx.cancelled, ctx.reason
        (True, 'shutting down')

    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> bool:
        """Request cancellation.

        Returns:
            True if this call cancelled the context, False if it already was.

        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
        logger.debug("Context cancelled: %s", reason or "no reason given")
        return True

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or until ``timeout`` seconds pass.

        Returns:
            True if the context is cancelled.

        """
        return self._event.wait(timeout)


@runtime_checkable
class Runnable(Protocol):
    """An instance with a long-running loop.

    ``run`` should return promptly once ``ctx`` is cancelled, and raise to
    report failure.
    """

    def run(self, ctx: Context) -> None: ...


def is_runnable(value: object) -> bool:
    """Check whether ``value`` has a ``run`` method callable as ``run(ctx)``.

    ``isinstance(value, Runnable)`` only checks that a ``run`` attribute
    exists; objects such as ``threading.Thread`` have a ``run`` that takes no
    context and are not started.
    """
    if not isinstance(value, Runnable):
        return False
    try:
        inspect.signature(value.run).bind(None)
    except (TypeError, ValueError):
        return False
    return True


@dataclass(frozen=True, slots=True)
class TaskOutcome:
    """How a supervised task ended."""

    name: str
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TaskGroup:
    """Join set of background tasks sharing one context.

    Each task runs in a daemon thread. A task that raises is logged and
    cancels the shared context, so every other task starts shutting down;
    failed tasks are never restarted.
    """

    def __init__(self, context: Context) -> None:
        self._context = context
        self._cond = threading.Condition()
        self._active: dict[threading.Thread, str] = {}
        self._outcomes: list[TaskOutcome] = []

    @property
    def context(self) -> Context:
        return self._context

    def spawn(self, name: str, target: Callable[[Context], object]) -> threading.Thread:
        """Run ``target(context)`` in the background."""
        thread = threading.Thread(target=self._run, args=(name, target), name=f"wiregen:{name}", daemon=True)
        # Registered before start so that wait() never misses it
        with self._cond:
            self._active[thread] = name
        logger.debug("Starting task %s", name)
        thread.start()
        return thread

    def _run(self, name: str, target: Callable[[Context], object]) -> None:
        error: Exception | None = None
        try:
            target(self._context)
        except Exception as e:
            error = e
            logger.exception("Error running %s", name)
            self._context.cancel(f"{name} failed: {e}")
        else:
            logger.info("%s exited", name)
        finally:
            with self._cond:
                self._active.pop(threading.current_thread(), None)
                self._outcomes.append(TaskOutcome(name=name, error=error))
                self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until every spawned task has returned.

        Returns:
            True if all tasks finished, False on timeout.

        """
        with self._cond:
            return self._cond.wait_for(lambda: not self._active, timeout)

    @property
    def active(self) -> tuple[str, ...]:
        with self._cond:
            return tuple(self._active.values())

    @property
    def outcomes(self) -> tuple[TaskOutcome, ...]:
        """Finished tasks, in completion order."""
        with self._cond:
            return tuple(self._outcomes)

    @property
    def failed(self) -> tuple[TaskOutcome, ...]:
        return tuple(outcome for outcome in self.outcomes if not outcome.ok)
