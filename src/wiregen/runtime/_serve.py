"""Process entry point used by generated ``main()`` functions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._container import Graph

logger = logging.getLogger(__name__)

# Seconds to wait for tasks to observe cancellation before giving up
SHUTDOWN_GRACE = 10.0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def serve(graph: Graph, names: Sequence[str], *, verbose: bool = False) -> int:
    """Build the named instances and supervise them until they finish.

    Args:
        graph: The definitions of the process.
        names: Top-level instances to build, in order.
        verbose: Log at DEBUG level.

    Returns:
        The process exit code: 0 if every task exited cleanly, 1 if startup
        or any task failed.

    """
    _configure_logging(verbose)
    container = graph.build()

    for name in names:
        try:
            container.get(name)
        except Exception:
            logger.exception("Failed to build %s", name)
            container.cancel(f"failed to build {name}")
            container.wait(SHUTDOWN_GRACE)
            return 1

    try:
        container.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        container.cancel("interrupted")
        if not container.wait(SHUTDOWN_GRACE):
            logger.warning("Tasks still running after %.0fs: %s", SHUTDOWN_GRACE, ", ".join(container.tasks.active))

    failed = container.tasks.failed
    if failed:
        logger.error("%d task(s) failed: %s", len(failed), ", ".join(outcome.name for outcome in failed))
        return 1
    return 0
