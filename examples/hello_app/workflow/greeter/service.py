"""Hand-written greeter service."""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Greeter(Protocol):
    def greet(self, name: str) -> str: ...


class GreeterImpl:
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def greet(self, name: str) -> str:
        return f"{self.prefix}, {name}!"

    def run(self, ctx) -> None:
        """Greet once at startup, then exit."""
        logger.info(self.greet("world"))


def new_greeter(prefix: str) -> GreeterImpl:
    return GreeterImpl(prefix)
