"""Base IR node."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._capability import Capability

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]")


def clean_name(name: str) -> str:
    """Turn a node name into a valid Python identifier.

    Example:
        >>> clean_name("user-service.handler")
        'user_service_handler'

    """
    cleaned = _INVALID_IDENTIFIER_CHARS.sub("_", name)
    if not cleaned or cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned


class IRNode:
    """An abstract component of the architecture graph.

    A node has a name, an ordered sequence of argument nodes (collaborators it
    is given) and an ordered sequence of contained nodes (children it owns and
    is responsible for generating). Both are fixed at construction.

    Nodes are shared by reference: the same instance may be an argument of one
    node and a child of another. Equality and hashing are by identity.

    Subclasses opt into capabilities by listing them in ``capabilities`` and
    defining the matching methods; see ``wiregen._ir.Capability``.
    """

    capabilities: ClassVar[frozenset[Capability]] = frozenset()
    kind: ClassVar[str] = "IRNode"

    __slots__ = ("_args", "_contained", "_name")

    def __init__(self, name: str, args: Iterable[IRNode] = (), contained: Iterable[IRNode] = ()) -> None:
        if not name:
            msg = "IR node name must not be empty"
            raise ValueError(msg)
        self._name = name
        self._args = tuple(args)
        self._contained = tuple(contained)

    @property
    def name(self) -> str:
        return self._name

    @property
    def args(self) -> tuple[IRNode, ...]:
        return self._args

    @property
    def contained(self) -> tuple[IRNode, ...]:
        return self._contained

    @property
    def children(self) -> tuple[IRNode, ...]:
        """Arguments followed by contained nodes."""
        return self._args + self._contained

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r}>"

    def __str__(self) -> str:
        return pretty_print(self)


def pretty_print(node: IRNode, indent: int = 2) -> str:
    """Render a node and its contained nodes as an indented block.

    Example:
        >>> print(pretty_print(process))
        frontend = Process(greeting_prefix) {
          greeting_prefix = ConfigValue()
          greeter = WorkflowService(greeting_prefix)
        }

    """
    arg_names = ", ".join(arg.name for arg in node.args)
    header = f"{node.name} = {node.kind}({arg_names})"
    if not node.contained:
        return header
    pad = " " * indent
    body = "\n".join(pad + line for child in node.contained for line in pretty_print(child, indent).splitlines())
    return f"{header} {{\n{body}\n}}"
