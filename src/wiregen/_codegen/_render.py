"""Pure functions turning typed descriptions into Python source text.

Nothing here touches the filesystem; builders decide where the text goes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._imports import Imports
    from ._types import Constructor, Method, ServiceInterface

INDENT = "    "


def render_header(plugin: str) -> str:
    """First line of every generated file."""
    return f"# Code generated by wiregen ({plugin}). DO NOT EDIT."


@dataclass(frozen=True, slots=True)
class Declaration:
    """A build function declared in a namespace file.

    Attributes:
        name: Instance name registered with the runtime container.
        func_name: Name of the generated build function.
        source: Source text of the build function definition.
        dependencies: Instance names the build function gets from the container.

    """

    name: str
    func_name: str
    source: str
    dependencies: tuple[str, ...] = ()


# =============================================================================
# Methods and interfaces
# =============================================================================


def render_signature(method: Method, imports: Imports) -> str:
    """Render ``def name(self, arg: T, ...) -> R:`` for a method."""
    params = ["self"]
    for arg in method.arguments:
        params.append(f"{arg.name}: {imports.add_type(arg.type)}" if arg.type is not None else arg.name)
    returns = f" -> {imports.add_type(method.returns)}" if method.returns is not None else ""
    return f"def {method.name}({', '.join(params)}){returns}:"


def render_call(method: Method, target: str) -> str:
    """Render a call forwarding the method's arguments to ``target``."""
    args = ", ".join(arg.name for arg in method.arguments)
    return f"{target}.{method.name}({args})"


def render_protocol(iface: ServiceInterface, imports: Imports, header: str) -> str:
    """Render a module declaring the interface as a ``typing.Protocol``."""
    typing_alias = imports.add_package("typing")
    body = [f"{INDENT}{render_signature(method, imports)} ..." for method in iface.methods]
    if not body:
        body = [f"{INDENT}..."]
    lines = [
        header,
        "",
        imports.render(),
        "",
        "",
        f"class {iface.name}({typing_alias}.Protocol):",
        *body,
    ]
    return "\n".join(lines) + "\n"


# =============================================================================
# Build functions
# =============================================================================


def render_build_func(func_name: str, call: str, dependencies: Sequence[str]) -> str:
    """Render a build function that gets its dependencies and calls ``call``.

    Example:
        >>> print(render_build_func("_build_users", "handlers.new_users", ["db"]))
        def _build_users(ctr):
            arg0 = ctr.get('db')
            return handlers.new_users(arg0)

    """
    lines = [f"def {func_name}(ctr):"]
    arg_names = []
    for idx, dep in enumerate(dependencies):
        lines.append(f"{INDENT}arg{idx} = ctr.get({dep!r})")
        arg_names.append(f"arg{idx}")
    lines.append(f"{INDENT}return {call}({', '.join(arg_names)})")
    return "\n".join(lines)


def render_constructor_call(constructor: Constructor, imports: Imports) -> str:
    """Return the expression naming the constructor, importing its module."""
    return f"{imports.add_package(constructor.package)}.{constructor.name}"


def render_value_func(func_name: str, value: Any) -> str:
    """Render a build function returning a literal value."""
    literal = repr(value)
    if not _is_literal(value):
        msg = f"Cannot render {type(value).__name__} value as a literal: {literal}"
        raise TypeError(msg)
    return f"def {func_name}(ctr):\n{INDENT}return {literal}"


def _is_literal(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if value is None or isinstance(value, (bool, int, str, bytes)):
        return True
    if isinstance(value, (list, tuple, set, frozenset)):
        return all(_is_literal(item) for item in value)
    if isinstance(value, dict):
        return all(_is_literal(k) and _is_literal(v) for k, v in value.items())
    return False


# =============================================================================
# Whole files
# =============================================================================


def render_namespace_file(
    *,
    header: str,
    imports: Imports,
    runtime_alias: str,
    declarations: Sequence[Declaration],
    entrypoints: Sequence[str] = (),
) -> str:
    """Render a file registering declarations with the runtime container.

    The file defines ``build_graph(graph=None)``. When ``entrypoints`` is not
    empty it also defines ``main()``, which serves those instances, and runs it
    when executed as a script.
    """
    lines = [header, "", imports.render(), "", ""]
    for decl in declarations:
        lines.extend([decl.source, "", ""])

    lines.append("def build_graph(graph=None):")
    lines.append(f'{INDENT}"""Register every instance declared in this file."""')
    lines.append(f"{INDENT}if graph is None:")
    lines.append(f"{INDENT}{INDENT}graph = {runtime_alias}.Graph()")
    lines.extend(f"{INDENT}graph.define({decl.name!r}, {decl.func_name})" for decl in declarations)
    lines.append(f"{INDENT}return graph")

    if entrypoints:
        names = ", ".join(repr(name) for name in entrypoints)
        lines.extend(
            [
                "",
                "",
                "def main():",
                f"{INDENT}return {runtime_alias}.serve(build_graph(), [{names}])",
                "",
                "",
                'if __name__ == "__main__":',
                f"{INDENT}raise SystemExit(main())",
            ],
        )
    return "\n".join(lines) + "\n"


def render_health_check_handler(
    *,
    header: str,
    imports: Imports,
    handler_name: str,
    constructor_name: str,
    iface: ServiceInterface,
    wrapped: ServiceInterface,
) -> str:
    """Render a class forwarding ``wrapped``'s methods and adding ``health_check``.

    The class subclasses ``iface``, which must already have been generated.
    """
    base = imports.add_type(iface.type_name)
    lines = [
        header,
        "",
        "",  # import block, filled in below
        "",
        "",
        f"class {handler_name}({base}):",
        f"{INDENT}def __init__(self, service):",
        f"{INDENT}{INDENT}self.service = service",
    ]
    for method in wrapped.methods:
        lines.extend(
            [
                "",
                f"{INDENT}{render_signature(method, imports)}",
                f"{INDENT}{INDENT}return {render_call(method, 'self.service')}",
            ],
        )
    lines.extend(
        [
            "",
            f"{INDENT}def health_check(self) -> str:",
            f'{INDENT}{INDENT}return "Healthy"',
            "",
            "",
            f"def {constructor_name}(service):",
            f"{INDENT}return {handler_name}(service)",
        ],
    )
    # Signatures may have added imports; render the block last
    lines[2] = imports.render()
    return "\n".join(lines) + "\n"
