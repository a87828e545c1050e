"""Code generation helpers.

Typed descriptions of generated code (pydantic models), an import manager
for one generated file, and pure render functions from descriptions to
Python source text.
"""

from ._imports import Imports
from ._render import (
    Declaration,
    render_build_func,
    render_call,
    render_constructor_call,
    render_header,
    render_health_check_handler,
    render_namespace_file,
    render_protocol,
    render_signature,
    render_value_func,
)
from ._types import Constructor, Method, ServiceInterface, TypeName, Variable

__all__ = [
    "Constructor",
    "Declaration",
    "Imports",
    "Method",
    "ServiceInterface",
    "TypeName",
    "Variable",
    "render_build_func",
    "render_call",
    "render_constructor_call",
    "render_header",
    "render_health_check_handler",
    "render_namespace_file",
    "render_protocol",
    "render_signature",
    "render_value_func",
]
