"""Tests for typed code descriptions and pure render functions."""

import pytest
from pydantic import ValidationError

from wiregen._codegen import (
    Constructor,
    Declaration,
    Imports,
    Method,
    ServiceInterface,
    TypeName,
    Variable,
    render_build_func,
    render_constructor_call,
    render_header,
    render_health_check_handler,
    render_namespace_file,
    render_protocol,
    render_signature,
    render_value_func,
)

STR = TypeName(name="str")

GREETER = ServiceInterface(
    name="Greeter",
    package="greeter.service",
    methods=(Method(name="greet", arguments=(Variable(name="name", type=STR),), returns=STR),),
)


# =============================================================================
# Tests for descriptions
# =============================================================================


class TestTypes:
    """Tests for the pydantic descriptions."""

    def test_type_name_str(self) -> None:
        assert str(TypeName(package="a.b", name="C")) == "a.b.C"
        assert str(STR) == "str"
        assert STR.is_builtin

    def test_none_is_a_valid_type_name(self) -> None:
        assert TypeName(name="None").name == "None"

    @pytest.mark.parametrize("name", ["1abc", "has-dash", "class", ""])
    def test_invalid_identifiers_are_rejected(self, name: str) -> None:
        with pytest.raises(ValidationError):
            Variable(name=name)

    def test_invalid_package_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeName(package="a..b", name="C")

    def test_descriptions_are_frozen(self) -> None:
        with pytest.raises(ValidationError):
            GREETER.name = "Other"  # type: ignore[misc]

    def test_extend_appends_methods(self) -> None:
        ping = Method(name="ping")
        extended = GREETER.extend("PingGreeter", "gen.iface", ping)
        assert extended.type_name == TypeName(package="gen.iface", name="PingGreeter")
        assert [m.name for m in extended.methods] == ["greet", "ping"]
        assert [m.name for m in GREETER.methods] == ["greet"]


# =============================================================================
# Tests for render functions
# =============================================================================


def test_render_header() -> None:
    assert render_header("process") == "# Code generated by wiregen (process). DO NOT EDIT."


def test_render_signature_imports_argument_types() -> None:
    imports = Imports()
    user_id = Variable(name="user_id", type=TypeName(package="users.model", name="UserId"))
    method = Method(
        name="lookup",
        arguments=(user_id, Variable(name="raw")),
        returns=TypeName(package="users.model", name="User"),
    )
    assert render_signature(method, imports) == "def lookup(self, user_id: model.UserId, raw) -> model.User:"
    assert imports.packages == {"users.model": "model"}


def test_render_protocol() -> None:
    text = render_protocol(GREETER, Imports(), render_header("test"))
    assert text == (
        "# Code generated by wiregen (test). DO NOT EDIT.\n"
        "\n"
        "import typing\n"
        "\n"
        "\n"
        "class Greeter(typing.Protocol):\n"
        "    def greet(self, name: str) -> str: ...\n"
    )


def test_render_build_func() -> None:
    assert render_build_func("_build_users", "handlers.new_users", ["db", "cache"]) == (
        "def _build_users(ctr):\n"
        "    arg0 = ctr.get('db')\n"
        "    arg1 = ctr.get('cache')\n"
        "    return handlers.new_users(arg0, arg1)"
    )


def test_render_constructor_call_imports_package() -> None:
    imports = Imports()
    call = render_constructor_call(Constructor(package="greeter.service", name="new_greeter"), imports)
    assert call == "service.new_greeter"
    assert imports.alias_of("greeter.service") == "service"


@pytest.mark.parametrize("value", ["Hello", 3, 2.5, True, None, ["a", 1], {"k": ("v",)}])
def test_render_value_func_round_trips_literals(value: object) -> None:
    namespace: dict[str, object] = {}
    exec(render_value_func("_build_value", value), namespace)  # noqa: S102
    assert namespace["_build_value"](None) == value


@pytest.mark.parametrize("value", [object(), float("nan"), [1, object()]])
def test_render_value_func_rejects_non_literals(value: object) -> None:
    with pytest.raises(TypeError, match="Cannot render"):
        render_value_func("_build_value", value)


class TestRenderNamespaceFile:
    """Tests for whole namespace files."""

    def _render(self, entrypoints: list[str]) -> str:
        imports = Imports(reserved=["build_graph", "main", "graph", "ctr"])
        runtime = imports.add_package("wiregen.runtime")
        declarations = [
            Declaration("greeting", "_build_greeting", render_value_func("_build_greeting", "hi")),
            Declaration(
                "shout",
                "_build_shout",
                "def _build_shout(ctr):\n    return ctr.get('greeting').upper()",
                ("greeting",),
            ),
        ]
        return render_namespace_file(
            header=render_header("test"),
            imports=imports,
            runtime_alias=runtime,
            declarations=declarations,
            entrypoints=entrypoints,
        )

    def test_defines_build_graph(self) -> None:
        text = self._render([])
        assert "import wiregen.runtime as runtime\n" in text
        assert "    graph.define('greeting', _build_greeting)\n    graph.define('shout', _build_shout)\n" in text
        assert "def main()" not in text

    def test_generated_graph_builds_instances(self) -> None:
        namespace: dict[str, object] = {}
        exec(compile(self._render([]), "<generated>", "exec"), namespace)  # noqa: S102
        container = namespace["build_graph"]().build()
        assert container.get("shout") == "HI"

    def test_entrypoints_add_main(self) -> None:
        text = self._render(["shout"])
        assert "def main():\n    return runtime.serve(build_graph(), ['shout'])\n" in text
        assert text.endswith('if __name__ == "__main__":\n    raise SystemExit(main())\n')
        compile(text, "<generated>", "exec")


def test_render_health_check_handler_is_valid_python() -> None:
    iface = GREETER.extend("GreeterHealthCheck", "gen.healthcheck.iface", Method(name="health_check", returns=STR))
    text = render_health_check_handler(
        header=render_header("healthcheck"),
        imports=Imports(),
        handler_name="GreeterHealthCheckHandler",
        constructor_name="new_greeter_healthcheck",
        iface=iface,
        wrapped=GREETER,
    )
    compile(text, "<generated>", "exec")
    assert text.startswith(
        "# Code generated by wiregen (healthcheck). DO NOT EDIT.\n\nimport gen.healthcheck.iface as iface\n",
    )
    assert "class GreeterHealthCheckHandler(iface.GreeterHealthCheck):" in text
    assert "        return self.service.greet(name)" in text
    assert '        return "Healthy"' in text
    assert "def new_greeter_healthcheck(service):\n    return GreeterHealthCheckHandler(service)\n" in text
