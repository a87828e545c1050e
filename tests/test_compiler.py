"""End-to-end tests: from an IR graph to a generated workspace that runs."""

import importlib
import sys
import tomllib
from collections.abc import Iterator
from pathlib import Path

import pytest

from wiregen import (
    CompilationError,
    CompilerConfig,
    Constructor,
    IRGraph,
    Method,
    ServiceInterface,
    TypeName,
    Variable,
    compile_graph,
)
from wiregen._builder import MANIFEST_FILE, WORKSPACE_FILE
from wiregen.plugins import ConfigValue, HealthCheckWrapper, Process, WorkflowService

STR = TypeName(name="str")

GREETER_IFACE = ServiceInterface(
    name="Greeter",
    package="e2e_greeter.service",
    methods=(Method(name="greet", arguments=(Variable(name="name", type=STR),), returns=STR),),
)

GREETER_CONSTRUCTOR = Constructor(
    package="e2e_greeter.service",
    name="new_greeter",
    arguments=(Variable(name="prefix", type=STR),),
)

GENERATED_PACKAGES = {"e2e_greeter", "e2e_frontend", "wiregen_gen_e2e_frontend"}

SERVICE_SOURCE = '''\
class GreeterImpl:
    def __init__(self, prefix):
        self.prefix = prefix

    def greet(self, name):
        return f"{self.prefix}, {name}!"


def new_greeter(prefix):
    return GreeterImpl(prefix)
'''


@pytest.fixture
def workflow_dir(tmp_path: Path) -> Path:
    """A hand-written local module providing the greeter service."""
    root = tmp_path / "workflow"
    package = root / "e2e_greeter"
    package.mkdir(parents=True)
    (package / "__init__.py").write_text("")
    (package / "service.py").write_text(SERVICE_SOURCE)
    (root / MANIFEST_FILE).write_text('[project]\nname = "e2e-greeter"\nversion = "0.3.0"\n')
    return root


def make_graph(workflow_dir: Path, constructor: Constructor = GREETER_CONSTRUCTOR) -> IRGraph:
    graph = IRGraph("e2e")
    prefix = graph.add(ConfigValue("greeting_prefix", "Hello"))
    greeter = graph.add(
        WorkflowService(
            "greeter",
            module_path=workflow_dir,
            module_short_name="greeter",
            interface=GREETER_IFACE,
            constructor=constructor,
            args=[prefix],
        ),
    )
    greeter_hc = graph.add(HealthCheckWrapper("greeter_hc", greeter))
    graph.add(Process("e2e_frontend", contained=[prefix, greeter, greeter_hc]))
    return graph


@pytest.fixture
def restore_modules() -> Iterator[None]:
    """Forget modules imported from a generated workspace."""
    yield
    for name in list(sys.modules):
        if name.split(".", 1)[0] in GENERATED_PACKAGES:
            del sys.modules[name]


def read_toml(path: Path) -> dict:
    with path.open("rb") as f:
        return tomllib.load(f)


class TestCompileGraph:
    """Tests for compile_graph."""

    def test_result_lists_nodes_and_modules(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should compile the closure of the roots, dependencies first."""
        result = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], CompilerConfig(tmp_path / "out"))

        assert result.roots == ("e2e_frontend",)
        assert result.nodes == ("greeting_prefix", "greeter", "greeter_hc", "e2e_frontend")
        assert result.path == (tmp_path / "out").resolve()
        assert {(m.name, m.version) for m in result.modules} == {
            ("wiregen_gen-e2e_frontend", "0.1.0"),
            ("e2e-greeter", "0.3.0"),
        }

    def test_generated_files(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should write every module, package and generated file."""
        ws = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], CompilerConfig(tmp_path / "out")).path

        assert (ws / WORKSPACE_FILE).is_file()
        assert (ws / "greeter" / "e2e_greeter" / "service.py").is_file()
        module = ws / "wiregen_gen_e2e_frontend"
        assert (module / "e2e_frontend" / "__init__.py").is_file()
        assert (module / "e2e_frontend" / "main.py").is_file()
        healthcheck = module / "wiregen_gen_e2e_frontend" / "healthcheck"
        assert (healthcheck / "greeter_hc_healthcheck_iface.py").is_file()
        assert (healthcheck / "greeter_hc_healthcheck.py").is_file()

    def test_module_manifest(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should pin the runtime and the local service module."""
        ws = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], CompilerConfig(tmp_path / "out")).path

        manifest = read_toml(ws / "wiregen_gen_e2e_frontend" / MANIFEST_FILE)

        assert manifest["project"]["name"] == "wiregen_gen-e2e_frontend"
        assert manifest["project"]["dependencies"] == ["e2e-greeter==0.3.0", "wiregen==0.1.0"]
        assert manifest["tool"]["uv"]["sources"] == {"e2e-greeter": {"path": "../greeter", "editable": True}}
        packages = manifest["tool"]["hatch"]["build"]["targets"]["wheel"]["packages"]
        assert packages == ["e2e_frontend", "wiregen_gen_e2e_frontend"]

    def test_namespace_file(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should declare every contained instance and serve them from main()."""
        ws = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], CompilerConfig(tmp_path / "out")).path

        text = (ws / "wiregen_gen_e2e_frontend" / "e2e_frontend" / "main.py").read_text()

        assert text.startswith("# Code generated by wiregen (process). DO NOT EDIT.\n")
        assert "import e2e_greeter.service as service\n" in text
        assert "import wiregen.runtime as runtime\n" in text
        assert "def _build_greeting_prefix(ctr):\n    return 'Hello'\n" in text
        assert (
            "def _build_greeter(ctr):\n"
            "    arg0 = ctr.get('greeting_prefix')\n"
            "    return service.new_greeter(arg0)\n"
        ) in text
        assert "runtime.serve(build_graph(), ['greeting_prefix', 'greeter', 'greeter_hc'])" in text

    def test_generated_process_runs(
        self,
        workflow_dir: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        restore_modules: None,
    ) -> None:
        """Should produce code that builds the wired instances."""
        ws = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], CompilerConfig(tmp_path / "out")).path
        monkeypatch.syspath_prepend(str(ws / "greeter"))
        monkeypatch.syspath_prepend(str(ws / "wiregen_gen_e2e_frontend"))

        main = importlib.import_module("e2e_frontend.main")
        container = main.build_graph().build()
        handler = container.get("greeter_hc")

        assert handler.greet("World") == "Hello, World!"
        assert handler.health_check() == "Healthy"
        assert container.get("greeter") is handler.service

    def test_shared_service_across_processes(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should copy a local module once even when two processes use it."""
        graph = make_graph(workflow_dir)
        graph.add(Process("backend", contained=[graph.get("greeter")]))

        result = compile_graph(graph, ["e2e_frontend", "backend"], CompilerConfig(tmp_path / "out"))

        index = read_toml(result.path / WORKSPACE_FILE)
        assert [m["path"] for m in index["workspace"]["modules"]] == [
            "greeter",
            "wiregen_gen_backend",
            "wiregen_gen_e2e_frontend",
        ]

    def test_module_prefix(self, workflow_dir: Path, tmp_path: Path) -> None:
        config = CompilerConfig(tmp_path / "out", module_prefix="acme")
        result = compile_graph(make_graph(workflow_dir), ["e2e_frontend"], config)
        assert (result.path / "acme_e2e_frontend" / MANIFEST_FILE).is_file()

    def test_unknown_root(self, workflow_dir: Path, tmp_path: Path) -> None:
        with pytest.raises(KeyError):
            compile_graph(make_graph(workflow_dir), ["nope"], CompilerConfig(tmp_path / "out"))


class TestCompilationErrors:
    """Tests for errors raised while compiling."""

    def test_missing_local_module(self, tmp_path: Path) -> None:
        """Should name the node and the workspace scope."""
        graph = make_graph(tmp_path / "does_not_exist")

        with pytest.raises(CompilationError) as exc_info:
            compile_graph(graph, ["e2e_frontend"], CompilerConfig(tmp_path / "out"))

        error = exc_info.value
        assert error.node_name == "greeter"
        assert error.compile_pass == "add_to_workspace"
        assert error.scope_path.startswith("workspace ")
        assert "missing pyproject.toml" in str(error)

    def test_innermost_scope_is_reported(self, workflow_dir: Path, tmp_path: Path) -> None:
        """Should report the namespace scope, not the process that drove it."""
        no_args = Constructor(package="e2e_greeter.service", name="new_greeter")
        graph = make_graph(workflow_dir, constructor=no_args)

        with pytest.raises(CompilationError) as exc_info:
            compile_graph(graph, ["e2e_frontend"], CompilerConfig(tmp_path / "out"))

        error = exc_info.value
        assert error.node_name == "greeter"
        assert error.compile_pass == "add_instantiation"
        assert error.scope_path.endswith("> module wiregen_gen-e2e_frontend > namespace e2e_frontend.main")
        assert "takes 0 argument(s), got 1" in str(error)
