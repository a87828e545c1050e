"""Tests for the check and compile commands."""

import sys
import tomllib
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wiregen._cli.main import app

runner = CliRunner()

WIRING = """\
from wiregen import IRGraph
from wiregen.plugins import ConfigValue, Process

graph = IRGraph("cli_app")
port = graph.add(ConfigValue("port", 8080))
server = graph.add(Process("server", contained=[port]))
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """A project directory holding a wiring script, used as the working directory."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cli_wiring.py").write_text(WIRING)
    path = list(sys.path)
    yield tmp_path
    sys.modules.pop("cli_wiring", None)
    sys.path[:] = path


class TestCheck:
    """Tests for the check command."""

    def test_valid_graph(self, project: Path) -> None:
        """Should list every node and report the graph as valid."""
        result = runner.invoke(app, ["check", str(project / "cli_wiring.py")])

        assert result.exit_code == 0, result.output
        assert "Graph: cli_app" in result.output
        assert "port" in result.output
        assert "ConfigValue" in result.output
        assert "Graph is valid" in result.output

    def test_no_graph(self, project: Path) -> None:
        """Should fail when neither an argument nor configuration names a graph."""
        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "no graph given" in result.output

    def test_graph_from_configuration(self, project: Path) -> None:
        (project / "pyproject.toml").write_text('[tool.wiregen]\ngraph = { script = "cli_wiring.py" }\n')

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 0, result.output
        assert "Graph is valid" in result.output

    def test_invalid_configuration(self, project: Path) -> None:
        (project / "pyproject.toml").write_text("[tool.wiregen]\ngraph = 1\n")

        result = runner.invoke(app, ["check"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCompile:
    """Tests for the compile command."""

    def test_compile_script(self, project: Path) -> None:
        """Should generate a workspace with one module per process."""
        result = runner.invoke(app, ["compile", str(project / "cli_wiring.py"), "-o", str(project / "out")])

        assert result.exit_code == 0, result.output
        assert "Compiled 2 node(s)" in result.output
        assert "wiregen_gen-server" in result.output
        assert (project / "out" / "workspace.toml").is_file()
        assert (project / "out" / "wiregen_gen_server" / "server" / "main.py").is_file()

    def test_module_prefix_option(self, project: Path) -> None:
        result = runner.invoke(
            app,
            ["compile", str(project / "cli_wiring.py"), "-o", str(project / "out"), "--module-prefix", "acme"],
        )

        assert result.exit_code == 0, result.output
        with (project / "out" / "acme_server" / "pyproject.toml").open("rb") as f:
            assert tomllib.load(f)["project"]["name"] == "acme-server"

    def test_non_empty_output_requires_overwrite(self, project: Path) -> None:
        """Should refuse to write into a non-empty directory unless asked to."""
        out = project / "out"
        out.mkdir()
        (out / "stale.txt").write_text("old")
        args = ["compile", str(project / "cli_wiring.py"), "-o", str(out)]

        result = runner.invoke(app, args)
        assert result.exit_code == 1
        # The message holds a long path, so the console may have wrapped it
        assert "not empty" in " ".join(result.output.split())

        result = runner.invoke(app, [*args, "--overwrite"])
        assert result.exit_code == 0, result.output
        assert not (out / "stale.txt").exists()

    def test_unknown_root(self, project: Path) -> None:
        result = runner.invoke(app, ["compile", str(project / "cli_wiring.py"), "-o", "out", "--root", "nope"])

        assert result.exit_code == 1
        assert "Unknown root node" in result.output

    def test_missing_output(self, project: Path) -> None:
        result = runner.invoke(app, ["compile", str(project / "cli_wiring.py")])

        assert result.exit_code == 1
        assert "no output directory given" in result.output

    def test_compile_from_configuration(self, project: Path) -> None:
        """Should take the graph, roots and output from [tool.wiregen]."""
        (project / "pyproject.toml").write_text(
            """
[tool.wiregen]
graph = { script = "cli_wiring.py", name = "graph" }
roots = ["server"]
output = "build"
""",
        )

        result = runner.invoke(app, ["compile"])

        assert result.exit_code == 0, result.output
        assert (project / "build" / "wiregen_gen_server" / "pyproject.toml").is_file()
