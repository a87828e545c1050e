import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wiregen._compiler import compile_graph
from wiregen._config import CompilerConfig
from wiregen._errors import WiregenError
from wiregen._ir import Capability, IRGraph, supports

from .config import ConfigError, WiregenConfig, get_config
from .discover import load_graph, load_graph_from_source

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Wiregen CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> WiregenConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _resolve_graph(path: str | None, graph_var: str | None, config: WiregenConfig) -> IRGraph:
    if path is not None:
        err_console.print(f"[cyan]Loading graph from:[/cyan] {path}")
        return load_graph(path, graph_var)
    if config.graph is not None:
        err_console.print("[cyan]Loading graph from \\[tool.wiregen] configuration[/cyan]")
        return load_graph_from_source(config.graph)
    err_console.print("[red]Error: no graph given and no \\[tool.wiregen].graph configured[/red]")
    raise typer.Exit(code=1)


def _default_roots(graph: IRGraph) -> list[str]:
    """Every node that provides a module."""
    return [node.name for node in graph if supports(node, Capability.PROVIDES_MODULE)]


PathArgument = Annotated[
    str | None,
    typer.Argument(help="Path to Python script or module path (e.g., examples.hello_app.wiring:graph)"),
]
GraphVarOption = Annotated[
    str | None,
    typer.Option("--graph-var", help="Name of the graph variable (for script paths only)"),
]


@app.command()
def check(
    path: PathArgument = None,
    *,
    graph_var: GraphVarOption = None,
) -> None:
    """Check that a graph is a valid DAG and list its nodes."""
    config = _load_config()
    graph = _resolve_graph(path, graph_var, config)

    err_console.print(f"[cyan]Graph:[/cyan] [bold]{escape(graph.name)}[/bold]")
    err_console.print("[cyan]Validating graph...[/cyan]")
    try:
        graph.freeze()
    except WiregenError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", style="bold")
    table.add_column("Kind", style="yellow")
    table.add_column("Capabilities", style="green")
    table.add_column("Args")
    table.add_column("Contained")

    for node in graph:
        table.add_row(
            escape(node.name),
            node.kind,
            ", ".join(sorted(type(node).capabilities)),
            escape(", ".join(arg.name for arg in node.args)),
            escape(", ".join(child.name for child in node.contained)),
        )

    out_console.print(
        Panel(
            table,
            title=f"[bold]Graph: {escape(graph.name)}[/bold]",
            subtitle=f"[dim]{len(graph)} nodes[/dim]",
            border_style="cyan",
        ),
    )
    err_console.print()
    err_console.print("[green]✓ Graph is valid[/green]")


@app.command(name="compile")
def compile_(  # noqa: PLR0913
    path: PathArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Workspace directory to generate into"),
    ] = None,
    roots: Annotated[
        list[str] | None,
        typer.Option("--root", "-r", help="Node to compile (repeatable); defaults to every module provider"),
    ] = None,
    module_prefix: Annotated[
        str | None,
        typer.Option("--module-prefix", help="Prefix of generated module names"),
    ] = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Replace the contents of a non-empty output directory"),
    ] = False,
    graph_var: GraphVarOption = None,
) -> None:
    """Compile a graph into a workspace of Python modules."""
    config = _load_config()
    graph = _resolve_graph(path, graph_var, config)

    output_dir = output or config.output
    if output_dir is None:
        err_console.print("[red]Error: no output directory given (use -o or \\[tool.wiregen].output)[/red]")
        raise typer.Exit(code=1)

    compiler_config = CompilerConfig(output_dir=output_dir, overwrite=overwrite)
    prefix = module_prefix or config.module_prefix
    if prefix is not None:
        compiler_config = replace(compiler_config, module_prefix=prefix)

    selected = roots or list(config.roots) or _default_roots(graph)
    err_console.print(f"[cyan]Roots:[/cyan] {escape(', '.join(selected)) or '(none)'}")
    err_console.print(f"[cyan]Output:[/cyan] {output_dir}")
    err_console.print()

    try:
        result = compile_graph(graph, selected, compiler_config)
    except KeyError as e:
        err_console.print(f"[red]✗ Unknown root node: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    except WiregenError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Module", style="bold")
    table.add_column("Version", style="yellow")
    table.add_column("Path", style="dim")
    for module in result.modules:
        table.add_row(escape(module.name), module.version, str(module.path.relative_to(result.path)))
    out_console.print(Panel(table, title="[bold]Generated modules[/bold]", border_style="cyan"))

    err_console.print()
    err_console.print(f"[green]✓ Compiled {len(result.nodes)} node(s) into {result.path}[/green]")


def main() -> None:
    app()
