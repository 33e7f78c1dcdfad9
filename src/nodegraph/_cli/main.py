import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from nodegraph._config import get_config
from nodegraph._engine import Graph
from nodegraph._errors import GraphError
from nodegraph._events import NodeRemoved
from nodegraph._io import export_to_toml, load_nodes_from_toml

from .render import render_node_detail, render_removals, render_summary, render_tree

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

FileOption = Annotated[
    Path | None,
    typer.Option("-f", "--file", help="Path to the TOML node file (defaults to [tool.nodegraph].nodes)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Nodegraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
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


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]✗ {escape(message)}[/red]")
    err_console.print()
    return typer.Exit(code=1)


def _load_graph(file: Path | None) -> Graph:
    """Build a graph from a node file, adding all of its nodes in one batch.

    Args:
        file: Node file given on the command line, or None to use the configured one.

    Returns:
        The populated graph.

    Raises:
        typer.Exit: If no file is known or the nodes do not form a valid graph.

    """
    try:
        config = get_config()
    except GraphError as e:
        raise _fail(str(e)) from e

    path = file if file is not None else config.nodes
    if path is None:
        msg = "No node file given. Pass --file or set [tool.nodegraph].nodes in pyproject.toml"
        raise _fail(msg)

    err_console.print(f"[cyan]Loading nodes from:[/cyan] {path}")
    try:
        nodes = load_nodes_from_toml(path)
        graph = Graph.from_config(config).add_node(*nodes)
    except (GraphError, ValidationError, OSError) as e:
        raise _fail(str(e)) from e

    logger.debug(f"Loaded graph with {len(graph)} node(s)")
    return graph


@app.command()
def check(file: FileOption = None) -> None:
    """Check that a node file describes a valid acyclic graph."""
    err_console.print()
    graph = _load_graph(file)
    err_console.print()

    render_summary(graph, out_console)

    err_console.print()
    err_console.print("[green]✓ Graph is valid[/green]")
    err_console.print()


@app.command()
def tree(file: FileOption = None) -> None:
    """Print the graph as trees, from the nodes without dependencies to their dependents."""
    err_console.print()
    graph = _load_graph(file)
    err_console.print()

    render_tree(graph.nodes, out_console)


@app.command()
def show(
    node_id: Annotated[str, typer.Argument(help="Id of the node to show")],
    *,
    file: FileOption = None,
) -> None:
    """Show the dependencies, dependents and payload of a node."""
    err_console.print()
    graph = _load_graph(file)
    err_console.print()

    if node_id not in graph:
        msg = f"Node '{node_id}' not found"
        raise _fail(msg)

    render_node_detail(graph, node_id, out_console)


@app.command()
def remove(
    node_ids: Annotated[list[str], typer.Argument(help="Ids of the nodes to remove")],
    *,
    file: FileOption = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the remaining nodes to this TOML file"),
    ] = None,
) -> None:
    """Remove nodes and report every node pruned along with them."""
    err_console.print()
    graph = _load_graph(file)
    err_console.print()

    removed: list[NodeRemoved] = []
    graph.events.on(NodeRemoved, removed.append)
    graph.remove_node(*node_ids)

    render_removals(removed, out_console)

    if output is not None:
        err_console.print()
        err_console.print(f"[cyan]Exporting remaining nodes to:[/cyan] {output}")
        output.parent.mkdir(parents=True, exist_ok=True)
        export_to_toml(graph, output)

    err_console.print()
    err_console.print(f"[green]✓ Removed {len(removed)} node(s), {len(graph)} left[/green]")
    err_console.print()
