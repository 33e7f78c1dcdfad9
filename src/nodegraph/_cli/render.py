"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from nodegraph._events import RemovalType

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

    from nodegraph._engine import Graph
    from nodegraph._events import NodeRemoved
    from nodegraph._graph import TreeNode
    from nodegraph._node import NodeId


def render_summary(graph: Graph, console: Console) -> None:
    """Render node counts of a graph as a Rich table.

    Args:
        graph: Graph to summarize.
        console: Rich Console to output to.

    """
    node_list = graph.node_list
    depended_on = {dep for node in node_list.values() for dep in node.deps}
    roots = [node_id for node_id, node in node_list.items() if not node.deps]
    leaves = [node_id for node_id in node_list if node_id not in depended_on]

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Nodes", justify="right")
    table.add_column("Roots", justify="right")
    table.add_column("Leaves", justify="right")
    table.add_row(str(len(node_list)), str(len(roots)), str(len(leaves)))

    console.print(table)


def render_tree(roots: Mapping[NodeId, TreeNode], console: Console) -> None:
    """Render the tree view of a graph using Rich Tree.

    A node reachable through several dependencies is expanded the first
    time it is met only.

    Args:
        roots: Tree view of the graph, as returned by ``Graph.nodes``.
        console: Rich Console to output to.

    """
    if not roots:
        console.print("[dim]Graph is empty[/dim]")
        return

    expanded: set[NodeId] = set()
    for root in roots.values():
        rich_tree = Tree(f"[bold]{escape(root.id)}[/bold]")
        expanded.add(root.id)
        _add_tree_children(rich_tree, root, expanded)
        console.print(rich_tree)


def _add_tree_children(parent: Tree, tree_node: TreeNode, expanded: set[NodeId]) -> None:
    """Recursively add the dependents of a tree node to a Rich Tree."""
    for child in tree_node.children.values():
        if child.id in expanded:
            parent.add(f"{escape(child.id)} [dim](see above)[/dim]")
            continue
        expanded.add(child.id)
        branch = parent.add(escape(child.id))
        _add_tree_children(branch, child, expanded)


def render_node_detail(graph: Graph, node_id: NodeId, console: Console) -> None:
    """Render detailed information about one node.

    Args:
        graph: Graph containing the node.
        node_id: Id of the node to render. Must be in the graph.
        console: Rich Console to output to.

    """
    node_list = graph.node_list
    node = node_list[node_id]
    dependents = [other.id for other in node_list.values() if node_id in other.deps]

    console.print(f"[bold]Node:[/bold] {escape(node.id)}")
    console.print()

    if node.deps:
        console.print(f"[cyan]Dependencies ({len(node.deps)}):[/cyan]")
        for dep in node.deps:
            console.print(f"  {escape(dep)}")
    else:
        console.print("[cyan]Dependencies:[/cyan] [dim]None[/dim]")
    console.print()

    if dependents:
        console.print(f"[cyan]Dependents ({len(dependents)}):[/cyan]")
        for dependent in dependents:
            console.print(f"  {escape(dependent)}")
    else:
        console.print("[cyan]Dependents:[/cyan] [dim]None[/dim]")
    console.print()

    payload = node.payload
    if payload:
        console.print("[cyan]Payload:[/cyan]")
        for key, value in payload.items():
            console.print(f"  {escape(key)}: {escape(repr(value))}")


def render_removals(events: list[NodeRemoved], console: Console) -> None:
    """Render removal events as a Rich table, in emission order.

    Args:
        events: NodeRemoved events collected while removing.
        console: Rich Console to output to.

    """
    if not events:
        console.print("[dim]Nothing to remove[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", style="bold")
    table.add_column("Removal")

    for event in events:
        style = "red" if event.removal_type is RemovalType.DIRECT else "yellow"
        table.add_row(escape(event.node.id), f"[{style}]{event.removal_type.upper()}[/{style}]")

    console.print(table)
