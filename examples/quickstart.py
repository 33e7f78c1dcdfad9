"""Quickstart: build a small graph, replace a node and prune it away.

Run with ``python examples/quickstart.py``.
"""

from rich.console import Console

import nodegraph as ng
from nodegraph._cli.render import render_tree

console = Console()

graph = ng.Graph()
graph.events.on_any(lambda event: console.print(f"[dim]{event!r}[/dim]"))

# Nodes of a batch may depend on each other in any order
graph.add_node(
    {"id": "boris", "deps": ["berte"]},
    {"id": "berte"},
).add_node(
    {"id": "bob", "deps": ["boris", "berte"]},
)

render_tree(graph.nodes, console)  # berte -> boris -> bob

# Replacing berte with a node depending on bob would close a cycle
try:
    graph.replace_node({"id": "berte", "deps": ["bob"]})
except ng.CyclicalDependencyError as e:
    console.print(f"[red]{e}[/red]")

graph.replace_node({"id": "berte", "note": "replaced"})
console.print(graph.node_list["berte"].note)

# Removing berte prunes boris and bob, which depend on it
graph.remove_node("berte")
render_tree(graph.nodes, console)  # empty
