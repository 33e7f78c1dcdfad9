import logging
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import tomli_w

from ._engine import Graph
from ._errors import GraphError
from ._graph import resolve_order
from ._node import Node

logger = logging.getLogger(__name__)


class NodeFileError(GraphError):
    """Error in the contents of a node file."""


def toml_to_nodes(toml_contents: dict[str, Any]) -> list[Node]:
    """Convert parsed TOML contents to validated nodes.

    The contents are expected to hold a ``nodes`` array of tables, one table
    per node. A missing ``nodes`` key means an empty file.

    Args:
        toml_contents: The parsed TOML dictionary

    Returns:
        Nodes in file order.

    Raises:
        NodeFileError: If ``nodes`` is not an array of tables.
        pydantic.ValidationError: If a table is not a valid node.

    """
    entries = toml_contents.get("nodes", [])
    if not isinstance(entries, list):
        msg = "Invalid node file: 'nodes' must be an array of tables ([[nodes]])"
        raise NodeFileError(msg)

    nodes: list[Node] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            msg = f"Invalid node file: entry #{index} of 'nodes' is not a table"
            raise NodeFileError(msg)
        nodes.append(Node.model_validate(entry))
    return nodes


def load_nodes_from_toml(input_path: Path | str) -> list[Node]:
    """Load nodes from a TOML node file.

    Args:
        input_path: Path to the node file

    Returns:
        Nodes in file order, ready to be passed to ``Graph.add_node``.

    Raises:
        NodeFileError: If the file is not valid TOML or not a node file.

    """
    input_path = Path(input_path)
    with input_path.open("rb") as f:
        try:
            toml_contents = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {input_path}: {e}"
            raise NodeFileError(msg) from e

    nodes = toml_to_nodes(toml_contents)
    logger.debug(f"Loaded {len(nodes)} node(s) from {input_path}")
    return nodes


def nodes_to_dict(nodes: Iterable[Node]) -> dict[str, Any]:
    """Convert nodes to a TOML-ready dictionary, dependency-first.

    Empty ``deps`` are left out of the node tables.

    Raises:
        MissingDependencyError: If a node depends on a node not in ``nodes``.
        CyclicalDependencyError: If the nodes contain a cycle.

    """
    tables: list[dict[str, Any]] = []
    for node in resolve_order({}, list(nodes)):
        table: dict[str, Any] = {"id": node.id}
        if node.deps:
            table["deps"] = list(node.deps)
        table.update(node.payload)
        tables.append(table)
    return {"nodes": tables}


def export_to_toml(graph: Graph, output_path: Path | str) -> None:
    """Export the nodes of a graph to a TOML node file.

    Args:
        graph: The graph to export
        output_path: Path to the output TOML file

    """
    toml_data = nodes_to_dict(graph.node_list.values())

    output_path = Path(output_path)
    with output_path.open("wb") as f:
        tomli_w.dump(toml_data, f)

    logger.debug(f"Exported {len(toml_data['nodes'])} node(s) to {output_path}")
