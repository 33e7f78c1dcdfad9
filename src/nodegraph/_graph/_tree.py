"""Read-only tree projection of a flat node mapping."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from nodegraph._node import Node, NodeId


@dataclass(frozen=True, slots=True, eq=False)
class TreeNode:
    """A node of the tree view.

    Edges point from a dependency to its dependents: ``children`` holds the
    nodes that declare this node as a dependency and ``parents`` the nodes
    this node depends on. Both are read-only views into the arena the tree
    was built from, so a node reachable through several paths is always the
    same TreeNode object.

    Attributes:
        id: Id of the wrapped node.
        node: The wrapped node.
        children: Dependents of this node, keyed by id.
        parents: Dependencies of this node, keyed by id.

    """

    id: NodeId
    node: Node
    children: Mapping[NodeId, TreeNode] = field(repr=False)
    parents: Mapping[NodeId, TreeNode] = field(repr=False)

    def is_root(self) -> bool:
        """Check if this node has no dependencies."""
        return len(self.parents) == 0

    def is_leaf(self) -> bool:
        """Check if nothing depends on this node."""
        return len(self.children) == 0


def build_tree_view(nodes: Mapping[NodeId, Node]) -> Mapping[NodeId, TreeNode]:
    """Build the tree view of a flat node mapping.

    Args:
        nodes: Committed nodes keyed by id. Every dependency is expected to be
            a key of the mapping; dangling ids are ignored.

    Returns:
        Read-only mapping from the ids of the root nodes (nodes without
        dependencies) to their TreeNode.

    """
    children: dict[NodeId, dict[NodeId, TreeNode]] = {node_id: {} for node_id in nodes}
    parents: dict[NodeId, dict[NodeId, TreeNode]] = {node_id: {} for node_id in nodes}
    arena = {
        node_id: TreeNode(
            id=node_id,
            node=node,
            children=MappingProxyType(children[node_id]),
            parents=MappingProxyType(parents[node_id]),
        )
        for node_id, node in nodes.items()
    }

    for node_id, node in nodes.items():
        for dep_id in node.deps:
            if dep_id not in arena:
                continue
            children[dep_id][node_id] = arena[node_id]
            parents[node_id][dep_id] = arena[dep_id]

    return MappingProxyType({node_id: tree_node for node_id, tree_node in arena.items() if tree_node.is_root()})
