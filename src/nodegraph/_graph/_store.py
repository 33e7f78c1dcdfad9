"""Authoritative id to node storage."""

from collections.abc import Iterator, Mapping

from nodegraph._node import Node, NodeId

from ._tree import TreeNode, build_tree_view


class NodeStore:
    """Mapping of node ids to committed nodes.

    The store performs no validation: callers are responsible for only
    putting nodes whose dependencies are present.
    """

    def __init__(self) -> None:
        self._nodes: dict[NodeId, Node] = {}

    def get(self, node_id: NodeId) -> Node | None:
        """Get a node by id, or None if absent."""
        return self._nodes.get(node_id)

    def snapshot(self) -> dict[NodeId, Node]:
        """Return an independent copy of the id to node mapping."""
        return dict(self._nodes)

    def put(self, node: Node) -> None:
        """Insert a node, overwriting any node with the same id."""
        self._nodes[node.id] = node

    def delete(self, node_id: NodeId) -> None:
        """Remove a node by id. Removing an absent id does nothing."""
        self._nodes.pop(node_id, None)

    def dependents_index(self) -> dict[NodeId, list[NodeId]]:
        """Map each node id to the ids of the nodes depending on it.

        Dependents are listed in store order, each at most once.

        Returns:
            Mapping with an entry for every stored node.

        """
        index: dict[NodeId, list[NodeId]] = {node_id: [] for node_id in self._nodes}
        for node_id, node in self._nodes.items():
            for dep_id in dict.fromkeys(node.deps):
                index.setdefault(dep_id, []).append(node_id)
        return index

    def tree_view(self) -> Mapping[NodeId, TreeNode]:
        """Build a fresh, read-only tree view of the stored nodes."""
        return build_tree_view(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)
