"""Transactional mutation engine for dependency graphs."""

from __future__ import annotations

import logging
import threading
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Self

from ._errors import UnknownNodeError
from ._events import EventEmitter, NodeAdded, NodeRemoved, NodeReplaced, RemovalType
from ._graph import NodeStore, TreeNode, resolve_order
from ._node import Node, NodeId, NodeLike, as_node

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from ._config import GraphConfig

logger = logging.getLogger(__name__)


class ReplacePolicy(StrEnum):
    """What ``Graph.replace_node`` does with ids that are not in the graph."""

    REJECT = auto()  # Raise UnknownNodeError, replace nothing
    ADD = auto()  # Add the node as if passed to add_node, announced dependency-first


class Graph:
    """A directed acyclic graph of dependency-declaring nodes.

    Mutations are transactional: a batch is validated against a snapshot of
    the graph before anything is committed, and a failing batch leaves the
    graph and its subscribers untouched. Committed changes are reported
    through ``events``.

    Every mutating method returns the graph itself so calls can be chained.

    Example:
        >>> graph = Graph().add_node({"id": "berte"}, {"id": "boris", "deps": ["berte"]})
        >>> graph.node_list["boris"].deps
        ('berte',)
        >>> len(graph.remove_node("berte"))
        0

    """

    def __init__(self, *, replace_policy: ReplacePolicy = ReplacePolicy.REJECT) -> None:
        self.events = EventEmitter()
        self.replace_policy = replace_policy
        self._store = NodeStore()
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: GraphConfig) -> Self:
        """Create an empty graph configured from a GraphConfig."""
        return cls(replace_policy=config.replace_policy)

    def add_node(self, *nodes: NodeLike) -> Self:
        """Add one or more nodes, resolving their dependencies.

        Interdependent nodes of the batch are committed dependency-first.
        A node whose id is already in the graph overwrites it.

        Args:
            nodes: Nodes (or node literals) to add. An empty batch does nothing.

        Returns:
            The graph itself.

        Raises:
            MissingDependencyError: A node depends on an id that is neither in
                the graph nor in the batch.
            CyclicalDependencyError: A node directly or indirectly depends on
                itself.

        """
        candidates = [as_node(node) for node in nodes]
        if not candidates:
            return self

        with self._lock:
            existing = self._store.snapshot()
            for node in candidates:
                existing.pop(node.id, None)
            ordered = resolve_order(existing, candidates)

            for node in ordered:
                self._store.put(node)
                logger.debug("Added node '%s'", node.id)
            for node in ordered:
                self.events.emit(NodeAdded(node))

        return self

    def remove_node(self, *node_ids: NodeId) -> Self:
        """Remove nodes, pruning every node that depends on them.

        Dependents are removed depth-first before the node they depend on,
        and reported with ``RemovalType.PRUNE``; the requested nodes are
        reported with ``RemovalType.DIRECT``. Ids not in the graph are
        ignored.

        Every removal is committed before the first ``NodeRemoved`` event
        is emitted.

        Args:
            node_ids: Ids of the nodes to remove.

        Returns:
            The graph itself.

        """
        with self._lock:
            dependents = self._store.dependents_index()
            removals: dict[NodeId, NodeRemoved] = {}
            for node_id in node_ids:
                if node_id in self._store and node_id not in removals:
                    self._collect_removals(node_id, dependents, removals)

            for node_id, event in removals.items():
                self._store.delete(node_id)
                logger.debug("Removed node '%s' (%s)", node_id, event.removal_type)
            for event in removals.values():
                self.events.emit(event)

        return self

    def _collect_removals(
        self,
        node_id: NodeId,
        dependents: Mapping[NodeId, list[NodeId]],
        removals: dict[NodeId, NodeRemoved],
    ) -> None:
        stack: list[tuple[NodeId, Iterator[NodeId]]] = [(node_id, iter(dependents.get(node_id, ())))]
        while stack:
            current_id, pending = stack[-1]
            for dependent_id in pending:
                if dependent_id in self._store and dependent_id not in removals:
                    stack.append((dependent_id, iter(dependents.get(dependent_id, ()))))
                    break
            else:
                stack.pop()
                removal_type = RemovalType.DIRECT if current_id == node_id else RemovalType.PRUNE
                removals[current_id] = NodeRemoved(self._store.get(current_id), removal_type)

    def replace_node(self, *nodes: NodeLike) -> Self:
        """Replace nodes by new nodes with the same ids.

        The whole graph, with the replacements substituted in, is validated
        before anything changes: a replacement may neither depend on a missing
        node nor close a cycle through the nodes depending on it.

        Events are emitted in three waves over the batch, each in input order:
        ``NodeRemoved`` (direct) for every old node, ``NodeAdded`` for every
        new node, then ``NodeReplaced`` for every pair.

        Under ``ReplacePolicy.ADD``, nodes whose ids were not in the graph
        only get a ``NodeAdded`` event. They open the ``NodeAdded`` wave,
        dependency-first, so a replacement depending on one of them is
        announced after it.

        Args:
            nodes: Replacement nodes (or node literals).

        Returns:
            The graph itself.

        Raises:
            UnknownNodeError: A replacement targets an id not in the graph and
                the replace policy is ``ReplacePolicy.REJECT``.
            MissingDependencyError: A replacement depends on a missing id.
            CyclicalDependencyError: A replacement creates a cycle.

        """
        replacements = list({node.id: node for node in map(as_node, nodes)}.values())
        if not replacements:
            return self

        with self._lock:
            existing = self._store.snapshot()
            unknown = [node.id for node in replacements if node.id not in existing]
            if unknown and self.replace_policy is ReplacePolicy.REJECT:
                raise UnknownNodeError(unknown)

            old_nodes = {node.id: existing.pop(node.id) for node in replacements if node.id in existing}
            ordered = resolve_order(existing, replacements)
            added = [node for node in ordered if node.id not in old_nodes]

            for node in replacements:
                self._store.put(node)

            for node in replacements:
                if node.id in old_nodes:
                    self.events.emit(NodeRemoved(old_nodes[node.id], RemovalType.DIRECT))
            for node in [*added, *(node for node in replacements if node.id in old_nodes)]:
                self.events.emit(NodeAdded(node))
            for node in replacements:
                if node.id in old_nodes:
                    self.events.emit(NodeReplaced(old_nodes[node.id], node))

            logger.debug("Replaced %d node(s), added %d", len(old_nodes), len(replacements) - len(old_nodes))

        return self

    def get(self, node_id: NodeId) -> Node | None:
        """Get a node by id, or None if it is not in the graph."""
        with self._lock:
            return self._store.get(node_id)

    @property
    def node_list(self) -> dict[NodeId, Node]:
        """A flattened copy of the graph, keyed by node id."""
        with self._lock:
            return self._store.snapshot()

    @property
    def nodes(self) -> Mapping[NodeId, TreeNode]:
        """The tree view of the graph, keyed by root node id."""
        with self._lock:
            return self._store.tree_view()

    def __contains__(self, node_id: object) -> bool:
        with self._lock:
            return node_id in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} nodes)"
