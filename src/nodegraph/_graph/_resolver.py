"""Dependency resolution for candidate nodes."""

import logging
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum, auto

from nodegraph._errors import CyclicalDependencyError, MissingDependencyError
from nodegraph._node import Node, NodeId

logger = logging.getLogger(__name__)


class _Mark(Enum):
    IN_PROGRESS = auto()
    DONE = auto()


def resolve_order(existing: Mapping[NodeId, Node], candidates: Sequence[Node]) -> list[Node]:
    """Order candidate nodes so that every node comes after its dependencies.

    Runs a depth-first traversal over the union of the existing nodes and the
    candidates. Dependencies are looked up among the candidates first, then
    among the existing nodes, so a candidate shadows an existing node with the
    same id. Every candidate is visited, in input order, even when no other
    candidate reaches it.

    Existing nodes take part in the traversal but are left out of the result.
    The function mutates nothing.

    Args:
        existing: Nodes already committed to the graph, keyed by id.
        candidates: Nodes proposed for insertion. When several candidates
            share an id, the last one wins.

    Returns:
        The candidates, dependency-first. Independent candidates keep their
        input order.

    Raises:
        MissingDependencyError: If a dependency resolves to no node at all.
        CyclicalDependencyError: If a node is reached again while its own
            dependencies are still being visited.

    Example:
        >>> order = resolve_order({}, [Node(id="b", deps=["a"]), Node(id="a")])
        >>> [node.id for node in order]
        ['a', 'b']

    """
    pending: dict[NodeId, Node] = {}
    for node in candidates:
        pending[node.id] = node

    def lookup(node_id: NodeId) -> Node | None:
        if node_id in pending:
            return pending[node_id]
        return existing.get(node_id)

    marks: dict[NodeId, _Mark] = {}
    order: list[Node] = []

    for root in pending.values():
        if root.id in marks:
            continue

        marks[root.id] = _Mark.IN_PROGRESS
        stack: list[tuple[Node, Iterator[NodeId]]] = [(root, iter(root.deps))]

        while stack:
            node, deps = stack[-1]
            for dep_id in deps:
                mark = marks.get(dep_id)
                if mark is _Mark.DONE:
                    continue
                if mark is _Mark.IN_PROGRESS:
                    raise CyclicalDependencyError(dep_id)

                dep = lookup(dep_id)
                if dep is None:
                    missing = [d for d in dict.fromkeys(node.deps) if lookup(d) is None]
                    raise MissingDependencyError(node.id, node.deps, missing)

                marks[dep_id] = _Mark.IN_PROGRESS
                stack.append((dep, iter(dep.deps)))
                break
            else:
                # All dependencies are done
                stack.pop()
                marks[node.id] = _Mark.DONE
                if node.id in pending:
                    order.append(node)

    logger.debug("Resolved %d candidate(s): %s", len(order), [node.id for node in order])
    return order
