"""Errors raised while validating graph mutations."""

from collections.abc import Iterable

from ._node import NodeId


class GraphError(Exception):
    """Base class for all nodegraph errors."""


class MissingDependencyError(GraphError):
    """Raised when a node declares a dependency that is nowhere to be found.

    Attributes:
        node_id: Id of the node declaring the dependency.
        dependencies: The node's full list of declared dependencies.
        missing: The declared dependencies that could not be resolved.

    """

    def __init__(self, node_id: NodeId, dependencies: Iterable[NodeId], missing: Iterable[NodeId]) -> None:
        self.node_id = node_id
        self.dependencies = tuple(dependencies)
        self.missing = tuple(missing)
        if len(self.missing) == 1:
            msg = (
                f"Node '{node_id}' declares a dependency on '{self.missing[0]}' "
                "but it isn't in the graph yet, did you forget to register it?"
            )
        else:
            names = ", ".join(f"'{dep}'" for dep in self.missing)
            msg = (
                f"Node '{node_id}' declares a dependency on {names} "
                "but they aren't in the graph yet, did you forget to register them?"
            )
        super().__init__(msg)


class CyclicalDependencyError(GraphError):
    """Raised when a node directly or indirectly depends on itself."""

    def __init__(self, node_id: NodeId) -> None:
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' declares a dependency that directly or indirectly depends on it.")


class UnknownNodeError(GraphError):
    """Raised when replacing nodes whose ids are not in the graph."""

    def __init__(self, node_ids: Iterable[NodeId]) -> None:
        self.node_ids = tuple(node_ids)
        names = ", ".join(f"'{node_id}'" for node_id in self.node_ids)
        super().__init__(f"Cannot replace {names}: no such node in the graph")
