"""Transactional directed acyclic graph of dependency-declaring nodes."""

__all__ = [
    "ConfigError",
    "CyclicalDependencyError",
    "EventEmitter",
    "Graph",
    "GraphConfig",
    "GraphError",
    "GraphEvent",
    "MissingDependencyError",
    "Node",
    "NodeAdded",
    "NodeFileError",
    "NodeId",
    "NodeRemoved",
    "NodeReplaced",
    "RemovalType",
    "ReplacePolicy",
    "TreeNode",
    "UnknownNodeError",
    "export_to_toml",
    "get_config",
    "load_config",
    "load_nodes_from_toml",
    "resolve_order",
]

from ._config import ConfigError, GraphConfig, get_config, load_config
from ._engine import Graph, ReplacePolicy
from ._errors import CyclicalDependencyError, GraphError, MissingDependencyError, UnknownNodeError
from ._events import EventEmitter, GraphEvent, NodeAdded, NodeRemoved, NodeReplaced, RemovalType
from ._graph import TreeNode, resolve_order
from ._io import NodeFileError, export_to_toml, load_nodes_from_toml
from ._node import Node, NodeId
