"""Graph module providing the node store and dependency resolution.

This module contains:
- resolve_order: Dependency-first ordering of candidate nodes
- NodeStore: The id to node mapping backing a Graph
- TreeNode / build_tree_view: The read-only tree projection of a store
"""

from ._resolver import resolve_order
from ._store import NodeStore
from ._tree import TreeNode, build_tree_view

__all__ = ["NodeStore", "TreeNode", "build_tree_view", "resolve_order"]
