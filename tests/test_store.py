"""Tests for NodeStore and the tree view."""

import pytest

from nodegraph._graph import NodeStore, build_tree_view
from nodegraph._node import Node


@pytest.fixture
def diamond() -> NodeStore:
    """a <- b, a <- c, (b, c) <- d."""
    store = NodeStore()
    for node in (
        Node(id="a"),
        Node(id="b", deps=["a"]),
        Node(id="c", deps=["a"]),
        Node(id="d", deps=["b", "c"]),
    ):
        store.put(node)
    return store


class TestNodeStore:
    def test_empty_store(self) -> None:
        store = NodeStore()
        assert len(store) == 0
        assert store.get("bob") is None
        assert "bob" not in store

    def test_put_and_get(self) -> None:
        store = NodeStore()
        bob = Node(id="bob")
        store.put(bob)
        assert store.get("bob") is bob
        assert "bob" in store
        assert list(store) == ["bob"]

    def test_put_overwrites_same_id(self) -> None:
        store = NodeStore()
        store.put(Node(id="bob", mark="original"))
        store.put(Node(id="bob", mark="new"))
        assert len(store) == 1
        assert store.get("bob").mark == "new"

    def test_delete(self) -> None:
        store = NodeStore()
        store.put(Node(id="bob"))
        store.delete("bob")
        assert "bob" not in store

    def test_delete_absent_is_noop(self) -> None:
        store = NodeStore()
        store.put(Node(id="bob"))
        store.delete("boris")
        assert list(store) == ["bob"]

    def test_snapshot_is_independent(self) -> None:
        store = NodeStore()
        store.put(Node(id="bob"))
        snapshot = store.snapshot()
        snapshot.pop("bob")
        snapshot["boris"] = Node(id="boris")
        assert list(store) == ["bob"]

    def test_dependents_index(self, diamond: NodeStore) -> None:
        assert diamond.dependents_index() == {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}

    def test_dependents_index_lists_repeated_dependency_once(self) -> None:
        store = NodeStore()
        store.put(Node(id="a"))
        store.put(Node(id="b", deps=["a", "a"]))
        assert store.dependents_index()["a"] == ["b"]


class TestTreeView:
    def test_empty(self) -> None:
        assert dict(build_tree_view({})) == {}

    def test_roots_are_nodes_without_dependencies(self) -> None:
        store = NodeStore()
        store.put(Node(id="a"))
        store.put(Node(id="b", deps=["a"]))
        store.put(Node(id="x"))
        assert list(store.tree_view()) == ["a", "x"]

    def test_children_and_parents(self, diamond: NodeStore) -> None:
        roots = diamond.tree_view()
        a = roots["a"]
        assert a.node == Node(id="a")
        assert list(a.children) == ["b", "c"]
        assert a.is_root()
        assert not a.is_leaf()

        d = a.children["b"].children["d"]
        assert list(d.parents) == ["b", "c"]
        assert d.is_leaf()

    def test_shared_node_is_the_same_object(self, diamond: NodeStore) -> None:
        a = diamond.tree_view()["a"]
        assert a.children["b"].children["d"] is a.children["c"].children["d"]
        assert a.children["b"].parents["a"] is a

    def test_repeated_dependency_links_once(self) -> None:
        view = build_tree_view({"a": Node(id="a"), "b": Node(id="b", deps=["a", "a"])})
        assert list(view["a"].children) == ["b"]

    def test_view_is_read_only(self, diamond: NodeStore) -> None:
        roots = diamond.tree_view()
        with pytest.raises(TypeError):
            roots["z"] = roots["a"]  # type: ignore[index]
        with pytest.raises(TypeError):
            roots["a"].children["z"] = roots["a"]  # type: ignore[index]
        with pytest.raises(AttributeError):
            roots["a"].node = Node(id="z")  # type: ignore[misc]

    def test_view_is_recomputed(self, diamond: NodeStore) -> None:
        before = diamond.tree_view()
        diamond.put(Node(id="e", deps=["d"]))
        after = diamond.tree_view()

        assert "e" not in before["a"].children["b"].children["d"].children
        assert "e" in after["a"].children["b"].children["d"].children
        assert before["a"] is not after["a"]
