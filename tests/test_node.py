"""Tests for the Node model."""

import pytest
from pydantic import ValidationError

from nodegraph._node import Node, as_node


class TestNode:
    def test_defaults_to_no_dependencies(self) -> None:
        node = Node(id="bob")
        assert node.deps == ()
        assert not node.has_dependencies()

    def test_deps_are_stored_as_tuple(self) -> None:
        node = Node(id="boris", deps=["bob", "berte"])
        assert node.deps == ("bob", "berte")
        assert node.has_dependencies()

    def test_duplicate_deps_are_kept(self) -> None:
        node = Node(id="boris", deps=["bob", "bob"])
        assert node.deps == ("bob", "bob")

    def test_payload_fields_are_attributes(self) -> None:
        node = Node(id="bob", mark="original", weight=3)
        assert node.mark == "original"
        assert node.weight == 3
        assert node.payload == {"mark": "original", "weight": 3}

    def test_payload_is_a_copy(self) -> None:
        node = Node(id="bob", mark="original")
        node.payload["mark"] = "changed"
        assert node.mark == "original"

    def test_payload_containers_are_frozen(self) -> None:
        tags = ["t"]
        node = Node(id="bob", tags=tags, limits={"cpu": [1, 2]})

        tags.append("u")

        assert node.tags == ("t",)
        assert node.limits == {"cpu": (1, 2)}
        with pytest.raises(AttributeError):
            node.tags.append("v")
        with pytest.raises(TypeError):
            node.limits["cpu"] = ()

    @pytest.mark.parametrize("name", ["payload", "has_dependencies", "model_fields"])
    def test_payload_field_named_after_an_attribute_is_rejected(self, name: str) -> None:
        with pytest.raises(ValidationError, match="clash with Node attributes"):
            Node.model_validate({"id": "bob", name: 1})

    def test_empty_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Node(id="")

    def test_missing_id_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Node.model_validate({"deps": ["bob"]})

    def test_nodes_are_immutable(self) -> None:
        node = Node(id="bob")
        with pytest.raises(ValidationError):
            node.id = "boris"  # type: ignore[misc]

    def test_equality_includes_payload(self) -> None:
        assert Node(id="bob", mark="a") == Node(id="bob", mark="a")
        assert Node(id="bob", mark="a") != Node(id="bob", mark="b")
        assert Node(id="bob", deps=["x"]) != Node(id="bob")


class TestAsNode:
    def test_node_is_returned_as_is(self) -> None:
        node = Node(id="bob")
        assert as_node(node) is node

    def test_mapping_is_validated(self) -> None:
        node = as_node({"id": "boris", "deps": ["bob"], "mark": 1})
        assert node == Node(id="boris", deps=("bob",), mark=1)

    def test_invalid_mapping_raises(self) -> None:
        with pytest.raises(ValidationError):
            as_node({"id": "boris", "deps": "bob-and-berte"})
