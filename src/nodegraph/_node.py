"""Node model for the dependency graph."""

from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

NodeId = str


def _freeze(value: Any) -> Any:
    """Return a read-only deep copy of a payload value's containers.

    Lists and tuples become tuples, sets become frozensets, and mappings
    become read-only mappings over a fresh dict. Other values are kept as is.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Set):
        return frozenset(value)
    return value


class Node(BaseModel):
    """An immutable, dependency-declaring graph node.

    A node is identified by its ``id`` and lists the ids of the nodes it
    depends on in ``deps``. Any other keyword field is kept as opaque payload
    and is readable as an attribute. Payload containers are frozen on
    validation (lists to tuples, dicts to read-only mappings), so nothing
    the caller keeps can change a node afterwards. Payload fields may not
    reuse the name of a Node attribute, such as ``payload``.

    Nodes are value snapshots: "changing" a node means replacing it in the
    graph with a new node under the same id.

    Attributes:
        id: Unique identifier of the node within a graph.
        deps: Ids of the nodes this node depends on, in declaration order.
            Repeated ids are kept as given.

    Example:
        >>> node = Node(id="boris", deps=["bob"], mark="original", tags=["a"])
        >>> node.deps
        ('bob',)
        >>> node.tags
        ('a',)

    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: NodeId = Field(min_length=1)
    deps: tuple[NodeId, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _freeze_payload(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        reserved = sorted(key for key in data if key not in cls.model_fields and hasattr(cls, key))
        if reserved:
            msg = f"Payload field(s) {', '.join(map(repr, reserved))} clash with Node attributes"
            raise ValueError(msg)
        return {key: value if key in cls.model_fields else _freeze(value) for key, value in data.items()}

    @property
    def payload(self) -> dict[str, Any]:
        """Copy of the payload fields (everything except ``id`` and ``deps``)."""
        return dict(self.model_extra or {})

    def has_dependencies(self) -> bool:
        """Check if this node declares at least one dependency."""
        return len(self.deps) > 0


NodeLike = Node | Mapping[str, Any]


def as_node(value: NodeLike) -> Node:
    """Return ``value`` as a Node, validating plain mappings.

    Raises:
        pydantic.ValidationError: If a mapping is not a valid node literal.

    """
    if isinstance(value, Node):
        return value
    return Node.model_validate(value)
