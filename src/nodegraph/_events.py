"""Lifecycle events reported by a graph."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._node import Node

logger = logging.getLogger(__name__)


class RemovalType(StrEnum):
    """Why a node was removed."""

    DIRECT = auto()  # Requested by the caller (or superseded by a replacement)
    PRUNE = auto()  # Removed because one of its dependencies was removed


@dataclass(frozen=True, slots=True)
class NodeAdded:
    """A node has been committed to the graph."""

    node: Node


@dataclass(frozen=True, slots=True)
class NodeRemoved:
    """A node has left the graph."""

    node: Node
    removal_type: RemovalType


@dataclass(frozen=True, slots=True)
class NodeReplaced:
    """A node has been superseded by a new node with the same id."""

    old_node: Node
    new_node: Node


GraphEvent = NodeAdded | NodeRemoved | NodeReplaced

Handler = Callable[[GraphEvent], None]


class EventEmitter:
    """Synchronous publish/subscribe channel for graph events.

    Handlers subscribe either to a single event class or to every event.
    ``emit`` calls the handlers of the event's class first, then the
    wildcard handlers, each group in subscription order. Exceptions raised
    by a handler propagate to the emitter.

    Example:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> unsubscribe = emitter.on(NodeAdded, seen.append)
        >>> emitter.emit(NodeAdded(Node(id="bob")))
        >>> [event.node.id for event in seen]
        ['bob']
        >>> unsubscribe()

    """

    def __init__(self) -> None:
        self._handlers: defaultdict[type[GraphEvent], list[Handler]] = defaultdict(list)
        self._any_handlers: list[Handler] = []

    def on(self, event_type: type[GraphEvent], handler: Handler) -> Callable[[], None]:
        """Subscribe a handler to one event class.

        Args:
            event_type: NodeAdded, NodeRemoved or NodeReplaced.
            handler: Called with each emitted event of that class.

        Returns:
            A callable that unsubscribes the handler.

        """
        self._handlers[event_type].append(handler)
        return lambda: self.off(event_type, handler)

    def off(self, event_type: type[GraphEvent], handler: Handler) -> None:
        """Unsubscribe a handler from one event class. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers is not None and handler in handlers:
            handlers.remove(handler)

    def on_any(self, handler: Handler) -> Callable[[], None]:
        """Subscribe a handler to every event.

        Returns:
            A callable that unsubscribes the handler.

        """
        self._any_handlers.append(handler)
        return lambda: self.off_any(handler)

    def off_any(self, handler: Handler) -> None:
        """Unsubscribe a wildcard handler. Unknown handlers are ignored."""
        if handler in self._any_handlers:
            self._any_handlers.remove(handler)

    def emit(self, event: GraphEvent) -> None:
        """Deliver an event to its subscribers."""
        logger.debug("Emitting %r", event)
        # Copy so that handlers may unsubscribe while being called
        for handler in [*self._handlers.get(type(event), ()), *self._any_handlers]:
            handler(event)
