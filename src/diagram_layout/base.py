"""
Base classes for diagram layouts.

This module provides abstract base classes that define the common interface
and shared functionality for all layouts:

- BaseLayout: Abstract base with event system and node/edge management
- StaticLayout: For single-pass layouts (hierarchical, grid, tiered columns)

It also provides normalize_nodes() and normalize_edges(), which turn the
loosely typed input accepted by the public API into GraphNode/GraphEdge
lists.
"""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

if TYPE_CHECKING:
    from typing_extensions import Self

from .diagnostics import GraphStructureWarning
from .types import (
    EdgeLike,
    Event,
    EventType,
    GraphEdge,
    GraphNode,
    NodeLike,
)
from .validation import (
    InvalidEdgeError,
    find_duplicate_ids,
    validate_edge_endpoints,
)


def normalize_nodes(value: Sequence[NodeLike]) -> list[GraphNode]:
    """
    Coerce node input into GraphNode objects.

    Duplicate ids keep their first occurrence and emit a
    GraphStructureWarning.

    Raises:
        InvalidNodeError: If a node has no id
    """
    nodes = [GraphNode.coerce(item) for item in value]
    duplicates = find_duplicate_ids([node.id for node in nodes])
    if not duplicates:
        return nodes

    warnings.warn(
        f"Duplicate node id(s) {duplicates}; keeping the first occurrence of each.",
        GraphStructureWarning,
        stacklevel=3,
    )
    seen: set[str] = set()
    unique: list[GraphNode] = []
    for node in nodes:
        if node.id not in seen:
            seen.add(node.id)
            unique.append(node)
    return unique


def node_sizes(
    nodes: Sequence[GraphNode], default_width: float, default_height: float
) -> dict[str, tuple[float, float]]:
    """Resolve (width, height) for every node, falling back to the defaults."""
    return {node.id: node.size(default_width, default_height) for node in nodes}


def normalize_edges(value: Sequence[EdgeLike]) -> list[GraphEdge]:
    """
    Coerce edge input into GraphEdge objects.

    Edges lacking a source or target are dropped with a
    GraphStructureWarning. Dangling references are kept here; each layout
    drops them against its own node set.
    """
    edges: list[GraphEdge] = []
    malformed = 0
    for i, item in enumerate(value):
        try:
            edges.append(GraphEdge.coerce(item, index=i))
        except InvalidEdgeError:
            malformed += 1
    if malformed:
        warnings.warn(
            f"Dropped {malformed} edge(s) without a source or target.",
            GraphStructureWarning,
            stacklevel=3,
        )
    return edges


class BaseLayout(ABC):
    """
    Abstract base class for all diagram layouts.

    Provides shared infrastructure:
    - Event system (start/end events)
    - Node/edge management via properties
    - Lookup of edges whose endpoints are known

    Example:
        layout = SomeLayout(
            nodes=[{"id": "a"}, {"id": "b"}],
            edges=[{"source": "a", "target": "b"}],
        )
        layout.run()

        # Access results via properties
        for node_id, pos in layout.positions.items():
            print(f"{node_id}: ({pos.x}, {pos.y})")
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[EdgeLike]] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize layout with configuration.

        Args:
            nodes: List of nodes (GraphNode objects, dicts, or objects with attributes)
            edges: List of edges (GraphEdge objects or dicts with source/target)
            on_start: Callback for start event
            on_end: Callback for end event
        """
        self._nodes: list[GraphNode] = []
        self._edges: list[GraphEdge] = []
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}

        # Set initial values via properties (triggers normalization)
        if nodes is not None:
            self.nodes = nodes
        if edges is not None:
            self.edges = edges

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> list[GraphNode]:
        """Get the list of nodes."""
        return self._nodes

    @nodes.setter
    def nodes(self, value: Sequence[NodeLike]) -> None:
        """Set nodes from a sequence of GraphNode objects, dicts, or objects."""
        self._nodes = normalize_nodes(value)

    @property
    def edges(self) -> list[GraphEdge]:
        """Get the list of edges."""
        return self._edges

    @edges.setter
    def edges(self, value: Sequence[EdgeLike]) -> None:
        """Set edges from a sequence of GraphEdge objects, dicts, or objects."""
        self._edges = normalize_edges(value)

    @property
    def node_ids(self) -> list[str]:
        """Node ids in input order."""
        return [node.id for node in self._nodes]

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a layout event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> Self:
        """
        Validate that every edge references a known node.

        Layouts drop dangling edges on their own; call this for fail-fast
        behavior instead.

        Returns:
            self (for chaining)

        Raises:
            InvalidEdgeError: If any edge references an unknown node id.
        """
        if self._edges:
            validate_edge_endpoints(self._edges, set(self.node_ids), strict=True)
        return self

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Returns:
            self (for chaining)
        """
        pass

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _valid_edges(self) -> list[GraphEdge]:
        """Edges whose endpoints are both known nodes.

        Dangling references are skipped without a warning; upstream
        extraction routinely produces them.
        """
        known = set(self.node_ids)
        return [e for e in self._edges if e.source in known and e.target in known]


class StaticLayout(BaseLayout):
    """
    Base class for single-pass layouts.

    These layouts compute positions in one pass without iteration.

    Example:
        layout = GridLayout(nodes=nodes)
        layout.run()
    """

    def run(self, **kwargs: Any) -> Self:
        """
        Run the layout algorithm.

        Fires start event, computes layout, fires end event.

        Args:
            **kwargs: Additional arguments passed to _compute()

        Returns:
            self (for chaining)
        """
        self.trigger({"type": EventType.start, "node_count": len(self._nodes)})

        # Subclasses implement _compute()
        self._compute(**kwargs)

        self.trigger({"type": EventType.end, "node_count": len(self._nodes)})
        return self

    @abstractmethod
    def _compute(self, **kwargs: Any) -> None:
        """
        Compute node positions.

        Subclasses must implement this to perform the actual layout computation.
        """
        pass


__all__ = [
    "BaseLayout",
    "StaticLayout",
    "normalize_nodes",
    "normalize_edges",
    "node_sizes",
]
