"""
Common types for diagram layout.

This module provides the fundamental types shared by every layout:
- GraphNode: Graph vertex with an optional box size and tags
- GraphEdge: Typed relationship between two nodes
- RelationshipKind: Closed set of relationship kinds with layout weights
- LayoutOptions: Validated configuration for the class-diagram pipeline
- Position, Bounds: Geometry results
- LayoutResult: Immutable output of a full layout computation
- TieredPlacement: Output cell of the tiered column layout
- EventType, Event: Layout lifecycle events
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence, TypedDict, Union

from .validation import (
    InvalidEdgeError,
    InvalidNodeError,
    InvalidOptionsError,
    validate_extent,
    validate_separation,
)


class EventType(IntEnum):
    """
    Layout lifecycle events.

    - start: Layout computation has begun
    - end: Layout computation has finished
    """

    start = 0
    end = 1


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    node_count: int


class Direction(str, Enum):
    """Flow direction of the hierarchical layout."""

    TB = "TB"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    @property
    def is_horizontal(self) -> bool:
        """True when ranks advance along the x axis."""
        return self in (Direction.LR, Direction.RL)

    @property
    def is_reversed(self) -> bool:
        """True when ranks advance toward negative coordinates."""
        return self in (Direction.BT, Direction.RL)


class LayoutAlgorithm(str, Enum):
    """Algorithm requested for a class diagram."""

    HIERARCHICAL = "hierarchical"
    GRID = "grid"


@dataclass(frozen=True)
class EdgeStyle:
    """Cosmetic rendering attributes of a relationship kind."""

    stroke: str
    dash: Optional[str] = None
    marker_start: Optional[str] = None
    marker_end: Optional[str] = None


_KIND_STYLES: dict[str, EdgeStyle] = {
    "inheritance": EdgeStyle("#3b82f6", marker_end="inheritance-end"),
    "realization": EdgeStyle("#10b981", dash="5,5", marker_end="interface-end"),
    "composition": EdgeStyle("#ef4444", marker_start="composition-start"),
    "aggregation": EdgeStyle("#f97316", marker_start="aggregation-start"),
    "association": EdgeStyle("#6b7280", marker_end="association-end"),
    "dependency": EdgeStyle("#9ca3af", dash="3,3", marker_end="dependency-end"),
    "generic": EdgeStyle("#6b7280"),
}


class RelationshipKind(str, Enum):
    """
    Kind of relationship carried by an edge.

    Ordering kinds (inheritance, realization) point from child to parent
    and dominate ranking; all other kinds are generic for layout purposes.
    """

    INHERITANCE = "inheritance"
    REALIZATION = "realization"
    COMPOSITION = "composition"
    AGGREGATION = "aggregation"
    ASSOCIATION = "association"
    DEPENDENCY = "dependency"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: Union[RelationshipKind, str, None]) -> RelationshipKind:
        """Parse a kind from its name; unknown or missing values are GENERIC."""
        if isinstance(value, RelationshipKind):
            return value
        if value is None:
            return cls.GENERIC
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.GENERIC

    @property
    def is_ordering(self) -> bool:
        """True for kinds that define the parent/child hierarchy."""
        return self in (RelationshipKind.INHERITANCE, RelationshipKind.REALIZATION)

    @property
    def weight(self) -> float:
        """Default layout weight; ordering kinds dominate generic ones."""
        return 10.0 if self.is_ordering else 1.0

    @property
    def style(self) -> EdgeStyle:
        """Rendering style. Has no influence on layout."""
        return _KIND_STYLES[self.value]


@dataclass(frozen=True)
class GraphNode:
    """
    Graph node to be placed.

    Attributes:
        id: Unique node identifier
        width: Box width, or None to use the layout's default width
        height: Box height, or None to use the layout's default height
        group: Optional package/group tag
        kind: Optional type tag (e.g. "class", "interface", "CONCEPT")
    """

    id: str
    width: Optional[float] = None
    height: Optional[float] = None
    group: Optional[str] = None
    kind: Optional[str] = None

    def size(self, default_width: float, default_height: float) -> tuple[float, float]:
        """Return (width, height), filling gaps from the given defaults."""
        width = self.width if self.width is not None else default_width
        height = self.height if self.height is not None else default_height
        return float(width), float(height)

    @classmethod
    def coerce(cls, value: Any) -> GraphNode:
        """Build a node from a GraphNode, a dict, or an object with attributes."""
        if isinstance(value, GraphNode):
            return value
        if isinstance(value, Mapping):
            get = value.get
        else:

            def get(key: str, default: Any = None) -> Any:
                return getattr(value, key, default)

        node_id = get("id")
        if node_id is None:
            raise InvalidNodeError(f"Node has no id: {value!r}")
        size = get("size")
        width = get("width")
        height = get("height")
        if size is not None and width is None and height is None:
            if isinstance(size, Mapping):
                width, height = size.get("width"), size.get("height")
            else:
                width, height = size
        return cls(
            id=str(node_id),
            width=None if width is None else float(width),
            height=None if height is None else float(height),
            group=get("group", get("package")),
            kind=get("kind", get("type")),
        )


@dataclass(frozen=True)
class GraphEdge:
    """
    Directed, typed edge between two nodes.

    Attributes:
        id: Edge identifier (used as key of routed paths)
        source: Source node id
        target: Target node id
        kind: Relationship kind
        weight: Optional layout weight overriding the kind's default
    """

    id: str
    source: str
    target: str
    kind: RelationshipKind = RelationshipKind.GENERIC
    weight: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", RelationshipKind.parse(self.kind))

    @property
    def layout_weight(self) -> float:
        """Effective layout weight."""
        return float(self.weight) if self.weight is not None else self.kind.weight

    @classmethod
    def coerce(cls, value: Any, index: int = 0) -> GraphEdge:
        """Build an edge from a GraphEdge, a dict, or an object with attributes.

        Edges without an id get one derived from their endpoints and index.
        """
        if isinstance(value, GraphEdge):
            return value
        if isinstance(value, Mapping):
            get = value.get
        else:

            def get(key: str, default: Any = None) -> Any:
                return getattr(value, key, default)

        source = get("source")
        target = get("target")
        if source is None or target is None:
            raise InvalidEdgeError(f"Edge needs a source and a target: {value!r}")
        kind = RelationshipKind.parse(get("kind", get("type")))
        edge_id = get("id")
        if edge_id is None:
            edge_id = f"{source}-{target}-{index}"
        weight = get("weight")
        return cls(
            id=str(edge_id),
            source=str(source),
            target=str(target),
            kind=kind,
            weight=None if weight is None else float(weight),
        )


_OPTION_ALIASES = {
    "nodeSeparation": "node_separation",
    "rankSeparation": "rank_separation",
    "edgeSeparation": "edge_separation",
    "nodeWidth": "node_width",
    "nodeHeight": "node_height",
}


@dataclass(frozen=True)
class LayoutOptions:
    """
    Configuration of the class-diagram layout.

    Attributes:
        algorithm: "hierarchical" (default) or "grid"
        direction: Flow direction, one of TB, BT, LR, RL
        node_separation: Gap between sibling boxes within a rank
        rank_separation: Gap between consecutive ranks
        edge_separation: Spacing between parallel edge runs (advisory)
        node_width: Default box width
        node_height: Default box height

    Raises:
        InvalidOptionsError: On an unknown direction or algorithm, a negative
            separation, or a non-positive default node size.
    """

    algorithm: LayoutAlgorithm = LayoutAlgorithm.HIERARCHICAL
    direction: Direction = Direction.TB
    node_separation: float = 80.0
    rank_separation: float = 120.0
    edge_separation: float = 10.0
    node_width: float = 200.0
    node_height: float = 120.0

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "direction", Direction(self.direction))
        except ValueError:
            valid = [d.value for d in Direction]
            raise InvalidOptionsError(
                f"direction must be one of {valid}, got {self.direction!r}"
            ) from None
        try:
            object.__setattr__(self, "algorithm", LayoutAlgorithm(self.algorithm))
        except ValueError:
            valid = [a.value for a in LayoutAlgorithm]
            raise InvalidOptionsError(
                f"algorithm must be one of {valid}, got {self.algorithm!r}"
            ) from None

        for name in ("node_separation", "rank_separation", "edge_separation"):
            object.__setattr__(self, name, validate_separation(name, getattr(self, name)))
        for name in ("node_width", "node_height"):
            object.__setattr__(self, name, validate_extent(name, getattr(self, name)))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> LayoutOptions:
        """Build options from snake_case or camelCase keys; unknown keys are ignored."""
        known = set(cls.__dataclass_fields__)
        kwargs: dict[str, Any] = {}
        for key, value in values.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, value: Union[LayoutOptions, Mapping[str, Any], None]) -> LayoutOptions:
        """Accept options, a mapping, or None (defaults)."""
        if value is None:
            return cls()
        if isinstance(value, LayoutOptions):
            return value
        return cls.from_mapping(value)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible values."""
        return {
            "algorithm": self.algorithm.value,
            "direction": self.direction.value,
            "node_separation": self.node_separation,
            "rank_separation": self.rank_separation,
            "edge_separation": self.edge_separation,
            "node_width": self.node_width,
            "node_height": self.node_height,
        }


@dataclass(frozen=True)
class Position:
    """A 2D point. Node positions use the top-left corner of the box."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle given by its top-left corner and extent."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def empty(cls) -> Bounds:
        """Zero-area rectangle at the origin."""
        return cls(0.0, 0.0, 0.0, 0.0)

    @property
    def right(self) -> float:
        """Right edge x coordinate."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge y coordinate."""
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains_box(self, x: float, y: float, width: float, height: float) -> bool:
        """Check that the box with top-left (x, y) lies inside these bounds."""
        return (
            self.x <= x
            and self.y <= y
            and x + width <= self.right
            and y + height <= self.bottom
        )


@dataclass(frozen=True)
class LayoutResult:
    """
    Immutable result of a layout computation.

    Attributes:
        positions: Node id -> top-left Position
        edges: Edge id -> ordered route points
        bounds: Rectangle containing every node box plus padding
        computation_time: Wall-clock computation time in milliseconds
        algorithm: Algorithm that produced the result ("hierarchical" or "grid")

    Results compare by value but are not hashable; key them by cache key instead.
    """

    positions: Mapping[str, Position]
    edges: Mapping[str, tuple[Position, ...]]
    bounds: Bounds
    computation_time: float = 0.0
    algorithm: str = LayoutAlgorithm.HIERARCHICAL.value
    sizes: Mapping[str, tuple[float, float]] = field(default_factory=dict)

    # Fields are mapping proxies, so a generated hash could never succeed
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))
        object.__setattr__(
            self, "edges", MappingProxyType({k: tuple(v) for k, v in self.edges.items()})
        )
        object.__setattr__(self, "sizes", MappingProxyType(dict(self.sizes)))

    def __repr__(self) -> str:
        return (
            f"LayoutResult(nodes={len(self.positions)}, edges={len(self.edges)}, "
            f"algorithm={self.algorithm!r}, time={self.computation_time:.2f}ms)"
        )


@dataclass(frozen=True)
class TieredPlacement:
    """Cell assigned to a node by the tiered column layout."""

    column: int
    row: int
    x: float
    y: float


# Type aliases for flexible input
NodeLike = Union[GraphNode, Mapping[str, Any], Any]
"""Input type for nodes: GraphNode objects, dicts, or objects with node attributes."""

EdgeLike = Union[GraphEdge, Mapping[str, Any], Any]
"""Input type for edges: GraphEdge objects, dicts, or objects with source/target."""

OptionsLike = Union[LayoutOptions, Mapping[str, Any], None]
"""Input type for options: LayoutOptions, a mapping of option names, or None."""

PositionMap = dict[str, Position]
SizeMap = Mapping[str, tuple[float, float]]
PointLike = Union[Position, Sequence[float]]


__all__ = [
    "EventType",
    "Event",
    "Direction",
    "LayoutAlgorithm",
    "EdgeStyle",
    "RelationshipKind",
    "GraphNode",
    "GraphEdge",
    "LayoutOptions",
    "Position",
    "Bounds",
    "LayoutResult",
    "TieredPlacement",
    "NodeLike",
    "EdgeLike",
    "OptionsLike",
    "PositionMap",
    "SizeMap",
    "PointLike",
]
