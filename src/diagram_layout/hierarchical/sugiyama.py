"""
Sugiyama layered layout for class diagrams.

Based on the framework from:
"Methods for Visual Understanding of Hierarchical System Structures"
by Sugiyama, Tagawa, and Toda (1981)

The layout runs these phases:
1. Cycle removal (inheritance reversed so parents rank above children)
2. Layer assignment (longest path)
3. Crossing reduction (weighted barycenter sweeps)
4. Coordinate assignment with per-node box sizes
5. Axis remapping for the requested direction
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from ..base import StaticLayout, node_sizes
from ..preprocessing import (
    assign_layers_longest_path,
    break_cycles,
    extend_acyclic,
    minimize_crossings_barycenter,
)
from ..types import (
    Direction,
    EdgeLike,
    Event,
    LayoutOptions,
    NodeLike,
    Position,
)
from ..validation import (
    InvalidOptionsError,
    validate_count,
    validate_extent,
    validate_separation,
)


@dataclass(frozen=True)
class RankingEdge:
    """Directed edge used for ranking, oriented from higher to lower tier."""

    source: str
    target: str
    weight: float
    edge_id: str


class HierarchicalLayout(StaticLayout):
    """
    Sugiyama layered layout with box-aware spacing.

    Parents of ordering relationships (inheritance, realization) are placed
    on lower ranks than their children; generic relationships add rank
    constraints only where they do not contradict the hierarchy. Siblings
    in a rank are spaced by their box extent plus ``node_separation`` and
    consecutive ranks by the tallest box plus ``rank_separation``.

    Positions are the top-left corners of the node boxes, translated so
    the diagram starts at (margin, margin).

    Example:
        layout = HierarchicalLayout(
            nodes=[{"id": "Base"}, {"id": "User"}, {"id": "Admin"}],
            edges=[
                {"source": "User", "target": "Base", "type": "inheritance"},
                {"source": "Admin", "target": "Base", "type": "inheritance"},
            ],
            direction="TB",
        )
        layout.run()
        layout.positions["Base"]
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[EdgeLike]] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # Hierarchical-specific parameters
        direction: Union[Direction, str] = Direction.TB,
        node_separation: float = 80.0,
        rank_separation: float = 120.0,
        node_width: float = 200.0,
        node_height: float = 120.0,
        crossing_iterations: int = 24,
        margin: float = 20.0,
    ) -> None:
        """
        Initialize hierarchical layout.

        Args:
            nodes: List of nodes
            edges: List of edges
            on_start: Callback for start event
            on_end: Callback for end event
            direction: Flow direction - 'TB', 'BT', 'LR' or 'RL'.
            node_separation: Gap between sibling boxes within a rank.
            rank_separation: Gap between consecutive ranks.
            node_width: Width of nodes without an explicit width.
            node_height: Height of nodes without an explicit height.
            crossing_iterations: Number of barycenter sweeps.
            margin: Offset of the diagram's top-left corner.
        """
        super().__init__(nodes=nodes, edges=edges, on_start=on_start, on_end=on_end)

        self.direction = direction
        self._node_separation: float = validate_separation("node_separation", node_separation)
        self._rank_separation: float = validate_separation("rank_separation", rank_separation)
        self._node_width: float = validate_extent("node_width", node_width)
        self._node_height: float = validate_extent("node_height", node_height)
        self._crossing_iterations: int = validate_count(
            "crossing_iterations", crossing_iterations
        )
        self._margin: float = validate_separation("margin", margin)

        # Internal state
        self._ranking_edges: list[RankingEdge] = []
        self._layers: list[list[str]] = []
        self._ranks: dict[str, int] = {}
        self._positions: dict[str, Position] = {}
        self._sizes: dict[str, tuple[float, float]] = {}

    @classmethod
    def from_options(
        cls,
        options: LayoutOptions,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[EdgeLike]] = None,
        **kwargs: Any,
    ) -> HierarchicalLayout:
        """Create a layout configured from LayoutOptions."""
        return cls(
            nodes=nodes,
            edges=edges,
            direction=options.direction,
            node_separation=options.node_separation,
            rank_separation=options.rank_separation,
            node_width=options.node_width,
            node_height=options.node_height,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def direction(self) -> Direction:
        """Get layout direction."""
        return self._direction

    @direction.setter
    def direction(self, value: Union[Direction, str]) -> None:
        """Set layout direction."""
        try:
            self._direction = Direction(value)
        except ValueError:
            valid = [d.value for d in Direction]
            raise InvalidOptionsError(f"direction must be one of {valid}, got {value!r}") from None

    @property
    def node_separation(self) -> float:
        """Get gap between sibling boxes within a rank."""
        return self._node_separation

    @node_separation.setter
    def node_separation(self, value: float) -> None:
        """Set gap between sibling boxes within a rank."""
        self._node_separation = validate_separation("node_separation", value)

    @property
    def rank_separation(self) -> float:
        """Get gap between consecutive ranks."""
        return self._rank_separation

    @rank_separation.setter
    def rank_separation(self, value: float) -> None:
        """Set gap between consecutive ranks."""
        self._rank_separation = validate_separation("rank_separation", value)

    @property
    def crossing_iterations(self) -> int:
        """Get number of crossing reduction sweeps."""
        return self._crossing_iterations

    @crossing_iterations.setter
    def crossing_iterations(self, value: int) -> None:
        """Set number of crossing reduction sweeps."""
        self._crossing_iterations = validate_count("crossing_iterations", value)

    @property
    def positions(self) -> dict[str, Position]:
        """Top-left box corner per node id (after run())."""
        return dict(self._positions)

    @property
    def sizes(self) -> dict[str, tuple[float, float]]:
        """Resolved (width, height) per node id (after run())."""
        return dict(self._sizes)

    @property
    def ranks(self) -> dict[str, int]:
        """Rank per node id (after run())."""
        return dict(self._ranks)

    @property
    def layers(self) -> list[list[str]]:
        """Node ids per rank, in final order (after run())."""
        return [list(layer) for layer in self._layers]

    @property
    def ranking_edges(self) -> list[RankingEdge]:
        """Acyclic, hierarchy-oriented edges used for ranking (after run())."""
        return list(self._ranking_edges)

    # -------------------------------------------------------------------------
    # Phase 1: Cycle Removal
    # -------------------------------------------------------------------------

    def _build_ranking_edges(self) -> None:
        """Orient edges for ranking and drop those that would close a cycle."""
        node_ids = self.node_ids
        ordering: list[RankingEdge] = []
        generic: list[RankingEdge] = []

        for edge in self._valid_edges():
            if edge.kind.is_ordering:
                # Child -> parent in the model; parent ranks first
                ordering.append(RankingEdge(edge.target, edge.source, edge.layout_weight, edge.id))
            else:
                generic.append(RankingEdge(edge.source, edge.target, edge.layout_weight, edge.id))

        kept = break_cycles(node_ids, ordering)
        generic.sort(key=lambda e: -e.weight)
        extra = extend_acyclic(node_ids, kept, generic)
        self._ranking_edges = kept + extra

    # -------------------------------------------------------------------------
    # Phase 2: Layer Assignment (Longest Path)
    # -------------------------------------------------------------------------

    def _assign_layers(self) -> None:
        """Assign nodes to layers using the longest path algorithm."""
        self._layers = assign_layers_longest_path(self.node_ids, self._ranking_edges)
        self._ranks = {
            node_id: layer_idx
            for layer_idx, layer in enumerate(self._layers)
            for node_id in layer
        }

    # -------------------------------------------------------------------------
    # Phase 3: Crossing Reduction (Barycenter Method)
    # -------------------------------------------------------------------------

    def _group_layers(self) -> None:
        """Start each layer with nodes of the same group adjacent."""
        first_seen: dict[str, int] = {}
        keys: dict[str, int] = {}
        for idx, node in enumerate(self._nodes):
            if node.group:
                keys[node.id] = first_seen.setdefault(node.group, idx)
            else:
                keys[node.id] = idx
        self._layers = [sorted(layer, key=keys.__getitem__) for layer in self._layers]

    def _minimize_crossings(self) -> None:
        """Reduce edge crossings using the weighted barycenter heuristic."""
        self._layers = minimize_crossings_barycenter(
            self._layers,
            self._ranking_edges,
            iterations=self._crossing_iterations,
        )

    # -------------------------------------------------------------------------
    # Phase 4: Coordinate Assignment
    # -------------------------------------------------------------------------

    def _resolve_sizes(self) -> None:
        self._sizes = node_sizes(self._nodes, self._node_width, self._node_height)

    def _extents(self, node_id: str) -> tuple[float, float]:
        """(cross, primary) extents of a node box for the current direction."""
        width, height = self._sizes[node_id]
        if self._direction.is_horizontal:
            return height, width
        return width, height

    def _assign_coordinates(self) -> None:
        """Assign box positions from layer order and box extents."""
        if not self._layers:
            return

        # Primary axis: centre line of each rank
        rank_extents = [max(self._extents(n)[1] for n in layer) for layer in self._layers]
        rank_centers: list[float] = []
        cursor = 0.0
        for extent in rank_extents:
            rank_centers.append(cursor + extent / 2)
            cursor += extent + self._rank_separation

        # Cross axis: each rank centred on the widest one
        rank_widths = [
            sum(self._extents(n)[0] for n in layer) + self._node_separation * (len(layer) - 1)
            for layer in self._layers
        ]
        widest = max(rank_widths)

        centers: dict[str, tuple[float, float]] = {}
        for layer_idx, layer in enumerate(self._layers):
            cross = (widest - rank_widths[layer_idx]) / 2
            primary = rank_centers[layer_idx]
            if self._direction.is_reversed:
                primary = -primary
            for node_id in layer:
                cross_extent = self._extents(node_id)[0]
                cross_center = cross + cross_extent / 2
                cross += cross_extent + self._node_separation

                if self._direction.is_horizontal:
                    centers[node_id] = (primary, cross_center)
                else:
                    centers[node_id] = (cross_center, primary)

        # Top-left corners, translated to start at the margin
        corners = {
            node_id: (cx - self._sizes[node_id][0] / 2, cy - self._sizes[node_id][1] / 2)
            for node_id, (cx, cy) in centers.items()
        }
        min_x = min(x for x, _ in corners.values())
        min_y = min(y for _, y in corners.values())
        self._positions = {
            node_id: Position(x - min_x + self._margin, y - min_y + self._margin)
            for node_id, (x, y) in corners.items()
        }

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> None:
        """Compute hierarchical layout."""
        self._ranking_edges = []
        self._layers = []
        self._ranks = {}
        self._positions = {}
        self._resolve_sizes()

        if not self._nodes:
            return

        # Phase 1: Cycle removal
        self._build_ranking_edges()

        # Phase 2: Layer assignment
        self._assign_layers()

        # Phase 3: Crossing reduction
        self._group_layers()
        self._minimize_crossings()

        # Phase 4: Coordinate assignment
        self._assign_coordinates()


__all__ = ["HierarchicalLayout", "RankingEdge"]
