"""
Tiered column layout for knowledge graphs and mind maps.

Nodes are arranged left to right in breadth-first tiers:

- Column 0 holds the roots (nodes without incoming edges).
- Each later column holds the unplaced nodes reached by an edge from a
  node placed in an earlier column.
- When a tier reaches nothing, every remaining node is placed in one final
  column, so cycles without roots still terminate.

Within a column nodes are stable-sorted by type priority and stacked top to
bottom on a fixed pitch. No edges are routed.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Optional, Sequence

from .base import StaticLayout
from .types import EdgeLike, Event, NodeLike, Position, TieredPlacement
from .validation import validate_extent, validate_separation

DEFAULT_TYPE_PRIORITY: tuple[str, ...] = (
    "SOURCE",
    "CONCEPT",
    "REGULATION",
    "IMPACT",
    "RISK",
    "OPPORTUNITY",
)


class TieredColumnLayout(StaticLayout):
    """
    Breadth-first column layout.

    Cell (column, row) has its top-left corner at
    ``(start_x + column * (column_width + spacing),
    start_y + row * (row_height + spacing))``.

    Example:
        layout = TieredColumnLayout(
            nodes=[{"id": "A"}, {"id": "B"}, {"id": "C"}],
            edges=[{"source": "A", "target": "B"}, {"source": "B", "target": "C"}],
        )
        layout.run()
        layout.columns  # [["A"], ["B"], ["C"]]
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        edges: Optional[Sequence[EdgeLike]] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # Tiered-specific parameters
        column_width: float = 350.0,
        row_height: float = 300.0,
        spacing: float = 50.0,
        start_x: float = 100.0,
        start_y: float = 200.0,
        type_priority: Sequence[str] = DEFAULT_TYPE_PRIORITY,
    ) -> None:
        """
        Initialize tiered column layout.

        Args:
            nodes: List of nodes; ``kind`` (or ``type``) drives in-column order
            edges: List of edges; only source and target are used
            on_start: Callback for start event
            on_end: Callback for end event
            column_width: Width of a column cell.
            row_height: Height of a row cell.
            spacing: Gap between neighbouring cells on both axes.
            start_x: x of the first column.
            start_y: y of the first row.
            type_priority: Node kinds in display order, compared
                case-insensitively. Other kinds sort after them.
        """
        super().__init__(nodes=nodes, edges=edges, on_start=on_start, on_end=on_end)

        self._column_width: float = validate_extent("column_width", column_width)
        self._row_height: float = validate_extent("row_height", row_height)
        self._spacing: float = validate_separation("spacing", spacing)
        self._start_x: float = float(start_x)
        self._start_y: float = float(start_y)
        self.type_priority = type_priority

        self._columns: list[list[str]] = []
        self._placements: dict[str, TieredPlacement] = {}
        self._fallback_column: Optional[int] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def column_width(self) -> float:
        return self._column_width

    @property
    def row_height(self) -> float:
        return self._row_height

    @property
    def spacing(self) -> float:
        return self._spacing

    @property
    def type_priority(self) -> tuple[str, ...]:
        """Node kinds in display order."""
        return self._type_priority

    @type_priority.setter
    def type_priority(self, value: Sequence[str]) -> None:
        self._type_priority = tuple(str(kind).upper() for kind in value)
        self._rank_of = {kind: idx for idx, kind in enumerate(self._type_priority)}

    @property
    def columns(self) -> list[list[str]]:
        """Node ids per column, top to bottom (after run())."""
        return [list(column) for column in self._columns]

    @property
    def placements(self) -> dict[str, TieredPlacement]:
        """Cell and coordinates per node id (after run())."""
        return dict(self._placements)

    @property
    def positions(self) -> dict[str, Position]:
        """Top-left cell corner per node id (after run())."""
        return {node_id: Position(p.x, p.y) for node_id, p in self._placements.items()}

    @property
    def fallback_column(self) -> Optional[int]:
        """Index of the column holding unreachable nodes, if one was needed."""
        return self._fallback_column

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _priority(self, kind: Optional[str]) -> int:
        if kind is None:
            return len(self._type_priority)
        return self._rank_of.get(kind.upper(), len(self._type_priority))

    def _build_columns(self) -> None:
        """Group node ids into breadth-first tiers."""
        predecessors: dict[str, set[str]] = defaultdict(set)
        for edge in self._valid_edges():
            predecessors[edge.target].add(edge.source)

        remaining = self.node_ids
        roots = [n for n in remaining if not predecessors[n]]
        if roots:
            self._columns.append(roots)

        placed = set(roots)
        remaining = [n for n in remaining if n not in placed]
        while remaining:
            # Only nodes from earlier columns count, not ones added this round.
            # A self-loop never matches since its node is still unplaced.
            column = [n for n in remaining if predecessors[n] & placed]
            if not column:
                self._fallback_column = len(self._columns)
                self._columns.append(remaining)
                break
            self._columns.append(column)
            placed.update(column)
            remaining = [n for n in remaining if n not in placed]

    def _compute(self, **kwargs: Any) -> None:
        """Compute tiered column placements."""
        self._columns = []
        self._placements = {}
        self._fallback_column = None
        if not self._nodes:
            return

        self._build_columns()

        kinds = {node.id: node.kind for node in self._nodes}
        self._columns = [
            sorted(column, key=lambda n: self._priority(kinds[n])) for column in self._columns
        ]

        for col_idx, column in enumerate(self._columns):
            x = self._start_x + col_idx * (self._column_width + self._spacing)
            for row_idx, node_id in enumerate(column):
                y = self._start_y + row_idx * (self._row_height + self._spacing)
                self._placements[node_id] = TieredPlacement(col_idx, row_idx, x, y)


__all__ = ["TieredColumnLayout", "DEFAULT_TYPE_PRIORITY"]
