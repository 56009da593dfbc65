"""
Grid layout used when the hierarchical layout cannot run.

Places nodes row-major on a square-ish grid, ignoring edges entirely.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional, Sequence

from ..base import StaticLayout, node_sizes
from ..types import Event, LayoutOptions, NodeLike, Position
from ..validation import validate_extent, validate_separation


class GridLayout(StaticLayout):
    """
    Row-major grid placement.

    The grid has ceil(sqrt(n)) columns. Cells are square, with a pitch of
    the largest box extent plus ``node_separation``, but never less than
    ``min_spacing``. Positions are top-left box corners, starting at the
    origin.

    Example:
        layout = GridLayout(nodes=[{"id": "a"}, {"id": "b"}, {"id": "c"}])
        layout.run()
        layout.positions["c"]  # Position(x=0.0, y=250.0)
    """

    def __init__(
        self,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
        # Grid-specific parameters
        node_separation: float = 80.0,
        node_width: float = 200.0,
        node_height: float = 120.0,
        min_spacing: float = 250.0,
    ) -> None:
        """
        Initialize grid layout.

        Args:
            nodes: List of nodes
            on_start: Callback for start event
            on_end: Callback for end event
            node_separation: Gap added to the largest box extent.
            node_width: Width of nodes without an explicit width.
            node_height: Height of nodes without an explicit height.
            min_spacing: Lower bound on the cell pitch.
        """
        super().__init__(nodes=nodes, on_start=on_start, on_end=on_end)

        self._node_separation: float = validate_separation("node_separation", node_separation)
        self._node_width: float = validate_extent("node_width", node_width)
        self._node_height: float = validate_extent("node_height", node_height)
        self._min_spacing: float = validate_separation("min_spacing", min_spacing)

        self._positions: dict[str, Position] = {}
        self._sizes: dict[str, tuple[float, float]] = {}
        self._columns: int = 0
        self._spacing: float = 0.0

    @classmethod
    def from_options(
        cls,
        options: LayoutOptions,
        *,
        nodes: Optional[Sequence[NodeLike]] = None,
        **kwargs: Any,
    ) -> GridLayout:
        """Create a grid layout configured from LayoutOptions."""
        return cls(
            nodes=nodes,
            node_separation=options.node_separation,
            node_width=options.node_width,
            node_height=options.node_height,
            **kwargs,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def positions(self) -> dict[str, Position]:
        """Top-left box corner per node id (after run())."""
        return dict(self._positions)

    @property
    def sizes(self) -> dict[str, tuple[float, float]]:
        """Resolved (width, height) per node id (after run())."""
        return dict(self._sizes)

    @property
    def columns(self) -> int:
        """Number of grid columns (after run())."""
        return self._columns

    @property
    def spacing(self) -> float:
        """Cell pitch on both axes (after run())."""
        return self._spacing

    # -------------------------------------------------------------------------
    # Layout Computation
    # -------------------------------------------------------------------------

    def _compute(self, **kwargs: Any) -> None:
        """Compute grid positions."""
        self._sizes = node_sizes(self._nodes, self._node_width, self._node_height)
        self._positions = {}
        n = len(self._nodes)
        if n == 0:
            self._columns = 0
            self._spacing = 0.0
            return

        largest = max(max(w, h) for w, h in self._sizes.values())
        self._spacing = max(largest + self._node_separation, self._min_spacing)
        self._columns = math.ceil(math.sqrt(n))

        for i, node in enumerate(self._nodes):
            row, col = divmod(i, self._columns)
            self._positions[node.id] = Position(col * self._spacing, row * self._spacing)


__all__ = ["GridLayout"]
