"""
Public facade for class-diagram layout.

DiagramLayoutEngine ties the pipeline together:

    nodes + edges -> HierarchicalLayout (cycle breaking, ranking, ordering)
                  -> resolve_collisions -> route_all_edges -> compute_bounds
                  -> LayoutResult, memoized by a LayoutCache

If the hierarchical layout fails, the grid fallback is used instead and a
LayoutFallbackWarning is emitted.
"""

from __future__ import annotations

import time
import warnings
from typing import Optional, Sequence

from .base import normalize_edges, normalize_nodes
from .cache import LayoutCache
from .collision import resolve_collisions
from .diagnostics import LayoutFallbackWarning, LayoutPerformanceWarning
from .geometry import center_in_viewport, compute_bounds
from .hierarchical import GridLayout, HierarchicalLayout
from .routing import route_all_edges
from .types import (
    EdgeLike,
    GraphEdge,
    GraphNode,
    LayoutAlgorithm,
    LayoutOptions,
    LayoutResult,
    NodeLike,
    OptionsLike,
    Position,
)
from .validation import InvalidOptionsError

DEFAULT_SLOW_THRESHOLD_MS = 2000.0


class DiagramLayoutEngine:
    """
    Compute, cache and center class-diagram layouts.

    Each engine owns its cache; results for identical requests are returned
    as the same object until evicted.

    Example:
        engine = DiagramLayoutEngine()
        result = engine.compute_layout(
            nodes=[{"id": "Base"}, {"id": "User"}],
            edges=[{"source": "User", "target": "Base", "type": "inheritance"}],
            options={"direction": "TB"},
        )
        offset = engine.center_diagram(result, 1200, 800)
    """

    def __init__(
        self,
        cache: Optional[LayoutCache] = None,
        slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
    ) -> None:
        """
        Initialize the engine.

        Args:
            cache: Cache to use; a new LayoutCache is created when omitted.
            slow_threshold_ms: Computation time above which a
                LayoutPerformanceWarning is emitted.
        """
        if slow_threshold_ms < 0:
            raise InvalidOptionsError(
                f"slow_threshold_ms must be non-negative, got {slow_threshold_ms!r}"
            )
        self._cache = cache if cache is not None else LayoutCache()
        self._slow_threshold_ms = float(slow_threshold_ms)

    @property
    def cache(self) -> LayoutCache:
        """The cache owned by this engine."""
        return self._cache

    @property
    def slow_threshold_ms(self) -> float:
        return self._slow_threshold_ms

    @slow_threshold_ms.setter
    def slow_threshold_ms(self, value: float) -> None:
        if value < 0:
            raise InvalidOptionsError(f"slow_threshold_ms must be non-negative, got {value!r}")
        self._slow_threshold_ms = float(value)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def compute_layout(
        self,
        nodes: Sequence[NodeLike],
        edges: Sequence[EdgeLike] = (),
        options: OptionsLike = None,
    ) -> LayoutResult:
        """
        Lay out a class diagram.

        Args:
            nodes: GraphNode objects, dicts, or objects with node attributes
            edges: GraphEdge objects, dicts, or objects with source/target
            options: LayoutOptions or a mapping of option names

        Returns:
            The layout result. Identical requests return the cached object.

        Raises:
            InvalidOptionsError: If the options are invalid
            InvalidNodeError: If a node has no id
        """
        opts = LayoutOptions.coerce(options)
        graph_nodes = normalize_nodes(nodes)
        graph_edges = normalize_edges(edges)

        key = self._cache.make_key(graph_nodes, graph_edges, opts)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        start = time.perf_counter()
        if opts.algorithm is LayoutAlgorithm.GRID:
            result = self._grid_result(graph_nodes, opts)
        else:
            try:
                result = self._hierarchical_result(graph_nodes, graph_edges, opts)
            except Exception as exc:
                warnings.warn(
                    f"Hierarchical layout failed ({exc!r}); using grid layout instead.",
                    LayoutFallbackWarning,
                    stacklevel=2,
                )
                result = self._grid_result(graph_nodes, opts)

        result = self._finish(result, start, len(graph_nodes))
        self._cache.put(key, result)
        return result

    def compute_grid_layout(
        self,
        nodes: Sequence[NodeLike],
        options: OptionsLike = None,
    ) -> LayoutResult:
        """
        Lay out nodes on a grid, ignoring relationships.

        The result has no routed edges and is not cached.
        """
        opts = LayoutOptions.coerce(options)
        graph_nodes = normalize_nodes(nodes)
        start = time.perf_counter()
        return self._finish(self._grid_result(graph_nodes, opts), start, len(graph_nodes))

    def clear_cache(self) -> None:
        """Drop every cached result."""
        self._cache.clear()

    def center_diagram(
        self,
        result: LayoutResult,
        viewport_width: float,
        viewport_height: float,
    ) -> Position:
        """
        Offset that centres a layout in a viewport, clamped at zero.

        Raises:
            InvalidViewportError: If a viewport dimension is negative
        """
        return center_in_viewport(result.bounds, viewport_width, viewport_height)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _hierarchical_result(
        self,
        nodes: list[GraphNode],
        edges: list[GraphEdge],
        options: LayoutOptions,
    ) -> LayoutResult:
        layout = HierarchicalLayout.from_options(options, nodes=nodes, edges=edges).run()
        sizes = layout.sizes
        # Resolver gaps are per axis; ranks run along x when horizontal
        if options.direction.is_horizontal:
            x_gap, y_gap = options.rank_separation, options.node_separation
        else:
            x_gap, y_gap = options.node_separation, options.rank_separation
        positions = resolve_collisions(
            layout.positions,
            sizes,
            node_separation=x_gap,
            rank_separation=y_gap,
        )
        routes = route_all_edges(
            layout.edges,
            positions,
            sizes,
            edge_separation=options.edge_separation,
        )
        return LayoutResult(
            positions=positions,
            edges=routes,
            bounds=compute_bounds(positions, sizes),
            algorithm=LayoutAlgorithm.HIERARCHICAL.value,
            sizes=sizes,
        )

    def _grid_result(self, nodes: list[GraphNode], options: LayoutOptions) -> LayoutResult:
        layout = GridLayout.from_options(options, nodes=nodes).run()
        positions = layout.positions
        sizes = layout.sizes
        return LayoutResult(
            positions=positions,
            edges={},
            bounds=compute_bounds(positions, sizes),
            algorithm=LayoutAlgorithm.GRID.value,
            sizes=sizes,
        )

    def _finish(self, result: LayoutResult, start: float, node_count: int) -> LayoutResult:
        """Stamp the computation time and warn when it is over the threshold."""
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if elapsed_ms > self._slow_threshold_ms:
            warnings.warn(
                f"Layout of {node_count} nodes took {elapsed_ms:.0f}ms "
                f"(threshold {self._slow_threshold_ms:.0f}ms).",
                LayoutPerformanceWarning,
                stacklevel=3,
            )
        return LayoutResult(
            positions=result.positions,
            edges=result.edges,
            bounds=result.bounds,
            computation_time=elapsed_ms,
            algorithm=result.algorithm,
            sizes=result.sizes,
        )


__all__ = ["DiagramLayoutEngine", "DEFAULT_SLOW_THRESHOLD_MS"]
