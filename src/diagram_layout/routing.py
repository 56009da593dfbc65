"""Orthogonal edge routing between placed node boxes.

Every edge becomes a right-angle polyline: it leaves the source box where
the centre-to-centre ray crosses the source boundary, runs horizontally to
the x-midpoint of the two anchors, vertically to the target anchor's level,
and horizontally into the target boundary.

Parallel edges between the same pair of nodes share anchors, so their
vertical runs are fanned out by the edge separation.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Mapping, Sequence

from .geometry import box_center, rect_boundary_intersection
from .types import GraphEdge, Position, SizeMap

_EPS = 1e-9


def _collapse_duplicates(points: list[Position]) -> list[Position]:
    """Drop consecutive points that coincide."""
    collapsed: list[Position] = []
    for pt in points:
        if (
            collapsed
            and abs(pt.x - collapsed[-1].x) < _EPS
            and abs(pt.y - collapsed[-1].y) < _EPS
        ):
            continue
        collapsed.append(pt)
    return collapsed


def route_edge(
    src_pos: Position,
    src_size: tuple[float, float],
    tgt_pos: Position,
    tgt_size: tuple[float, float],
    offset: float = 0.0,
) -> list[Position]:
    """Route one edge between two top-left anchored boxes.

    Args:
        src_pos: Top-left corner of the source box.
        src_size: Source (width, height).
        tgt_pos: Top-left corner of the target box.
        tgt_size: Target (width, height).
        offset: Horizontal shift applied to the vertical run.

    Returns:
        Ordered route points. Boxes with coincident centres yield a single
        point.
    """
    src_center = box_center(src_pos, src_size)
    tgt_center = box_center(tgt_pos, tgt_size)

    if abs(src_center.x - tgt_center.x) < _EPS and abs(src_center.y - tgt_center.y) < _EPS:
        return [src_center]

    start = rect_boundary_intersection(src_center, src_size[0] / 2, src_size[1] / 2, tgt_center)
    end = rect_boundary_intersection(tgt_center, tgt_size[0] / 2, tgt_size[1] / 2, src_center)

    mid_x = (start.x + end.x) / 2 + offset
    points = [
        start,
        Position(mid_x, start.y),
        Position(mid_x, end.y),
        end,
    ]
    return _collapse_duplicates(points)


def _parallel_offsets(edges: Sequence[GraphEdge], edge_separation: float) -> dict[str, float]:
    """Spread parallel edges symmetrically around the shared midpoint."""
    bundles: dict[frozenset[str], list[str]] = defaultdict(list)
    for edge in edges:
        if edge.source != edge.target:
            bundles[frozenset((edge.source, edge.target))].append(edge.id)

    offsets: dict[str, float] = {}
    for edge_ids in bundles.values():
        k = len(edge_ids)
        for i, edge_id in enumerate(edge_ids):
            offsets[edge_id] = (i - (k - 1) / 2) * edge_separation
    return offsets


def route_all_edges(
    edges: Sequence[GraphEdge],
    positions: Mapping[str, Position],
    sizes: SizeMap,
    edge_separation: float = 10.0,
) -> dict[str, list[Position]]:
    """Route every edge whose endpoints are both placed.

    Args:
        edges: Edges to route.
        positions: Node id -> top-left Position.
        sizes: Node id -> (width, height).
        edge_separation: Spacing between vertical runs of parallel edges.

    Returns:
        Edge id -> ordered route points. Edges with an unplaced endpoint
        are omitted.
    """
    placed = [e for e in edges if e.source in positions and e.target in positions]
    offsets = _parallel_offsets(placed, edge_separation)

    routes: dict[str, list[Position]] = {}
    for edge in placed:
        routes[edge.id] = route_edge(
            positions[edge.source],
            sizes[edge.source],
            positions[edge.target],
            sizes[edge.target],
            offset=offsets.get(edge.id, 0.0),
        )
    return routes


__all__ = ["route_edge", "route_all_edges"]
