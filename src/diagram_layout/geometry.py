"""
Geometric primitives for diagram layout.

Provides:
- rect_boundary_intersection: where a ray from a box centre leaves the box
- box centre/overlap helpers for top-left anchored boxes
- compute_bounds: padded bounding rectangle over all node boxes
- center_in_viewport: viewport offset that centres a diagram
- scale_to_fit / center_positions: fit a point cloud into a canvas
"""

from __future__ import annotations

from typing import Mapping

import numpy as np

from .types import Bounds, PointLike, Position, SizeMap
from .validation import validate_viewport

DEFAULT_BOUNDS_PADDING = 40.0


def rect_boundary_intersection(
    center: PointLike,
    half_width: float,
    half_height: float,
    target: PointLike,
) -> Position:
    """
    Find where the ray from a box centre toward a target exits the box.

    The vertical side facing the target horizontally is tested first: if
    the ray's offset at that side lies within the half-height, it is the
    exit point. Otherwise the horizontal side facing the target vertically
    is tested the same way. Axis-aligned rays skip the test that would
    divide by zero.

    Args:
        center: Box centre
        half_width: Half of the box width
        half_height: Half of the box height
        target: Point the ray aims at

    Returns:
        The boundary point, or the centre itself when the target coincides
        with it.

    Example:
        >>> rect_boundary_intersection((0, 0), 50, 20, (100, 0))
        Position(x=50.0, y=0.0)
    """
    cx, cy = float(center[0]), float(center[1])
    dx = float(target[0]) - cx
    dy = float(target[1]) - cy

    if dx == 0 and dy == 0:
        return Position(cx, cy)

    if dx != 0:
        x_edge = half_width if dx > 0 else -half_width
        y_hit = dy / dx * x_edge
        if -half_height <= y_hit <= half_height:
            return Position(cx + x_edge, cy + y_hit)

    if dy != 0:
        y_edge = half_height if dy > 0 else -half_height
        x_hit = dx / dy * y_edge
        if -half_width <= x_hit <= half_width:
            return Position(cx + x_hit, cy + y_edge)

    return Position(cx, cy)


def box_center(position: PointLike, size: tuple[float, float]) -> Position:
    """Centre of the box with top-left corner ``position``."""
    return Position(float(position[0]) + size[0] / 2, float(position[1]) + size[1] / 2)


def boxes_overlap(
    pos1: PointLike,
    size1: tuple[float, float],
    pos2: PointLike,
    size2: tuple[float, float],
) -> bool:
    """
    Check whether two top-left anchored boxes share interior area.

    Boxes that only touch along an edge do not overlap.
    """
    return (
        pos1[0] < pos2[0] + size2[0]
        and pos2[0] < pos1[0] + size1[0]
        and pos1[1] < pos2[1] + size2[1]
        and pos2[1] < pos1[1] + size1[1]
    )


def compute_bounds(
    positions: Mapping[str, Position],
    sizes: SizeMap,
    padding: float = DEFAULT_BOUNDS_PADDING,
) -> Bounds:
    """
    Compute the padded bounding rectangle of all node boxes.

    The rectangle spans from the minimum box corner minus ``padding`` to
    the maximum far box corner plus ``padding``, so every node's full box
    lies inside it.

    Args:
        positions: Node id -> top-left Position
        sizes: Node id -> (width, height)
        padding: Margin added on every side

    Returns:
        The bounds, or a zero-area rectangle when there are no nodes.
    """
    if not positions:
        return Bounds.empty()

    ids = list(positions)
    corners = np.array([[positions[i].x, positions[i].y] for i in ids], dtype=float)
    extents = np.array([sizes[i] for i in ids], dtype=float)
    far_corners = corners + extents

    min_x, min_y = corners.min(axis=0)
    max_x, max_y = far_corners.max(axis=0)

    return Bounds(
        x=float(min_x - padding),
        y=float(min_y - padding),
        width=float(max_x - min_x + 2 * padding),
        height=float(max_y - min_y + 2 * padding),
    )


def center_in_viewport(bounds: Bounds, viewport_width: float, viewport_height: float) -> Position:
    """
    Offset that centres a diagram of the given bounds in a viewport.

    Each axis is clamped at zero, so diagrams larger than the viewport
    are anchored at the origin instead of being pushed off-screen.

    Raises:
        InvalidViewportError: If a viewport dimension is negative
    """
    width, height = validate_viewport(viewport_width, viewport_height)
    return Position(
        max(0.0, (width - bounds.width) / 2),
        max(0.0, (height - bounds.height) / 2),
    )


def scale_to_fit(
    positions: Mapping[str, Position],
    width: float,
    height: float,
    padding: float = 50.0,
) -> dict[str, Position]:
    """
    Scale and translate points into a ``width`` x ``height`` canvas.

    Points are moved so their minimum corner sits at ``padding``; layouts
    larger than the available area are shrunk uniformly, smaller ones are
    never scaled up.
    """
    if not positions:
        return {}

    ids = list(positions)
    coords = np.array([[positions[i].x, positions[i].y] for i in ids], dtype=float)
    mins = coords.min(axis=0)
    span = coords.max(axis=0) - mins

    available = np.array([width - 2 * padding, height - 2 * padding], dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        ratios = np.where(span > 0, available / np.where(span > 0, span, 1.0), 1.0)
    scale = float(min(ratios.min(), 1.0))

    scaled = (coords - mins) * scale + padding
    return {node_id: Position(float(x), float(y)) for node_id, (x, y) in zip(ids, scaled)}


def center_positions(
    positions: Mapping[str, Position],
    width: float,
    height: float,
) -> dict[str, Position]:
    """Translate points so their bounding box is centred in the canvas."""
    if not positions:
        return {}

    ids = list(positions)
    coords = np.array([[positions[i].x, positions[i].y] for i in ids], dtype=float)
    mins = coords.min(axis=0)
    span = coords.max(axis=0) - mins
    offset = (np.array([width, height], dtype=float) - span) / 2 - mins

    moved = coords + offset
    return {node_id: Position(float(x), float(y)) for node_id, (x, y) in zip(ids, moved)}


__all__ = [
    "DEFAULT_BOUNDS_PADDING",
    "rect_boundary_intersection",
    "box_center",
    "boxes_overlap",
    "compute_bounds",
    "center_in_viewport",
    "scale_to_fit",
    "center_positions",
]
