"""
Overlap resolution for placed node boxes.

A single pairwise pass pushes colliding boxes apart along the x axis.
The pass is not iterated to a fixed point: moving one pair can push a box
into a third one, so tight clusters of three or more boxes may keep
residual overlaps after one call. Calling again on the result continues
the separation. Use find_overlaps() to check.
"""

from __future__ import annotations

from typing import Mapping

from .geometry import box_center, boxes_overlap
from .types import Position, SizeMap


def resolve_collisions(
    positions: Mapping[str, Position],
    sizes: SizeMap,
    node_separation: float,
    rank_separation: float,
) -> dict[str, Position]:
    """
    Push apart node boxes that sit closer than the required separation.

    Pairs are visited once each, in input order. A pair collides when the
    distance between centres is below half the summed extents plus the
    required gap on both axes at once (``node_separation`` horizontally,
    ``rank_separation`` vertically). A colliding pair is pushed apart by the
    horizontal deficit, each box moving half of it: the box further left
    moves left, the other moves right. Later checks see earlier moves.

    Args:
        positions: Node id -> top-left Position
        sizes: Node id -> (width, height)
        node_separation: Required horizontal gap between boxes
        rank_separation: Required vertical gap between boxes

    Returns:
        New position map; the input is not modified.
    """
    adjusted = dict(positions)
    ids = list(adjusted)

    for i, id1 in enumerate(ids):
        for id2 in ids[i + 1 :]:
            size1, size2 = sizes[id1], sizes[id2]
            c1 = box_center(adjusted[id1], size1)
            c2 = box_center(adjusted[id2], size2)

            dx = abs(c1.x - c2.x)
            dy = abs(c1.y - c2.y)
            min_dx = (size1[0] + size2[0]) / 2 + node_separation
            min_dy = (size1[1] + size2[1]) / 2 + rank_separation

            if dx < min_dx and dy < min_dy:
                shift = (min_dx - dx) / 2
                if c1.x <= c2.x:
                    shift1, shift2 = -shift, shift
                else:
                    shift1, shift2 = shift, -shift
                p1, p2 = adjusted[id1], adjusted[id2]
                adjusted[id1] = Position(p1.x + shift1, p1.y)
                adjusted[id2] = Position(p2.x + shift2, p2.y)

    return adjusted


def find_overlaps(
    positions: Mapping[str, Position],
    sizes: SizeMap,
) -> list[tuple[str, str]]:
    """
    List every pair of node boxes that share interior area.

    Args:
        positions: Node id -> top-left Position
        sizes: Node id -> (width, height)

    Returns:
        Overlapping (id, id) pairs in input order.
    """
    ids = list(positions)
    overlaps: list[tuple[str, str]] = []
    for i, id1 in enumerate(ids):
        for id2 in ids[i + 1 :]:
            if boxes_overlap(positions[id1], sizes[id1], positions[id2], sizes[id2]):
                overlaps.append((id1, id2))
    return overlaps


__all__ = ["resolve_collisions", "find_overlaps"]
