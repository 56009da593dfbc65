"""
Interpolation between two layouts for animated re-layout.

The caller drives the clock: compute ``progress`` in [0, 1] from elapsed
time and render the positions returned by interpolate_positions().
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping

from .types import Position

Easing = Callable[[float], float]


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out: fast start, gentle stop."""
    return 1.0 - (1.0 - t) ** 3


def interpolate_positions(
    start: Mapping[str, Position],
    end: Mapping[str, Position],
    progress: float,
    easing: Easing = ease_out_cubic,
) -> dict[str, Position]:
    """
    Blend two position maps.

    Every node of ``end`` is returned. Nodes missing from either map are
    treated as sitting at the origin there. ``progress`` is clamped to
    [0, 1] before easing.
    """
    t = easing(min(max(float(progress), 0.0), 1.0))
    origin = Position(0.0, 0.0)

    frame: dict[str, Position] = {}
    for node_id, to_pos in end.items():
        from_pos = start.get(node_id, origin)
        frame[node_id] = Position(
            from_pos.x + (to_pos.x - from_pos.x) * t,
            from_pos.y + (to_pos.y - from_pos.y) * t,
        )
    return frame


def transition_frames(
    start: Mapping[str, Position],
    end: Mapping[str, Position],
    steps: int,
    easing: Easing = ease_out_cubic,
) -> Iterator[dict[str, Position]]:
    """Yield ``steps`` evenly spaced frames, the last one equal to ``end``."""
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")
    for i in range(1, steps + 1):
        yield interpolate_positions(start, end, i / steps, easing)


__all__ = ["Easing", "ease_out_cubic", "interpolate_positions", "transition_frames"]
