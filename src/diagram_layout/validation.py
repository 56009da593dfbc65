"""
Input validation utilities for diagram layout.

Provides centralized validation for layout configuration and for the
node/edge lists handed to layouts. Configuration problems raise
descriptive exceptions; graph problems are reported as issue lists so the
layouts can degrade instead of failing.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Collection, Sequence


class ValidationError(ValueError):
    """Base exception for layout validation errors."""

    pass


class InvalidOptionsError(ValidationError):
    """Raised when layout options are invalid."""

    pass


class InvalidViewportError(ValidationError):
    """Raised when viewport dimensions are invalid."""

    pass


class InvalidNodeError(ValidationError):
    """Raised when a node is malformed."""

    pass


class InvalidEdgeError(ValidationError):
    """Raised when an edge is malformed or references unknown nodes."""

    pass


def validate_viewport(width: float, height: float) -> tuple[float, float]:
    """
    Validate viewport dimensions.

    Args:
        width: Viewport width
        height: Viewport height

    Returns:
        Validated (width, height) tuple

    Raises:
        InvalidViewportError: If either dimension is negative or not finite
    """
    width, height = float(width), float(height)

    if width < 0 or not math.isfinite(width):
        raise InvalidViewportError(f"Viewport width must be non-negative, got {width}")
    if height < 0 or not math.isfinite(height):
        raise InvalidViewportError(f"Viewport height must be non-negative, got {height}")

    return width, height


def validate_separation(name: str, value: float) -> float:
    """
    Validate a spacing parameter.

    Raises:
        InvalidOptionsError: If value is negative or not finite
    """
    value = float(value)
    if value < 0 or not math.isfinite(value):
        raise InvalidOptionsError(f"{name} must be a non-negative number, got {value}")
    return value


def validate_extent(name: str, value: float) -> float:
    """
    Validate a box or cell extent.

    Raises:
        InvalidOptionsError: If value is not strictly positive
    """
    value = float(value)
    if value <= 0 or not math.isfinite(value):
        raise InvalidOptionsError(f"{name} must be positive, got {value}")
    return value


def validate_count(name: str, value: int) -> int:
    """
    Validate an iteration count.

    Raises:
        InvalidOptionsError: If value is not a whole number of at least 1
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
        raise InvalidOptionsError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def validate_edge_endpoints(
    edges: Sequence[Any],
    node_ids: Collection[str],
    strict: bool = True,
) -> list[tuple[int, str]]:
    """
    Validate that every edge source/target names a known node.

    Args:
        edges: Sequence of GraphEdge objects or dicts with source/target
        node_ids: Known node ids
        strict: If True, raises on invalid. If False, returns list of issues.

    Returns:
        List of (edge_index, issue_description) tuples

    Raises:
        InvalidEdgeError: If strict=True and invalid edges found
    """
    issues: list[tuple[int, str]] = []

    for i, edge in enumerate(edges):
        src = _get_endpoint(edge, "source")
        tgt = _get_endpoint(edge, "target")

        if src is None:
            issues.append((i, f"Edge {i}: source is None"))
        elif src not in node_ids:
            issues.append((i, f"Edge {i}: unknown source {src!r}"))

        if tgt is None:
            issues.append((i, f"Edge {i}: target is None"))
        elif tgt not in node_ids:
            issues.append((i, f"Edge {i}: unknown target {tgt!r}"))

    if strict and issues:
        msg = "Invalid edge endpoints:\n" + "\n".join(issue[1] for issue in issues)
        raise InvalidEdgeError(msg)

    return issues


def find_duplicate_ids(node_ids: Sequence[str]) -> list[str]:
    """Return ids that occur more than once, in first-repeat order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for node_id in node_ids:
        if node_id in seen and node_id not in duplicates:
            duplicates.append(node_id)
        seen.add(node_id)
    return duplicates


def _get_endpoint(obj: Any, attr: str) -> Any:
    """Extract an endpoint id from a dict or an object attribute."""
    if isinstance(obj, dict):
        val = obj.get(attr)
    else:
        val = getattr(obj, attr, None)
    return None if val is None else str(val)


__all__ = [
    "ValidationError",
    "InvalidOptionsError",
    "InvalidViewportError",
    "InvalidNodeError",
    "InvalidEdgeError",
    "validate_viewport",
    "validate_separation",
    "validate_extent",
    "validate_count",
    "validate_edge_endpoints",
    "find_duplicate_ids",
]
