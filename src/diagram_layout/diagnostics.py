"""
Warning categories issued by diagram layouts.

Layouts never abort on questionable input; they degrade and report through
the standard warnings machinery so callers can filter, record or escalate.
"""

from __future__ import annotations


class LayoutWarning(UserWarning):
    """Base category for all diagram layout warnings."""

    pass


class GraphStructureWarning(LayoutWarning):
    """Warning issued when graph input is malformed and had to be repaired."""

    pass


class LayoutFallbackWarning(LayoutWarning):
    """Warning issued when the hierarchical layout failed and the grid was used."""

    pass


class LayoutPerformanceWarning(LayoutWarning):
    """Warning issued when a layout computation exceeded its time budget."""

    pass


__all__ = [
    "LayoutWarning",
    "GraphStructureWarning",
    "LayoutFallbackWarning",
    "LayoutPerformanceWarning",
]
