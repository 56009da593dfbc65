"""
Hierarchical diagram layouts.

This module provides:
- HierarchicalLayout: Layered (Sugiyama) layout with box-aware spacing
- GridLayout: Edge-agnostic grid placement used as the fallback
"""

from .grid import GridLayout
from .sugiyama import HierarchicalLayout, RankingEdge

__all__ = [
    "HierarchicalLayout",
    "RankingEdge",
    "GridLayout",
]
