"""
diagram-layout: Layout of class diagrams and knowledge graphs in Python.

This package turns nodes and typed edges into box positions, routed edge
paths and bounds for diagram rendering.

Available components:
- engine: DiagramLayoutEngine facade with result caching and grid fallback
- hierarchical: Layered (Sugiyama) layout and grid fallback
- tiered: Breadth-first column layout for knowledge graphs
- collision, routing, geometry: Post-processing of placed boxes
- transitions: Interpolation for animated re-layout
"""

__version__ = "0.1.0"

# Base classes for building layouts
from .base import BaseLayout, StaticLayout

# Result caching
from .cache import LayoutCache

# Overlap resolution
from .collision import find_overlaps, resolve_collisions

# Warning categories
from .diagnostics import (
    GraphStructureWarning,
    LayoutFallbackWarning,
    LayoutPerformanceWarning,
    LayoutWarning,
)

# Public facade
from .engine import DiagramLayoutEngine

# Geometry helpers
from .geometry import (
    center_in_viewport,
    center_positions,
    compute_bounds,
    rect_boundary_intersection,
    scale_to_fit,
)

# Hierarchical layouts
from .hierarchical import GridLayout, HierarchicalLayout

# Preprocessing utilities
from .preprocessing import (
    assign_layers_longest_path,
    break_cycles,
    count_crossings,
    detect_cycle,
    has_cycle,
    minimize_crossings_barycenter,
    topological_sort,
)

# Edge routing
from .routing import route_all_edges, route_edge

# Knowledge-graph layout
from .tiered import TieredColumnLayout

# Animation helpers
from .transitions import ease_out_cubic, interpolate_positions, transition_frames
from .types import (
    Bounds,
    Direction,
    EdgeLike,
    EdgeStyle,
    Event,
    EventType,
    GraphEdge,
    GraphNode,
    LayoutAlgorithm,
    LayoutOptions,
    LayoutResult,
    NodeLike,
    Position,
    RelationshipKind,
    TieredPlacement,
)

# Validation
from .validation import (
    InvalidEdgeError,
    InvalidNodeError,
    InvalidOptionsError,
    InvalidViewportError,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Types
    "Bounds",
    "Direction",
    "EdgeLike",
    "EdgeStyle",
    "Event",
    "EventType",
    "GraphEdge",
    "GraphNode",
    "LayoutAlgorithm",
    "LayoutOptions",
    "LayoutResult",
    "NodeLike",
    "Position",
    "RelationshipKind",
    "TieredPlacement",
    # Base classes
    "BaseLayout",
    "StaticLayout",
    # Facade
    "DiagramLayoutEngine",
    "LayoutCache",
    # Layouts
    "HierarchicalLayout",
    "GridLayout",
    "TieredColumnLayout",
    # Preprocessing
    "assign_layers_longest_path",
    "break_cycles",
    "count_crossings",
    "detect_cycle",
    "has_cycle",
    "minimize_crossings_barycenter",
    "topological_sort",
    # Geometry
    "center_in_viewport",
    "center_positions",
    "compute_bounds",
    "rect_boundary_intersection",
    "scale_to_fit",
    # Post-processing
    "find_overlaps",
    "resolve_collisions",
    "route_all_edges",
    "route_edge",
    # Animation
    "ease_out_cubic",
    "interpolate_positions",
    "transition_frames",
    # Diagnostics
    "LayoutWarning",
    "GraphStructureWarning",
    "LayoutFallbackWarning",
    "LayoutPerformanceWarning",
    # Validation
    "ValidationError",
    "InvalidOptionsError",
    "InvalidViewportError",
    "InvalidNodeError",
    "InvalidEdgeError",
]
