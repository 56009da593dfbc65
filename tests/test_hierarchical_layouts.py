"""
Tests for hierarchical layout algorithms.
"""

import pytest

from diagram_layout import (
    Direction,
    GraphNode,
    InvalidOptionsError,
    LayoutOptions,
    Position,
    find_overlaps,
)
from diagram_layout.hierarchical import GridLayout, HierarchicalLayout

# =============================================================================
# Test Fixtures
# =============================================================================


def create_inheritance():
    """Base class with two subclasses."""
    #      Base
    #     /    \
    #   User  Admin
    nodes = [{"id": "Base"}, {"id": "User"}, {"id": "Admin"}]
    edges = [
        {"id": "e1", "source": "User", "target": "Base", "type": "inheritance"},
        {"id": "e2", "source": "Admin", "target": "Base", "type": "inheritance"},
    ]
    return nodes, edges


def create_mixed_diagram():
    """Interfaces, inheritance and associations across packages."""
    nodes = [
        {"id": "Repository", "package": "data", "type": "interface"},
        {"id": "SqlRepository", "package": "data"},
        {"id": "Service", "package": "core"},
        {"id": "UserService", "package": "core"},
        {"id": "Controller", "package": "web"},
        {"id": "Logger"},
    ]
    edges = [
        {"source": "SqlRepository", "target": "Repository", "type": "realization"},
        {"source": "UserService", "target": "Service", "type": "inheritance"},
        {"source": "UserService", "target": "Repository", "type": "association"},
        {"source": "Controller", "target": "UserService", "type": "dependency"},
        {"source": "Controller", "target": "Logger", "type": "association"},
        {"source": "Logger", "target": "Controller", "type": "dependency"},
    ]
    return nodes, edges


def run_layout(nodes, edges, **kwargs):
    return HierarchicalLayout(nodes=nodes, edges=edges, **kwargs).run()


# =============================================================================
# Hierarchical Layout Tests
# =============================================================================


class TestHierarchicalLayout:
    """Tests for the layered layout."""

    def test_inheritance_top_to_bottom(self):
        """Parent sits one rank above its children, centred over them."""
        nodes, edges = create_inheritance()
        layout = run_layout(nodes, edges)
        pos = layout.positions

        assert pos["Base"] == Position(160.0, 20.0)
        assert pos["User"] == Position(20.0, 260.0)
        assert pos["Admin"] == Position(300.0, 260.0)
        assert layout.ranks == {"Base": 0, "User": 1, "Admin": 1}

    def test_rank_and_sibling_separation(self):
        """Gaps between ranks and between siblings match the options."""
        nodes, edges = create_inheritance()
        pos = run_layout(nodes, edges).positions

        assert pos["User"].y - (pos["Base"].y + 120) >= 120
        assert abs(pos["User"].x - pos["Admin"].x) == pytest.approx(280.0)

    def test_bottom_to_top(self):
        """BT places the parent below its children."""
        nodes, edges = create_inheritance()
        pos = run_layout(nodes, edges, direction="BT").positions
        assert pos["Base"].y > pos["User"].y
        assert pos["Base"].y - (pos["User"].y + 120) == pytest.approx(120.0)
        assert pos["User"].y == pytest.approx(20.0)

    def test_left_to_right(self):
        """LR advances ranks along x; box width is the rank extent."""
        nodes, edges = create_inheritance()
        pos = run_layout(nodes, edges, direction=Direction.LR).positions
        assert pos["Base"] == Position(20.0, 120.0)
        assert pos["User"] == Position(340.0, 20.0)
        assert pos["Admin"] == Position(340.0, 220.0)

    def test_right_to_left(self):
        """RL places the parent right of its children."""
        nodes, edges = create_inheritance()
        pos = run_layout(nodes, edges, direction="RL").positions
        assert pos["Base"].x - (pos["User"].x + 200) == pytest.approx(120.0)
        assert pos["User"].x == pytest.approx(20.0)

    def test_realization_places_interface_above(self):
        """Realization is ordering, like inheritance."""
        nodes = [{"id": "Impl"}, {"id": "Iface"}]
        edges = [{"source": "Impl", "target": "Iface", "type": "realization"}]
        layout = run_layout(nodes, edges)
        assert layout.ranks == {"Iface": 0, "Impl": 1}

    def test_generic_edges_keep_direction(self):
        """Associations rank their source above their target."""
        nodes = [{"id": "Order"}, {"id": "Customer"}]
        edges = [{"source": "Order", "target": "Customer", "type": "association"}]
        assert run_layout(nodes, edges).ranks == {"Order": 0, "Customer": 1}

    def test_generic_edge_contradicting_hierarchy_dropped(self):
        """A generic edge never overrides the inheritance order."""
        nodes = [{"id": "Base"}, {"id": "Child"}]
        edges = [
            {"source": "Child", "target": "Base", "type": "inheritance"},
            {"source": "Base", "target": "Child", "type": "dependency"},
            {"source": "Child", "target": "Base", "type": "association"},
        ]
        layout = run_layout(nodes, edges)
        assert layout.ranks == {"Base": 0, "Child": 1}
        assert len(layout.ranking_edges) == 2

    def test_two_cycle(self):
        """A 2-cycle is broken and both nodes get positions."""
        nodes = [{"id": "A"}, {"id": "B"}]
        edges = [{"source": "A", "target": "B"}, {"source": "B", "target": "A"}]
        layout = run_layout(nodes, edges)
        assert set(layout.positions) == {"A", "B"}
        assert layout.ranks == {"A": 0, "B": 1}
        assert [(e.source, e.target) for e in layout.ranking_edges] == [("A", "B")]

    def test_inheritance_cycle(self):
        """Cyclic inheritance does not raise."""
        nodes = [{"id": "A"}, {"id": "B"}, {"id": "C"}]
        edges = [
            {"source": "A", "target": "B", "type": "inheritance"},
            {"source": "B", "target": "C", "type": "inheritance"},
            {"source": "C", "target": "A", "type": "inheritance"},
        ]
        layout = run_layout(nodes, edges)
        assert len(set(layout.ranks.values())) == 3

    def test_dangling_edges_ignored(self):
        """Edges to unknown nodes are dropped."""
        nodes = [{"id": "A"}]
        edges = [{"source": "A", "target": "ghost", "type": "inheritance"}]
        layout = run_layout(nodes, edges)
        assert layout.positions == {"A": Position(20.0, 20.0)}
        assert layout.ranking_edges == []

    def test_empty_graph(self):
        """No nodes gives no positions."""
        layout = run_layout([], [])
        assert layout.positions == {}
        assert layout.layers == []

    def test_isolated_nodes_share_rank_zero(self):
        """Nodes without edges line up in the first rank."""
        nodes = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        layout = run_layout(nodes, [])
        assert layout.layers == [["a", "b", "c"]]
        xs = [layout.positions[n].x for n in ("a", "b", "c")]
        assert xs == [20.0, 300.0, 580.0]

    def test_groups_start_adjacent(self):
        """Nodes of one package are kept together in a rank."""
        nodes = [
            {"id": "a", "package": "p1"},
            {"id": "b", "package": "p2"},
            {"id": "c", "package": "p1"},
        ]
        layout = run_layout(nodes, [])
        assert layout.layers == [["a", "c", "b"]]

    def test_per_node_sizes(self):
        """Rank pitch uses the tallest box of a rank."""
        nodes = [
            {"id": "Base", "width": 300, "height": 300},
            {"id": "Child", "size": (100, 60)},
        ]
        edges = [{"source": "Child", "target": "Base", "type": "inheritance"}]
        layout = run_layout(nodes, edges)
        pos = layout.positions
        assert layout.sizes == {"Base": (300.0, 300.0), "Child": (100.0, 60.0)}
        assert pos["Child"].y - (pos["Base"].y + 300) == pytest.approx(120.0)
        # Centres aligned on the cross axis
        assert pos["Base"].x + 150 == pytest.approx(pos["Child"].x + 50)

    def test_no_overlaps_in_mixed_diagram(self):
        """Boxes never overlap and all nodes are placed."""
        nodes, edges = create_mixed_diagram()
        layout = run_layout(nodes, edges)
        assert len(layout.positions) == len(nodes)
        assert find_overlaps(layout.positions, layout.sizes) == []
        assert min(p.x for p in layout.positions.values()) == pytest.approx(20.0)
        assert min(p.y for p in layout.positions.values()) == pytest.approx(20.0)

    def test_ranking_edges_point_down(self):
        """Every ranking edge goes from a lower rank to a higher one."""
        nodes, edges = create_mixed_diagram()
        layout = run_layout(nodes, edges)
        for edge in layout.ranking_edges:
            assert layout.ranks[edge.source] < layout.ranks[edge.target]

    def test_deterministic(self):
        """Identical input gives identical output."""
        nodes, edges = create_mixed_diagram()
        assert run_layout(nodes, edges).positions == run_layout(nodes, edges).positions

    def test_events(self):
        """Start and end callbacks fire once each."""
        seen = []
        nodes, edges = create_inheritance()
        HierarchicalLayout(
            nodes=nodes,
            edges=edges,
            on_start=lambda e: seen.append(("start", e["node_count"])),
            on_end=lambda e: seen.append(("end", e["node_count"])),
        ).run()
        assert seen == [("start", 3), ("end", 3)]

    def test_from_options(self):
        """Options carry direction and spacing."""
        nodes, edges = create_inheritance()
        options = LayoutOptions(direction="LR", node_separation=10, rank_separation=30)
        layout = HierarchicalLayout.from_options(options, nodes=nodes, edges=edges)
        assert layout.direction is Direction.LR
        assert layout.node_separation == 10
        assert layout.rank_separation == 30

    def test_invalid_direction(self):
        """Unknown directions raise InvalidOptionsError."""
        with pytest.raises(InvalidOptionsError):
            HierarchicalLayout(direction="diagonal")

    def test_negative_separation(self):
        """Negative spacing raises InvalidOptionsError."""
        with pytest.raises(InvalidOptionsError):
            HierarchicalLayout(node_separation=-1)
        layout = HierarchicalLayout()
        with pytest.raises(InvalidOptionsError):
            layout.rank_separation = -5

    def test_invalid_crossing_iterations(self):
        """Sweep counts are validated, not clamped."""
        with pytest.raises(InvalidOptionsError, match="crossing_iterations"):
            HierarchicalLayout(crossing_iterations=0)
        layout = HierarchicalLayout(crossing_iterations=3)
        assert layout.crossing_iterations == 3
        with pytest.raises(InvalidOptionsError):
            layout.crossing_iterations = 2.5
        assert layout.crossing_iterations == 3

    def test_accepts_graph_node_objects(self):
        """GraphNode instances are used as-is."""
        nodes = [GraphNode("a", width=50, height=50), GraphNode("b")]
        layout = run_layout(nodes, [{"source": "a", "target": "b"}])
        assert layout.sizes["a"] == (50.0, 50.0)
        assert layout.sizes["b"] == (200.0, 120.0)


# =============================================================================
# Grid Layout Tests
# =============================================================================


class TestGridLayout:
    """Tests for the grid fallback."""

    def test_row_major_placement(self):
        """Nodes fill rows of ceil(sqrt(n)) columns."""
        nodes = [{"id": str(i)} for i in range(5)]
        layout = GridLayout(nodes=nodes).run()
        assert layout.columns == 3
        assert layout.spacing == 280.0
        assert layout.positions["0"] == Position(0.0, 0.0)
        assert layout.positions["2"] == Position(560.0, 0.0)
        assert layout.positions["3"] == Position(0.0, 280.0)

    def test_minimum_spacing(self):
        """Small boxes still get a 250 pitch."""
        nodes = [{"id": "a", "size": (20, 20)}, {"id": "b", "size": (20, 20)}]
        layout = GridLayout(nodes=nodes, node_separation=10).run()
        assert layout.spacing == 250.0
        assert layout.positions["b"] == Position(250.0, 0.0)

    def test_large_boxes_widen_pitch(self):
        """The largest box extent drives the pitch."""
        nodes = [{"id": "a", "width": 100, "height": 400}, {"id": "b"}]
        layout = GridLayout(nodes=nodes).run()
        assert layout.spacing == 480.0
        assert find_overlaps(layout.positions, layout.sizes) == []

    def test_empty(self):
        """Zero nodes is fine."""
        layout = GridLayout(nodes=[]).run()
        assert layout.positions == {}
        assert layout.columns == 0

    def test_from_options(self):
        """Default sizes come from the options."""
        options = LayoutOptions(node_width=400, node_height=100, node_separation=0)
        layout = GridLayout.from_options(options, nodes=[{"id": "a"}]).run()
        assert layout.sizes == {"a": (400.0, 100.0)}
        assert layout.spacing == 400.0
