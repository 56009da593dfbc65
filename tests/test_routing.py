"""Tests for orthogonal edge routing."""

import pytest

from diagram_layout import GraphEdge, Position, route_all_edges, route_edge

SIZE = (100.0, 50.0)


def assert_orthogonal(points):
    """Consecutive points share an x or a y coordinate."""
    for p, q in zip(points, points[1:]):
        assert p.x == pytest.approx(q.x) or p.y == pytest.approx(q.y)


class TestRouteEdge:
    """Tests for single edge routes."""

    def test_vertical_alignment_collapses_to_straight_line(self):
        """Boxes stacked on one x give a two-point vertical route."""
        points = route_edge(Position(0, 0), SIZE, Position(0, 200), SIZE)
        assert points == [Position(50.0, 50.0), Position(50.0, 200.0)]

    def test_horizontal_alignment(self):
        """Boxes side by side give a straight horizontal route."""
        points = route_edge(Position(0, 0), SIZE, Position(300, 0), SIZE)
        assert points[0] == Position(100.0, 25.0)
        assert points[-1] == Position(300.0, 25.0)
        assert all(p.y == pytest.approx(25.0) for p in points)

    def test_offset_boxes_get_four_points(self):
        """Diagonal neighbours get a horizontal-vertical-horizontal route."""
        points = route_edge(Position(0, 0), SIZE, Position(300, 300), SIZE)
        assert len(points) == 4
        start, bend1, bend2, end = points
        assert bend1.y == pytest.approx(start.y)
        assert bend1.x == pytest.approx(bend2.x)
        assert bend2.y == pytest.approx(end.y)
        assert bend1.x == pytest.approx((start.x + end.x) / 2)

    def test_anchors_on_box_boundaries(self):
        """Endpoints lie on the source and target boundaries."""
        points = route_edge(Position(0, 0), SIZE, Position(40, 300), SIZE)
        start, end = points[0], points[-1]
        assert start.y == pytest.approx(50.0)
        assert end.y == pytest.approx(300.0)

    def test_coincident_centres(self):
        """Coincident boxes give a single point."""
        points = route_edge(Position(10, 10), SIZE, Position(10, 10), SIZE)
        assert points == [Position(60.0, 35.0)]

    def test_offset_shifts_vertical_run(self):
        """A non-zero offset moves the vertical segment."""
        plain = route_edge(Position(0, 0), SIZE, Position(300, 300), SIZE)
        shifted = route_edge(Position(0, 0), SIZE, Position(300, 300), SIZE, offset=10)
        assert shifted[1].x == pytest.approx(plain[1].x + 10)
        assert shifted[0] == plain[0]
        assert shifted[-1] == plain[-1]


class TestRouteAllEdges:
    """Tests for routing every edge of a layout."""

    def setup_method(self):
        self.positions = {"a": Position(0, 0), "b": Position(300, 300)}
        self.sizes = {"a": SIZE, "b": SIZE}

    def test_routes_keyed_by_edge_id(self):
        """Routes are returned per edge id."""
        routes = route_all_edges([GraphEdge("e1", "a", "b")], self.positions, self.sizes)
        assert list(routes) == ["e1"]
        assert_orthogonal(routes["e1"])

    def test_unplaced_endpoint_skipped(self):
        """Edges to nodes without a position are omitted."""
        edges = [GraphEdge("e1", "a", "b"), GraphEdge("e2", "a", "ghost")]
        routes = route_all_edges(edges, self.positions, self.sizes)
        assert set(routes) == {"e1"}

    def test_self_loop_single_point(self):
        """A self-loop collapses to the box centre."""
        routes = route_all_edges([GraphEdge("loop", "a", "a")], self.positions, self.sizes)
        assert routes["loop"] == [Position(50.0, 25.0)]

    def test_parallel_edges_fanned_out(self):
        """Parallel edges get distinct vertical runs spaced by edge_separation."""
        edges = [
            GraphEdge("e1", "a", "b"),
            GraphEdge("e2", "a", "b", kind="dependency"),
            GraphEdge("e3", "b", "a"),
        ]
        routes = route_all_edges(edges, self.positions, self.sizes, edge_separation=10)
        runs = sorted(routes[e][1].x for e in ("e1", "e2"))
        assert runs[1] - runs[0] == pytest.approx(10.0)
        assert len({routes[e][1].x for e in ("e1", "e2", "e3")}) == 3

    def test_single_edge_not_offset(self):
        """An edge without siblings runs through the midpoint."""
        routes = route_all_edges([GraphEdge("e1", "a", "b")], self.positions, self.sizes)
        start, bend, _, end = routes["e1"]
        assert bend.x == pytest.approx((start.x + end.x) / 2)
