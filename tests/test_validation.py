"""Tests for input validation."""

import pytest

from diagram_layout import (
    GraphEdge,
    InvalidEdgeError,
    InvalidOptionsError,
    InvalidViewportError,
    ValidationError,
)
from diagram_layout.hierarchical import HierarchicalLayout
from diagram_layout.validation import (
    find_duplicate_ids,
    validate_count,
    validate_edge_endpoints,
    validate_extent,
    validate_separation,
    validate_viewport,
)


class TestValidateViewport:
    """Tests for validate_viewport function."""

    def test_valid(self):
        """Zero and positive sizes pass."""
        assert validate_viewport(800, 0) == (800.0, 0.0)

    def test_negative_width(self):
        with pytest.raises(InvalidViewportError, match="width"):
            validate_viewport(-1, 600)

    def test_infinite_height(self):
        with pytest.raises(InvalidViewportError, match="height"):
            validate_viewport(800, float("inf"))


class TestValidateSpacing:
    """Tests for separation and extent checks."""

    def test_separation_allows_zero(self):
        assert validate_separation("gap", 0) == 0.0

    def test_separation_rejects_negative(self):
        with pytest.raises(InvalidOptionsError, match="gap"):
            validate_separation("gap", -0.5)

    def test_extent_rejects_zero(self):
        with pytest.raises(InvalidOptionsError):
            validate_extent("width", 0)

    def test_count_accepts_positive_integers(self):
        assert validate_count("sweeps", 4) == 4

    @pytest.mark.parametrize("value", [0, -2, 1.5, True])
    def test_count_rejects_non_positive_or_fractional(self, value):
        with pytest.raises(InvalidOptionsError, match="sweeps"):
            validate_count("sweeps", value)

    def test_errors_are_value_errors(self):
        """Callers can catch ValueError."""
        assert issubclass(InvalidOptionsError, ValidationError)
        assert issubclass(ValidationError, ValueError)


class TestValidateEdgeEndpoints:
    """Tests for validate_edge_endpoints function."""

    def test_valid_edges(self):
        """Known endpoints give no issues."""
        edges = [{"source": "a", "target": "b"}, GraphEdge("e", "b", "a")]
        assert validate_edge_endpoints(edges, {"a", "b"}) == []

    def test_unknown_target_strict(self):
        """Strict mode raises."""
        with pytest.raises(InvalidEdgeError, match="ghost"):
            validate_edge_endpoints([{"source": "a", "target": "ghost"}], {"a"})

    def test_non_strict_returns_issues(self):
        """Lenient mode lists issues."""
        issues = validate_edge_endpoints(
            [{"source": None, "target": "a"}, {"source": "a", "target": "ghost"}],
            {"a"},
            strict=False,
        )
        assert [idx for idx, _ in issues] == [0, 1]

    def test_layout_validate(self):
        """Layouts can opt in to fail-fast checks."""
        layout = HierarchicalLayout(
            nodes=[{"id": "a"}],
            edges=[{"source": "a", "target": "ghost"}],
        )
        with pytest.raises(InvalidEdgeError):
            layout.validate()


class TestFindDuplicateIds:
    """Tests for duplicate detection."""

    def test_reports_each_duplicate_once(self):
        assert find_duplicate_ids(["a", "b", "a", "a", "b", "c"]) == ["a", "b"]

    def test_no_duplicates(self):
        assert find_duplicate_ids(["a", "b"]) == []
