"""Tests for the layout result cache."""

import pytest

from diagram_layout import (
    Bounds,
    GraphEdge,
    GraphNode,
    InvalidOptionsError,
    LayoutCache,
    LayoutOptions,
    LayoutResult,
)


def make_result(tag=0.0):
    return LayoutResult(positions={}, edges={}, bounds=Bounds.empty(), computation_time=tag)


def create_graph():
    nodes = [GraphNode("A"), GraphNode("B", width=150, group="pkg")]
    edges = [GraphEdge("e1", "A", "B", kind="association")]
    return nodes, edges


class TestMakeKey:
    """Tests for cache key construction."""

    def test_order_independent(self):
        """Input order does not affect the key."""
        nodes, edges = create_graph()
        options = LayoutOptions()
        assert LayoutCache.make_key(nodes, edges, options) == LayoutCache.make_key(
            list(reversed(nodes)), edges, options
        )

    def test_options_change_key(self):
        """Different options give a different key."""
        nodes, edges = create_graph()
        assert LayoutCache.make_key(nodes, edges, LayoutOptions()) != LayoutCache.make_key(
            nodes, edges, LayoutOptions(direction="LR")
        )

    def test_node_size_changes_key(self):
        """Resizing a node gives a different key."""
        nodes, edges = create_graph()
        resized = [nodes[0], GraphNode("B", width=151, group="pkg")]
        options = LayoutOptions()
        assert LayoutCache.make_key(nodes, edges, options) != LayoutCache.make_key(
            resized, edges, options
        )

    def test_edge_kind_changes_key(self):
        """Changing a relationship kind gives a different key."""
        nodes, edges = create_graph()
        retyped = [GraphEdge("e1", "A", "B", kind="inheritance")]
        options = LayoutOptions()
        assert LayoutCache.make_key(nodes, edges, options) != LayoutCache.make_key(
            nodes, retyped, options
        )

    def test_hyphenated_ids_keep_keys_apart(self):
        """Endpoints are not merged with their separators."""
        nodes = [GraphNode("a-b"), GraphNode("c"), GraphNode("a"), GraphNode("b-c")]
        first = [GraphEdge.coerce({"source": "a-b", "target": "c", "type": "inheritance"})]
        second = [GraphEdge.coerce({"source": "a", "target": "b-c", "type": "inheritance"})]
        assert first[0].id == second[0].id
        options = LayoutOptions()
        assert LayoutCache.make_key(nodes, first, options) != LayoutCache.make_key(
            nodes, second, options
        )


class TestLayoutCache:
    """Tests for storage and eviction."""

    def test_get_miss_and_hit(self):
        """Stored results are returned unchanged."""
        cache = LayoutCache()
        result = make_result()
        assert cache.get("k") is None
        cache.put("k", result)
        assert cache.get("k") is result
        assert cache.hits == 1
        assert cache.misses == 1

    def test_evicts_oldest_inserted(self):
        """The 11th insert evicts the first one."""
        cache = LayoutCache(max_entries=10)
        for i in range(11):
            cache.put(f"k{i}", make_result(i))
        assert len(cache) == 10
        assert "k0" not in cache
        assert cache.keys()[0] == "k1"
        assert cache.evictions == 1

    def test_hit_does_not_refresh(self):
        """Reading an entry does not protect it from eviction."""
        cache = LayoutCache(max_entries=2)
        cache.put("a", make_result())
        cache.put("b", make_result())
        cache.get("a")
        cache.put("c", make_result())
        assert cache.keys() == ["b", "c"]

    def test_get_or_compute(self):
        """The factory runs only on a miss."""
        cache = LayoutCache()
        calls = []

        def compute():
            calls.append(1)
            return make_result()

        first = cache.get_or_compute("k", compute)
        second = cache.get_or_compute("k", compute)
        assert first is second
        assert len(calls) == 1

    def test_clear(self):
        """Clearing empties the cache."""
        cache = LayoutCache()
        cache.put("k", make_result())
        cache.clear()
        assert len(cache) == 0
        assert cache.get("k") is None

    def test_invalid_capacity(self):
        """Capacity must be positive."""
        with pytest.raises(InvalidOptionsError):
            LayoutCache(max_entries=0)
