"""
Bounded cache of layout results.

Keys are deterministic strings built from the node set, the edge set and
the options. Eviction is by insertion order: hits do not refresh an entry.
The cache is not thread-safe; its owner serializes access.
"""

from __future__ import annotations

import json
from typing import Callable, Optional, Sequence

from .types import GraphEdge, GraphNode, LayoutOptions, LayoutResult
from .validation import InvalidOptionsError

DEFAULT_MAX_ENTRIES = 10


def _node_descriptor(node: GraphNode) -> str:
    return json.dumps([node.id, node.width, node.height, node.group, node.kind])


def _edge_descriptor(edge: GraphEdge) -> str:
    return json.dumps([edge.id, edge.source, edge.target, edge.kind.value])


class LayoutCache:
    """
    Insertion-ordered cache of LayoutResult objects.

    Example:
        cache = LayoutCache(max_entries=10)
        key = cache.make_key(nodes, edges, options)
        result = cache.get_or_compute(key, lambda: compute(nodes, edges))
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if int(max_entries) < 1:
            raise InvalidOptionsError(f"max_entries must be at least 1, got {max_entries!r}")
        self._max_entries = int(max_entries)
        self._entries: dict[str, LayoutResult] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @staticmethod
    def make_key(
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        options: LayoutOptions,
    ) -> str:
        """
        Build the cache key for a layout request.

        Node and edge descriptors are sorted, so input order does not matter.
        Any change to a node's size or tags, an edge's id, endpoints or kind,
        or any option yields a different key.
        """
        node_part = sorted(_node_descriptor(n) for n in nodes)
        edge_part = sorted(_edge_descriptor(e) for e in edges)
        return json.dumps([node_part, edge_part, options.to_dict()], sort_keys=True)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def evictions(self) -> int:
        return self._evictions

    def get(self, key: str) -> Optional[LayoutResult]:
        """Return the stored result, or None on a miss."""
        result = self._entries.get(key)
        if result is None:
            self._misses += 1
        else:
            self._hits += 1
        return result

    def put(self, key: str, result: LayoutResult) -> None:
        """Store a result, evicting the oldest entries beyond capacity."""
        self._entries[key] = result
        while len(self._entries) > self._max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            self._evictions += 1

    def get_or_compute(self, key: str, compute: Callable[[], LayoutResult]) -> LayoutResult:
        """Return the cached result for ``key``, computing and storing it on a miss."""
        result = self.get(key)
        if result is None:
            result = compute()
            self.put(key, result)
        return result

    def clear(self) -> None:
        """Drop every entry. Counters are kept."""
        self._entries.clear()

    def keys(self) -> list[str]:
        """Keys from oldest to newest."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["LayoutCache", "DEFAULT_MAX_ENTRIES"]
