"""
Graph preprocessing utilities.

This module provides reusable functions for preparing graphs before layout:
- Cycle detection and cycle breaking
- Acyclic extension of an edge set
- Topological sorting
- Layer assignment
- Crossing minimization and crossing counting

Nodes are identified by string ids. Edges may be GraphEdge objects, dicts
with "source"/"target" keys, or any object with source/target attributes.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from .types import EdgeLike

E = TypeVar("E")


def _default_get_source(edge: Any) -> str:
    """Default function to extract the source id from an edge."""
    return edge["source"] if isinstance(edge, dict) else edge.source


def _default_get_target(edge: Any) -> str:
    """Default function to extract the target id from an edge."""
    return edge["target"] if isinstance(edge, dict) else edge.target


def _default_get_weight(edge: Any) -> float:
    """Default function to extract the layout weight from an edge."""
    if isinstance(edge, dict):
        weight = edge.get("weight")
    else:
        weight = getattr(edge, "layout_weight", None)
        if weight is None:
            weight = getattr(edge, "weight", None)
    return 1.0 if weight is None else float(weight)


# =============================================================================
# Cycle Detection and Removal
# =============================================================================


def detect_cycle(
    node_ids: Sequence[str],
    edges: Sequence[EdgeLike],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> Optional[list[str]]:
    """
    Detect if a directed graph contains a cycle.

    Uses DFS-based cycle detection. Returns the first cycle found,
    or None if the graph is acyclic.

    Args:
        node_ids: Node ids
        edges: List of directed edges
        get_source: Function to extract source id from edge (default: edge['source'])
        get_target: Function to extract target id from edge (default: edge['target'])

    Returns:
        List of node ids forming a cycle (first id repeated at the end),
        or None if acyclic.

    Example:
        >>> edges = [{'source': 'a', 'target': 'b'}, {'source': 'b', 'target': 'a'}]
        >>> detect_cycle(['a', 'b'], edges)
        ['a', 'b', 'a']
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    known = set(node_ids)
    adj: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in known and tgt in known:
            adj[src].append(tgt)

    # DFS states: 0=unvisited, 1=visiting, 2=visited
    state = dict.fromkeys(adj, 0)

    for start in adj:
        if state[start] != 0:
            continue
        path = [start]
        state[start] = 1
        stack = [(start, iter(adj[start]))]
        while stack:
            node, neighbors = stack[-1]
            advanced = False
            for neighbor in neighbors:
                if state[neighbor] == 1:
                    # Found cycle - extract it
                    cycle_start = path.index(neighbor)
                    return path[cycle_start:] + [neighbor]
                if state[neighbor] == 0:
                    state[neighbor] = 1
                    path.append(neighbor)
                    stack.append((neighbor, iter(adj[neighbor])))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                path.pop()
                state[node] = 2

    return None


def has_cycle(
    node_ids: Sequence[str],
    edges: Sequence[EdgeLike],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> bool:
    """
    Check if a directed graph contains any cycle.

    Args:
        node_ids: Node ids
        edges: List of directed edges
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        True if graph contains a cycle, False otherwise.
    """
    return detect_cycle(node_ids, edges, get_source, get_target) is not None


def break_cycles(
    node_ids: Sequence[str],
    edges: Sequence[E],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> list[E]:
    """
    Remove back edges so the remaining edge set is acyclic.

    Runs a depth-first traversal from every unvisited node (in ``node_ids``
    order) while tracking the recursion stack. An edge whose target is on
    the stack closes a cycle and is excluded; only that edge is dropped, so
    parallel edges between the same pair are judged individually.
    Self-loops are always excluded, as are edges with an unknown endpoint.

    Never raises.

    Args:
        node_ids: Node ids
        edges: List of directed edges
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        The kept edges, in input order.

    Example:
        >>> edges = [{'source': 'a', 'target': 'b'}, {'source': 'b', 'target': 'a'}]
        >>> break_cycles(['a', 'b'], edges)
        [{'source': 'a', 'target': 'b'}]
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    known = set(node_ids)
    # Adjacency with edge positions: node -> [(neighbor, edge_index)]
    adj: dict[str, list[tuple[str, int]]] = {node_id: [] for node_id in node_ids}
    candidates: list[int] = []
    for i, edge in enumerate(edges):
        src = get_source(edge)
        tgt = get_target(edge)
        if src not in known or tgt not in known or src == tgt:
            continue
        adj[src].append((tgt, i))
        candidates.append(i)

    state = dict.fromkeys(adj, 0)  # 0=unvisited, 1=on stack, 2=done
    back_edges: set[int] = set()

    for start in adj:
        if state[start] != 0:
            continue
        state[start] = 1
        stack = [(start, iter(adj[start]))]
        while stack:
            node, neighbors = stack[-1]
            advanced = False
            for neighbor, edge_idx in neighbors:
                if state[neighbor] == 1:
                    back_edges.add(edge_idx)
                elif state[neighbor] == 0:
                    state[neighbor] = 1
                    stack.append((neighbor, iter(adj[neighbor])))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                state[node] = 2

    return [edges[i] for i in candidates if i not in back_edges]


def extend_acyclic(
    node_ids: Sequence[str],
    base_edges: Sequence[Any],
    extra_edges: Iterable[E],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> list[E]:
    """
    Greedily add edges to an acyclic edge set without closing a cycle.

    Each candidate from ``extra_edges`` is accepted, in iteration order,
    only when its target cannot already reach its source. ``base_edges``
    must be acyclic.

    Args:
        node_ids: Node ids
        base_edges: Acyclic edges that are always kept
        extra_edges: Candidate edges, highest priority first
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        The accepted candidates, in iteration order.
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    known = set(node_ids)
    adj: dict[str, set[str]] = {node_id: set() for node_id in node_ids}
    for edge in base_edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in known and tgt in known:
            adj[src].add(tgt)

    def reaches(start: str, goal: str) -> bool:
        seen = {start}
        queue: deque[str] = deque([start])
        while queue:
            node = queue.popleft()
            if node == goal:
                return True
            for neighbor in adj[node]:
                if neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return False

    accepted: list[E] = []
    for edge in extra_edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src not in known or tgt not in known or src == tgt:
            continue
        if reaches(tgt, src):
            continue
        adj[src].add(tgt)
        accepted.append(edge)

    return accepted


# =============================================================================
# Topological Sort
# =============================================================================


def topological_sort(
    node_ids: Sequence[str],
    edges: Sequence[EdgeLike],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> Optional[list[str]]:
    """
    Compute a topological ordering of nodes in a directed acyclic graph.

    Uses Kahn's algorithm (BFS-based). Ties keep ``node_ids`` order.

    Args:
        node_ids: Node ids
        edges: List of directed edges
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        List of node ids in topological order, or None if graph has cycles.

    Example:
        >>> edges = [{'source': 'a', 'target': 'b'}, {'source': 'b', 'target': 'c'}]
        >>> topological_sort(['c', 'b', 'a'], edges)
        ['a', 'b', 'c']
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    adj: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    in_degree = dict.fromkeys(adj, 0)

    for edge in edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in adj and tgt in adj:
            adj[src].append(tgt)
            in_degree[tgt] += 1

    # Start with nodes that have no incoming edges
    queue: deque[str] = deque(node_id for node_id in adj if in_degree[node_id] == 0)
    result: list[str] = []

    while queue:
        node = queue.popleft()
        result.append(node)

        for neighbor in adj[node]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    # If not all nodes processed, graph has a cycle
    if len(result) != len(adj):
        return None

    return result


# =============================================================================
# Layer Assignment
# =============================================================================


def assign_layers_longest_path(
    node_ids: Sequence[str],
    edges: Sequence[EdgeLike],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> list[list[str]]:
    """
    Assign nodes to layers using the longest path algorithm.

    Every node's layer is the length of the longest path reaching it from
    a source (a node with no incoming edges), so each edge points from a
    lower layer to a strictly higher one. Isolated nodes land in layer 0.

    Args:
        node_ids: Node ids
        edges: List of directed edges, which must be acyclic
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        List of layers, where each layer is a list of node ids in
        ``node_ids`` order. Layer 0 contains source nodes.

    Raises:
        ValueError: If the edges contain a cycle.

    Example:
        >>> edges = [{'source': 'a', 'target': 'b'}, {'source': 'a', 'target': 'c'},
        ...          {'source': 'b', 'target': 'd'}]
        >>> assign_layers_longest_path(['a', 'b', 'c', 'd'], edges)
        [['a'], ['b', 'c'], ['d']]
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    if not node_ids:
        return []

    order = topological_sort(node_ids, edges, get_source, get_target)
    if order is None:
        raise ValueError("Cannot assign layers: edges contain a cycle")

    outgoing: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    for edge in edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in outgoing and tgt in outgoing:
            outgoing[src].append(tgt)

    node_layer = dict.fromkeys(node_ids, 0)
    for node in order:
        for child in outgoing[node]:
            if node_layer[node] + 1 > node_layer[child]:
                node_layer[child] = node_layer[node] + 1

    # Group by layer
    max_layer = max(node_layer.values())
    layers: list[list[str]] = [[] for _ in range(max_layer + 1)]
    for node_id in node_ids:
        layers[node_layer[node_id]].append(node_id)

    return layers


# =============================================================================
# Crossing Minimization
# =============================================================================


def minimize_crossings_barycenter(
    layers: list[list[str]],
    edges: Sequence[EdgeLike],
    iterations: int = 24,
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
    get_weight: Optional[Callable[[Any], float]] = None,
) -> list[list[str]]:
    """
    Reduce edge crossings between layers using the weighted barycenter heuristic.

    Repeatedly sweeps through layers, reordering nodes based on the
    weighted average position of their neighbors. Heavier edges pull
    harder. The ordering with the fewest crossings seen is returned.

    Args:
        layers: List of layers from assign_layers_longest_path()
        edges: List of directed edges
        iterations: Number of sweep iterations
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge
        get_weight: Function to extract layout weight from edge

    Returns:
        Reordered layers.

    Example:
        >>> layers = [['a'], ['b', 'c'], ['d']]
        >>> edges = [{'source': 'a', 'target': 'c'}, {'source': 'a', 'target': 'b'}]
        >>> new_layers = minimize_crossings_barycenter(layers, edges)
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target
    if get_weight is None:
        get_weight = _default_get_weight

    if len(layers) < 2:
        return [list(layer) for layer in layers]

    node_layer: dict[str, int] = {}
    for layer_idx, layer in enumerate(layers):
        for node in layer:
            node_layer[node] = layer_idx

    # Weighted adjacency: node -> [(neighbor, weight)]
    outgoing: dict[str, list[tuple[str, float]]] = {node: [] for node in node_layer}
    incoming: dict[str, list[tuple[str, float]]] = {node: [] for node in node_layer}

    for edge in edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in node_layer and tgt in node_layer:
            weight = get_weight(edge)
            outgoing[src].append((tgt, weight))
            incoming[tgt].append((src, weight))

    # Make mutable copy
    result = [list(layer) for layer in layers]

    # Track positions
    position: dict[str, int] = {}
    for layer in result:
        for pos, node in enumerate(layer):
            position[node] = pos

    def order_layer(layer_idx: int, adj: dict[str, list[tuple[str, float]]]) -> None:
        layer = result[layer_idx]
        if not layer:
            return

        barycenters: list[tuple[float, str]] = []
        for node in layer:
            neighbors = adj[node]
            total = sum(weight for _, weight in neighbors)
            if neighbors and total > 0:
                avg = sum(position[n] * weight for n, weight in neighbors) / total
            else:
                avg = position[node]
            barycenters.append((avg, node))

        barycenters.sort(key=lambda x: x[0])
        result[layer_idx] = [node for _, node in barycenters]

        for pos, (_, node) in enumerate(barycenters):
            position[node] = pos

    best = [list(layer) for layer in result]
    best_crossings = count_crossings(best, edges, get_source, get_target)

    # Iterate with alternating sweeps
    for i in range(iterations):
        if best_crossings == 0:
            break
        if i % 2 == 0:
            # Sweep down
            for layer_idx in range(1, len(result)):
                order_layer(layer_idx, incoming)
        else:
            # Sweep up
            for layer_idx in range(len(result) - 2, -1, -1):
                order_layer(layer_idx, outgoing)

        crossings = count_crossings(result, edges, get_source, get_target)
        if crossings < best_crossings:
            best = [list(layer) for layer in result]
            best_crossings = crossings

    return best


# =============================================================================
# Graph Metrics
# =============================================================================


def count_crossings(
    layers: list[list[str]],
    edges: Sequence[EdgeLike],
    get_source: Optional[Callable[[Any], str]] = None,
    get_target: Optional[Callable[[Any], str]] = None,
) -> int:
    """
    Count the number of edge crossings in a layered layout.

    Edges are grouped by the pair of layers they connect; two edges of a
    group cross when their endpoint orders disagree.

    Args:
        layers: List of layers, each containing node ids
        edges: List of directed edges
        get_source: Function to extract source id from edge
        get_target: Function to extract target id from edge

    Returns:
        Number of edge crossings.
    """
    if get_source is None:
        get_source = _default_get_source
    if get_target is None:
        get_target = _default_get_target

    # Build node position map
    node_layer: dict[str, int] = {}
    node_pos: dict[str, int] = {}
    for layer_idx, layer in enumerate(layers):
        for pos, node in enumerate(layer):
            node_layer[node] = layer_idx
            node_pos[node] = pos

    # Group edges by layer pairs
    layer_edges: dict[tuple[int, int], list[tuple[int, int]]] = {}
    for edge in edges:
        src = get_source(edge)
        tgt = get_target(edge)
        if src in node_layer and tgt in node_layer:
            l1, l2 = node_layer[src], node_layer[tgt]
            if l1 == l2:
                continue
            if l1 > l2:
                l1, l2 = l2, l1
                src, tgt = tgt, src
            layer_edges.setdefault((l1, l2), []).append((node_pos[src], node_pos[tgt]))

    # Count crossings for each layer pair
    total = 0
    for pair_edges in layer_edges.values():
        for i, (s1, t1) in enumerate(pair_edges):
            for s2, t2 in pair_edges[i + 1 :]:
                # Two edges cross if one is "above" on left and "below" on right
                if (s1 < s2 and t1 > t2) or (s1 > s2 and t1 < t2):
                    total += 1

    return total


__all__ = [
    "detect_cycle",
    "has_cycle",
    "break_cycles",
    "extend_acyclic",
    "topological_sort",
    "assign_layers_longest_path",
    "minimize_crossings_barycenter",
    "count_crossings",
]
