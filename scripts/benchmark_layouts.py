#!/usr/bin/env python3
"""
Benchmark diagram layouts on generated class hierarchies.

Usage:
    uv run python scripts/benchmark_layouts.py [--sizes N,...] [--algorithms ALGO,...]

Examples:
    uv run python scripts/benchmark_layouts.py
    uv run python scripts/benchmark_layouts.py --sizes 50,200,800
    uv run python scripts/benchmark_layouts.py --algorithms hierarchical,tiered --repeat 5
    uv run python scripts/benchmark_layouts.py --direction LR --output results.json
"""

from __future__ import annotations

import argparse
import json
import random
import time
import warnings
from typing import Any, Callable

from diagram_layout import (
    DiagramLayoutEngine,
    LayoutPerformanceWarning,
    TieredColumnLayout,
    find_overlaps,
)

RELATION_KINDS = ["association", "dependency", "composition", "aggregation"]


def generate_class_diagram(
    num_classes: int,
    seed: int = 42,
    packages: int = 4,
    extra_edge_ratio: float = 0.5,
) -> tuple[list[dict], list[dict]]:
    """
    Generate a class diagram: an inheritance forest plus random associations.

    Every class after the first few inherits from an earlier one; roughly
    ``extra_edge_ratio * num_classes`` generic relationships are sprinkled on
    top, some of them closing cycles.
    """
    rng = random.Random(seed)
    nodes = [
        {
            "id": f"C{i}",
            "package": f"pkg{i % packages}",
            "width": rng.choice([160, 200, 240]),
            "height": rng.choice([80, 120, 180]),
        }
        for i in range(num_classes)
    ]

    edges = []
    for i in range(1, num_classes):
        if rng.random() < 0.8:
            parent = rng.randrange(max(1, i // 2), i) if i > 1 else 0
            edges.append({"source": f"C{i}", "target": f"C{parent}", "type": "inheritance"})

    for _ in range(int(num_classes * extra_edge_ratio)):
        a, b = rng.randrange(num_classes), rng.randrange(num_classes)
        if a != b:
            edges.append({"source": f"C{a}", "target": f"C{b}", "type": rng.choice(RELATION_KINDS)})

    return nodes, edges


def _run_engine(algorithm: str, direction: str) -> Callable[[list, list], dict[str, Any]]:
    def run(nodes: list[dict], edges: list[dict]) -> dict[str, Any]:
        # Fresh engine so the cache never serves the result
        engine = DiagramLayoutEngine()
        result = engine.compute_layout(nodes, edges, {"algorithm": algorithm, "direction": direction})
        return {
            "algorithm_used": result.algorithm,
            "routed_edges": len(result.edges),
            "overlaps": len(find_overlaps(result.positions, result.sizes)),
            "bounds": [result.bounds.width, result.bounds.height],
        }

    return run


def _run_tiered(nodes: list[dict], edges: list[dict]) -> dict[str, Any]:
    layout = TieredColumnLayout(nodes=nodes, edges=edges).run()
    return {
        "columns": len(layout.columns),
        "fallback_column": layout.fallback_column,
    }


def benchmark(
    run: Callable[[list, list], dict[str, Any]],
    nodes: list[dict],
    edges: list[dict],
    repeat: int,
) -> dict[str, Any]:
    """
    Time one layout several times.

    Returns:
        Dict with best/mean timing and the details of the last run
    """
    timings = []
    details: dict[str, Any] = {}
    for _ in range(repeat):
        start = time.perf_counter()
        details = run(nodes, edges)
        timings.append(time.perf_counter() - start)

    return {
        "best_seconds": min(timings),
        "mean_seconds": sum(timings) / len(timings),
        "num_nodes": len(nodes),
        "num_edges": len(edges),
        **details,
    }


def run_benchmarks(
    sizes: list[int],
    algorithms: list[str] | None = None,
    repeat: int = 3,
    direction: str = "TB",
    seed: int = 42,
) -> list[dict]:
    """Run benchmarks on generated diagrams of the given sizes."""
    all_algorithms: dict[str, Callable[[list, list], dict[str, Any]]] = {
        "hierarchical": _run_engine("hierarchical", direction),
        "grid": _run_engine("grid", direction),
        "tiered": _run_tiered,
    }

    if algorithms:
        selected = {}
        for name in algorithms:
            if name in all_algorithms:
                selected[name] = all_algorithms[name]
            else:
                print(f"Warning: Unknown algorithm '{name}', skipping")
        all_algorithms = selected

    results = []

    print(f"\nBenchmarking {len(all_algorithms)} algorithms on {len(sizes)} diagram sizes")
    print(f"Repeat: {repeat}, Direction: {direction}, Seed: {seed}")
    print("=" * 80)

    for size in sizes:
        nodes, edges = generate_class_diagram(size, seed=seed)
        print(f"\n{size} classes, {len(edges)} relationships")
        print("-" * 60)

        for algo_name, run in all_algorithms.items():
            with warnings.catch_warnings():
                # Slow runs are what we are measuring
                warnings.simplefilter("ignore", LayoutPerformanceWarning)
                result = benchmark(run, nodes, edges, repeat)

            extra = ""
            if "overlaps" in result:
                extra = f"  overlaps={result['overlaps']}  used={result['algorithm_used']}"
            elif "columns" in result:
                extra = f"  columns={result['columns']}"
            print(f"  {algo_name:14s}: {result['best_seconds']:.4f}s{extra}")

            results.append({"size": size, "algorithm": algo_name, **result})

    # Summary
    print("\n" + "=" * 80)
    print("SUMMARY (best times in seconds)")
    print("=" * 80)

    algo_names = list(all_algorithms.keys())
    print(f"{'Classes':<12s}", end="")
    for algo in algo_names:
        print(f"{algo:>14s}", end="")
    print()
    print("-" * (12 + 14 * len(algo_names)))

    for size in sizes:
        print(f"{size:<12d}", end="")
        for algo in algo_names:
            matching = [r for r in results if r["size"] == size and r["algorithm"] == algo]
            if matching:
                print(f"{matching[0]['best_seconds']:>14.4f}", end="")
            else:
                print(f"{'--':>14s}", end="")
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark diagram layouts")
    parser.add_argument("--sizes", default="25,100,400", help="Comma-separated class counts")
    parser.add_argument(
        "--algorithms", help="Comma-separated algorithm names (hierarchical, grid, tiered)"
    )
    parser.add_argument("--repeat", type=int, default=3, help="Runs per measurement")
    parser.add_argument("--direction", default="TB", choices=["TB", "BT", "LR", "RL"])
    parser.add_argument("--seed", type=int, default=42, help="Random seed for generated diagrams")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    sizes = [int(s) for s in args.sizes.split(",")]
    algorithms = args.algorithms.split(",") if args.algorithms else None

    results = run_benchmarks(
        sizes=sizes,
        algorithms=algorithms,
        repeat=max(1, args.repeat),
        direction=args.direction,
        seed=args.seed,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
