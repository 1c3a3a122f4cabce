#!/usr/bin/env python3
"""
Benchmark of the two linking strategies.

Compares, for forests of several sizes:
1. Two-pass: linearize fully, then walk the 'next' relation
2. Fused: walk while the 'next' relation is being built

Each case is timed after a warmup run and reported as the median.
"""

import gc
import statistics
import sys
import time
from pathlib import Path
from typing import Callable, Dict, List

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from arraytree import AdjacencyTree, LinkingStrategy, TreeOption
from arraytree.render import TreeRenderer, View
from arraytree.testing import make_forest

OPTIONS = TreeOption.NUMBER_NODES | TreeOption.COUNT_DESCENDANTS


class StrategyBenchmark:
    """Times iterating and rendering one forest with each strategy."""

    def __init__(self, records: List[dict], iterations: int = 5):
        self.records = records
        self.iterations = iterations
        self.view = View().add({"level": {"content": "{{title}}"}})

    def _median(self, func: Callable[[], object]) -> float:
        func()  # warmup
        times = []
        for _ in range(self.iterations):
            gc.collect()
            start = time.perf_counter()
            func()
            times.append(time.perf_counter() - start)
        return statistics.median(times)

    def iterate(self, strategy: LinkingStrategy) -> float:
        def run():
            for _ in AdjacencyTree(self.records, options=OPTIONS, strategy=strategy):
                pass
        return self._median(run)

    def render(self, strategy: LinkingStrategy) -> float:
        def run():
            tree = AdjacencyTree(self.records, options=OPTIONS, strategy=strategy)
            TreeRenderer(tree, self.view).render()
        return self._median(run)

    def run_all(self) -> Dict[str, float]:
        results = {}
        for strategy in LinkingStrategy:
            results[f"iterate/{strategy.value}"] = self.iterate(strategy)
            results[f"render/{strategy.value}"] = self.render(strategy)
        return results


def main():
    sizes = [int(arg) for arg in sys.argv[1:]] or [1_000, 10_000, 100_000]

    print("=" * 46)
    print("LINKING STRATEGY BENCHMARK")
    print("=" * 46)
    print(f"{'nodes':>10}  {'case':<20} {'median':>12}")
    print("-" * 46)
    for size in sizes:
        records = make_forest(size, roots=max(1, size // 1000), seed=42)
        for case, seconds in StrategyBenchmark(records).run_all().items():
            print(f"{size:>10,}  {case:<20} {seconds * 1000:>10.1f}ms")


if __name__ == "__main__":
    main()
