# route_sim/eval/harness.py
import time
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from route_sim.app.protocols import ProgressFn, RouteFn
from route_sim.domain.graph import GraphView, bfs_hops
from route_sim.domain.types import PathRequest


@dataclass
class EvalStats:
    samples: int = 0
    arrived: int = 0
    stretch_sum: float = 0.0  # arrived samples only
    duration: float = 0.0  # seconds


class EvaluationHarness:
    """
    Samples random (source, target) pairs, routes them and compares each
    arrived path's hop count with the BFS shortest path. Non-arrived samples
    count toward the arrived fraction only, never toward stretch.
    """

    def __init__(
        self,
        rng: np.random.Generator,
        *,
        progress: ProgressFn | None = None,
        progress_every: int = 100,
    ):
        self.rng = rng
        self.progress = progress
        self.progress_every = max(1, progress_every)
        self.stats = EvalStats()

    def clear(self) -> None:
        self.stats = EvalStats()

    def arrived_fraction(self) -> float:
        s = self.stats
        return s.arrived / s.samples if s.samples else 0.0

    def mean_stretch(self) -> float:
        s = self.stats
        return s.stretch_sum / s.arrived if s.arrived else 0.0

    def summary(self) -> dict:
        return {
            "samples": self.stats.samples,
            "arrived_fraction": self.arrived_fraction(),
            "mean_stretch": self.mean_stretch(),
            "duration": self.stats.duration,
        }

    def run_samples(
        self,
        view: GraphView,
        route_fn: RouteFn,
        sample_count: int,
        *,
        should_abort: Callable[[], bool] | None = None,
    ) -> EvalStats:
        t0 = time.perf_counter()
        n = view.node_count
        total = sample_count if n >= 2 else 0
        truth: dict[int, dict[int, int]] = {}  # per-run BFS cache by source
        for k in range(total):
            if should_abort is not None and should_abort():
                break
            s = int(self.rng.integers(n))
            t = int(self.rng.integers(n - 1))
            t += t >= s
            source, target = view.node_at(s), view.node_at(t)

            result = route_fn(PathRequest(source, target))
            self.stats.samples += 1
            if result.arrived:
                if source not in truth:
                    truth[source] = bfs_hops(view, source)
                self.stats.arrived += 1
                self.stats.stretch_sum += result.hops / truth[source][target]

            if self.progress and ((k + 1) % self.progress_every == 0 or k + 1 == total):
                self.progress(k + 1, total)
        self.stats.duration += time.perf_counter() - t0
        return self.stats
