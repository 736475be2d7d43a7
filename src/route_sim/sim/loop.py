# sim/loop.py

import time
from collections.abc import Callable

from route_sim.app.protocols import Movements, RoutingAlgorithm, StaticMovements
from route_sim.domain.graph import Graph
from route_sim.domain.locations import Locations

from .hooks import NoopHooks, SimHooks


class SimulationLoop:
    """
    Drives the active algorithm's background work and node movement.
    The caller owns consistency: after any topology change or algorithm swap
    the algorithm must be reset before advance() is called again.
    """

    def __init__(
        self,
        graph: Graph,
        locations: Locations,
        algorithm: RoutingAlgorithm,
        movements: Movements | None = None,
        hooks: SimHooks | None = None,
    ):
        self.graph = graph
        self.locations = locations
        self.algorithm = algorithm
        self.movements = movements or StaticMovements()
        self._hooks = hooks or NoopHooks()
        self.steps = 0

    def reset(self) -> None:
        self.steps = 0

    def advance(
        self,
        count: int = 1,
        *,
        should_abort: Callable[[], bool] | None = None,
        show_progress: bool = False,
    ) -> float:
        """Run up to `count` steps; returns elapsed wall seconds."""
        t0 = time.perf_counter()
        name = self.algorithm.name
        self._hooks.run_start(algorithm=name, steps=count, at_step=self.steps)
        view = self.graph.view(self.locations)
        processed = 0
        for _ in range(count):
            if should_abort is not None and should_abort():
                break
            self.algorithm.step(view)
            self.movements.advance_positions(self.locations)
            self.steps += 1
            processed += 1
            if show_progress:
                self._hooks.progress(phase="step", done=processed, total=count)
        elapsed = time.perf_counter() - t0
        self._hooks.run_end(
            algorithm=name, processed=processed, at_step=self.steps, wall_ms=elapsed * 1000
        )
        return elapsed
