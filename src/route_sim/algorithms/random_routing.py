# route_sim/algorithms/random_routing.py
from route_sim.algorithms.base import RoutingBase
from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult


class RandomRouting(RoutingBase):
    """Unbiased random walk. Worst-case baseline; keeps no per-node state."""

    name = "random"

    def route(self, request: PathRequest, view: GraphView) -> PathResult:
        self._check(view)

        def choose(cur, nbrs):
            if not nbrs:
                return None
            return nbrs[int(self.rng.integers(len(nbrs)))]

        return self.walk(request, view, choose)
