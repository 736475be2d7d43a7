# route_sim/algorithms/vivaldi_routing.py
import numpy as np

from route_sim.algorithms.base import RoutingBase, greedy_chooser
from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult

MIN_RTT = 1e-6


class VivaldiRouting(RoutingBase):
    """
    Vivaldi network coordinates with greedy geometric forwarding.

    Each node holds a coordinate and an error estimate. A step lets every node
    sample one neighbor; both ends move along the line between them so that
    their embedded distance approaches the link weight. Moves are damped by
    `cc` and by the node's share of the pair's combined error, so confident
    nodes move less. Errors track the relative sample error with gain `ce`.

    When nodes carry positions, the first step after a reset starts each
    positioned node from its own location (the first `dimensions` axes).
    Without positions, coordinates start random. Relaxing link pairs alone
    can then fold the embedding into a local optimum where every link
    matches but greedy forwarding stalls, so arrivals on meshes stay low.
    """

    name = "vivaldi"
    PARAMS = RoutingBase.PARAMS | {"dimensions": int, "cc": float, "ce": float}

    def __init__(
        self,
        rng: np.random.Generator,
        *,
        hop_limit: int = 100,
        dimensions: int = 2,
        cc: float = 0.25,
        ce: float = 0.25,
    ):
        super().__init__(rng, hop_limit=hop_limit)
        self.dimensions, self.cc, self.ce = dimensions, cc, ce
        self.coords = np.zeros((0, dimensions))
        self.error = np.zeros(0)
        self._seeded = False

    def reset(self, node_count: int) -> None:
        super().reset(node_count)
        self.coords = self.rng.uniform(-0.5, 0.5, size=(node_count, self.dimensions))
        self.error = np.ones(node_count)
        self._seeded = False

    def _seed_from_positions(self, view: GraphView) -> None:
        k = min(self.dimensions, 3)
        for s, i in enumerate(view.ids):
            pos = view.position(i)
            if pos is not None:
                self.coords[s] = 0.0
                self.coords[s, :k] = pos[:k]

    def set(self, key: str, value: str) -> None:
        if key == "dimensions" and int(value) < 1:
            raise ValueError(f"dimensions must be >= 1, got {value}")
        super().set(key, value)
        if key == "dimensions":
            self.reset(self._node_count)

    def step(self, view: GraphView) -> None:
        self._check(view)
        if not self._seeded:
            if view.has_positions():
                self._seed_from_positions(view)
            self._seeded = True
        for s, i in enumerate(view.ids):
            nbrs = view.neighbors(i)
            if not nbrs:
                continue
            j = nbrs[int(self.rng.integers(len(nbrs)))]
            self._relax(s, view.slot(j), view.weight(i, j))

    def _relax(self, a: int, b: int, rtt: float) -> None:
        rtt = max(rtt, MIN_RTT)
        diff = self.coords[a] - self.coords[b]
        dist = float(np.linalg.norm(diff))
        if dist < 1e-9:
            u = self.rng.normal(size=self.dimensions)
            u /= np.linalg.norm(u)
        else:
            u = diff / dist
        ea, eb = self.error[a], self.error[b]
        total = ea + eb
        wa = ea / total if total > 0 else 0.5
        wb = 1.0 - wa
        sample_err = abs(dist - rtt) / rtt
        force = rtt - dist

        self.error[a] = sample_err * self.ce * wa + ea * (1 - self.ce * wa)
        self.error[b] = sample_err * self.ce * wb + eb * (1 - self.ce * wb)
        self.coords[a] += self.cc * wa * force * u
        self.coords[b] -= self.cc * wb * force * u

    def route(self, request: PathRequest, view: GraphView) -> PathResult:
        self._check(view)
        return self.walk(request, view, greedy_chooser(view, self.coords, request.target))
