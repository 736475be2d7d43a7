# route_sim/algorithms/spring_routing.py
import numpy as np

from route_sim.algorithms.base import RoutingBase, greedy_chooser
from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult

MIN_DIST2 = 1e-4


class SpringRouting(RoutingBase):
    """
    Force-directed embedding with greedy geometric forwarding.

    Links act as springs with rest length equal to the link weight; every node
    repels the others (or `repulsion_samples` random others per node) with an
    inverse-square force. All forces come from the same snapshot and are
    applied together, each move capped at ten times `step_size`.
    """

    name = "spring"
    PARAMS = RoutingBase.PARAMS | {
        "dimensions": int,
        "step_size": float,
        "attraction": float,
        "repulsion": float,
        "repulsion_samples": int,
    }

    def __init__(
        self,
        rng: np.random.Generator,
        *,
        hop_limit: int = 100,
        dimensions: int = 2,
        step_size: float = 0.1,
        attraction: float = 1.0,
        repulsion: float = 0.5,
        repulsion_samples: int = 0,
    ):
        super().__init__(rng, hop_limit=hop_limit)
        self.dimensions = dimensions
        self.step_size = step_size
        self.attraction = attraction
        self.repulsion = repulsion
        self.repulsion_samples = repulsion_samples
        self.coords = np.zeros((0, dimensions))

    def reset(self, node_count: int) -> None:
        super().reset(node_count)
        self.coords = self.rng.uniform(-0.5, 0.5, size=(node_count, self.dimensions))

    def set(self, key: str, value: str) -> None:
        if key == "dimensions" and int(value) < 1:
            raise ValueError(f"dimensions must be >= 1, got {value}")
        super().set(key, value)
        if key == "dimensions":
            self.reset(self._node_count)

    def step(self, view: GraphView) -> None:
        self._check(view)
        n = view.node_count
        if n == 0:
            return
        force = self._attraction(view) + self._repulsion(n)
        disp = self.step_size * force
        cap = self.step_size * 10.0
        norms = np.linalg.norm(disp, axis=1, keepdims=True)
        scale = np.where(norms > cap, cap / np.maximum(norms, 1e-12), 1.0)
        self.coords += disp * scale

    def _attraction(self, view: GraphView) -> np.ndarray:
        pos = self.coords
        force = np.zeros_like(pos)
        for s, i in enumerate(view.ids):
            for j in view.neighbors(i):
                t = view.slot(j)
                if t <= s:
                    continue
                d = pos[t] - pos[s]
                dist = float(np.linalg.norm(d))
                if dist < 1e-9:
                    continue
                f = self.attraction * (dist - view.weight(i, j)) * d / dist
                force[s] += f
                force[t] -= f
        return force

    def _repulsion(self, n: int) -> np.ndarray:
        pos = self.coords
        k = self.repulsion_samples
        if k == 0 or k >= n - 1:
            diff = pos[:, None, :] - pos[None, :, :]
            dist2 = np.maximum((diff**2).sum(axis=-1), MIN_DIST2)
            inv = 1.0 / (dist2 * np.sqrt(dist2))
            np.fill_diagonal(inv, 0.0)
            return self.repulsion * (diff * inv[..., None]).sum(axis=1)

        force = np.zeros_like(pos)
        scale = (n - 1) / k
        for s in range(n):
            others = self.rng.choice(n - 1, size=k, replace=False)
            others = others + (others >= s)
            diff = pos[s] - pos[others]
            dist2 = np.maximum((diff**2).sum(axis=-1), MIN_DIST2)
            force[s] = scale * self.repulsion * (diff / (dist2 * np.sqrt(dist2))[:, None]).sum(axis=0)
        return force

    def route(self, request: PathRequest, view: GraphView) -> PathResult:
        self._check(view)
        return self.walk(request, view, greedy_chooser(view, self.coords, request.target))
