# route_sim/domain/locations.py
from collections.abc import Iterable

import numpy as np

# kilometers per degree of arc on the earth's surface
DEG2KM = 111.32


class Locations:
    """Optional 3-D node positions in kilometers, keyed by node id."""

    def __init__(self):
        self.data: dict[int, np.ndarray] = {}

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.data

    @property
    def enabled(self) -> bool:
        return bool(self.data)

    def clear(self) -> None:
        self.data.clear()

    def position(self, node_id: int) -> np.ndarray | None:
        return self.data.get(node_id)

    def set_position(self, node_id: int, pos) -> None:
        self.data[node_id] = np.asarray(pos, dtype=float).reshape(3)

    def init_positions(self, node_ids: Iterable[int], pos=(0.0, 0.0, 0.0)) -> None:
        """Give every node without a position the default one."""
        for i in node_ids:
            if i not in self.data:
                self.set_position(i, pos)

    def remove(self, node_ids: Iterable[int]) -> None:
        for i in node_ids:
            self.data.pop(i, None)

    def distance(self, a: int, b: int) -> float | None:
        pa, pb = self.data.get(a), self.data.get(b)
        if pa is None or pb is None:
            return None
        return float(np.linalg.norm(pa - pb))

    def move_node(self, node_id: int, delta) -> bool:
        pos = self.data.get(node_id)
        if pos is None:
            return False
        self.data[node_id] = pos + np.asarray(delta, dtype=float)
        return True

    def move_nodes(self, delta) -> None:
        d = np.asarray(delta, dtype=float)
        for i in self.data:
            self.data[i] = self.data[i] + d

    def graph_center(self) -> np.ndarray:
        if not self.data:
            return np.zeros(3)
        return np.mean(np.stack(list(self.data.values())), axis=0)

    def randomize_positions_2d(self, center, range_km: float, rng: np.random.Generator) -> None:
        """Scatter all positioned nodes uniformly in a square of width range_km around center."""
        c = np.asarray(center, dtype=float)
        half = range_km / 2.0
        for i in sorted(self.data):
            dx, dy = rng.uniform(-half, half, size=2)
            self.data[i] = np.array([c[0] + dx, c[1] + dy, c[2]])
