# route_sim/algorithms/genetic_routing.py
import numpy as np

from route_sim.algorithms.base import RoutingBase
from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult


class GeneticRouting(RoutingBase):
    """
    Evolves next-hop tables. A candidate holds one neighbor slot per node
    (-1 for isolated nodes); forwarding follows it until the target is a
    neighbor. Each step scores the population on a shared sample of pairs
    (more arrivals first, fewer hops second), keeps the elite and breeds the
    rest by tournament selection, uniform crossover and per-gene mutation.
    """

    name = "genetic"
    PARAMS = RoutingBase.PARAMS | {
        "population": int,
        "fitness_samples": int,
        "mutation_rate": float,
        "elite": int,
    }

    def __init__(
        self,
        rng: np.random.Generator,
        *,
        hop_limit: int = 100,
        population: int = 16,
        fitness_samples: int = 16,
        mutation_rate: float = 0.05,
        elite: int = 2,
    ):
        super().__init__(rng, hop_limit=hop_limit)
        self.population = population
        self.fitness_samples = fitness_samples
        self.mutation_rate = mutation_rate
        self.elite = elite
        self.tables = np.empty((0, 0), dtype=int)
        self.best: np.ndarray | None = None
        self.generation = 0

    def reset(self, node_count: int) -> None:
        super().reset(node_count)
        self.tables = np.empty((0, node_count), dtype=int)
        self.best = None
        self.generation = 0

    def set(self, key: str, value: str) -> None:
        if key == "mutation_rate" and not 0.0 <= float(value) <= 1.0:
            raise ValueError(f"mutation_rate must be within [0, 1], got {value}")
        super().set(key, value)

    # ------------- evolution ----------------

    def step(self, view: GraphView) -> None:
        self._check(view)
        n = view.node_count
        if n < 2 or self.population < 1:
            return
        options = [np.array([view.slot(j) for j in view.neighbors(i)], dtype=int) for i in view.ids]
        if len(self.tables) != self.population:
            self.tables = np.stack([self._random_table(options) for _ in range(self.population)])

        pairs = self._sample_pairs(n, max(1, self.fitness_samples))
        scores = [self._fitness(table, pairs, view) for table in self.tables]
        order = sorted(range(len(self.tables)), key=lambda c: (-scores[c][0], scores[c][1], c))
        rank = np.empty(len(order), dtype=int)
        rank[order] = np.arange(len(order))
        self.best = self.tables[order[0]].copy()

        keep = min(self.elite, len(order))
        nxt = [self.tables[c].copy() for c in order[:keep]]
        while len(nxt) < self.population:
            a = self.tables[self._tournament(rank)]
            b = self.tables[self._tournament(rank)]
            child = np.where(self.rng.random(n) < 0.5, a, b)
            nxt.append(self._mutate(child, options))
        self.tables = np.stack(nxt)
        self.generation += 1

    def _random_table(self, options: list[np.ndarray]) -> np.ndarray:
        return np.array(
            [int(o[self.rng.integers(len(o))]) if len(o) else -1 for o in options], dtype=int
        )

    def _mutate(self, table: np.ndarray, options: list[np.ndarray]) -> np.ndarray:
        hits = np.flatnonzero(self.rng.random(len(table)) < self.mutation_rate)
        for s in hits:
            if len(options[s]):
                table[s] = options[s][self.rng.integers(len(options[s]))]
        return table

    def _tournament(self, rank: np.ndarray) -> int:
        a, b = self.rng.integers(len(rank), size=2)
        return int(a if rank[a] <= rank[b] else b)

    def _sample_pairs(self, n: int, k: int) -> list[tuple[int, int]]:
        src = self.rng.integers(n, size=k)
        dst = self.rng.integers(n - 1, size=k)
        dst = dst + (dst >= src)
        return list(zip(src.tolist(), dst.tolist()))

    def _fitness(self, table: np.ndarray, pairs, view: GraphView) -> tuple[int, int]:
        arrived = hops = 0
        for s, t in pairs:
            res = self._follow(table, PathRequest(view.node_at(s), view.node_at(t)), view)
            if res.arrived:
                arrived += 1
                hops += res.hops
        return arrived, hops

    # ------------- routing ------------------

    def _follow(self, table: np.ndarray | None, request: PathRequest, view: GraphView):
        def choose(cur, nbrs):
            if table is None:
                return None
            s = int(table[view.slot(cur)])
            return view.node_at(s) if s >= 0 else None

        return self.walk(request, view, choose)

    def route(self, request: PathRequest, view: GraphView) -> PathResult:
        self._check(view)
        return self._follow(self.best, request, view)
