# route_sim/algorithms/spanning_tree_routing.py
from collections import deque
from dataclasses import dataclass

import numpy as np

from route_sim.algorithms.base import RoutingBase
from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult


@dataclass(frozen=True)
class SpanningForest:
    parent: np.ndarray  # slot of parent, -1 at roots
    depth: np.ndarray
    root: np.ndarray  # slot of the component's root

    def ancestor_at(self, s: int, depth: int) -> int:
        while self.depth[s] > depth:
            s = int(self.parent[s])
        return s


def bfs_forest(view: GraphView) -> SpanningForest:
    """Breadth-first forest, one tree per component rooted at its lowest id."""
    n = view.node_count
    parent = np.full(n, -1, dtype=int)
    depth = np.full(n, -1, dtype=int)
    root = np.full(n, -1, dtype=int)
    for r in range(n):
        if depth[r] >= 0:
            continue
        depth[r], root[r] = 0, r
        q = deque([r])
        while q:
            s = q.popleft()
            for j in view.neighbors(view.node_at(s)):
                t = view.slot(j)
                if depth[t] < 0:
                    parent[t], depth[t], root[t] = s, depth[s] + 1, r
                    q.append(t)
    return SpanningForest(parent, depth, root)


class SpanningTreeRouting(RoutingBase):
    """
    Deterministic routing along a BFS spanning forest. A node forwards down
    toward the target when it is one of the target's ancestors, otherwise up
    to its parent, so packets travel the unique tree path via the nearest
    common ancestor. The forest is built on the first step after reset; until
    then route() builds a throwaway one per call. hop_limit never cuts a tree
    path short, so every pair in one component arrives.
    """

    name = "tree"

    def __init__(self, rng: np.random.Generator, *, hop_limit: int = 100):
        super().__init__(rng, hop_limit=hop_limit)
        self.forest: SpanningForest | None = None

    def reset(self, node_count: int) -> None:
        super().reset(node_count)
        self.forest = None

    def step(self, view: GraphView) -> None:
        self._check(view)
        if self.forest is None:
            self.forest = bfs_forest(view)

    def route(self, request: PathRequest, view: GraphView) -> PathResult:
        self._check(view)
        forest = self.forest if self.forest is not None else bfs_forest(view)
        source, target = request.source, request.target
        limit = self.hop_limit
        if view.has_node(source) and view.has_node(target):
            ss, ts = view.slot(source), view.slot(target)
            # tree paths never revisit a node and are at most depth(s) + depth(t) long
            if forest.root[ss] == forest.root[ts]:
                limit = max(limit, int(forest.depth[ss] + forest.depth[ts]))

        def choose(cur, nbrs):
            cs, ts = view.slot(cur), view.slot(target)
            if forest.root[cs] != forest.root[ts]:
                return None
            if forest.depth[ts] > forest.depth[cs]:
                below = forest.ancestor_at(ts, forest.depth[cs] + 1)
                if forest.parent[below] == cs:
                    return view.node_at(below)
            p = int(forest.parent[cs])
            return view.node_at(p) if p >= 0 else None

        return self.walk(request, view, choose, shortcut=False, limit=limit)
