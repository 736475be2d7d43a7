# route_sim/algorithms/base.py
from collections.abc import Callable

import numpy as np

from route_sim.domain.graph import GraphView
from route_sim.domain.types import PathRequest, PathResult
from route_sim.errors import StateMismatch, UnknownParameter

# (current node, its neighbors) -> next node, or None to give up
ChooseFn = Callable[[int, tuple[int, ...]], int | None]


def _parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in ("true", "1", "yes", "on"):
        return True
    if v in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


_PARSERS: dict[type, Callable[[str], object]] = {int: int, float: float, bool: _parse_bool}


class RoutingBase:
    """
    Shared plumbing for the routing variants: string parameter access,
    state-size checks and the hop-by-hop walk.
    Subclasses extend PARAMS with their own tunables (attribute name -> type).
    """

    name = "base"
    PARAMS: dict[str, type] = {"hop_limit": int}

    def __init__(self, rng: np.random.Generator, *, hop_limit: int = 100):
        self.rng = rng
        self.hop_limit = hop_limit
        self._node_count = 0

    def reset(self, node_count: int) -> None:
        self._node_count = node_count

    def step(self, view: GraphView) -> None:
        self._check(view)

    def _check(self, view: GraphView) -> None:
        if view.node_count != self._node_count:
            raise StateMismatch(
                f"{self.name}: state sized for {self._node_count} nodes, "
                f"graph has {view.node_count}; reset() was skipped"
            )

    # --------------- parameters ----------------

    def get(self, key: str) -> str:
        if key == "name":
            return self.name
        if key not in self.PARAMS:
            raise UnknownParameter(key)
        value = getattr(self, key)
        return str(value).lower() if isinstance(value, bool) else str(value)

    def set(self, key: str, value: str) -> None:
        kind = self.PARAMS.get(key)
        if kind is None:
            raise UnknownParameter(key)
        parsed = _PARSERS[kind](value)
        if kind is not bool and parsed < 0:
            raise ValueError(f"{key} must be >= 0, got {value}")
        setattr(self, key, parsed)

    # --------------- routing -------------------

    def walk(
        self,
        request: PathRequest,
        view: GraphView,
        choose: ChooseFn,
        *,
        shortcut: bool = True,
        limit: int | None = None,
    ) -> PathResult:
        """
        Follow `choose` hop by hop from source until the target is reached, the
        chooser gives up or `limit` links (hop_limit by default) have been
        traversed. With `shortcut` a neighboring target is taken directly.
        """
        cur, target = request.source, request.target
        path = [cur]
        if not (view.has_node(cur) and view.has_node(target)):
            return PathResult(path, False)
        limit = self.hop_limit if limit is None else limit
        while cur != target and len(path) - 1 < limit:
            nbrs = view.neighbors(cur)
            nxt = target if shortcut and target in nbrs else choose(cur, nbrs)
            if nxt is None:
                break
            path.append(nxt)
            cur = nxt
        return PathResult(path, cur == target)


def greedy_chooser(view: GraphView, coords: np.ndarray, target: int) -> ChooseFn:
    """Pick the neighbor strictly closer to the target's coordinate; lowest id wins ties."""
    def dist(i: int) -> float:
        return float(np.linalg.norm(coords[view.slot(i)] - coords[view.slot(target)]))

    def choose(cur: int, nbrs: tuple[int, ...]) -> int | None:
        best, best_d = None, dist(cur)
        for n in nbrs:  # ascending ids, strict < keeps the lowest on ties
            d = dist(n)
            if d < best_d:
                best, best_d = n, d
        return best

    return choose
