# route_sim/eval/debug.py
from route_sim.app.protocols import RouteFn
from route_sim.domain.graph import GraphView, bfs_hops
from route_sim.domain.types import PathRequest


class DebugTracer:
    """
    Hop-by-hop replay of one routing decision. Every hop asks the algorithm's
    own route() from the current node and takes its first move, so the trace
    follows whatever state the algorithm holds when the step is taken.
    """

    def __init__(self):
        self.request: PathRequest | None = None
        self.node: int | None = None  # current position of the traced packet
        self.hops = 0

    def init(self, source: int, target: int) -> None:
        self.request = PathRequest(source, target)
        self.node = source
        self.hops = 0

    def clear(self) -> None:
        self.request, self.node, self.hops = None, None, 0

    def step(self, view: GraphView, route_fn: RouteFn, n: int = 1) -> list[str]:
        if self.request is None:
            return ["no path under trace, call init first"]
        target = self.request.target
        # distances measured from the target, the graph is undirected
        remaining = bfs_hops(view, target)
        lines = []
        for _ in range(n):
            cur = self.node
            if cur == target:
                lines.append(f"arrived at {target} after {self.hops} hops")
                break
            path = route_fn(PathRequest(cur, target)).path
            if len(path) < 2:
                lines.append(f"stuck at {cur} after {self.hops} hops, {target} not reached")
                break
            nxt = path[1]
            self.node = nxt
            self.hops += 1
            left = remaining.get(nxt)
            lines.append(
                f"hop {self.hops}: {cur} -> {nxt}, distance to {target}: "
                + (f"{left} hops" if left is not None else "unreachable")
            )
        return lines
