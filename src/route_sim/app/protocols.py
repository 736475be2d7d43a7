from collections.abc import Callable
from typing import Protocol, runtime_checkable

from route_sim.domain.graph import Graph, GraphView
from route_sim.domain.locations import Locations
from route_sim.domain.types import PathRequest, PathResult

# (done, total) -> None
ProgressFn = Callable[[int, int], None]
RouteFn = Callable[[PathRequest], PathResult]


# ------------- Routing --------------------
@runtime_checkable
class RoutingAlgorithm(Protocol):
    """
    Responsibilities:
      • Keep per-node state sized to the topology (arrays indexed by view slot).
      • Do one unit of background work per step.
      • Route a request from its current state without changing that state.
    reset(node_count) must be called after every topology change and before
    any further step/route.
    """

    name: str

    def reset(self, node_count: int) -> None: ...
    def step(self, view: GraphView) -> None: ...
    def route(self, request: PathRequest, view: GraphView) -> PathResult: ...
    def get(self, key: str) -> str: ...
    def set(self, key: str, value: str) -> None: ...


# ------------- Collaborators -----------------
@runtime_checkable
class Movements(Protocol):
    """Node kinematics, applied once per simulation step."""

    def advance_positions(self, locations: Locations) -> None: ...


@runtime_checkable
class Exporter(Protocol):
    """Receives the simulator state after each mutating operation."""

    def export(
        self,
        graph: Graph,
        locations: Locations | None,
        algorithm: RoutingAlgorithm,
        marked: Graph | None = None,
    ) -> None: ...


class StaticMovements:
    """Nodes stay where they are."""

    def advance_positions(self, locations: Locations) -> None:
        pass
