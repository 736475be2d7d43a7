# app/simulator.py
import functools
import threading
from collections.abc import Iterable

import numpy as np

from route_sim.app.protocols import Exporter, Movements, RoutingAlgorithm
from route_sim.domain import topology
from route_sim.domain.graph import Graph, GraphView
from route_sim.domain.locations import DEG2KM, Locations
from route_sim.errors import InvalidReference
from route_sim.eval.debug import DebugTracer
from route_sim.eval.harness import EvaluationHarness
from route_sim.runtime.registries import algorithm_names, make_algorithm
from route_sim.sim.hooks import NoopHooks, SimHooks
from route_sim.sim.loop import SimulationLoop
from route_sim.sim.rng import RNGRegistry


def _locked(fn):
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return fn(self, *args, **kwargs)

    return wrapper


class Simulator:
    """
    Owns the graph, positions, the active algorithm, the evaluation harness
    and the debug tracer. Every public operation runs under one lock.

    Any operation that changes nodes or links resets the algorithm to the new
    node count and clears the evaluation stats before returning, so per-node
    state can never drift from the topology. Edits naming unknown ids apply
    the valid part, then raise InvalidReference.
    """

    def __init__(
        self,
        rng: RNGRegistry,
        *,
        algorithm: str | RoutingAlgorithm = "random",
        hooks: SimHooks | None = None,
        movements: Movements | None = None,
        exporter: Exporter | None = None,
        progress_every: int = 100,
    ):
        self._lock = threading.RLock()
        self._abort = threading.Event()
        self.rng = rng
        self.hooks = hooks or NoopHooks()
        self.exporter = exporter
        self.show_progress = False
        self.positions = False
        self.graph = Graph()
        self.locations = Locations()
        if isinstance(algorithm, str):
            algorithm = make_algorithm(algorithm, rng=rng.substream("algorithm", algorithm))
        self.loop = SimulationLoop(self.graph, self.locations, algorithm, movements, self.hooks)
        self.harness = EvaluationHarness(
            rng.stream("eval"), progress=self._eval_progress, progress_every=progress_every
        )
        self.tracer = DebugTracer()
        self._view: GraphView | None = None
        self._position_draws = 0
        self._topology_draws = 0
        self.algorithm.reset(self.graph.node_count())

    @property
    def algorithm(self) -> RoutingAlgorithm:
        return self.loop.algorithm

    # ------------- helpers ------------------

    def _current_view(self) -> GraphView:
        if self._view is None:
            self._view = self.graph.view(self.locations)
        return self._view

    def _changed(self, op: str, rejected: Iterable[int] = (), **extra) -> None:
        self.algorithm.reset(self.graph.node_count())
        self.harness.clear()
        self.tracer.clear()
        self._view = None
        self.hooks.topology_changed(
            op=op, nodes=self.graph.node_count(), links=self.graph.link_count(), **extra
        )
        self._export()
        rejected = sorted(set(rejected))
        if rejected:
            self.hooks.error(op=op, reason="invalid_reference", ids=rejected)
            raise InvalidReference(rejected)

    def _export(self, marked: Graph | None = None) -> None:
        if self.exporter is not None:
            self.exporter.export(self.graph, self.locations, self.algorithm, marked)

    def _placed(self, ids: list[int]) -> list[int]:
        if self.positions:
            self.locations.init_positions(ids, self.locations.graph_center())
        return ids

    def _eval_progress(self, done: int, total: int) -> None:
        if self.show_progress:
            self.hooks.progress(phase="test", done=done, total=total)

    # ------------- info ---------------------

    @_locked
    def graph_info(self) -> dict:
        return {
            "nodes": self.graph.node_count(),
            "links": self.graph.link_count(),
            "avg_node_degree": self.graph.avg_node_degree(),
            "locations": len(self.locations),
        }

    @_locked
    def sim_info(self) -> dict:
        return {"algorithm": self.algorithm.name, "steps": self.loop.steps}

    # ------------- topology -----------------

    @_locked
    def clear_graph(self) -> None:
        self.graph.clear()
        self.locations.clear()
        self._changed("clear_graph")

    @_locked
    def add_line(self, count: int, close: bool = False) -> list[int]:
        ids = self._placed(topology.add_line(self.graph, count, close))
        self._changed("add_line", added=len(ids))
        return ids

    @_locked
    def add_star(self, count: int) -> list[int]:
        ids = self._placed(topology.add_star(self.graph, count))
        self._changed("add_star", added=len(ids))
        return ids

    @_locked
    def add_tree(self, count: int, intra: int = 0) -> list[int]:
        self._topology_draws += 1
        rng = self.rng.substream("topology", self._topology_draws)
        ids = self._placed(topology.add_tree(self.graph, count, intra, rng=rng))
        self._changed("add_tree", added=len(ids))
        return ids

    @_locked
    def add_lattice4(self, x_count: int, y_count: int) -> list[int]:
        ids = self._placed(topology.add_lattice4(self.graph, x_count, y_count))
        self._changed("add_lattice4", added=len(ids))
        return ids

    @_locked
    def add_lattice8(self, x_count: int, y_count: int) -> list[int]:
        ids = self._placed(topology.add_lattice8(self.graph, x_count, y_count))
        self._changed("add_lattice8", added=len(ids))
        return ids

    @_locked
    def remove_nodes(self, ids: list[int]) -> None:
        rejected = self.graph.remove_nodes(ids)
        self.locations.remove(ids)
        self._changed("remove_nodes", rejected)

    @_locked
    def connect_nodes(self, ids: list[int]) -> None:
        self._changed("connect_nodes", self.graph.connect_nodes(ids))

    @_locked
    def disconnect_nodes(self, ids: list[int]) -> None:
        self._changed("disconnect_nodes", self.graph.disconnect_nodes(ids))

    @_locked
    def remove_unconnected(self) -> list[int]:
        removed = self.graph.remove_unconnected_nodes()
        self.locations.remove(removed)
        self._changed("remove_unconnected", removed=len(removed))
        return removed

    @_locked
    def connect_in_range(self, range_km: float) -> int:
        added = topology.connect_in_range(self.graph, self.locations, range_km)
        self._changed("connect_in_range", added=added)
        return added

    @_locked
    def show_mst(self) -> Graph:
        mst = self.graph.minimum_spanning_tree(self.locations)
        self._export(marked=mst)
        return mst

    @_locked
    def crop_mst(self) -> None:
        """Drop every link that is not part of the minimum spanning forest."""
        mst = self.graph.minimum_spanning_tree(self.locations)
        for a, b in self.graph.links():
            if not mst.has_link(a, b):
                self.graph.disconnect(a, b)
        self._changed("crop_mst")

    # ------------- positions ----------------

    @_locked
    def enable_positions(self, enable: bool) -> None:
        self.positions = enable
        if enable:
            self.locations.init_positions(self.graph.nodes())
        else:
            self.locations.clear()
        self._export()

    @_locked
    def move_node(self, node_id: int, dx: float, dy: float, dz: float) -> None:
        if not self.graph.has_node(node_id):
            self.hooks.error(op="move_node", reason="invalid_reference", ids=[node_id])
            raise InvalidReference([node_id])
        if not self.locations.move_node(node_id, (dx, dy, dz)):
            self.hooks.error(op="move_node", reason="no_position", ids=[node_id])
        self._export()

    @_locked
    def move_nodes(self, dx: float, dy: float, dz: float) -> None:
        self.locations.move_nodes((dx, dy, dz))
        self._export()

    @_locked
    def move_to(self, x_deg: float, y_deg: float, z_deg: float) -> None:
        """Shift all nodes so their center lands on the given point (degrees)."""
        target = np.array([x_deg, y_deg, z_deg]) * DEG2KM
        self.locations.move_nodes(target - self.locations.graph_center())
        self._export()

    @_locked
    def randomize_positions(self, range_km: float) -> None:
        self._position_draws += 1
        rng = self.rng.substream("positions", self._position_draws)
        self.locations.randomize_positions_2d(self.locations.graph_center(), range_km, rng)
        self._export()

    # ------------- algorithm ----------------

    @_locked
    def available_algorithms(self) -> list[str]:
        return algorithm_names()

    @_locked
    def set_algorithm(self, name: str) -> None:
        """Swap the active algorithm; unknown names raise and keep the current one."""
        self.loop.algorithm = make_algorithm(name, rng=self.rng.substream("algorithm", name))
        self.hooks.algorithm_changed(name=name)
        self._changed("set_algorithm")

    @_locked
    def algorithm_name(self) -> str:
        return self.algorithm.name

    @_locked
    def get(self, key: str) -> str:
        return self.algorithm.get(key)

    @_locked
    def set(self, key: str, value: str) -> None:
        self.algorithm.set(key, value)

    # ------------- running ------------------

    @_locked
    def step(self, count: int = 1) -> float:
        return self.loop.advance(
            count, should_abort=self._abort.is_set, show_progress=self.show_progress
        )

    @_locked
    def test(self, samples: int = 1000) -> dict:
        view = self._current_view()
        name = self.algorithm.name
        self.harness.clear()
        self.hooks.eval_start(algorithm=name, samples=samples, nodes=view.node_count)
        self.harness.run_samples(
            view,
            lambda req: self.algorithm.route(req, view),
            samples,
            should_abort=self._abort.is_set,
        )
        summary = self.harness.summary()
        self.hooks.eval_end(algorithm=name, summary=summary)
        return summary

    @_locked
    def debug_init(self, source: int, target: int) -> None:
        missing = [i for i in (source, target) if not self.graph.has_node(i)]
        if missing:
            self.hooks.error(op="debug_init", reason="invalid_reference", ids=missing)
            raise InvalidReference(missing)
        self.tracer.init(source, target)

    @_locked
    def debug_step(self, steps: int = 1) -> list[str]:
        view = self._current_view()
        return self.tracer.step(view, lambda req: self.algorithm.route(req, view), steps)

    @_locked
    def reset_sim(self) -> None:
        self._abort.clear()
        self.loop.reset()
        self._changed("reset_sim")

    @_locked
    def set_progress(self, show: bool) -> None:
        self.show_progress = show

    def abort(self) -> None:
        """Stop running loops between iterations. Takes no lock; stays set until reset_sim()."""
        self._abort.set()
