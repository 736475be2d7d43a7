# tests/sim/test_loop.py
from route_sim.domain.graph import Graph
from route_sim.domain.locations import Locations
from route_sim.domain.topology import add_line
from route_sim.sim.hooks import NoopHooks
from route_sim.sim.loop import SimulationLoop


class CountingAlgorithm:
    name = "counting"

    def __init__(self):
        self.views = []

    def reset(self, node_count):
        pass

    def step(self, view):
        self.views.append(view.node_count)

    def route(self, request, view):
        raise NotImplementedError

    def get(self, key):
        return self.name

    def set(self, key, value):
        pass


class DriftEast:
    def __init__(self):
        self.calls = 0

    def advance_positions(self, locations):
        self.calls += 1
        locations.move_nodes((1.0, 0.0, 0.0))


class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []

    def run_start(self, *, algorithm, steps, at_step):
        self.trace.append(("start", steps, at_step))

    def run_end(self, *, algorithm, processed, at_step, wall_ms):
        self.trace.append(("end", processed, at_step))

    def progress(self, *, phase, done, total):
        self.trace.append((phase, done, total))


def _loop(**kw):
    g = Graph()
    add_line(g, 3)
    loc = Locations()
    loc.init_positions(g.nodes())
    algo = CountingAlgorithm()
    return SimulationLoop(g, loc, algo, **kw), algo, loc


def test_advance_steps_algorithm_then_movement():
    moves = DriftEast()
    loop, algo, loc = _loop(movements=moves)
    elapsed = loop.advance(4)
    assert elapsed >= 0.0
    assert loop.steps == 4
    assert algo.views == [3, 3, 3, 3]
    assert moves.calls == 4
    assert loc.position(0)[0] == 4.0


def test_abort_is_checked_between_iterations():
    loop, algo, _ = _loop()
    calls = {"n": 0}

    def should_abort():
        calls["n"] += 1
        return calls["n"] > 2

    loop.advance(10, should_abort=should_abort)
    assert loop.steps == 2
    assert len(algo.views) == 2


def test_hooks_and_progress():
    hooks = TraceHooks()
    loop, _, _ = _loop(hooks=hooks)
    loop.advance(2, show_progress=True)
    loop.advance(1)
    assert hooks.trace == [
        ("start", 2, 0),
        ("step", 1, 2),
        ("step", 2, 2),
        ("end", 2, 2),
        ("start", 1, 2),
        ("end", 1, 3),
    ]
    loop.reset()
    assert loop.steps == 0
