# tests/app/test_build_and_run.py
import logging

from route_sim.app.build import build
from route_sim.app.simulator import Simulator
from route_sim.io.sim_logging import SimLogging
from route_sim.sim.rng import RNGRegistry


def _cfg(**over):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "sim": {"seed": 1, "steps": 20},
        "eval": {"samples": 100},
        "algorithm": {"kind": "vivaldi", "dimensions": 2},
        "topology": [{"kind": "lattice4", "x": 3, "y": 3}, {"kind": "line", "count": 2}],
    }
    cfg.update(over)
    return cfg


def test_build_runs():
    app = build(_cfg(), use_logging=False)
    assert app.sim.graph_info()["nodes"] == 11
    summary = app.run()
    assert app.sim.sim_info() == {"algorithm": "vivaldi", "steps": 20}
    assert summary["samples"] == 100
    assert 0.0 <= summary["arrived_fraction"] <= 1.0


def test_same_config_same_result():
    a = build(_cfg(), use_logging=False).run()
    b = build(_cfg(), use_logging=False).run()
    a.pop("duration"), b.pop("duration")
    assert a == b


def test_connect_item_joins_structures():
    cfg = _cfg(
        algorithm={"kind": "tree"},
        topology=[
            {"kind": "line", "count": 3},
            {"kind": "star", "count": 2},
            {"kind": "connect", "ids": [2, 3]},
        ],
    )
    app = build(cfg, use_logging=False)
    summary = app.run()
    assert summary["arrived_fraction"] == 1.0


def test_positions_enabled_from_config():
    app = build(_cfg(positions=True), use_logging=False)
    assert app.sim.graph_info()["locations"] == 11


def test_json_hooks_log_runs_and_evaluations(caplog):
    logger = logging.getLogger("route_sim.test_hooks")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    hooks = SimLogging(run_id="r-9", logger=logger)
    sim = Simulator(RNGRegistry(0), algorithm="random", hooks=hooks)
    sim.add_line(4)
    sim.step(2)
    sim.test(10)
    sim.set_algorithm("spring")

    msgs = [r.getMessage() for r in caplog.records]
    assert msgs == [
        "topology_changed",
        "run_start",
        "run_end",
        "eval_start",
        "eval_end",
        "algorithm_changed",
        "topology_changed",
    ]
    end = next(r for r in caplog.records if r.getMessage() == "eval_end")
    assert end.extra["run_id"] == "r-9"
    assert end.extra["samples"] == 10
    assert end.extra["algorithm"] == "random"
