# route_sim/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from route_sim.app.protocols import Exporter, Movements
from route_sim.app.simulator import Simulator
from route_sim.config.models import (
    ConnectModel,
    Lattice4Model,
    Lattice8Model,
    LineModel,
    ScenarioModel,
    StarModel,
    TopologyUnion,
    TreeModel,
)
from route_sim.io.sim_logging import SimLogging
from route_sim.runtime.registries import make_algorithm_from_model
from route_sim.sim.hooks import NoopHooks
from route_sim.sim.rng import RNGRegistry


@dataclass
class App:
    model: ScenarioModel
    rng: RNGRegistry
    sim: Simulator

    def run(self) -> dict:
        """Advance the configured number of steps, then evaluate."""
        if self.model.sim.steps:
            self.sim.step(self.model.sim.steps)
        return self.sim.test(self.model.eval.samples)


def _apply_topology(sim: Simulator, item: TopologyUnion) -> None:
    if isinstance(item, LineModel):
        sim.add_line(item.count, item.close)
    elif isinstance(item, StarModel):
        sim.add_star(item.count)
    elif isinstance(item, TreeModel):
        sim.add_tree(item.count, item.intra)
    elif isinstance(item, Lattice4Model):
        sim.add_lattice4(item.x, item.y)
    elif isinstance(item, Lattice8Model):
        sim.add_lattice8(item.x, item.y)
    elif isinstance(item, ConnectModel):
        sim.connect_nodes(item.ids)
    else:
        raise TypeError(item)


def build(
    cfg: ScenarioModel | Mapping,
    *,
    worker: int = 0,
    use_logging: bool = True,
    movements: Movements | None = None,
    exporter: Exporter | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.sim.seed, scenario=model.name, worker=worker)

    # 2) Hooks
    hooks = (
        SimLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Algorithm & simulator
    algorithm = make_algorithm_from_model(
        model.algorithm, rng=rng_registry.substream("algorithm", model.algorithm.kind)
    )
    sim = Simulator(
        rng_registry,
        algorithm=algorithm,
        hooks=hooks,
        movements=movements,
        exporter=exporter,
        progress_every=model.eval.progress_every,
    )
    sim.set_progress(model.eval.progress)

    # 4) Topology
    if model.positions:
        sim.enable_positions(True)
    for item in model.topology:
        _apply_topology(sim, item)

    return App(model, rng_registry, sim)
