# runtime/registries.py
from collections.abc import Callable

import numpy as np

from route_sim.algorithms.genetic_routing import GeneticRouting
from route_sim.algorithms.random_routing import RandomRouting
from route_sim.algorithms.spanning_tree_routing import SpanningTreeRouting
from route_sim.algorithms.spring_routing import SpringRouting
from route_sim.algorithms.vivaldi_routing import VivaldiRouting
from route_sim.app.protocols import RoutingAlgorithm
from route_sim.config.models import AlgorithmUnion
from route_sim.errors import UnknownAlgorithm

AlgorithmFactory = Callable[..., RoutingAlgorithm]

_algorithm_registry: dict[str, AlgorithmFactory] = {}


def register_algorithm(kind: str):
    def deco(fn: AlgorithmFactory):
        _algorithm_registry[kind] = fn
        return fn

    return deco


def algorithm_names() -> list[str]:
    return list(_algorithm_registry)


def make_algorithm(kind: str, *, rng: np.random.Generator, **params) -> RoutingAlgorithm:
    try:
        factory = _algorithm_registry[kind]
    except KeyError:
        raise UnknownAlgorithm(kind) from None
    return factory(rng=rng, **params)


def make_algorithm_from_model(cfg: AlgorithmUnion, *, rng: np.random.Generator) -> RoutingAlgorithm:
    return make_algorithm(cfg.kind, rng=rng, **cfg.model_dump(exclude={"kind"}))


register_algorithm("random")(RandomRouting)
register_algorithm("vivaldi")(VivaldiRouting)
register_algorithm("spring")(SpringRouting)
register_algorithm("genetic")(GeneticRouting)
register_algorithm("tree")(SpanningTreeRouting)
