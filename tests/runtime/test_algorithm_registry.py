# tests/runtime/test_algorithm_registry.py
import numpy as np
import pytest

from route_sim.app.protocols import RoutingAlgorithm
from route_sim.config.models import GeneticRoutingModel, VivaldiRoutingModel
from route_sim.errors import UnknownAlgorithm
from route_sim.runtime.registries import (
    algorithm_names,
    make_algorithm,
    make_algorithm_from_model,
)


def test_all_five_variants_are_registered():
    assert set(algorithm_names()) == {"random", "vivaldi", "spring", "genetic", "tree"}


@pytest.mark.parametrize("name", ["random", "vivaldi", "spring", "genetic", "tree"])
def test_factory_builds_by_name(name):
    algo = make_algorithm(name, rng=np.random.default_rng(0))
    assert isinstance(algo, RoutingAlgorithm)
    assert algo.get("name") == name


def test_unknown_name_is_reported():
    with pytest.raises(UnknownAlgorithm) as ei:
        make_algorithm("dijkstra", rng=np.random.default_rng(0))
    assert ei.value.name == "dijkstra"


def test_factory_applies_model_parameters():
    algo = make_algorithm_from_model(
        VivaldiRoutingModel(dimensions=3, hop_limit=12), rng=np.random.default_rng(0)
    )
    assert algo.get("dimensions") == "3"
    assert algo.get("hop_limit") == "12"

    gen = make_algorithm_from_model(
        GeneticRoutingModel(population=4, mutation_rate=0.5), rng=np.random.default_rng(0)
    )
    assert gen.get("population") == "4"
    assert gen.get("mutation_rate") == "0.5"
