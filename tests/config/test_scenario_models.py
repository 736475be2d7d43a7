# tests/config/test_scenario_models.py
import pytest
from pydantic import ValidationError

from route_sim.config.models import (
    ConnectModel,
    LineModel,
    ScenarioModel,
    SpringRoutingModel,
    VivaldiRoutingModel,
)
from route_sim.io.config import load_scenario


def test_defaults():
    model = ScenarioModel.model_validate({"name": "x"})
    assert model.algorithm.kind == "random"
    assert model.algorithm.hop_limit == 100
    assert model.eval.samples == 1000
    assert model.topology == []


def test_discriminated_unions():
    model = ScenarioModel.model_validate(
        {
            "name": "x",
            "algorithm": {"kind": "spring", "repulsion_samples": 4},
            "topology": [{"kind": "line", "count": 3}, {"kind": "connect", "ids": [0, 2]}],
        }
    )
    assert isinstance(model.algorithm, SpringRoutingModel)
    assert model.algorithm.repulsion_samples == 4
    assert isinstance(model.topology[0], LineModel)
    assert isinstance(model.topology[1], ConnectModel)


@pytest.mark.parametrize(
    "patch",
    [
        {"algorithm": {"kind": "dijkstra"}},
        {"algorithm": {"kind": "genetic", "mutation_rate": 1.5}},
        {"algorithm": {"kind": "vivaldi", "dimensions": 0}},
        {"algorithm": {"kind": "tree", "hop_limit": 0}},
        {"topology": [{"kind": "line", "count": 0}]},
        {"topology": [{"kind": "connect", "ids": [1]}]},
        {"eval": {"samples": 10, "colour": "red"}},
        {"bogus": 1},
    ],
)
def test_invalid_scenarios_are_rejected(patch):
    with pytest.raises(ValidationError):
        ScenarioModel.model_validate({"name": "x", **patch})


def test_load_yaml_scenario(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(
        "name: yaml\n"
        "sim: {seed: 3, steps: 10}\n"
        "algorithm: {kind: vivaldi, cc: 0.5}\n"
        "topology:\n"
        "  - {kind: lattice4, x: 2, y: 2}\n"
    )
    model = load_scenario(path)
    assert model.sim.seed == 3 and model.sim.steps == 10
    assert isinstance(model.algorithm, VivaldiRoutingModel)
    assert model.algorithm.cc == 0.5
    assert model.topology[0].kind == "lattice4"
