# io/config.py
from pathlib import Path

import yaml

from route_sim.config.models import ScenarioModel


def load_scenario(path: str | Path) -> ScenarioModel:
    """Read a YAML scenario file and validate it; pydantic errors propagate."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return ScenarioModel.model_validate(raw)
