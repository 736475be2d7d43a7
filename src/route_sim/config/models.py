from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class SimModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    seed: int = 0
    steps: int = Field(default=0, ge=0)  # simulation steps before evaluation


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class EvalModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    samples: int = Field(default=1000, ge=0)
    progress: bool = False
    progress_every: int = Field(default=100, ge=1)


# ----------------- ALGORITHMS ---------------------


class _AlgorithmBase(BaseModel):
    model_config = ConfigDict(extra="forbid")
    hop_limit: int = Field(default=100, ge=1)


class RandomRoutingModel(_AlgorithmBase):
    kind: Literal["random"] = "random"


class VivaldiRoutingModel(_AlgorithmBase):
    kind: Literal["vivaldi"] = "vivaldi"
    dimensions: int = Field(default=2, ge=1)
    cc: float = Field(default=0.25, gt=0)
    ce: float = Field(default=0.25, gt=0)


class SpringRoutingModel(_AlgorithmBase):
    kind: Literal["spring"] = "spring"
    dimensions: int = Field(default=2, ge=1)
    step_size: float = Field(default=0.1, gt=0)
    attraction: float = Field(default=1.0, ge=0)
    repulsion: float = Field(default=0.5, ge=0)
    repulsion_samples: int = Field(default=0, ge=0)  # 0 => all pairs


class GeneticRoutingModel(_AlgorithmBase):
    kind: Literal["genetic"] = "genetic"
    population: int = Field(default=16, ge=1)
    fitness_samples: int = Field(default=16, ge=1)
    mutation_rate: float = 0.05
    elite: int = Field(default=2, ge=0)

    @field_validator("mutation_rate")
    @classmethod
    def _unit_interval(cls, v: float, info: ValidationInfo) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"{info.field_name} must be within [0, 1]")
        return v


class SpanningTreeRoutingModel(_AlgorithmBase):
    kind: Literal["tree"] = "tree"


AlgorithmUnion = Annotated[
    RandomRoutingModel
    | VivaldiRoutingModel
    | SpringRoutingModel
    | GeneticRoutingModel
    | SpanningTreeRoutingModel,
    Field(discriminator="kind"),
]

# ----------------- TOPOLOGY ---------------------


class LineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["line"] = "line"
    count: int = Field(ge=1)
    close: bool = False


class StarModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["star"] = "star"
    count: int = Field(ge=1)  # leaves


class TreeModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["tree"] = "tree"
    count: int = Field(ge=1)
    intra: int = Field(default=0, ge=0)


class Lattice4Model(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["lattice4"] = "lattice4"
    x: int = Field(ge=1)
    y: int = Field(ge=1)


class Lattice8Model(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["lattice8"] = "lattice8"
    x: int = Field(ge=1)
    y: int = Field(ge=1)


class ConnectModel(BaseModel):
    """Chain-connect the listed ids: [a, b, c] links a-b and b-c."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["connect"] = "connect"
    ids: list[int] = Field(min_length=2)


TopologyUnion = Annotated[
    LineModel | StarModel | TreeModel | Lattice4Model | Lattice8Model | ConnectModel,
    Field(discriminator="kind"),
]

# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    sim: SimModel = SimModel()
    log: LogModel = LogModel()
    eval: EvalModel = EvalModel()
    algorithm: AlgorithmUnion = Field(default_factory=RandomRoutingModel)
    positions: bool = False
    topology: list[TopologyUnion] = Field(default_factory=list)
