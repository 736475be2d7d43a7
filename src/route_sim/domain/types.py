# route_sim/domain/types.py
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PathRequest:
    source: int
    target: int


@dataclass
class PathResult:
    path: list[int] = field(default_factory=list)
    arrived: bool = False

    @property
    def hops(self) -> int:
        return max(len(self.path) - 1, 0)
