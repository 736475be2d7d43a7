# sim/hooks.py
from typing import Protocol


class SimHooks(Protocol):
    def run_start(self, *, algorithm, steps, at_step): ...
    def run_end(self, *, algorithm, processed, at_step, wall_ms): ...
    def eval_start(self, *, algorithm, samples, nodes): ...
    def eval_end(self, *, algorithm, summary): ...
    def progress(self, *, phase: str, done: int, total: int): ...
    def topology_changed(self, *, op: str, nodes: int, links: int, **kw): ...
    def algorithm_changed(self, *, name: str): ...
    def error(self, *, op: str, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def eval_start(self, **_):
        pass

    def eval_end(self, **_):
        pass

    def progress(self, **_):
        pass

    def topology_changed(self, **_):
        pass

    def algorithm_changed(self, **_):
        pass

    def error(self, **_):
        pass
