# io/sim_logging.py
import json
import logging
import sys

from route_sim.sim.hooks import NoopHooks


def _default_json_logger(name="route_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class SimLogging(NoopHooks):
    """
    Structured JSON logs for simulation runs, evaluations and state changes.
    Progress lines only appear with debug=True, one in every `sample_every`.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.log = logger or _default_json_logger(level=level)
        self._progress_seen = 0

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id, **extra}
        self.log.log(getattr(logging, level), msg, extra={"extra": payload})

    # simulation loop

    def run_start(self, *, algorithm, steps, at_step):
        self._emit("INFO", "run_start", algorithm=algorithm, steps=steps, at_step=at_step)

    def run_end(self, *, algorithm, processed, **extra):
        self._emit("INFO", "run_end", algorithm=algorithm, processed=processed, **extra)

    def progress(self, *, phase: str, done: int, total: int):
        self._progress_seen += 1
        if self.debug and (self._progress_seen % self.sample_every) == 0:
            self._emit("DEBUG", "progress", phase=phase, done=done, total=total)

    # evaluation

    def eval_start(self, *, algorithm, samples, nodes):
        self._emit("INFO", "eval_start", algorithm=algorithm, samples=samples, nodes=nodes)

    def eval_end(self, *, algorithm, summary):
        self._emit("INFO", "eval_end", algorithm=algorithm, **summary)

    # state changes

    def topology_changed(self, *, op: str, nodes: int, links: int, **extra):
        level = "INFO" if self.debug else "DEBUG"
        self._emit(level, "topology_changed", op=op, nodes=nodes, links=links, **extra)

    def algorithm_changed(self, *, name: str):
        self._emit("INFO", "algorithm_changed", name=name)

    def error(self, *, op: str, reason: str, **extra):
        self._emit("WARNING", "sim_error", op=op, reason=reason, **extra)
