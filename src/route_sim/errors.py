# route_sim/errors.py


class RouteSimError(Exception):
    """Base class for recoverable errors reported to the caller."""


class InvalidReference(RouteSimError):
    """An edit named node ids that do not exist. Valid ids were still applied."""

    def __init__(self, ids):
        self.ids = sorted(ids)
        super().__init__(f"unknown node ids: {', '.join(str(i) for i in self.ids)}")


class UnknownParameter(RouteSimError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"unknown parameter: {key}")


class UnknownAlgorithm(RouteSimError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown algorithm: {name}")


class StateMismatch(AssertionError):
    """Per-node state no longer matches the topology (reset was skipped)."""
