from __future__ import annotations


class TSPError(Exception):
    """Base class for every failure raised by the MetricTSP engine."""


class InvalidGraph(TSPError, ValueError):
    """Raised when graph input is malformed, incomplete or has negative weights."""


class NonMetricGraph(InvalidGraph):
    """Raised by the optional metric check when the triangle inequality fails."""

    def __init__(self, message: str, triple: tuple | None = None):
        super().__init__(message)
        self.triple = triple


class DisconnectedGraph(TSPError):
    """A spanning tree could not reach every vertex."""


class NotEulerian(TSPError):
    """A multigraph handed to the Eulerian builder has odd degrees or is disconnected."""


class NoPerfectMatching(TSPError):
    """The blossom matcher finished with an exposed vertex."""


class InstanceTooLarge(TSPError):
    """Raised when the exact solver is asked for more vertices than it accepts."""

    def __init__(self, n: int, limit: int):
        super().__init__(f"Exact solver accepts at most {limit} vertices, got {n}")
        self.n = n
        self.limit = limit


class TimeLimitExpired(TSPError):
    """Raised when an algorithm exceeds the allotted wall clock budget."""


__all__ = [
    "DisconnectedGraph",
    "InstanceTooLarge",
    "InvalidGraph",
    "NoPerfectMatching",
    "NonMetricGraph",
    "NotEulerian",
    "TSPError",
    "TimeLimitExpired",
]
