from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Sequence, Type

from MetricTSP.exceptions import TimeLimitExpired
from MetricTSP.graph import GraphModel
from MetricTSP.observability import EventSink, resolve_sink
from MetricTSP.utils.taxonomy import AlgorithmFamily


@dataclass
class Tour:
    """A closed tour: every vertex once, the edge back to ``path[0]`` implied."""

    name: str
    path: List[Hashable]
    indices: List[int]
    cost: float
    elapsed: float
    status: str = "complete"
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.path)


def current_time() -> float:
    return time.perf_counter()


def remaining_budget(start_time: float, time_limit: float | None) -> float:
    if time_limit is None:
        return float("inf")
    return time_limit - (current_time() - start_time)


def enforce_time_budget(start_time: float, time_limit: float | None) -> None:
    if remaining_budget(start_time, time_limit) <= 0:
        raise TimeLimitExpired("Time budget exhausted")


def compute_cycle_cost(graph: GraphModel, cycle: Sequence[int]) -> float:
    """Compute tour cost (including return leg)."""
    return graph.tour_cost(cycle)


@dataclass(frozen=True)
class SolverSpec:
    """Metadata describing a solver implementation."""

    name: str
    cls: Type["BaseSolver"]
    family: AlgorithmFamily


class BaseSolver:
    """Common interface for MetricTSP solvers."""

    name: str
    family: AlgorithmFamily

    def solve(
        self,
        graph: GraphModel,
        time_limit: float | None = None,
        sink: EventSink | None = None,
    ) -> Tour:  # noqa: D401
        """Solve a metric TSP instance."""
        raise NotImplementedError

    def __call__(
        self,
        graph: GraphModel,
        time_limit: float | None = None,
        sink: EventSink | None = None,
    ) -> Tour:
        return self.solve(graph, time_limit=time_limit, sink=sink)

    def _finish(
        self,
        graph: GraphModel,
        indices: Sequence[int],
        start_time: float,
        sink: EventSink,
        metadata: Dict[str, Any] | None = None,
        cost: float | None = None,
    ) -> Tour:
        indices = [int(i) for i in indices]
        if len(indices) != graph.n or len(set(indices)) != graph.n:
            raise AssertionError(f"{self.name} produced an invalid tour over {graph.n} vertices: {indices}")
        if cost is None:
            cost = compute_cycle_cost(graph, indices)
        tour = Tour(
            name=self.name,
            path=[graph.label(i) for i in indices],
            indices=indices,
            cost=float(cost),
            elapsed=current_time() - start_time,
            metadata=dict(metadata or {}),
        )
        sink.emit("tour.complete", solver=self.name, n=graph.n, cost=tour.cost, elapsed=tour.elapsed)
        return tour

    def _trivial(self, graph: GraphModel, start_time: float, sink: EventSink) -> Tour:
        """Tours on one or two vertices need no tree, matching or circuit."""
        sink.emit("solve.trivial", solver=self.name, n=graph.n)
        return self._finish(graph, list(range(graph.n)), start_time, sink)


__all__ = [
    "AlgorithmFamily",
    "BaseSolver",
    "SolverSpec",
    "TimeLimitExpired",
    "Tour",
    "compute_cycle_cost",
    "current_time",
    "enforce_time_budget",
    "remaining_budget",
    "resolve_sink",
]
