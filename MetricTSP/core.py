from __future__ import annotations

from typing import Any

from MetricTSP.config import EngineConfig
from MetricTSP.exceptions import InvalidGraph, TSPError
from MetricTSP.graph import GraphModel
from MetricTSP.observability import EventSink, resolve_sink
from MetricTSP.selectors import BaseSelector, get_selector
from MetricTSP.solvers import BaseSolver, ChristofidesSolver, DoubleTreeSolver, HeldKarpSolver, Tour, get_solver
from MetricTSP.utils.taxonomy import Strategy

STRATEGY_SOLVERS = {
    Strategy.EXACT: HeldKarpSolver.name,
    Strategy.CHRISTOFIDES: ChristofidesSolver.name,
    Strategy.DOUBLE_TREE: DoubleTreeSolver.name,
}


class TSPEngine:
    """End-to-end pipeline: validate -> pick solver -> solve."""

    def __init__(self, config: EngineConfig | None = None, selector: BaseSelector | None = None):
        self.config = config if config is not None else EngineConfig()
        if selector is not None:
            self.selector = selector
        else:
            self.selector = get_selector("rule_based", exact_threshold=self.config.exact_threshold)

    def solve(
        self,
        graph: GraphModel,
        strategy: Strategy | str | None = None,
        *,
        sink: EventSink | None = None,
        time_limit: float | None = None,
    ) -> Tour:
        sink = resolve_sink(sink)
        strategy = Strategy.parse(strategy if strategy is not None else self.config.strategy)
        if not isinstance(graph, GraphModel):
            raise InvalidGraph(f"Expected a GraphModel, got {type(graph).__name__}")
        graph.validate()
        if self.config.verify_metric:
            graph.check_metric(self.config.metric_tolerance)

        solver = self.select_solver(graph, strategy)
        limit = time_limit if time_limit is not None else self.config.time_limit
        sink.emit("engine.dispatch", strategy=strategy.value, solver=solver.name, n=graph.n)
        try:
            tour = solver.solve(graph, time_limit=limit, sink=sink)
        except TSPError as exc:
            sink.emit("engine.failed", solver=solver.name, n=graph.n, error=type(exc).__name__)
            raise

        tour.metadata.update({"strategy": strategy.value, "selected_solver": solver.name})
        sink.emit("engine.complete", solver=solver.name, n=graph.n, cost=tour.cost, elapsed=tour.elapsed)
        return tour

    def select_solver(self, graph: GraphModel, strategy: Strategy | str) -> BaseSolver:
        strategy = Strategy.parse(strategy)
        if strategy is Strategy.AUTO:
            solver_name = self.selector.predict(self._features(graph)).name
        else:
            solver_name = STRATEGY_SOLVERS[strategy]
        if solver_name == HeldKarpSolver.name:
            return get_solver(solver_name, max_vertices=self.config.exact_threshold)
        return get_solver(solver_name)

    @staticmethod
    def _features(graph: GraphModel) -> dict[str, Any]:
        return {"n_nodes": graph.n}


__all__ = ["STRATEGY_SOLVERS", "TSPEngine"]
