from __future__ import annotations

from MetricTSP.algorithms import EulerianBuilder, MSTBuilder, TourShortcutter
from MetricTSP.graph import GraphModel
from MetricTSP.observability import EventSink
from MetricTSP.solvers.base import BaseSolver, Tour, current_time, enforce_time_budget, resolve_sink
from MetricTSP.utils.taxonomy import AlgorithmFamily


class DoubleTreeSolver(BaseSolver):
    """2-approximation: walk every MST edge twice, then shortcut."""

    name = "double_tree"
    family = AlgorithmFamily.APPROXIMATION

    def solve(self, graph: GraphModel, time_limit: float | None = None, sink: EventSink | None = None) -> Tour:
        sink = resolve_sink(sink)
        start_time = current_time()
        if graph.n <= 2:
            return self._trivial(graph, start_time, sink)

        tree = MSTBuilder().build(graph)
        mst_weight = tree.weight(graph)
        sink.emit("mst.built", solver=self.name, edges=len(tree), weight=mst_weight)

        enforce_time_budget(start_time, time_limit)
        circuit = EulerianBuilder().build(tree.doubled(), start=0)
        sink.emit("eulerian.built", solver=self.name, edges=len(circuit))

        path = TourShortcutter().shortcut(circuit, start=0)
        sink.emit("tour.shortcut", solver=self.name, vertices=len(path))
        return self._finish(
            graph,
            path,
            start_time,
            sink,
            metadata={"mst_weight": mst_weight, "circuit_length": len(circuit)},
        )


__all__ = ["DoubleTreeSolver"]
