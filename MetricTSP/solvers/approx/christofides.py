from __future__ import annotations

from MetricTSP.algorithms import (
    EulerianBuilder,
    MSTBuilder,
    PerfectMatcher,
    TourShortcutter,
    matching_edges,
    matching_weight,
)
from MetricTSP.graph import GraphModel
from MetricTSP.observability import EventSink
from MetricTSP.solvers.base import BaseSolver, Tour, current_time, enforce_time_budget, resolve_sink
from MetricTSP.utils.taxonomy import AlgorithmFamily


class ChristofidesSolver(BaseSolver):
    """3/2-approximation: MST plus a minimum-weight matching on its odd vertices."""

    name = "christofides"
    family = AlgorithmFamily.APPROXIMATION

    def solve(self, graph: GraphModel, time_limit: float | None = None, sink: EventSink | None = None) -> Tour:
        sink = resolve_sink(sink)
        start_time = current_time()
        n = graph.n
        if n <= 2:
            return self._trivial(graph, start_time, sink)

        tree = MSTBuilder().build(graph)
        mst_weight = tree.weight(graph)
        sink.emit("mst.built", solver=self.name, edges=len(tree), weight=mst_weight)

        enforce_time_budget(start_time, time_limit)
        odd_vertices = tree.odd_vertices()
        matching = PerfectMatcher().match(graph, odd_vertices)
        pairs = matching_edges(matching)
        match_weight = matching_weight(graph, matching)
        sink.emit("matching.built", solver=self.name, odd_vertices=len(odd_vertices), weight=match_weight)

        enforce_time_budget(start_time, time_limit)
        multigraph = tree.union(pairs)
        circuit = EulerianBuilder().build(multigraph, start=0)
        sink.emit("eulerian.built", solver=self.name, edges=len(circuit))

        path = TourShortcutter().shortcut(circuit, start=0)
        sink.emit("tour.shortcut", solver=self.name, vertices=len(path))
        return self._finish(
            graph,
            path,
            start_time,
            sink,
            metadata={
                "odd_vertices": len(odd_vertices),
                "matching_size": len(pairs),
                "mst_weight": mst_weight,
                "matching_weight": match_weight,
                "circuit_length": len(circuit),
            },
        )


__all__ = ["ChristofidesSolver"]
