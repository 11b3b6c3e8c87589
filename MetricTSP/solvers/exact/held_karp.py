from __future__ import annotations

import numpy as np

from MetricTSP.exceptions import InstanceTooLarge
from MetricTSP.graph import GraphModel
from MetricTSP.observability import EventSink
from MetricTSP.solvers.base import BaseSolver, Tour, current_time, enforce_time_budget, resolve_sink
from MetricTSP.utils.taxonomy import AlgorithmFamily

DEFAULT_MAX_VERTICES = 24


class HeldKarpSolver(BaseSolver):
    """Exact bitmask dynamic program; memory grows as 2^n * n."""

    name = "held_karp"
    family = AlgorithmFamily.EXACT

    def __init__(self, max_vertices: int = DEFAULT_MAX_VERTICES):
        if int(max_vertices) < 1:
            raise ValueError("max_vertices must be at least 1")
        self.max_vertices = int(max_vertices)

    def solve(self, graph: GraphModel, time_limit: float | None = None, sink: EventSink | None = None) -> Tour:
        sink = resolve_sink(sink)
        start_time = current_time()
        n = graph.n
        if n > self.max_vertices:
            raise InstanceTooLarge(n, self.max_vertices)
        if n == 1:
            return self._trivial(graph, start_time, sink)

        dist_matrix = graph.matrix
        # Vertex 0 is the fixed start; vertices 1..n-1 occupy bits 0..m-1.
        m = n - 1
        inner = dist_matrix[1:, 1:]
        n_masks = 1 << m
        cost = np.full((n_masks, m), np.inf)
        parent = np.full((n_masks, m), -1, dtype=np.min_scalar_type(-m))
        cost[1 << np.arange(m), np.arange(m)] = dist_matrix[0, 1:]

        masks = np.arange(n_masks, dtype=np.int64)
        sizes = np.zeros(n_masks, dtype=np.int64)
        for bit in range(m):
            sizes += (masks >> bit) & 1

        for size in range(2, m + 1):
            enforce_time_budget(start_time, time_limit)
            layer = masks[sizes == size]
            for last in range(m):
                bit = 1 << last
                subset = layer[(layer & bit) != 0]
                # cost[previous, p] is inf whenever p is not in previous, last included.
                candidates = cost[subset ^ bit] + inner[:, last]
                best = np.argmin(candidates, axis=1)
                cost[subset, last] = candidates[np.arange(subset.size), best]
                parent[subset, last] = best
            sink.emit("held_karp.layer", solver=self.name, size=size, states=int(layer.size) * size)

        full = n_masks - 1
        totals = cost[full] + dist_matrix[1:, 0]
        last = int(np.argmin(totals))
        best_cost = float(totals[last])

        order = []
        mask = full
        while last >= 0:
            order.append(last + 1)
            previous = int(parent[mask, last])
            mask ^= 1 << last
            last = previous
        path = [0] + order[::-1]
        return self._finish(
            graph,
            path,
            start_time,
            sink,
            metadata={"states": n_masks * m, "optimal": True},
            cost=best_cost,
        )


__all__ = ["DEFAULT_MAX_VERTICES", "HeldKarpSolver"]
