from __future__ import annotations

from typing import List

import numpy as np

from MetricTSP.algorithms.multigraph import Edge, Multigraph
from MetricTSP.exceptions import NotEulerian


class EulerianBuilder:
    """Hierholzer's algorithm: follow unused edges and splice sub-circuits in on backtrack."""

    def build(self, multigraph: Multigraph, start: int | None = None) -> List[Edge]:
        edges = multigraph.edges
        if not edges:
            return []

        degrees = multigraph.degrees()
        odd = np.flatnonzero(degrees % 2 == 1)
        if odd.size:
            raise NotEulerian(f"Vertices with odd degree: {odd.tolist()}")
        if start is None:
            start = edges[0][0]
        if not 0 <= start < multigraph.n or degrees[start] == 0:
            raise NotEulerian(f"Start vertex {start} has no incident edges")

        incident: List[List[int]] = [[] for _ in range(multigraph.n)]
        for k, (u, v) in enumerate(edges):
            incident[u].append(k)
            incident[v].append(k)
        used = [False] * len(edges)
        cursor = [0] * multigraph.n

        circuit: List[Edge] = []
        # (vertex, index of the edge used to reach it)
        stack = [(start, -1)]
        while stack:
            v, via = stack[-1]
            adjacent = incident[v]
            while cursor[v] < len(adjacent) and used[adjacent[cursor[v]]]:
                cursor[v] += 1
            if cursor[v] == len(adjacent):
                stack.pop()
                if via >= 0:
                    circuit.append((stack[-1][0], v))
                continue
            k = adjacent[cursor[v]]
            used[k] = True
            a, b = edges[k]
            stack.append((b if a == v else a, k))

        circuit.reverse()
        if len(circuit) != len(edges):
            raise NotEulerian(
                f"Circuit covers {len(circuit)} of {len(edges)} edges; the multigraph is disconnected"
            )
        return circuit


def eulerian_circuit(multigraph: Multigraph, start: int | None = None) -> List[Edge]:
    return EulerianBuilder().build(multigraph, start=start)


__all__ = ["EulerianBuilder", "eulerian_circuit"]
