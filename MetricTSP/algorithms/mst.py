from __future__ import annotations

import numpy as np

from MetricTSP.algorithms.multigraph import Multigraph
from MetricTSP.exceptions import DisconnectedGraph
from MetricTSP.graph import GraphModel


class MSTBuilder:
    """Prim's algorithm on the dense weight matrix, O(n^2)."""

    def build(self, graph: GraphModel) -> Multigraph:
        dist_matrix = graph.matrix
        n = graph.n
        tree = Multigraph(n)

        in_tree = np.zeros(n, dtype=bool)
        key = np.full(n, np.inf)
        parent = np.full(n, -1, dtype=int)
        key[0] = 0.0

        for _ in range(n):
            candidates = np.where(in_tree, np.inf, key)
            u = int(np.argmin(candidates))
            if not np.isfinite(candidates[u]):
                raise DisconnectedGraph(
                    f"Spanning tree stopped at {len(tree)} of {n - 1} edges"
                )
            in_tree[u] = True
            if parent[u] >= 0:
                tree.add_edge(int(parent[u]), u)
            closer = ~in_tree & (dist_matrix[u] < key)
            key[closer] = dist_matrix[u][closer]
            parent[closer] = u

        if len(tree) != n - 1:
            raise DisconnectedGraph(f"Spanning tree has {len(tree)} edges, expected {n - 1}")
        return tree


def minimum_spanning_tree(graph: GraphModel) -> Multigraph:
    return MSTBuilder().build(graph)


__all__ = ["MSTBuilder", "minimum_spanning_tree"]
