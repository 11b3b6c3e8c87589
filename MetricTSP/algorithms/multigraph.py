from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Tuple

import numpy as np

from MetricTSP.graph import GraphModel

Edge = Tuple[int, int]


@dataclass
class Multigraph:
    """Edge list over vertex indices ``0..n-1``; parallel edges are kept."""

    n: int
    edges: List[Edge] = field(default_factory=list)

    def add_edge(self, u: int, v: int) -> None:
        if not (0 <= u < self.n and 0 <= v < self.n):
            raise IndexError(f"Edge ({u}, {v}) outside vertex range 0..{self.n - 1}")
        self.edges.append((u, v))

    def degrees(self) -> np.ndarray:
        degree = np.zeros(self.n, dtype=int)
        for u, v in self.edges:
            degree[u] += 1
            degree[v] += 1
        return degree

    def odd_vertices(self) -> List[int]:
        odd = [int(v) for v in np.flatnonzero(self.degrees() % 2 == 1)]
        assert len(odd) % 2 == 0, "handshake lemma violated"
        return odd

    def union(self, extra: Iterable[Edge]) -> "Multigraph":
        merged = Multigraph(self.n, list(self.edges))
        for u, v in extra:
            merged.add_edge(u, v)
        return merged

    def doubled(self) -> "Multigraph":
        return Multigraph(self.n, [edge for edge in self.edges for _ in range(2)])

    def weight(self, graph: GraphModel) -> float:
        matrix = graph.matrix
        return float(sum(matrix[u, v] for u, v in self.edges))

    def __len__(self) -> int:
        return len(self.edges)


def matching_edges(matching: Mapping[int, int]) -> List[Edge]:
    """Each matched pair once, as ``(smaller, larger)``."""
    return sorted({(min(u, v), max(u, v)) for u, v in matching.items()})


__all__ = ["Edge", "Multigraph", "matching_edges"]
