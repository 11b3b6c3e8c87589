from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, Mapping, Sequence, Tuple

import networkx as nx
import numpy as np

from MetricTSP.exceptions import InvalidGraph, NonMetricGraph

SYMMETRY_TOLERANCE = 1e-9


class GraphModel:
    """Immutable complete weighted undirected graph.

    Vertices are opaque hashable labels; algorithms address them by their
    position in ``labels`` and read weights from the dense ``matrix``.
    """

    __slots__ = ("_labels", "_index", "_matrix")

    def __init__(self, labels: Sequence[Hashable], matrix: Any):
        labels = tuple(labels)
        if len(labels) < 1:
            raise InvalidGraph("A graph needs at least one vertex")
        self._labels = labels
        self._index = _label_index(labels)

        try:
            arr = np.array(matrix, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidGraph(f"Weight matrix is not numeric: {exc}") from exc
        n = len(labels)
        if arr.shape != (n, n):
            raise InvalidGraph(f"Expected a {n}x{n} weight matrix, got shape {arr.shape}")
        np.fill_diagonal(arr, 0.0)
        self._matrix = arr
        self.validate()

        # Exact symmetry keeps every algorithm indifferent to edge orientation.
        arr = (arr + arr.T) / 2.0
        arr.flags.writeable = False
        self._matrix = arr

    # ------------------------------------------------------------------
    # Alternative constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_matrix(cls, matrix: Any, labels: Sequence[Hashable] | None = None) -> "GraphModel":
        if labels is None:
            try:
                n = len(matrix)
            except TypeError as exc:
                raise InvalidGraph("Weight matrix must be a sequence of rows") from exc
            labels = range(n)
        return cls(labels, matrix)

    @classmethod
    def from_weights(
        cls, labels: Sequence[Hashable], weights: Mapping[Tuple[Hashable, Hashable], float]
    ) -> "GraphModel":
        """Build a graph from ``{(u, v): weight}``; either orientation of a pair may be given."""
        labels = tuple(labels)
        index = _label_index(labels)
        n = len(labels)
        matrix = np.full((n, n), np.nan)
        for pair, value in weights.items():
            try:
                u, v = pair
            except (TypeError, ValueError) as exc:
                raise InvalidGraph(f"Weight keys must be vertex pairs, got {pair!r}") from exc
            i, j = _lookup(index, u), _lookup(index, v)
            if i == j:
                raise InvalidGraph(f"Self-loop on vertex {u!r} is not allowed")
            try:
                w = float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidGraph(f"Weight for pair ({u!r}, {v!r}) is not numeric: {value!r}") from exc
            if np.isnan(w):
                raise InvalidGraph(f"Missing weight for pair ({u!r}, {v!r})")
            known = matrix[i, j]
            if not np.isnan(known) and known != w:
                raise InvalidGraph(f"Conflicting weights for pair ({u!r}, {v!r}): {known} and {w}")
            matrix[i, j] = matrix[j, i] = w
        return cls(labels, matrix)

    @classmethod
    def from_coordinates(
        cls,
        coordinates: Any,
        labels: Sequence[Hashable] | None = None,
        metric: str = "euclidean",
    ) -> "GraphModel":
        try:
            coords = np.asarray(coordinates, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidGraph(f"Coordinates are not numeric points: {exc}") from exc
        if coords.ndim != 2:
            raise InvalidGraph("Coordinates must be a 2D array of points")
        diff = coords[:, None, :] - coords[None, :, :]
        metric = (metric or "euclidean").lower()
        if metric == "manhattan":
            dist_matrix = np.abs(diff).sum(axis=-1)
        elif metric == "euclidean":
            dist_matrix = np.linalg.norm(diff, axis=-1)
        else:
            raise InvalidGraph(f"Unsupported metric: {metric}")
        if labels is None:
            labels = range(coords.shape[0])
        return cls(labels, dist_matrix)

    @classmethod
    def from_networkx(cls, graph: nx.Graph, weight: str = "weight") -> "GraphModel":
        if graph.is_directed() or graph.is_multigraph():
            raise InvalidGraph("Only simple undirected networkx graphs are supported")
        labels = tuple(graph.nodes())
        index = _label_index(labels)
        matrix = np.full((len(labels), len(labels)), np.nan)
        for u, v, data in graph.edges(data=True):
            if u == v:
                raise InvalidGraph(f"Self-loop on vertex {u!r} is not allowed")
            i, j = index[u], index[v]
            matrix[i, j] = matrix[j, i] = float(data.get(weight, 1.0))
        return cls(labels, matrix)

    def to_networkx(self, weight: str = "weight") -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(self._labels)
        n = self.n
        for i in range(n):
            for j in range(i + 1, n):
                graph.add_edge(self._labels[i], self._labels[j], **{weight: float(self._matrix[i, j])})
        return graph

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def n(self) -> int:
        return len(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    @property
    def labels(self) -> Tuple[Hashable, ...]:
        return self._labels

    @property
    def matrix(self) -> np.ndarray:
        """Read-only symmetric weight matrix with a zero diagonal."""
        return self._matrix

    def vertices(self) -> Iterator[Hashable]:
        return iter(self._labels)

    def index(self, label: Hashable) -> int:
        return _lookup(self._index, label)

    def label(self, index: int) -> Hashable:
        return self._labels[index]

    def weight(self, u: Hashable, v: Hashable) -> float:
        i, j = self.index(u), self.index(v)
        if i == j:
            raise InvalidGraph(f"No edge from vertex {u!r} to itself")
        return float(self._matrix[i, j])

    def submatrix(self, indices: Sequence[int]) -> np.ndarray:
        idx = np.asarray(indices, dtype=int)
        return self._matrix[np.ix_(idx, idx)]

    def tour_cost(self, indices: Sequence[int]) -> float:
        """Weight of the closed tour visiting ``indices`` in order."""
        if len(indices) == 0:
            return 0.0
        idx = np.asarray(indices, dtype=int)
        return float(self._matrix[idx, np.roll(idx, -1)].sum())

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def validate(self) -> None:
        m = self._matrix
        n = self.n
        if m.shape != (n, n):
            raise InvalidGraph(f"Expected a {n}x{n} weight matrix, got shape {m.shape}")
        off_diagonal = ~np.eye(n, dtype=bool)

        missing = np.argwhere(np.isnan(m) & off_diagonal)
        if missing.size:
            i, j = missing[0]
            raise InvalidGraph(f"Missing weight for pair ({self._labels[i]!r}, {self._labels[j]!r})")
        infinite = np.argwhere(~np.isfinite(m))
        if infinite.size:
            i, j = infinite[0]
            raise InvalidGraph(f"Non-finite weight for pair ({self._labels[i]!r}, {self._labels[j]!r})")
        negative = np.argwhere(m < 0)
        if negative.size:
            i, j = negative[0]
            raise InvalidGraph(
                f"Negative weight {m[i, j]} for pair ({self._labels[i]!r}, {self._labels[j]!r})"
            )
        if np.any(np.diag(m) != 0):
            raise InvalidGraph("Self-loops are not allowed")
        asymmetric = np.argwhere(~np.isclose(m, m.T, rtol=SYMMETRY_TOLERANCE, atol=SYMMETRY_TOLERANCE))
        if asymmetric.size:
            i, j = asymmetric[0]
            raise InvalidGraph(
                f"Weights for ({self._labels[i]!r}, {self._labels[j]!r}) differ by direction: "
                f"{m[i, j]} vs {m[j, i]}"
            )

    def triangle_violation(self, tolerance: float = 1e-9) -> Tuple[int, int, int] | None:
        """Return ``(a, b, c)`` with ``w(a, b) > w(a, c) + w(c, b) + tolerance``, or ``None``."""
        m = self._matrix
        for c in range(self.n):
            detour = m[:, c][:, None] + m[c, :][None, :]
            hits = np.argwhere(m > detour + tolerance)
            if hits.size:
                a, b = hits[0]
                return int(a), int(b), c
        return None

    def check_metric(self, tolerance: float = 1e-9) -> None:
        triple = self.triangle_violation(tolerance)
        if triple is None:
            return
        a, b, c = (self._labels[i] for i in triple)
        raise NonMetricGraph(
            f"Triangle inequality violated: w({a!r}, {b!r}) > w({a!r}, {c!r}) + w({c!r}, {b!r})",
            triple=(a, b, c),
        )

    def __repr__(self) -> str:
        return f"GraphModel(n={self.n})"


def _label_index(labels: Sequence[Hashable]) -> Dict[Hashable, int]:
    index: Dict[Hashable, int] = {}
    for i, label in enumerate(labels):
        try:
            duplicate = label in index
        except TypeError as exc:
            raise InvalidGraph(f"Vertex labels must be hashable, got {label!r}") from exc
        if duplicate:
            raise InvalidGraph(f"Duplicate vertex label: {label!r}")
        index[label] = i
    return index


def _lookup(index: Mapping[Hashable, int], label: Hashable) -> int:
    try:
        return index[label]
    except (KeyError, TypeError):
        raise InvalidGraph(f"Unknown vertex: {label!r}") from None


__all__ = ["GraphModel"]
