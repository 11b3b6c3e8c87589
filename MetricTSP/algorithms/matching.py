"""Minimum-weight perfect matching on complete graphs.

The search is the primal-dual blossom method of Edmonds in the O(n^3) form
described by Galil ("Efficient algorithms for finding maximum matching in
graphs", 1986). Minimum-weight perfect matching is obtained by running the
maximum-weight, maximum-cardinality search on the weights ``C - w``: every
maximum-cardinality matching of a complete graph on an even vertex set is
perfect, and all perfect matchings share the constant ``|S|/2 * C``.

Vertices are ``0..n-1``. Blossoms live in an arena indexed ``n..2n-1``; a
blossom record is the set of parallel lists ``blossom_parent``,
``blossom_children``, ``blossom_endpoints``, ``blossom_base`` and
``blossom_best_edges`` at its id, and ids return to ``free_blossoms`` when a
blossom is expanded. Edge ``k`` has the two endpoints ``2k`` and ``2k+1``;
``endpoint[p]`` is the vertex at endpoint ``p`` and ``p ^ 1`` is the opposite
end of the same edge.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from MetricTSP.exceptions import NoPerfectMatching
from MetricTSP.graph import GraphModel

FREE = 0
OUTER = 1
INNER = 2
BREADCRUMB = 4


class _BlossomSearch:
    def __init__(self, nvertex: int, edges: List[Tuple[int, int, float]]):
        self.nvertex = nvertex
        self.edges = edges
        nedge = len(edges)
        max_weight = max(0.0, max(wt for _, _, wt in edges))

        self.endpoint = [edges[p // 2][p % 2] for p in range(2 * nedge)]
        # Endpoints pointing away from each vertex.
        self.neighbend: List[List[int]] = [[] for _ in range(nvertex)]
        for k, (i, j, _) in enumerate(edges):
            self.neighbend[i].append(2 * k + 1)
            self.neighbend[j].append(2 * k)

        # mate[v] is the remote endpoint of v's matched edge, or -1.
        self.mate = [-1] * nvertex
        # Labels and the endpoint through which the label was obtained, for
        # vertices and top-level blossoms alike.
        self.label = [FREE] * (2 * nvertex)
        self.labelend = [-1] * (2 * nvertex)
        self.inblossom = list(range(nvertex))

        self.blossom_parent = [-1] * (2 * nvertex)
        self.blossom_children: List[List[int] | None] = [None] * (2 * nvertex)
        self.blossom_base = list(range(nvertex)) + [-1] * nvertex
        self.blossom_endpoints: List[List[int] | None] = [None] * (2 * nvertex)
        self.best_edge = [-1] * (2 * nvertex)
        self.blossom_best_edges: List[List[int] | None] = [None] * (2 * nvertex)
        self.free_blossoms = list(range(nvertex, 2 * nvertex))

        self.dual = [max_weight] * nvertex + [0.0] * nvertex
        self.allowed = [False] * nedge
        self.queue: List[int] = []

    def slack(self, k: int) -> float:
        i, j, wt = self.edges[k]
        return self.dual[i] + self.dual[j] - 2 * wt

    def leaves(self, b: int) -> List[int]:
        if b < self.nvertex:
            return [b]
        found = []
        stack = [b]
        while stack:
            t = stack.pop()
            if t < self.nvertex:
                found.append(t)
            else:
                stack.extend(self.blossom_children[t])
        return found

    # ------------------------------------------------------------------
    # Forest growth
    # ------------------------------------------------------------------
    def assign_label(self, w: int, t: int, p: int) -> None:
        b = self.inblossom[w]
        self.label[w] = self.label[b] = t
        self.labelend[w] = self.labelend[b] = p
        self.best_edge[w] = self.best_edge[b] = -1
        if t == OUTER:
            self.queue.extend(self.leaves(b))
        elif t == INNER:
            # The base of an inner blossom is matched; its mate becomes outer.
            base = self.blossom_base[b]
            self.assign_label(self.endpoint[self.mate[base]], OUTER, self.mate[base] ^ 1)

    def scan_blossom(self, v: int, w: int) -> int:
        """Trace back from ``v`` and ``w``; return the common base or -1 for an augmenting path."""
        path = []
        base = -1
        while v != -1 or w != -1:
            b = self.inblossom[v]
            if self.label[b] & BREADCRUMB:
                base = self.blossom_base[b]
                break
            path.append(b)
            self.label[b] = OUTER | BREADCRUMB
            if self.labelend[b] == -1:
                v = -1
            else:
                v = self.endpoint[self.labelend[b]]
                b = self.inblossom[v]
                v = self.endpoint[self.labelend[b]]
            if w != -1:
                v, w = w, v
        for b in path:
            self.label[b] = OUTER
        return base

    # ------------------------------------------------------------------
    # Blossom contraction and expansion
    # ------------------------------------------------------------------
    def add_blossom(self, base: int, k: int) -> None:
        v, w, _ = self.edges[k]
        bb = self.inblossom[base]
        bv = self.inblossom[v]
        bw = self.inblossom[w]
        b = self.free_blossoms.pop()
        self.blossom_base[b] = base
        self.blossom_parent[b] = -1
        self.blossom_parent[bb] = b
        path: List[int] = []
        endps: List[int] = []
        self.blossom_children[b] = path
        self.blossom_endpoints[b] = endps

        while bv != bb:
            self.blossom_parent[bv] = b
            path.append(bv)
            endps.append(self.labelend[bv])
            v = self.endpoint[self.labelend[bv]]
            bv = self.inblossom[v]
        path.append(bb)
        path.reverse()
        endps.reverse()
        endps.append(2 * k)
        while bw != bb:
            self.blossom_parent[bw] = b
            path.append(bw)
            endps.append(self.labelend[bw] ^ 1)
            w = self.endpoint[self.labelend[bw]]
            bw = self.inblossom[w]

        self.label[b] = OUTER
        self.labelend[b] = self.labelend[bb]
        self.dual[b] = 0.0
        for leaf in self.leaves(b):
            if self.label[self.inblossom[leaf]] == INNER:
                # Former inner vertices become outer and must be scanned.
                self.queue.append(leaf)
            self.inblossom[leaf] = b

        best_edge_to = [-1] * (2 * self.nvertex)
        for bv in path:
            if self.blossom_best_edges[bv] is None:
                nblists = [[p // 2 for p in self.neighbend[leaf]] for leaf in self.leaves(bv)]
            else:
                nblists = [self.blossom_best_edges[bv]]
            for nblist in nblists:
                for e in nblist:
                    i, j, _ = self.edges[e]
                    if self.inblossom[j] == b:
                        i, j = j, i
                    bj = self.inblossom[j]
                    if (
                        bj != b
                        and self.label[bj] == OUTER
                        and (best_edge_to[bj] == -1 or self.slack(e) < self.slack(best_edge_to[bj]))
                    ):
                        best_edge_to[bj] = e
            self.blossom_best_edges[bv] = None
            self.best_edge[bv] = -1
        self.blossom_best_edges[b] = [e for e in best_edge_to if e != -1]
        self.best_edge[b] = -1
        for e in self.blossom_best_edges[b]:
            if self.best_edge[b] == -1 or self.slack(e) < self.slack(self.best_edge[b]):
                self.best_edge[b] = e

    def expand_blossom(self, b: int, endstage: bool) -> None:
        for s in self.blossom_children[b]:
            self.blossom_parent[s] = -1
            if s < self.nvertex:
                self.inblossom[s] = s
            elif endstage and self.dual[s] == 0:
                self.expand_blossom(s, endstage)
            else:
                for leaf in self.leaves(s):
                    self.inblossom[leaf] = s

        if not endstage and self.label[b] == INNER:
            # Relabel the sub-blossoms on the even-length path from the entry
            # child to the base; the rest of the cycle becomes unlabeled.
            children = self.blossom_children[b]
            endps = self.blossom_endpoints[b]
            entry_child = self.inblossom[self.endpoint[self.labelend[b] ^ 1]]
            j = children.index(entry_child)
            if j & 1:
                j -= len(children)
                jstep = 1
                endptrick = 0
            else:
                jstep = -1
                endptrick = 1
            p = self.labelend[b]
            while j != 0:
                self.label[self.endpoint[p ^ 1]] = FREE
                self.label[self.endpoint[endps[j - endptrick] ^ endptrick ^ 1]] = FREE
                self.assign_label(self.endpoint[p ^ 1], INNER, p)
                self.allowed[endps[j - endptrick] // 2] = True
                j += jstep
                p = endps[j - endptrick] ^ endptrick
                self.allowed[p // 2] = True
                j += jstep
            bv = children[j]
            self.label[self.endpoint[p ^ 1]] = self.label[bv] = INNER
            self.labelend[self.endpoint[p ^ 1]] = self.labelend[bv] = p
            self.best_edge[bv] = -1
            j += jstep
            while children[j] != entry_child:
                bv = children[j]
                if self.label[bv] == OUTER:
                    j += jstep
                    continue
                reached = next((leaf for leaf in self.leaves(bv) if self.label[leaf] != FREE), None)
                if reached is not None:
                    self.label[reached] = FREE
                    self.label[self.endpoint[self.mate[self.blossom_base[bv]]]] = FREE
                    self.assign_label(reached, INNER, self.labelend[reached])
                j += jstep

        self.label[b] = self.labelend[b] = -1
        self.blossom_children[b] = self.blossom_endpoints[b] = None
        self.blossom_base[b] = -1
        self.blossom_best_edges[b] = None
        self.best_edge[b] = -1
        self.free_blossoms.append(b)

    # ------------------------------------------------------------------
    # Augmentation
    # ------------------------------------------------------------------
    def augment_blossom(self, b: int, v: int) -> None:
        """Swap matched and unmatched edges inside ``b`` so that ``v`` becomes its base."""
        t = v
        while self.blossom_parent[t] != b:
            t = self.blossom_parent[t]
        if t >= self.nvertex:
            self.augment_blossom(t, v)
        children = self.blossom_children[b]
        endps = self.blossom_endpoints[b]
        i = j = children.index(t)
        if i & 1:
            j -= len(children)
            jstep = 1
            endptrick = 0
        else:
            jstep = -1
            endptrick = 1
        while j != 0:
            j += jstep
            t = children[j]
            p = endps[j - endptrick] ^ endptrick
            if t >= self.nvertex:
                self.augment_blossom(t, self.endpoint[p])
            j += jstep
            t = children[j]
            if t >= self.nvertex:
                self.augment_blossom(t, self.endpoint[p ^ 1])
            self.mate[self.endpoint[p]] = p ^ 1
            self.mate[self.endpoint[p ^ 1]] = p
        self.blossom_children[b] = children[i:] + children[:i]
        self.blossom_endpoints[b] = endps[i:] + endps[:i]
        self.blossom_base[b] = self.blossom_base[self.blossom_children[b][0]]

    def augment_matching(self, k: int) -> None:
        v, w, _ = self.edges[k]
        for s, p in ((v, 2 * k + 1), (w, 2 * k)):
            while True:
                bs = self.inblossom[s]
                if bs >= self.nvertex:
                    self.augment_blossom(bs, s)
                self.mate[s] = p
                if self.labelend[bs] == -1:
                    break
                t = self.endpoint[self.labelend[bs]]
                bt = self.inblossom[t]
                s = self.endpoint[self.labelend[bt]]
                j = self.endpoint[self.labelend[bt] ^ 1]
                if bt >= self.nvertex:
                    self.augment_blossom(bt, j)
                self.mate[j] = self.labelend[bt]
                p = self.labelend[bt] ^ 1

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def run(self) -> List[int]:
        nvertex = self.nvertex
        nedge = len(self.edges)
        for _ in range(nvertex):
            self.label[:] = [FREE] * (2 * nvertex)
            self.best_edge[:] = [-1] * (2 * nvertex)
            self.blossom_best_edges[nvertex:] = [None] * nvertex
            self.allowed[:] = [False] * nedge
            self.queue[:] = []

            for v in range(nvertex):
                if self.mate[v] == -1 and self.label[self.inblossom[v]] == FREE:
                    self.assign_label(v, OUTER, -1)

            augmented = self._grow_until_augmented()
            if not augmented:
                break

            for b in range(nvertex, 2 * nvertex):
                if (
                    self.blossom_parent[b] == -1
                    and self.blossom_base[b] >= 0
                    and self.label[b] == OUTER
                    and self.dual[b] == 0
                ):
                    self.expand_blossom(b, True)

        return [self.endpoint[p] if p >= 0 else -1 for p in self.mate]

    def _grow_until_augmented(self) -> bool:
        nvertex = self.nvertex
        while True:
            while self.queue:
                v = self.queue.pop()
                for p in self.neighbend[v]:
                    k = p // 2
                    w = self.endpoint[p]
                    if self.inblossom[v] == self.inblossom[w]:
                        continue
                    kslack = 0.0
                    if not self.allowed[k]:
                        kslack = self.slack(k)
                        if kslack <= 0:
                            self.allowed[k] = True
                    if self.allowed[k]:
                        if self.label[self.inblossom[w]] == FREE:
                            self.assign_label(w, INNER, p ^ 1)
                        elif self.label[self.inblossom[w]] == OUTER:
                            base = self.scan_blossom(v, w)
                            if base >= 0:
                                self.add_blossom(base, k)
                            else:
                                self.augment_matching(k)
                                return True
                        elif self.label[w] == FREE:
                            self.label[w] = INNER
                            self.labelend[w] = p ^ 1
                    elif self.label[self.inblossom[w]] == OUTER:
                        b = self.inblossom[v]
                        if self.best_edge[b] == -1 or kslack < self.slack(self.best_edge[b]):
                            self.best_edge[b] = k
                    elif self.label[w] == FREE:
                        if self.best_edge[w] == -1 or kslack < self.slack(self.best_edge[w]):
                            self.best_edge[w] = k

            delta_type, delta, delta_edge, delta_blossom = self._choose_delta()

            for v in range(nvertex):
                vlabel = self.label[self.inblossom[v]]
                if vlabel == OUTER:
                    self.dual[v] -= delta
                elif vlabel == INNER:
                    self.dual[v] += delta
            for b in range(nvertex, 2 * nvertex):
                if self.blossom_base[b] >= 0 and self.blossom_parent[b] == -1:
                    if self.label[b] == OUTER:
                        self.dual[b] += delta
                    elif self.label[b] == INNER:
                        self.dual[b] -= delta

            if delta_type == 1:
                return False
            if delta_type == 2:
                self.allowed[delta_edge] = True
                i, j, _ = self.edges[delta_edge]
                if self.label[self.inblossom[i]] == FREE:
                    i, j = j, i
                self.queue.append(i)
            elif delta_type == 3:
                self.allowed[delta_edge] = True
                i, _, _ = self.edges[delta_edge]
                self.queue.append(i)
            else:
                self.expand_blossom(delta_blossom, False)

    def _choose_delta(self) -> Tuple[int, float, int, int]:
        """Pick the smallest dual adjustment that creates a tight edge or frees a blossom."""
        nvertex = self.nvertex
        delta_type = -1
        delta = 0.0
        delta_edge = -1
        delta_blossom = -1

        # Outer vertex to free vertex.
        for v in range(nvertex):
            if self.label[self.inblossom[v]] == FREE and self.best_edge[v] != -1:
                d = self.slack(self.best_edge[v])
                if delta_type == -1 or d < delta:
                    delta, delta_type, delta_edge = d, 2, self.best_edge[v]
        # Edge between two outer blossoms.
        for b in range(2 * nvertex):
            if self.blossom_parent[b] == -1 and self.label[b] == OUTER and self.best_edge[b] != -1:
                d = self.slack(self.best_edge[b]) / 2.0
                if delta_type == -1 or d < delta:
                    delta, delta_type, delta_edge = d, 3, self.best_edge[b]
        # Inner blossom whose dual reaches zero.
        for b in range(nvertex, 2 * nvertex):
            if (
                self.blossom_base[b] >= 0
                and self.blossom_parent[b] == -1
                and self.label[b] == INNER
                and (delta_type == -1 or self.dual[b] < delta)
            ):
                delta, delta_type, delta_blossom = self.dual[b], 4, b

        if delta_type == -1:
            # No further growth: the matching has maximum cardinality.
            delta_type = 1
            delta = max(0.0, min(self.dual[:nvertex]))
        return delta_type, delta, delta_edge, delta_blossom


def minimum_weight_perfect_matching(weights: np.ndarray) -> List[int]:
    """Return ``mate`` with ``mate[i]`` the partner of ``i`` under a minimum-weight perfect matching."""
    w = np.asarray(weights, dtype=float)
    size = w.shape[0]
    if size % 2 == 1:
        raise NoPerfectMatching(f"Cannot perfectly match an odd number of vertices ({size})")
    if size == 0:
        return []
    if size == 2:
        return [1, 0]

    offset = 1.0 + float(w.max())
    edges = [(i, j, offset - float(w[i, j])) for i in range(size) for j in range(i + 1, size)]
    mate = _BlossomSearch(size, edges).run()
    exposed = [v for v, partner in enumerate(mate) if partner < 0]
    if exposed:
        raise NoPerfectMatching(f"Vertices left unmatched: {exposed}")
    return mate


class PerfectMatcher:
    """Minimum-weight perfect matching over a subset of a graph's vertices."""

    def match(self, graph: GraphModel, vertices: Sequence[int]) -> Dict[int, int]:
        vertices = [int(v) for v in vertices]
        if len(set(vertices)) != len(vertices):
            raise ValueError("Vertex subset contains duplicates")
        if not vertices:
            return {}
        mate = minimum_weight_perfect_matching(graph.submatrix(vertices))
        return {vertices[i]: vertices[partner] for i, partner in enumerate(mate)}


def matching_weight(graph: GraphModel, matching: Dict[int, int]) -> float:
    matrix = graph.matrix
    return float(sum(matrix[u, v] for u, v in matching.items() if u < v))


__all__ = ["PerfectMatcher", "matching_weight", "minimum_weight_perfect_matching"]
