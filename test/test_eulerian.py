from collections import Counter

import pytest

from MetricTSP import NotEulerian
from MetricTSP.algorithms import EulerianBuilder, MSTBuilder, Multigraph, PerfectMatcher, TourShortcutter, matching_edges
from tsp_test_data import random_euclidean_graph


def _edge_multiset(edges):
    return Counter(tuple(sorted(edge)) for edge in edges)


def _assert_closed_walk(circuit, start):
    assert circuit[0][0] == start
    assert circuit[-1][1] == start
    for (_, v), (u, _) in zip(circuit, circuit[1:]):
        assert v == u


class TestEulerianBuilder:
    def test_triangle(self):
        multigraph = Multigraph(3, [(0, 1), (1, 2), (2, 0)])
        circuit = EulerianBuilder().build(multigraph, start=0)
        _assert_closed_walk(circuit, 0)
        assert _edge_multiset(circuit) == _edge_multiset(multigraph.edges)

    def test_splices_sub_circuits(self):
        # Two triangles sharing vertex 0 (a bowtie) plus a doubled pendant edge.
        edges = [(0, 1), (1, 2), (2, 0), (0, 3), (3, 4), (4, 0), (4, 5), (5, 4)]
        multigraph = Multigraph(6, edges)
        circuit = EulerianBuilder().build(multigraph, start=1)
        _assert_closed_walk(circuit, 1)
        assert len(circuit) == len(edges)
        assert _edge_multiset(circuit) == _edge_multiset(edges)

    def test_default_start_is_first_edge(self):
        multigraph = Multigraph(4, [(2, 3), (3, 2)])
        circuit = EulerianBuilder().build(multigraph)
        _assert_closed_walk(circuit, 2)

    @pytest.mark.parametrize("seed", range(6))
    def test_doubled_tree_edges_are_preserved(self, seed):
        graph = random_euclidean_graph(15, seed)
        doubled = MSTBuilder().build(graph).doubled()
        circuit = EulerianBuilder().build(doubled, start=0)
        _assert_closed_walk(circuit, 0)
        assert _edge_multiset(circuit) == _edge_multiset(doubled.edges)

    @pytest.mark.parametrize("seed", range(6))
    def test_tree_plus_matching_edges_are_preserved(self, seed):
        graph = random_euclidean_graph(14, seed)
        tree = MSTBuilder().build(graph)
        matching = PerfectMatcher().match(graph, tree.odd_vertices())
        multigraph = tree.union(matching_edges(matching))
        circuit = EulerianBuilder().build(multigraph, start=0)
        _assert_closed_walk(circuit, 0)
        assert _edge_multiset(circuit) == _edge_multiset(multigraph.edges)

    def test_empty_multigraph(self):
        assert EulerianBuilder().build(Multigraph(3)) == []

    def test_odd_degree_is_rejected(self):
        with pytest.raises(NotEulerian, match="odd degree"):
            EulerianBuilder().build(Multigraph(2, [(0, 1)]))

    def test_disconnected_is_rejected(self):
        edges = [(0, 1), (1, 2), (2, 0), (3, 4), (4, 5), (5, 3)]
        with pytest.raises(NotEulerian, match="disconnected"):
            EulerianBuilder().build(Multigraph(6, edges), start=0)

    def test_isolated_start_is_rejected(self):
        with pytest.raises(NotEulerian):
            EulerianBuilder().build(Multigraph(4, [(0, 1), (1, 2), (2, 0)]), start=3)


class TestTourShortcutter:
    def test_keeps_first_occurrences(self):
        circuit = [(0, 1), (1, 2), (2, 1), (1, 3), (3, 1), (1, 0)]
        assert TourShortcutter().shortcut(circuit) == [0, 1, 2, 3]

    def test_empty_circuit(self):
        assert TourShortcutter().shortcut([]) == []
        assert TourShortcutter().shortcut([], start=0) == [0]

    def test_shortcut_never_longer_than_walk_on_metric_graph(self):
        graph = random_euclidean_graph(12, seed=5)
        doubled = MSTBuilder().build(graph).doubled()
        circuit = EulerianBuilder().build(doubled, start=0)
        path = TourShortcutter().shortcut(circuit)
        walk_weight = doubled.weight(graph)
        assert sorted(path) == list(range(12))
        assert graph.tour_cost(path) <= walk_weight + 1e-9


if __name__ == "__main__":
    pytest.main(["./test_eulerian.py"])
