import networkx as nx
import numpy as np
import pytest

from MetricTSP import GraphModel, NoPerfectMatching
from MetricTSP.algorithms import PerfectMatcher, matching_weight, minimum_weight_perfect_matching
from tsp_test_data import brute_force_matching_weight, random_euclidean_graph, random_weight_matrix


def _assert_perfect(mate, size):
    assert len(mate) == size
    for i, partner in enumerate(mate):
        assert partner != i
        assert mate[partner] == i


def _mate_weight(matrix, mate):
    return sum(matrix[i][partner] for i, partner in enumerate(mate) if i < partner)


@pytest.mark.parametrize("size", [2, 4, 6, 8])
@pytest.mark.parametrize("seed", range(12))
def test_matches_brute_force_real_weights(size, seed):
    matrix = random_weight_matrix(size, seed)
    mate = minimum_weight_perfect_matching(matrix)
    _assert_perfect(mate, size)
    assert _mate_weight(matrix, mate) == pytest.approx(brute_force_matching_weight(matrix))


@pytest.mark.parametrize("size", [4, 6, 8])
@pytest.mark.parametrize("seed", range(12))
def test_matches_brute_force_with_ties(size, seed):
    # Small integer weights (zeros included) produce many equal-weight optima and blossoms.
    matrix = random_weight_matrix(size, 100 + seed, integer=True)
    mate = minimum_weight_perfect_matching(matrix)
    _assert_perfect(mate, size)
    assert _mate_weight(matrix, mate) == pytest.approx(brute_force_matching_weight(matrix))


@pytest.mark.parametrize("seed", range(5))
def test_matches_brute_force_on_euclidean_points(seed):
    graph = random_euclidean_graph(8, seed)
    mate = minimum_weight_perfect_matching(graph.matrix)
    _assert_perfect(mate, 8)
    assert _mate_weight(graph.matrix, mate) == pytest.approx(brute_force_matching_weight(graph.matrix))


@pytest.mark.parametrize("size", [12, 20, 30])
def test_agrees_with_networkx_on_larger_sets(size):
    matrix = random_weight_matrix(size, seed=size)
    mate = minimum_weight_perfect_matching(matrix)
    _assert_perfect(mate, size)

    offset = 1.0 + matrix.max()
    inverted = nx.Graph()
    for i in range(size):
        for j in range(i + 1, size):
            inverted.add_edge(i, j, weight=offset - matrix[i, j])
    reference = nx.max_weight_matching(inverted, maxcardinality=True)
    assert len(reference) == size // 2
    expected = sum(matrix[u, v] for u, v in reference)
    assert _mate_weight(matrix, mate) == pytest.approx(expected)


def test_blossom_example():
    # Odd cycle 0-1-2 of cheap edges forces a blossom before 3 can be matched.
    matrix = np.array(
        [
            [0, 1, 1, 9, 9, 9],
            [1, 0, 1, 9, 9, 9],
            [1, 1, 0, 2, 9, 9],
            [9, 9, 2, 0, 1, 9],
            [9, 9, 9, 1, 0, 1],
            [9, 9, 9, 9, 1, 0],
        ],
        dtype=float,
    )
    mate = minimum_weight_perfect_matching(matrix)
    _assert_perfect(mate, 6)
    assert _mate_weight(matrix, mate) == pytest.approx(brute_force_matching_weight(matrix))


def test_empty_and_pair():
    assert minimum_weight_perfect_matching(np.zeros((0, 0))) == []
    assert minimum_weight_perfect_matching(np.array([[0.0, 3.0], [3.0, 0.0]])) == [1, 0]


def test_odd_size_has_no_perfect_matching():
    with pytest.raises(NoPerfectMatching):
        minimum_weight_perfect_matching(np.ones((3, 3)))


class TestPerfectMatcher:
    def test_subset_is_mapped_back_to_graph_indices(self):
        graph = random_euclidean_graph(9, seed=3)
        subset = [1, 4, 6, 8]
        matching = PerfectMatcher().match(graph, subset)
        assert sorted(matching) == subset
        assert sorted(matching.values()) == subset
        for u, v in matching.items():
            assert matching[v] == u
        expected = brute_force_matching_weight(graph.submatrix(subset))
        assert matching_weight(graph, matching) == pytest.approx(expected)

    def test_empty_subset(self):
        graph = GraphModel.from_matrix([[0, 1], [1, 0]])
        assert PerfectMatcher().match(graph, []) == {}

    def test_odd_subset(self):
        graph = random_euclidean_graph(5, seed=1)
        with pytest.raises(NoPerfectMatching):
            PerfectMatcher().match(graph, [0, 1, 2])

    def test_duplicate_vertices(self):
        graph = random_euclidean_graph(5, seed=1)
        with pytest.raises(ValueError):
            PerfectMatcher().match(graph, [0, 0])


if __name__ == "__main__":
    pytest.main(["./test_matching.py"])
