from MetricTSP.algorithms.eulerian import EulerianBuilder, eulerian_circuit
from MetricTSP.algorithms.matching import PerfectMatcher, matching_weight, minimum_weight_perfect_matching
from MetricTSP.algorithms.mst import MSTBuilder, minimum_spanning_tree
from MetricTSP.algorithms.multigraph import Edge, Multigraph, matching_edges
from MetricTSP.algorithms.shortcut import TourShortcutter

__all__ = [
    "Edge",
    "EulerianBuilder",
    "MSTBuilder",
    "Multigraph",
    "PerfectMatcher",
    "TourShortcutter",
    "eulerian_circuit",
    "matching_edges",
    "matching_weight",
    "minimum_spanning_tree",
    "minimum_weight_perfect_matching",
]
