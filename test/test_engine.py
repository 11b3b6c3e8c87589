import json
import logging

import numpy as np
import pytest

from MetricTSP import (
    EngineConfig,
    GraphModel,
    InstanceTooLarge,
    InvalidGraph,
    LoggingSink,
    NonMetricGraph,
    NullSink,
    RecordingSink,
    RuleBasedSelector,
    Strategy,
    TimeLimitExpired,
    TSPEngine,
    get_selector,
)
from tsp_test_data import TRIANGLE_WEIGHTS, is_valid_tour, random_euclidean_graph

NON_METRIC = [[0, 1, 5], [1, 0, 1], [5, 1, 0]]


class TestTSPEngine:
    @pytest.mark.parametrize(
        "strategy, solver_name",
        [
            (Strategy.EXACT, "held_karp"),
            (Strategy.CHRISTOFIDES, "christofides"),
            (Strategy.DOUBLE_TREE, "double_tree"),
            ("exact", "held_karp"),
            ("Christofides", "christofides"),
            ("double_tree", "double_tree"),
        ],
    )
    def test_explicit_strategy(self, strategy, solver_name):
        graph = random_euclidean_graph(8, seed=3)
        tour = TSPEngine().solve(graph, strategy, sink=NullSink())
        assert tour.name == solver_name
        assert tour.metadata["selected_solver"] == solver_name
        assert is_valid_tour(tour, graph)

    def test_auto_picks_exact_below_threshold(self):
        engine = TSPEngine()
        assert engine.select_solver(random_euclidean_graph(23, seed=1), Strategy.AUTO).name == "held_karp"
        tour = engine.solve(random_euclidean_graph(9, seed=1), sink=NullSink())
        assert tour.name == "held_karp"
        assert tour.metadata["strategy"] == "auto"

    def test_auto_picks_christofides_at_threshold(self):
        tour = TSPEngine().solve(random_euclidean_graph(24, seed=1), "auto", sink=NullSink())
        assert tour.name == "christofides"

    def test_configured_threshold_drives_auto_and_exact(self):
        engine = TSPEngine(EngineConfig(exact_threshold=6))
        assert engine.solve(random_euclidean_graph(5, seed=0), sink=NullSink()).name == "held_karp"
        assert engine.solve(random_euclidean_graph(6, seed=0), sink=NullSink()).name == "christofides"
        with pytest.raises(InstanceTooLarge):
            engine.solve(random_euclidean_graph(7, seed=0), Strategy.EXACT, sink=NullSink())

    def test_configured_default_strategy(self):
        engine = TSPEngine(EngineConfig(strategy="double_tree"))
        assert engine.solve(random_euclidean_graph(5, seed=0), sink=NullSink()).name == "double_tree"

    def test_unknown_strategy(self):
        with pytest.raises(KeyError):
            TSPEngine().solve(random_euclidean_graph(4, seed=0), "simulated_annealing")

    def test_rejects_non_graph_input(self):
        with pytest.raises(InvalidGraph):
            TSPEngine().solve([[0, 1], [1, 0]])

    def test_triangle_scenario(self):
        graph = GraphModel.from_weights(["A", "B", "C"], TRIANGLE_WEIGHTS)
        for strategy in Strategy:
            assert TSPEngine().solve(graph, strategy, sink=NullSink()).cost == pytest.approx(6.0)

    def test_metric_check_is_opt_in(self):
        graph = GraphModel(["a", "b", "c"], NON_METRIC)
        assert is_valid_tour(TSPEngine().solve(graph, sink=NullSink()), graph)
        strict = TSPEngine(EngineConfig(verify_metric=True))
        with pytest.raises(NonMetricGraph):
            strict.solve(graph, sink=NullSink())

    def test_events_and_failures_are_reported(self):
        sink = RecordingSink()
        tour = TSPEngine().solve(random_euclidean_graph(6, seed=2), Strategy.CHRISTOFIDES, sink=sink)
        assert sink.names()[0] == "engine.dispatch"
        assert sink.names()[-1] == "engine.complete"
        assert sink.find("engine.complete")[0].fields["cost"] == tour.cost

        sink = RecordingSink()
        with pytest.raises(InstanceTooLarge):
            TSPEngine().solve(random_euclidean_graph(30, seed=2), Strategy.EXACT, sink=sink)
        failed = sink.find("engine.failed")
        assert failed and failed[0].fields["error"] == "InstanceTooLarge"

    def test_custom_selector(self):
        engine = TSPEngine(selector=RuleBasedSelector(exact_threshold=3))
        assert engine.solve(random_euclidean_graph(4, seed=0), sink=NullSink()).name == "christofides"

    def test_select_solver_passes_threshold(self):
        engine = TSPEngine(EngineConfig(exact_threshold=9))
        solver = engine.select_solver(random_euclidean_graph(4, seed=0), "exact")
        assert solver.max_vertices == 9


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.strategy is Strategy.AUTO
        assert config.exact_threshold == 24
        assert config.verify_metric is False
        assert config.time_limit is None

    def test_from_mapping(self):
        config = EngineConfig.from_mapping({"strategy": "christofides", "exact_threshold": 12})
        assert config.strategy is Strategy.CHRISTOFIDES
        assert config.exact_threshold == 12

    def test_numpy_integer_threshold(self):
        config = EngineConfig(exact_threshold=np.int64(12))
        assert config.exact_threshold == 12
        assert type(config.exact_threshold) is int

    @pytest.mark.parametrize(
        "values",
        [
            {"strategy": "greedy"},
            {"exact_threshold": 0},
            {"exact_threshold": "24"},
            {"verify_metric": "yes"},
            {"time_limit": -1.0},
            {"metric_tolerance": -1e-3},
            {"unknown": 1},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ValueError):
            EngineConfig.from_mapping(values)

    def test_from_json(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text(json.dumps({"strategy": "double_tree", "verify_metric": True}), encoding="utf-8")
        config = EngineConfig.from_json(path)
        assert config.strategy is Strategy.DOUBLE_TREE
        assert config.verify_metric is True

    def test_from_json_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.from_json(tmp_path / "absent.json")

    def test_from_json_requires_object(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            EngineConfig.from_json(path)

    def test_time_limit_from_config(self):
        engine = TSPEngine(EngineConfig(time_limit=1e-12))
        with pytest.raises(TimeLimitExpired):
            engine.solve(random_euclidean_graph(40, seed=0), "christofides", sink=NullSink())


class TestSinks:
    def test_logging_sink_writes_events(self, caplog):
        logger = logging.getLogger("metric_tsp_test")
        caplog.set_level(logging.DEBUG, logger="metric_tsp_test")
        LoggingSink(logger).emit("mst.built", edges=3, weight=1.5)
        assert "mst.built edges=3 weight=1.5" in caplog.text

    def test_logging_sink_respects_level(self, caplog):
        logger = logging.getLogger("metric_tsp_quiet")
        caplog.set_level(logging.WARNING, logger="metric_tsp_quiet")
        LoggingSink(logger).emit("mst.built", edges=3)
        assert caplog.text == ""

    def test_default_sink_is_silent_at_warning_level(self):
        graph = random_euclidean_graph(5, seed=0)
        assert is_valid_tour(TSPEngine().solve(graph), graph)

    def test_get_selector(self):
        assert isinstance(get_selector(), RuleBasedSelector)
        with pytest.raises(ValueError):
            get_selector("random_forest")


if __name__ == "__main__":
    pytest.main(["./test_engine.py"])
