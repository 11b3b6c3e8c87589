from MetricTSP.config import EngineConfig
from MetricTSP.core import TSPEngine
from MetricTSP.exceptions import (
    DisconnectedGraph,
    InstanceTooLarge,
    InvalidGraph,
    NoPerfectMatching,
    NonMetricGraph,
    NotEulerian,
    TimeLimitExpired,
    TSPError,
)
from MetricTSP.graph import GraphModel
from MetricTSP.observability import Event, EventSink, LoggingSink, NullSink, RecordingSink
from MetricTSP.selectors import BaseSelector, RuleBasedSelector, get_selector
from MetricTSP.solvers import (
    BaseSolver,
    ChristofidesSolver,
    DoubleTreeSolver,
    HeldKarpSolver,
    SOLVER_FAMILIES,
    SOLVER_REGISTRY,
    SOLVER_SPECS,
    Tour,
    get_solver,
)
from MetricTSP.utils.taxonomy import AlgorithmFamily, Strategy

__all__ = [
    "AlgorithmFamily",
    "BaseSelector",
    "BaseSolver",
    "ChristofidesSolver",
    "DisconnectedGraph",
    "DoubleTreeSolver",
    "EngineConfig",
    "Event",
    "EventSink",
    "GraphModel",
    "HeldKarpSolver",
    "InstanceTooLarge",
    "InvalidGraph",
    "LoggingSink",
    "NoPerfectMatching",
    "NonMetricGraph",
    "NotEulerian",
    "NullSink",
    "RecordingSink",
    "RuleBasedSelector",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "Strategy",
    "TSPEngine",
    "TSPError",
    "TimeLimitExpired",
    "Tour",
    "get_selector",
    "get_solver",
]
