from __future__ import annotations

from MetricTSP.selectors.base import BaseSelector
from MetricTSP.solvers import ChristofidesSolver, DEFAULT_MAX_VERTICES, HeldKarpSolver


class RuleBasedSelector(BaseSelector):
    """Exact search below the vertex threshold, Christofides from there on."""

    def __init__(self, exact_threshold: int = DEFAULT_MAX_VERTICES):
        self.exact_threshold = int(exact_threshold)

    def predict(self, features: dict):
        n = int(features.get("n_nodes") or 0)
        if n < self.exact_threshold:
            return HeldKarpSolver
        return ChristofidesSolver


__all__ = ["RuleBasedSelector"]
