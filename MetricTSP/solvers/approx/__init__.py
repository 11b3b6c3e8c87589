from MetricTSP.solvers.approx.christofides import ChristofidesSolver
from MetricTSP.solvers.approx.double_tree import DoubleTreeSolver

__all__ = ["ChristofidesSolver", "DoubleTreeSolver"]
