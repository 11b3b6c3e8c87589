from MetricTSP.solvers.exact.held_karp import DEFAULT_MAX_VERTICES, HeldKarpSolver

__all__ = ["DEFAULT_MAX_VERTICES", "HeldKarpSolver"]
