from __future__ import annotations

from MetricTSP.solvers.approx import ChristofidesSolver, DoubleTreeSolver
from MetricTSP.solvers.base import BaseSolver, SolverSpec, Tour
from MetricTSP.solvers.exact import DEFAULT_MAX_VERTICES, HeldKarpSolver
from MetricTSP.utils.taxonomy import AlgorithmFamily

SOLVER_SPECS: dict[str, SolverSpec] = {
    HeldKarpSolver.name: SolverSpec(
        name=HeldKarpSolver.name,
        cls=HeldKarpSolver,
        family=HeldKarpSolver.family,
    ),
    ChristofidesSolver.name: SolverSpec(
        name=ChristofidesSolver.name,
        cls=ChristofidesSolver,
        family=ChristofidesSolver.family,
    ),
    DoubleTreeSolver.name: SolverSpec(
        name=DoubleTreeSolver.name,
        cls=DoubleTreeSolver,
        family=DoubleTreeSolver.family,
    ),
}

SOLVER_REGISTRY: dict[str, type[BaseSolver]] = {name: spec.cls for name, spec in SOLVER_SPECS.items()}
SOLVER_FAMILIES: dict[str, AlgorithmFamily] = {name: spec.family for name, spec in SOLVER_SPECS.items()}


def get_solver(name: str, **kwargs) -> BaseSolver:
    solver_cls = SOLVER_REGISTRY.get(name)
    if solver_cls is None:
        raise KeyError(f"Unknown solver: {name}")
    return solver_cls(**kwargs)


__all__ = [
    "BaseSolver",
    "ChristofidesSolver",
    "DEFAULT_MAX_VERTICES",
    "DoubleTreeSolver",
    "HeldKarpSolver",
    "SOLVER_FAMILIES",
    "SOLVER_REGISTRY",
    "SOLVER_SPECS",
    "SolverSpec",
    "Tour",
    "get_solver",
]
