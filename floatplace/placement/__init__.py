"""Gauss-Seidel floating placement: equations, relaxation and results."""

from .config import (
    SolverConfig,
    NetModel,
    ConvergenceMetric,
    SweepOrder,
    InitialPlacement,
    load_config,
    read_config_file,
)
from .equations import (
    EquationBuilder,
    EquationSystem,
    CellEquation,
    FixedTerm,
    CliqueDecomposition,
    build_equations,
)
from .state import PositionState
from .convergence import ConvergenceMonitor, Decision, SweepStats
from .gauss_seidel import GaussSeidelPlacer, SolverPhase, SweepReport, solve_placement
from .result import PlacementResult, SolveStatus
from .metrics import quadratic_wirelength, manhattan_wirelength

__all__ = [
    "SolverConfig",
    "NetModel",
    "ConvergenceMetric",
    "SweepOrder",
    "InitialPlacement",
    "load_config",
    "read_config_file",
    "EquationBuilder",
    "EquationSystem",
    "CellEquation",
    "FixedTerm",
    "CliqueDecomposition",
    "build_equations",
    "PositionState",
    "ConvergenceMonitor",
    "Decision",
    "SweepStats",
    "GaussSeidelPlacer",
    "SolverPhase",
    "SweepReport",
    "solve_placement",
    "PlacementResult",
    "SolveStatus",
    "quadratic_wirelength",
    "manhattan_wirelength",
]
