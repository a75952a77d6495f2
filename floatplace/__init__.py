"""
floatplace - Gauss-Seidel floating placement

Computes continuous, possibly overlapping 2D positions for cells connected
by weighted nets by relaxing a quadratic wirelength objective. Legalization
is left to a downstream tool.
"""

__version__ = "0.1.0"

from .errors import (
    FloatplaceError,
    InputError,
    DuplicateCellError,
    UnknownCellInNetError,
    MalformedNetError,
    MalformedCellError,
    NetlistFormatError,
    NumericError,
    DivergenceError,
)
from .netlist.abstraction import Cell, Net, Netlist
from .placement.config import SolverConfig
from .placement.gauss_seidel import GaussSeidelPlacer, solve_placement
from .placement.result import PlacementResult, SolveStatus

__all__ = [
    "FloatplaceError",
    "InputError",
    "DuplicateCellError",
    "UnknownCellInNetError",
    "MalformedNetError",
    "MalformedCellError",
    "NetlistFormatError",
    "NumericError",
    "DivergenceError",
    "Cell",
    "Net",
    "Netlist",
    "SolverConfig",
    "GaussSeidelPlacer",
    "solve_placement",
    "PlacementResult",
    "SolveStatus",
]
