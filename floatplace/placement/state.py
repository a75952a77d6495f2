"""Mutable coordinate vectors owned by the solver during relaxation."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from ..netlist.abstraction import Netlist
from .config import InitialPlacement, SolverConfig

logger = logging.getLogger(__name__)

AXES = ("x", "y")


@dataclass
class PositionState:
    """Per-axis coordinate arrays indexed by cell arena index.

    Fixed cells are written once at construction; ``write`` refuses to touch
    them afterwards.
    """
    xs: List[float]
    ys: List[float]
    fixed: List[bool]
    sweep: int = 0
    _axes: Tuple[List[float], List[float]] = field(init=False, repr=False)

    def __post_init__(self):
        self._axes = (self.xs, self.ys)

    @classmethod
    def from_netlist(cls, netlist: Netlist,
                     config: Optional[SolverConfig] = None) -> "PositionState":
        """Create the initial state.

        Fixed cells take their anchor coordinates. Free cells follow
        ``config.initial_placement``; cells without coordinates always start
        at the centre of the fixed cells' bounding box (origin if none).
        """
        config = config or SolverConfig()
        cx, cy = _fixed_centroid(netlist)
        use_given = config.initial_placement == InitialPlacement.GIVEN

        xs: List[float] = []
        ys: List[float] = []
        fixed: List[bool] = []
        for cell in netlist.cells:
            if cell.fixed or (use_given and cell.has_position):
                xs.append(cell.x)
                ys.append(cell.y)
            else:
                xs.append(cx)
                ys.append(cy)
            fixed.append(cell.fixed)

        logger.debug("Initial state: %d cells, fallback start (%.4f, %.4f)",
                     len(xs), cx, cy)
        return cls(xs=xs, ys=ys, fixed=fixed)

    def axis(self, axis: int) -> List[float]:
        """Coordinate array for axis 0 (x) or 1 (y)."""
        return self._axes[axis]

    def position(self, index: int) -> Tuple[float, float]:
        return (self.xs[index], self.ys[index])

    def write(self, axis: int, index: int, value: float):
        if self.fixed[index]:
            raise ValueError(f"Cell index {index} is fixed and cannot be moved")
        self._axes[axis][index] = value


def _fixed_centroid(netlist: Netlist) -> Tuple[float, float]:
    bbox = netlist.bounding_box(fixed_only=True)
    if bbox is None:
        return (0.0, 0.0)
    min_x, min_y, max_x, max_y = bbox
    return ((min_x + max_x) / 2, (min_y + max_y) / 2)
