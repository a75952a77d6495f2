"""
Result Emitter

Packages the final position state and solve status for the caller. A
result only exists for non-fatal outcomes; divergence surfaces as a
``DivergenceError`` instead.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Tuple
import math

from ..netlist.abstraction import Netlist
from .state import PositionState


class SolveStatus(Enum):
    """Terminal, non-fatal solver states."""
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    TIMED_OUT = "timed_out"


@dataclass
class PlacementResult:
    """Final coordinates of every cell, in ascending id order."""
    positions: Dict[Hashable, Tuple[float, float]]
    status: SolveStatus
    iterations_run: int
    final_delta: float = 0.0  # convergence metric of the last sweep
    fixed: List[Hashable] = field(default_factory=list)
    energy: Optional[float] = None  # objective after the last sweep, if tracked

    @property
    def converged(self) -> bool:
        return self.status == SolveStatus.CONVERGED

    def position_of(self, cell_id: Hashable) -> Tuple[float, float]:
        return self.positions[cell_id]

    def rounded(self) -> "PlacementResult":
        """Copy with coordinates rounded to integers (half away from zero)."""
        return PlacementResult(
            positions={cid: (_round_half_away(x), _round_half_away(y))
                       for cid, (x, y) in self.positions.items()},
            status=self.status,
            iterations_run=self.iterations_run,
            final_delta=self.final_delta,
            fixed=list(self.fixed),
            energy=self.energy,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain mapping for serialisation."""
        fixed = set(self.fixed)
        return {
            "status": self.status.value,
            "iterations_run": self.iterations_run,
            "final_delta": self.final_delta,
            "energy": self.energy,
            "cells": [
                {"id": cid, "x": x, "y": y, "fixed": cid in fixed}
                for cid, (x, y) in self.positions.items()
            ],
        }

    def summary(self) -> str:
        """Human-readable summary."""
        status = {
            SolveStatus.CONVERGED: "Converged",
            SolveStatus.MAX_ITERATIONS_REACHED: "Stopped at iteration cap (not converged)",
            SolveStatus.TIMED_OUT: "Stopped by timeout (not converged)",
        }[self.status]
        lines = [
            f"Status: {status}",
            f"Sweeps: {self.iterations_run}",
            f"Final delta: {self.final_delta:.6g}",
            f"Cells: {len(self.positions)} ({len(self.fixed)} fixed)",
        ]
        if self.energy is not None:
            lines.append(f"Quadratic wirelength: {self.energy:.6g}")
        return "\n".join(lines)


def emit_result(netlist: Netlist, state: PositionState, status: SolveStatus,
                iterations_run: int, final_delta: float,
                energy: Optional[float] = None) -> PlacementResult:
    """Read the final state out in ascending id order."""
    positions: Dict[Hashable, Tuple[float, float]] = {}
    fixed: List[Hashable] = []
    for idx in netlist.sorted_indices():
        cell = netlist.cells[idx]
        positions[cell.id] = state.position(idx)
        if cell.fixed:
            fixed.append(cell.id)
    return PlacementResult(
        positions=positions,
        status=status,
        iterations_run=iterations_run,
        final_delta=final_delta,
        fixed=fixed,
        energy=energy,
    )


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
