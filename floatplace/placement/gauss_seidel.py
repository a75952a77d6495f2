"""
Gauss-Seidel Floating Placement

Relaxes free-cell positions toward the minimum of the quadratic wirelength
objective. Each free cell is repeatedly moved to the weighted average of its
neighbours and fixed anchors:

    new = (sum w_i * pos(neighbour_i) + sum wf_j * anchor_j)
          / (sum w_i + sum wf_j)

Updates are written in place, so later cells in the same sweep already see
the values computed earlier in it. That makes the result depend on the visit
order, which is therefore fixed (ascending cell id, or colour class by colour
class). The x and y axes are independent under the clique model and are
relaxed one after the other within a sweep.

Solver phases:
    INITIALIZED -> SWEEPING -> CONVERGED | MAX_ITERATIONS_REACHED
                                | TIMED_OUT | DIVERGED
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple
import logging
import math
import time

from ..errors import DivergenceError
from ..netlist.abstraction import Netlist
from .coloring import colored_order
from .config import SolverConfig, SweepOrder
from .convergence import ConvergenceMonitor, Decision, SweepStats
from .equations import EquationBuilder, EquationSystem
from .metrics import quadratic_wirelength
from .result import PlacementResult, SolveStatus, emit_result
from .state import AXES, PositionState

logger = logging.getLogger(__name__)


class SolverPhase(Enum):
    """Lifecycle of a single solve."""
    INITIALIZED = "initialized"
    SWEEPING = "sweeping"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    TIMED_OUT = "timed_out"
    DIVERGED = "diverged"


_TERMINAL_STATUS = {
    Decision.CONVERGED: (SolverPhase.CONVERGED, SolveStatus.CONVERGED),
    Decision.MAX_ITERATIONS_REACHED: (SolverPhase.MAX_ITERATIONS_REACHED,
                                      SolveStatus.MAX_ITERATIONS_REACHED),
}


@dataclass
class SweepReport:
    """Progress snapshot handed to the solve callback after each sweep."""
    sweep: int
    max_delta: float
    metric: float
    elapsed: float
    energy: Optional[float] = None


class GaussSeidelPlacer:
    """
    Floating placement by Gauss-Seidel relaxation.

    The equation system is built once in the constructor; each ``solve``
    call starts from a fresh initial state, so repeated solves of the same
    netlist and configuration give identical results.
    """

    def __init__(self, netlist: Netlist, config: Optional[SolverConfig] = None):
        self.netlist = netlist
        self.config = config or SolverConfig()
        self.system: EquationSystem = EquationBuilder(netlist, self.config).build()
        self.monitor = ConvergenceMonitor(self.config)
        self.phase = SolverPhase.INITIALIZED

        if self.config.sweep_order == SweepOrder.COLORED:
            order = colored_order(self.system)
        else:
            order = self.system.order
        # Cells without equations keep their start position
        self._order: Tuple[int, ...] = tuple(
            idx for idx in order if not self.system.equation(idx).is_empty
        )

    def solve(self, callback: Optional[Callable[[SweepReport], None]] = None
              ) -> PlacementResult:
        """
        Sweep until converged, out of iterations or out of time.

        Args:
            callback: Optional function called after every completed sweep

        Returns:
            PlacementResult with the final positions of every cell

        Raises:
            DivergenceError: if any coordinate becomes non-finite
        """
        state = self._initialize_state()
        self.phase = SolverPhase.SWEEPING
        start = time.monotonic()

        if logger.isEnabledFor(logging.DEBUG):
            stats = self.netlist.stats()
            logger.debug(
                "Gauss-Seidel start: cells=%d free=%d active=%d nets=%d "
                "epsilon=%g max_iterations=%d metric=%s order=%s",
                stats["cells"], stats["free"], len(self._order), stats["nets"],
                self.config.convergence_epsilon, self.config.max_iterations,
                self.config.convergence_metric.value, self.config.sweep_order.value,
            )

        log_every = 10
        sweep = 0
        while True:
            sweep += 1
            stats = self._sweep(state, sweep)
            state.sweep = sweep
            metric = self.monitor.metric(stats)
            elapsed = time.monotonic() - start

            energy = None
            if self.config.track_energy:
                energy = quadratic_wirelength(self.system, state)

            if callback:
                callback(SweepReport(sweep=sweep, max_delta=stats.max_delta,
                                     metric=metric, elapsed=elapsed, energy=energy))

            if logger.isEnabledFor(logging.DEBUG) and (sweep == 1 or sweep % log_every == 0):
                logger.debug("Sweep %d: max_delta=%.6g metric=%.6g updates=%d",
                             sweep, stats.max_delta, metric, stats.updates)

            decision = self.monitor.decide(stats, sweep)
            if decision != Decision.CONTINUE:
                self.phase, status = _TERMINAL_STATUS[decision]
                break

            if self.config.timeout is not None and elapsed >= self.config.timeout:
                self.phase, status = SolverPhase.TIMED_OUT, SolveStatus.TIMED_OUT
                break

        if status == SolveStatus.CONVERGED:
            logger.debug("Converged after %d sweeps (metric=%.6g)", sweep, metric)
        else:
            logger.warning(
                "Gauss-Seidel did not converge after %d sweeps (%s, metric=%.6g, "
                "epsilon=%g). Consider increasing max_iterations.",
                sweep, status.value, metric, self.config.convergence_epsilon,
            )

        return emit_result(self.netlist, state, status, sweep, metric, energy)

    def _initialize_state(self) -> PositionState:
        return PositionState.from_netlist(self.netlist, self.config)

    def _sweep(self, state: PositionState, sweep: int) -> SweepStats:
        """Relax x then y over every active free cell once."""
        stats = SweepStats()
        for axis in (0, 1):
            self._relax_axis(state, axis, sweep, stats)
        return stats

    def _relax_axis(self, state: PositionState, axis: int, sweep: int,
                    stats: SweepStats):
        coords = state.axis(axis)
        for idx in self._order:
            eq = self.system.equation(idx)
            numerator = 0.0
            denominator = 0.0
            # Stored order keeps the float sums reproducible
            for other, weight in eq.neighbors:
                numerator += weight * coords[other]
                denominator += weight
            for term in eq.fixed_terms:
                numerator += term.weight * term.position(axis)
                denominator += term.weight

            new = numerator / denominator if denominator != 0.0 else math.nan
            if not math.isfinite(new):
                self.phase = SolverPhase.DIVERGED
                cell_id = self.netlist.cells[idx].id
                logger.error("Divergence in sweep %d at cell %r (%s=%s)",
                             sweep, cell_id, AXES[axis], new)
                raise DivergenceError(sweep, cell_id, AXES[axis], new)

            old = coords[idx]
            state.write(axis, idx, new)
            stats.record(abs(new - old))


def solve_placement(netlist: Netlist, config: Optional[SolverConfig] = None,
                    callback: Optional[Callable[[SweepReport], None]] = None
                    ) -> PlacementResult:
    """
    Convenience function to run floating placement on a netlist.

    Args:
        netlist: Validated netlist
        config: Solver configuration (defaults apply when omitted)
        callback: Optional per-sweep progress callback

    Returns:
        PlacementResult with status and final positions
    """
    return GaussSeidelPlacer(netlist, config).solve(callback=callback)
