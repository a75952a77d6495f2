"""
Convergence Monitor

Termination policy for the relaxation loop, kept apart from the update rule
so the metric can change without touching the solver. The monitor holds no
state between sweeps: each decision depends only on the finished sweep's
statistics, the sweep index and the configuration.
"""

from dataclasses import dataclass
from enum import Enum
import math

from .config import ConvergenceMetric, SolverConfig


class Decision(Enum):
    """Outcome of a convergence check."""
    CONTINUE = "continue"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


@dataclass
class SweepStats:
    """Movement accumulated over one sweep (both axes, all free cells)."""
    max_delta: float = 0.0
    sum_sq_delta: float = 0.0
    updates: int = 0  # coordinates actually recomputed

    def record(self, delta: float):
        if delta > self.max_delta:
            self.max_delta = delta
        self.sum_sq_delta += delta * delta
        self.updates += 1

    @property
    def rms_delta(self) -> float:
        if self.updates == 0:
            return 0.0
        return math.sqrt(self.sum_sq_delta / self.updates)


def sweep_metric(stats: SweepStats, metric: ConvergenceMetric) -> float:
    """Value of ``metric`` for a finished sweep."""
    if metric == ConvergenceMetric.RMS_DELTA:
        return stats.rms_delta
    return stats.max_delta


class ConvergenceMonitor:
    """Decide after each sweep whether to keep sweeping."""

    def __init__(self, config: SolverConfig):
        self.config = config

    def metric(self, stats: SweepStats) -> float:
        return sweep_metric(stats, self.config.convergence_metric)

    def decide(self, stats: SweepStats, sweep: int) -> Decision:
        """
        Args:
            stats: statistics of the sweep that just finished
            sweep: 1-based count of completed sweeps

        Returns:
            CONVERGED when the metric is below epsilon, otherwise
            MAX_ITERATIONS_REACHED once ``sweep`` hits the cap, otherwise
            CONTINUE.
        """
        if self.metric(stats) < self.config.convergence_epsilon:
            return Decision.CONVERGED
        if sweep >= self.config.max_iterations:
            return Decision.MAX_ITERATIONS_REACHED
        return Decision.CONTINUE
