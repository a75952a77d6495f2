"""
Solver configuration.

A single ``SolverConfig`` value is built by the caller and passed explicitly
to the equation builder, the solver and the convergence monitor. Nothing in
the package reads process-wide defaults.
"""

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import math

import yaml

logger = logging.getLogger(__name__)


class NetModel(Enum):
    """How a hyperedge is decomposed into two-pin edges."""
    CLIQUE = "clique"


class ConvergenceMetric(Enum):
    """Statistic compared against ``convergence_epsilon`` after each sweep."""
    MAX_DELTA = "max_delta"  # largest single-coordinate move
    RMS_DELTA = "rms_delta"  # root-mean-square over all updated coordinates


class SweepOrder(Enum):
    """Order in which free cells are visited within a sweep."""
    ASCENDING = "ascending"  # ascending cell id
    COLORED = "colored"      # colour class by colour class


class InitialPlacement(Enum):
    """Where free cells start before the first sweep."""
    GIVEN = "given"        # supplied coordinates, centroid when missing
    CENTROID = "centroid"  # centre of the fixed cells' bounding box


@dataclass
class SolverConfig:
    """Configuration for Gauss-Seidel floating placement."""
    # Termination
    convergence_epsilon: float = 1e-4
    max_iterations: int = 100
    convergence_metric: ConvergenceMetric = ConvergenceMetric.MAX_DELTA
    timeout: Optional[float] = None  # seconds, checked between sweeps only

    # Model
    net_model: NetModel = NetModel.CLIQUE

    # Relaxation
    sweep_order: SweepOrder = SweepOrder.ASCENDING
    initial_placement: InitialPlacement = InitialPlacement.GIVEN

    # Reporting
    track_energy: bool = False  # compute the objective after every sweep

    def __post_init__(self):
        # Accept plain strings for enum fields (YAML/CLI input)
        self.net_model = NetModel(self.net_model)
        self.convergence_metric = ConvergenceMetric(self.convergence_metric)
        self.sweep_order = SweepOrder(self.sweep_order)
        self.initial_placement = InitialPlacement(self.initial_placement)

        self.convergence_epsilon = _finite_number("convergence_epsilon", self.convergence_epsilon)
        if self.convergence_epsilon <= 0:
            raise ValueError(
                f"convergence_epsilon must be a positive number, got {self.convergence_epsilon}"
            )
        max_iterations = _finite_number("max_iterations", self.max_iterations)
        if max_iterations != int(max_iterations):
            raise ValueError(f"max_iterations must be an integer, got {self.max_iterations!r}")
        self.max_iterations = int(max_iterations)
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.timeout is not None:
            self.timeout = _finite_number("timeout", self.timeout)
            if self.timeout < 0:
                raise ValueError(f"timeout must be >= 0, got {self.timeout}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain mapping (enums as their values)."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SolverConfig":
        """Create from a mapping, rejecting unknown keys."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"solver config must be a mapping, got {type(data).__name__}")
        data = dict(data)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown solver config keys: {', '.join(unknown)}")
        return cls(**data)

    def replace(self, **overrides: Any) -> "SolverConfig":
        """Copy with some fields overridden; ``None`` values are ignored."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return SolverConfig.from_dict(data)


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read the solver settings a YAML file sets explicitly.

    The file may hold the settings at top level or under a ``config`` key,
    so a YAML netlist can double as a config file. Keys are validated but
    defaults are not filled in, so the result can be layered over another
    configuration with ``SolverConfig.replace``.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: invalid YAML: {e}")
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    if "config" in data:
        data = data["config"] or {}
    elif "cells" in data or "nets" in data:
        data = {}
    try:
        SolverConfig.from_dict(data)
    except ValueError as e:
        raise ValueError(f"{path}: {e}")
    return dict(data)


def load_config(path: Path) -> SolverConfig:
    """Load a ``SolverConfig`` from a YAML file, defaults for missing keys."""
    config = SolverConfig.from_dict(read_config_file(path))
    logger.debug("Loaded solver config from %s: %s", path, config)
    return config


def _finite_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value
