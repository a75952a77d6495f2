"""
Shared test fixtures for floatplace tests.

Provides small hand-checkable netlists and a seeded generator for random
connected netlists.
"""

import random

import pytest

from floatplace.netlist.abstraction import Netlist
from floatplace.placement.config import SolverConfig


@pytest.fixture
def default_config() -> SolverConfig:
    """Default configuration for testing."""
    return SolverConfig(convergence_epsilon=1e-6, max_iterations=1000)


@pytest.fixture
def anchor_pair() -> Netlist:
    """One fixed cell at (10, 10) pulling one free cell."""
    netlist = Netlist(name="anchor_pair")
    netlist.add_cell("F", fixed=True, x=10.0, y=10.0)
    netlist.add_cell("A", x=0.0, y=0.0)
    netlist.add_net(["F", "A"])
    return netlist


@pytest.fixture
def balanced_star() -> Netlist:
    """One free cell on a 3-pin net with anchors at (0, 0) and (10, 0)."""
    netlist = Netlist(name="balanced_star")
    netlist.add_cell("L", fixed=True, x=0.0, y=0.0)
    netlist.add_cell("R", fixed=True, x=10.0, y=0.0)
    netlist.add_cell("M", x=3.0, y=7.0)
    netlist.add_net(["L", "M", "R"])
    return netlist


@pytest.fixture
def chain() -> Netlist:
    """Free cells A-B-C strung between anchors at x=0 and x=8."""
    netlist = Netlist(name="chain")
    netlist.add_cell("P0", fixed=True, x=0.0, y=0.0)
    netlist.add_cell("P1", fixed=True, x=8.0, y=0.0)
    netlist.add_cell("A", x=0.0, y=5.0)
    netlist.add_cell("B", x=0.0, y=5.0)
    netlist.add_cell("C", x=0.0, y=5.0)
    netlist.add_net(["P0", "A"])
    netlist.add_net(["A", "B"])
    netlist.add_net(["B", "C"])
    netlist.add_net(["C", "P1"])
    return netlist


def make_random_netlist(seed: int, num_fixed: int = 4, num_free: int = 12,
                        extra_nets: int = 10, max_degree: int = 4) -> Netlist:
    """Random connected netlist with at least one anchor.

    A spanning path over every cell guarantees connectivity; extra nets of
    random degree and weight are layered on top.
    """
    rng = random.Random(seed)
    netlist = Netlist(name=f"random_{seed}")
    ids = []
    for i in range(num_fixed):
        cell_id = f"F{i:02d}"
        netlist.add_cell(cell_id, fixed=True,
                         x=rng.uniform(-50, 50), y=rng.uniform(-50, 50))
        ids.append(cell_id)
    for i in range(num_free):
        cell_id = f"M{i:02d}"
        netlist.add_cell(cell_id, x=rng.uniform(-50, 50), y=rng.uniform(-50, 50))
        ids.append(cell_id)

    order = ids[:]
    rng.shuffle(order)
    for a, b in zip(order, order[1:]):
        netlist.add_net([a, b], weight=rng.uniform(0.5, 3.0))

    for _ in range(extra_nets):
        degree = rng.randint(2, max_degree)
        netlist.add_net(rng.sample(ids, degree), weight=rng.uniform(0.1, 5.0))
    return netlist


@pytest.fixture
def random_netlist_factory():
    """Factory fixture for seeded random connected netlists."""
    return make_random_netlist
