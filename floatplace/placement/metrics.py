"""Wirelength measures for solver states and finished placements."""

from typing import Hashable, Mapping, Tuple

from ..netlist.abstraction import Net, Netlist
from .equations import EquationSystem
from .state import PositionState


def quadratic_wirelength(system: EquationSystem, state: PositionState) -> float:
    """Objective minimised by the relaxation.

    Sum of weight * squared euclidean distance over every free-free edge
    (counted once) and every fixed term. Fixed-fixed edges are constant and
    left out.
    """
    xs, ys = state.xs, state.ys
    total = 0.0
    for idx, eq in system.equations.items():
        x, y = xs[idx], ys[idx]
        for other, weight in eq.neighbors:
            if idx < other:
                dx = x - xs[other]
                dy = y - ys[other]
                total += weight * (dx * dx + dy * dy)
        for term in eq.fixed_terms:
            dx = x - term.x
            dy = y - term.y
            total += term.weight * (dx * dx + dy * dy)
    return total


def net_hpwl(net: Net, netlist: Netlist,
             positions: Mapping[Hashable, Tuple[float, float]]) -> float:
    """Half-perimeter of the bounding box around a net's pins."""
    xs = []
    ys = []
    for idx in net.cells:
        x, y = positions[netlist.cells[idx].id]
        xs.append(x)
        ys.append(y)
    return (max(xs) - min(xs)) + (max(ys) - min(ys))


def manhattan_wirelength(netlist: Netlist,
                         positions: Mapping[Hashable, Tuple[float, float]]) -> float:
    """Unweighted half-perimeter wirelength summed over all nets.

    For two-pin nets this is |dx| + |dy| per net.
    """
    return sum(net_hpwl(net, netlist, positions) for net in netlist.nets)
