"""
Equation Builder

Turns a validated netlist into the per-cell weighted adjacency that the
Gauss-Seidel solver relaxes. Each net is decomposed into two-pin edges by a
net model (clique by default). Edges are then sorted into three kinds:

- free-free: stored symmetrically in both cells' neighbour lists
- free-fixed: folded into the free cell's equation as a constant
  (weight, fixed_x, fixed_y) term
- fixed-fixed: discarded, they contribute nothing to any unknown

Repeated edges between the same pair accumulate. Neighbour order is the
order in which pairs are first seen (net insertion order, then pair order
within a net), so identical input always yields identical equations.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple, Type
import logging

from ..netlist.abstraction import Net, Netlist
from .config import NetModel, SolverConfig

logger = logging.getLogger(__name__)


Edge = Tuple[int, int, float]  # (cell_a, cell_b, weight) by cell index


# =============================================================================
# Net models
# =============================================================================


class NetDecomposition:
    """Strategy that contributes weighted two-pin edges for a net."""

    model: NetModel

    def edges(self, net: Net) -> Iterator[Edge]:
        raise NotImplementedError


class CliqueDecomposition(NetDecomposition):
    """Complete graph over the net's pins, each edge weighted w / (k - 1).

    Normalising by k - 1 keeps a net's total pull on any one pin equal to
    its weight regardless of fanout, approximating a star model without an
    extra unknown for the hub.
    """

    model = NetModel.CLIQUE

    def edges(self, net: Net) -> Iterator[Edge]:
        k = net.degree
        if k < 2:
            return
        pair_weight = net.weight / (k - 1)
        pins = net.cells
        for i in range(k):
            for j in range(i + 1, k):
                yield (pins[i], pins[j], pair_weight)


_NET_MODELS: Dict[NetModel, Type[NetDecomposition]] = {
    NetModel.CLIQUE: CliqueDecomposition,
}


def get_net_model(model: NetModel) -> NetDecomposition:
    """Instantiate the decomposition strategy for ``model``."""
    try:
        return _NET_MODELS[NetModel(model)]()
    except KeyError:
        raise ValueError(f"No decomposition registered for net model {model!r}")


# =============================================================================
# Equation system
# =============================================================================


@dataclass(frozen=True)
class FixedTerm:
    """Constant pull from an anchored cell."""
    cell: int
    weight: float
    x: float
    y: float

    def position(self, axis: int) -> float:
        return self.x if axis == 0 else self.y


@dataclass(frozen=True)
class CellEquation:
    """Weighted-average update rule for one free cell."""
    cell: int
    neighbors: Tuple[Tuple[int, float], ...]  # (free cell index, weight)
    fixed_terms: Tuple[FixedTerm, ...]

    @property
    def is_empty(self) -> bool:
        return not self.neighbors and not self.fixed_terms

    @property
    def total_weight(self) -> float:
        total = 0.0
        for _, weight in self.neighbors:
            total += weight
        for term in self.fixed_terms:
            total += term.weight
        return total


@dataclass(frozen=True)
class EquationSystem:
    """Adjacency for every free cell, read-only during solving."""
    equations: Dict[int, CellEquation]  # free cell index -> equation
    order: Tuple[int, ...]              # free cells, ascending id
    net_model: NetModel
    free_edges: int                     # distinct free-free pairs
    fixed_edges: int                    # distinct free-fixed pairs
    discarded_edges: int                # fixed-fixed edges dropped

    def equation(self, cell: int) -> CellEquation:
        return self.equations[cell]

    def neighbors_of(self, cell: int) -> Tuple[Tuple[int, float], ...]:
        return self.equations[cell].neighbors


class EquationBuilder:
    """Build an ``EquationSystem`` from a netlist."""

    def __init__(self, netlist: Netlist, config: Optional[SolverConfig] = None):
        self.netlist = netlist
        self.config = config or SolverConfig()
        self.decomposition = get_net_model(self.config.net_model)

    def build(self) -> EquationSystem:
        cells = self.netlist.cells
        free_links: Dict[int, Dict[int, float]] = {}
        fixed_links: Dict[int, Dict[int, float]] = {}
        for cell in cells:
            if not cell.fixed:
                free_links[cell.index] = {}
                fixed_links[cell.index] = {}

        discarded = 0
        for net in self.netlist.nets:
            for a, b, weight in self.decomposition.edges(net):
                a_fixed = cells[a].fixed
                b_fixed = cells[b].fixed
                if a_fixed and b_fixed:
                    discarded += 1
                elif a_fixed:
                    _accumulate(fixed_links[b], a, weight)
                elif b_fixed:
                    _accumulate(fixed_links[a], b, weight)
                else:
                    _accumulate(free_links[a], b, weight)
                    _accumulate(free_links[b], a, weight)

        equations: Dict[int, CellEquation] = {}
        for idx in free_links:
            fixed_terms = tuple(
                FixedTerm(cell=f, weight=w, x=cells[f].x, y=cells[f].y)
                for f, w in fixed_links[idx].items()
            )
            equations[idx] = CellEquation(
                cell=idx,
                neighbors=tuple(free_links[idx].items()),
                fixed_terms=fixed_terms,
            )

        order = tuple(i for i in self.netlist.sorted_indices() if not cells[i].fixed)
        free_pairs = sum(len(links) for links in free_links.values()) // 2
        fixed_pairs = sum(len(links) for links in fixed_links.values())

        system = EquationSystem(
            equations=equations,
            order=order,
            net_model=self.decomposition.model,
            free_edges=free_pairs,
            fixed_edges=fixed_pairs,
            discarded_edges=discarded,
        )
        if logger.isEnabledFor(logging.DEBUG):
            isolated = sum(1 for eq in equations.values() if eq.is_empty)
            logger.debug(
                "Built %s equations: free=%d free_edges=%d fixed_edges=%d "
                "discarded=%d isolated=%d",
                system.net_model.value, len(equations), free_pairs,
                fixed_pairs, discarded, isolated,
            )
        return system


def _accumulate(links: Dict[int, float], other: int, weight: float):
    links[other] = links.get(other, 0.0) + weight


def build_equations(netlist: Netlist, config: Optional[SolverConfig] = None
                    ) -> EquationSystem:
    """Convenience wrapper around ``EquationBuilder``."""
    return EquationBuilder(netlist, config).build()
