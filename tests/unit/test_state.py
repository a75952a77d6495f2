"""Tests for position state initialisation and colour classes."""

import pytest

from floatplace.netlist.abstraction import Netlist
from floatplace.placement.coloring import color_classes, colored_order
from floatplace.placement.config import InitialPlacement, SolverConfig
from floatplace.placement.equations import build_equations
from floatplace.placement.state import PositionState


# =============================================================================
# State Initialization Tests
# =============================================================================

class TestStateInitialization:
    """Tests for PositionState.from_netlist."""

    def test_given_positions_used(self, balanced_star):
        state = PositionState.from_netlist(balanced_star)
        m = balanced_star.cell_index("M")

        assert state.position(m) == (3.0, 7.0)
        assert state.position(balanced_star.cell_index("R")) == (10.0, 0.0)

    def test_missing_positions_use_fixed_centroid(self):
        netlist = Netlist()
        netlist.add_cell("F1", fixed=True, x=0.0, y=2.0)
        netlist.add_cell("F2", fixed=True, x=10.0, y=6.0)
        netlist.add_cell("A")

        state = PositionState.from_netlist(netlist)
        assert state.position(2) == (5.0, 4.0)

    def test_centroid_mode_overrides_given(self, balanced_star):
        config = SolverConfig(initial_placement=InitialPlacement.CENTROID)
        state = PositionState.from_netlist(balanced_star, config)

        assert state.position(balanced_star.cell_index("M")) == (5.0, 0.0)

    def test_origin_without_fixed_cells(self):
        netlist = Netlist()
        netlist.add_cell("A")
        netlist.add_cell("B", x=1.0, y=1.0)

        state = PositionState.from_netlist(netlist)
        assert state.position(0) == (0.0, 0.0)
        assert state.position(1) == (1.0, 1.0)

    def test_fixed_cells_are_write_protected(self, anchor_pair):
        state = PositionState.from_netlist(anchor_pair)

        with pytest.raises(ValueError):
            state.write(0, anchor_pair.cell_index("F"), 1.0)

        state.write(1, anchor_pair.cell_index("A"), 3.0)
        assert state.ys[anchor_pair.cell_index("A")] == 3.0

    def test_axis_views_share_storage(self, anchor_pair):
        state = PositionState.from_netlist(anchor_pair)
        state.write(0, 1, 7.0)

        assert state.axis(0) is state.xs
        assert state.xs[1] == 7.0


# =============================================================================
# Coloring Tests
# =============================================================================

class TestColoring:
    """Tests for colour classes of the free-cell graph."""

    def test_chain_alternates(self, chain):
        system = build_equations(chain)
        a, b, c = (chain.cell_index(i) for i in "ABC")

        assert color_classes(system) == [(a, c), (b,)]
        assert colored_order(system) == (a, c, b)

    def test_classes_are_independent(self, random_netlist_factory):
        netlist = random_netlist_factory(seed=5, num_free=30, extra_nets=40)
        system = build_equations(netlist)
        classes = color_classes(system)

        for cls in classes:
            members = set(cls)
            for cell in cls:
                assert not any(n in members for n, _ in system.neighbors_of(cell))
        assert sorted(i for cls in classes for i in cls) == sorted(system.order)

    def test_clique_needs_one_color_per_cell(self):
        netlist = Netlist()
        for cell_id in ("A", "B", "C", "D"):
            netlist.add_cell(cell_id)
        netlist.add_net(["A", "B", "C", "D"])

        classes = color_classes(build_equations(netlist))
        assert classes == [(0,), (1,), (2,), (3,)]

    def test_isolated_cells_share_first_class(self):
        netlist = Netlist()
        netlist.add_cell("A")
        netlist.add_cell("B")

        assert color_classes(build_equations(netlist)) == [(0, 1)]

    def test_empty_system(self):
        netlist = Netlist()
        netlist.add_cell("F", fixed=True, x=0.0, y=0.0)

        assert color_classes(build_equations(netlist)) == []
