"""
Netlist Abstraction Layer

Holds the placeable cells and the weighted nets connecting them. Cells and
nets live in flat arenas addressed by integer index, so nets refer to cells
by index rather than by object reference. The model is write-once: cells and
nets can be added but never updated or removed, and the solver only reads it.
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple
import math

from ..errors import (
    DuplicateCellError,
    MalformedCellError,
    MalformedNetError,
    UnknownCellInNetError,
)


@dataclass(frozen=True)
class Cell:
    """A placeable object.

    Fixed cells are anchors whose coordinates never change. Free cells carry
    an optional starting position; ``None`` means "derive one".
    """
    id: Hashable
    index: int
    fixed: bool = False
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None


@dataclass(frozen=True)
class Net:
    """A weighted hyperedge over two or more distinct cells."""
    index: int
    cells: Tuple[int, ...]  # cell indices, first-seen order
    weight: float = 1.0
    name: Optional[str] = None

    @property
    def degree(self) -> int:
        return len(self.cells)


@dataclass
class Netlist:
    """
    Validated cell/net graph.

    Built once by an ingestion layer (see ``floatplace.netlist.reader``) or
    directly through ``add_cell``/``add_net``, then treated as read-only.
    """

    name: str = ""
    cells: List[Cell] = field(default_factory=list)
    nets: List[Net] = field(default_factory=list)

    _index: Dict[Hashable, int] = field(default_factory=dict, repr=False)
    _cell_nets: List[List[int]] = field(default_factory=list, repr=False)

    # --- Construction ---

    def add_cell(self, cell_id: Hashable, fixed: bool = False,
                 x: Optional[float] = None, y: Optional[float] = None) -> Cell:
        """Add a cell and return it.

        Raises:
            DuplicateCellError: if ``cell_id`` is already present
            MalformedCellError: if a fixed cell lacks finite coordinates, or
                the id type differs from the ids already added
        """
        if not _valid_id(cell_id):
            raise MalformedCellError(cell_id, "cell ids must be str or int")
        if self.cells and type(cell_id) is not type(self.cells[0].id):
            raise MalformedCellError(
                cell_id,
                f"id type {type(cell_id).__name__} differs from "
                f"{type(self.cells[0].id).__name__} used by existing cells",
            )
        if cell_id in self._index:
            raise DuplicateCellError(cell_id)

        if (x is None) != (y is None):
            raise MalformedCellError(cell_id, "x and y must be given together")
        if x is not None:
            x, y = float(x), float(y)
            if not (math.isfinite(x) and math.isfinite(y)):
                raise MalformedCellError(cell_id, f"non-finite position ({x}, {y})")
        if fixed and x is None:
            raise MalformedCellError(cell_id, "fixed cells need coordinates")

        cell = Cell(id=cell_id, index=len(self.cells), fixed=bool(fixed), x=x, y=y)
        self.cells.append(cell)
        self._index[cell_id] = cell.index
        self._cell_nets.append([])
        return cell

    def add_net(self, cell_ids: Iterable[Hashable], weight: float = 1.0,
                name: Optional[str] = None) -> int:
        """Add a net over ``cell_ids`` and return its index.

        Repeated ids collapse to one pin; the pin order of first appearance
        is kept.

        Raises:
            UnknownCellInNetError: if an id was never added
            MalformedNetError: if fewer than 2 distinct cells remain, or the
                weight is negative or non-finite
        """
        ids = list(cell_ids)
        indices: List[int] = []
        for cell_id in ids:
            idx = self._index.get(cell_id) if _valid_id(cell_id) else None
            if idx is None:
                raise UnknownCellInNetError(cell_id, name)
            if idx not in indices:
                indices.append(idx)

        if len(indices) < 2:
            raise MalformedNetError(
                f"needs at least 2 distinct cells, got {len(indices)}", ids, name
            )

        weight = float(weight)
        if not math.isfinite(weight) or weight < 0:
            raise MalformedNetError(f"invalid weight {weight}", ids, name)

        net = Net(index=len(self.nets), cells=tuple(indices), weight=weight, name=name)
        self.nets.append(net)
        for idx in indices:
            self._cell_nets[idx].append(net.index)
        return net.index

    # --- Queries ---

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, cell_id: Hashable) -> bool:
        return _valid_id(cell_id) and cell_id in self._index

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def cell_index(self, cell_id: Hashable) -> int:
        """Arena index of a cell id (KeyError if unknown)."""
        return self._index[cell_id]

    def get_cell(self, cell_id: Hashable) -> Optional[Cell]:
        """Get a cell by id."""
        idx = self._index.get(cell_id)
        return self.cells[idx] if idx is not None else None

    def free_cells(self) -> List[Cell]:
        """Movable cells in insertion order."""
        return [c for c in self.cells if not c.fixed]

    def fixed_cells(self) -> List[Cell]:
        """Anchored cells in insertion order."""
        return [c for c in self.cells if c.fixed]

    def nets_of(self, cell_id: Hashable) -> List[Net]:
        """Nets touching a cell, in net insertion order."""
        return [self.nets[n] for n in self._cell_nets[self._index[cell_id]]]

    def sorted_indices(self) -> List[int]:
        """Cell indices in ascending id order."""
        return sorted(range(len(self.cells)), key=lambda i: self.cells[i].id)

    def bounding_box(self, fixed_only: bool = True
                     ) -> Optional[Tuple[float, float, float, float]]:
        """(min_x, min_y, max_x, max_y) over positioned cells.

        Returns None when no cell qualifies.
        """
        xs: List[float] = []
        ys: List[float] = []
        for cell in self.cells:
            if fixed_only and not cell.fixed:
                continue
            if cell.has_position:
                xs.append(cell.x)
                ys.append(cell.y)
        if not xs:
            return None
        return (min(xs), min(ys), max(xs), max(ys))

    def stats(self) -> Dict[str, int]:
        """Counts for logging and reports."""
        fixed = sum(1 for c in self.cells if c.fixed)
        return {
            "cells": len(self.cells),
            "fixed": fixed,
            "free": len(self.cells) - fixed,
            "nets": len(self.nets),
            "pins": sum(n.degree for n in self.nets),
        }


def _valid_id(cell_id: Hashable) -> bool:
    return isinstance(cell_id, (str, int)) and not isinstance(cell_id, bool)
