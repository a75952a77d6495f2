"""
Exception hierarchy for floatplace.

Input errors are raised while a netlist is being built or read and are never
recovered internally. Numeric errors abort a solve without producing a
partial result.
"""

from typing import Hashable, Optional, Sequence


class FloatplaceError(Exception):
    """Base class for all floatplace errors."""
    pass


# =============================================================================
# Input errors
# =============================================================================


class InputError(FloatplaceError):
    """Netlist construction or ingestion failed."""
    pass


class DuplicateCellError(InputError):
    """A cell id was added twice."""

    def __init__(self, cell_id: Hashable):
        self.cell_id = cell_id
        super().__init__(f"Duplicate cell id: {cell_id!r}")


class UnknownCellInNetError(InputError):
    """A net references a cell id that was never added."""

    def __init__(self, cell_id: Hashable, net_name: Optional[str] = None):
        self.cell_id = cell_id
        self.net_name = net_name
        where = f" in net {net_name!r}" if net_name else ""
        super().__init__(f"Unknown cell id {cell_id!r}{where}")


class MalformedNetError(InputError):
    """A net has fewer than two distinct cells or an invalid weight."""

    def __init__(self, reason: str, cell_ids: Sequence[Hashable] = (),
                 net_name: Optional[str] = None):
        self.reason = reason
        self.cell_ids = tuple(cell_ids)
        self.net_name = net_name
        where = f"net {net_name!r}" if net_name else "net"
        super().__init__(f"Malformed {where} {list(self.cell_ids)}: {reason}")


class MalformedCellError(InputError):
    """A cell definition is unusable (missing anchor, bad id type)."""

    def __init__(self, cell_id: Hashable, reason: str):
        self.cell_id = cell_id
        self.reason = reason
        super().__init__(f"Malformed cell {cell_id!r}: {reason}")


class NetlistFormatError(InputError):
    """A netlist file could not be parsed."""

    def __init__(self, path: str, reason: str, line: Optional[int] = None):
        self.path = path
        self.reason = reason
        self.line = line
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"{location}: {reason}")


# =============================================================================
# Numeric errors
# =============================================================================


class NumericError(FloatplaceError):
    """The relaxation produced an unusable number."""
    pass


class DivergenceError(NumericError):
    """A coordinate became non-finite during a sweep."""

    def __init__(self, sweep: int, cell_id: Hashable, axis: str, value: float):
        self.sweep = sweep
        self.cell_id = cell_id
        self.axis = axis
        self.value = value
        super().__init__(
            f"Diverged in sweep {sweep}: cell {cell_id!r} {axis}={value}"
        )
