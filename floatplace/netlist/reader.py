"""
Netlist Readers

Builds a ``Netlist`` from a file. Two formats are understood:

YAML (``.yaml`` / ``.yml``):
```yaml
config:                     # optional, same keys as SolverConfig
  convergence_epsilon: 1.0e-4
  max_iterations: 200
cells:
  - {id: P1, fixed: true, x: 0.0, y: 0.0}
  - {id: P2, fixed: true, x: 10.0, y: 0.0}
  - {id: A}                 # free, starts at the fixed-cell centroid
  - {id: B, x: 3.0, y: 4.0} # free, explicit start
nets:
  - {name: n1, cells: [P1, A, B], weight: 2.0}
  - [A, P2]                 # shorthand, weight 1.0
```

Legacy text (any other suffix):
```
0.01            # convergence epsilon
2 1 2           # fixed cells, free cells, edges
0 0             # fixed cell 0 at (0, 0)
10 0            # fixed cell 1 at (10, 0)
0 2             # edge between cell 0 and cell 2
1 2
```
Cells are numbered from 0, fixed cells first. Every edge becomes a two-pin
net of weight 1.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple
import logging

import yaml

from ..errors import (
    MalformedCellError,
    MalformedNetError,
    NetlistFormatError,
    UnknownCellInNetError,
)
from ..placement.config import SolverConfig
from .abstraction import Netlist

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class SinglePinPolicy(Enum):
    """What to do with nets that touch fewer than two distinct cells."""
    REJECT = "reject"  # raise MalformedNetError
    IGNORE = "ignore"  # drop silently
    WARN = "warn"      # drop and log a warning


@dataclass
class NetlistDocument:
    """A netlist read from disk, with any solver settings it carried."""
    netlist: Netlist
    config: Optional[SolverConfig] = None
    source_file: Optional[Path] = None
    dropped_nets: int = 0


def add_net_with_policy(netlist: Netlist, cell_ids: Sequence[Hashable],
                        weight: float = 1.0, name: Optional[str] = None,
                        policy: SinglePinPolicy = SinglePinPolicy.REJECT) -> bool:
    """Add a net, applying ``policy`` to single-pin nets.

    Unknown cells are reported regardless of policy.

    Returns:
        True if the net was added, False if it was dropped
    """
    policy = SinglePinPolicy(policy)
    if policy != SinglePinPolicy.REJECT and len(set(cell_ids)) < 2:
        for cell_id in cell_ids:
            if cell_id not in netlist:
                raise UnknownCellInNetError(cell_id, name)
        if policy == SinglePinPolicy.WARN:
            logger.warning("Ignoring net %s with fewer than 2 distinct cells: %s",
                           name or f"#{len(netlist.nets)}", list(cell_ids))
        return False
    netlist.add_net(cell_ids, weight=weight, name=name)
    return True


# =============================================================================
# YAML
# =============================================================================


def netlist_from_dict(data: Dict[str, Any],
                      single_pin_nets: SinglePinPolicy = SinglePinPolicy.REJECT,
                      name: str = "", source: str = "<dict>") -> NetlistDocument:
    """Build a netlist from the mapping layout used by the YAML format."""
    if not isinstance(data, dict):
        raise NetlistFormatError(source, f"expected a mapping, got {type(data).__name__}")

    cells = data.get("cells") or []
    nets = data.get("nets") or []
    if not isinstance(cells, list) or not isinstance(nets, list):
        raise NetlistFormatError(source, "'cells' and 'nets' must be lists")

    netlist = Netlist(name=name or str(data.get("name", "")))
    for position, entry in enumerate(cells):
        if not isinstance(entry, dict) or "id" not in entry:
            raise NetlistFormatError(source, f"cell #{position} needs an 'id'")
        fixed = entry.get("fixed", False)
        if not isinstance(fixed, bool):
            raise NetlistFormatError(
                source, f"cell {entry['id']!r}: 'fixed' must be true or false, got {fixed!r}"
            )
        try:
            netlist.add_cell(
                entry["id"],
                fixed=fixed,
                x=entry.get("x"),
                y=entry.get("y"),
            )
        except (TypeError, ValueError) as e:
            raise NetlistFormatError(source, f"cell {entry['id']!r}: {e}")

    dropped = 0
    for position, entry in enumerate(nets):
        if isinstance(entry, list):
            entry = {"cells": entry}
        if not isinstance(entry, dict) or not isinstance(entry.get("cells"), list):
            raise NetlistFormatError(source, f"net #{position} needs a 'cells' list")
        for pin in entry["cells"]:
            if isinstance(pin, bool) or not isinstance(pin, (str, int)):
                raise NetlistFormatError(
                    source, f"net #{position}: cell ids must be strings or integers, got {pin!r}"
                )
        net_name = entry.get("name")
        try:
            weight = float(entry.get("weight", 1.0))
        except (TypeError, ValueError):
            raise MalformedNetError(f"invalid weight {entry.get('weight')!r}",
                                    entry["cells"], net_name)
        added = add_net_with_policy(
            netlist, entry["cells"], weight=weight,
            name=None if net_name is None else str(net_name),
            policy=single_pin_nets,
        )
        if not added:
            dropped += 1

    config = None
    if data.get("config") is not None:
        try:
            config = SolverConfig.from_dict(data["config"])
        except (TypeError, ValueError) as e:
            raise NetlistFormatError(source, f"config: {e}")

    return NetlistDocument(netlist=netlist, config=config, dropped_nets=dropped)


def parse_yaml_netlist(path: Path,
                       single_pin_nets: SinglePinPolicy = SinglePinPolicy.REJECT
                       ) -> NetlistDocument:
    """Read a YAML netlist file."""
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise NetlistFormatError(str(path), f"invalid YAML: {e}")

    doc = netlist_from_dict(data or {}, single_pin_nets, name=path.stem, source=str(path))
    doc.source_file = path
    logger.debug("Loaded YAML netlist %s: %s", path, doc.netlist.stats())
    return doc


# =============================================================================
# Legacy text format
# =============================================================================


def parse_text_netlist(path: Path,
                       single_pin_nets: SinglePinPolicy = SinglePinPolicy.REJECT
                       ) -> NetlistDocument:
    """Read the legacy whitespace-separated netlist format."""
    path = Path(path)
    source = str(path)
    lines = _significant_lines(path.read_text())
    cursor = iter(lines)

    def next_fields(what: str, count: int) -> Tuple[int, List[str]]:
        try:
            line_no, text = next(cursor)
        except StopIteration:
            raise NetlistFormatError(source, f"file ended while reading {what}")
        fields = text.split()
        if len(fields) != count:
            raise NetlistFormatError(
                source, f"invalid {what}: expected {count} values, got {len(fields)}", line_no
            )
        return line_no, fields

    def to_number(value: str, kind, what: str, line_no: Optional[int] = None):
        try:
            return kind(value)
        except ValueError:
            raise NetlistFormatError(source, f"invalid {what} value {value!r}", line_no)

    epsilon_line, (epsilon_text,) = next_fields("convergence epsilon", 1)
    epsilon = to_number(epsilon_text, float, "convergence epsilon", epsilon_line)
    header_line, header = next_fields("header", 3)
    num_fixed, num_free, num_edges = (
        to_number(v, int, "header", header_line) for v in header
    )
    if min(num_fixed, num_free, num_edges) < 0:
        raise NetlistFormatError(source, "header counts must be non-negative", header_line)

    netlist = Netlist(name=path.stem)
    for index in range(num_fixed):
        line_no, (x, y) = next_fields("fixed cell definition", 2)
        try:
            netlist.add_cell(index, fixed=True,
                             x=to_number(x, float, "coordinate", line_no),
                             y=to_number(y, float, "coordinate", line_no))
        except MalformedCellError as e:
            raise NetlistFormatError(source, str(e), line_no)
    for index in range(num_fixed, num_fixed + num_free):
        netlist.add_cell(index, fixed=False)

    dropped = 0
    for edge in range(num_edges):
        line_no, (a, b) = next_fields("edge definition", 2)
        added = add_net_with_policy(
            netlist,
            [to_number(a, int, "edge", line_no), to_number(b, int, "edge", line_no)],
            name=f"e{edge}",
            policy=single_pin_nets,
        )
        if not added:
            dropped += 1

    try:
        config = SolverConfig(convergence_epsilon=epsilon)
    except ValueError as e:
        raise NetlistFormatError(source, str(e), epsilon_line)

    logger.debug("Loaded text netlist %s: %s", path, netlist.stats())
    return NetlistDocument(netlist=netlist, config=config, source_file=path,
                           dropped_nets=dropped)


def _significant_lines(content: str) -> List[tuple]:
    """(line number, text) for lines that are not blank or comments."""
    result = []
    for number, line in enumerate(content.splitlines(), start=1):
        text = line.split("#", 1)[0].strip()
        if text:
            result.append((number, text))
    return result


def load_netlist(path: Path,
                 single_pin_nets: SinglePinPolicy = SinglePinPolicy.REJECT
                 ) -> NetlistDocument:
    """Read a netlist file, choosing the format from its suffix."""
    path = Path(path)
    if path.suffix.lower() in YAML_SUFFIXES:
        return parse_yaml_netlist(path, single_pin_nets)
    return parse_text_netlist(path, single_pin_nets)
