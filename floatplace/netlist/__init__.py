"""Netlist model and ingestion."""

from .abstraction import Cell, Net, Netlist
from .reader import (
    NetlistDocument,
    SinglePinPolicy,
    load_netlist,
    netlist_from_dict,
    parse_yaml_netlist,
    parse_text_netlist,
)

__all__ = [
    # Core model
    "Cell",
    "Net",
    "Netlist",
    # Ingestion
    "NetlistDocument",
    "SinglePinPolicy",
    "load_netlist",
    "netlist_from_dict",
    "parse_yaml_netlist",
    "parse_text_netlist",
]
