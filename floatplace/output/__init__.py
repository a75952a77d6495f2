"""Serialisation of placement results."""

from .writer import OutputFormat, format_table, write_result

__all__ = ["OutputFormat", "format_table", "write_result"]
