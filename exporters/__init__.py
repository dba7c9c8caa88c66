"""Exporters for converting pages and inclusion trees to output formats."""

from .ascii_exporter import to_ascii
from .json_exporter import to_json, load_shallow_json

__all__ = ["to_ascii", "to_json", "load_shallow_json"]
