"""Inclusion graph model and deep resolution."""

from .model import (
    CircularMarker,
    DeepNode,
    IncludedBy,
    RawFileRecord,
    ShallowNode,
    find_unreferenced,
    has_circular,
    iter_occurrences,
)
from .deep import DeepResolver, resolve_all

__all__ = [
    "CircularMarker",
    "DeepNode",
    "IncludedBy",
    "RawFileRecord",
    "ShallowNode",
    "DeepResolver",
    "resolve_all",
    "find_unreferenced",
    "has_circular",
    "iter_occurrences",
]
