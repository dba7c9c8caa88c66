"""Scanner module for page discovery and reference extraction."""

from .discovery import iter_pages, collect_pages
from .layout import CorpusLayout, LayoutError, default_layout, load_layout
from .resolver import PathResolver
from .extractor import ReferenceExtractor
from .builder import build_shallow_nodes, build_corpus

__all__ = [
    "iter_pages",
    "collect_pages",
    "CorpusLayout",
    "LayoutError",
    "default_layout",
    "load_layout",
    "PathResolver",
    "ReferenceExtractor",
    "build_shallow_nodes",
    "build_corpus",
]
