"""Shallow graph builder: one node per page with its direct references."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Set

from graph.model import RawFileRecord, ShallowNode
from .discovery import collect_pages
from .extractor import ReferenceExtractor
from .layout import CorpusLayout
from .resolver import PathResolver

logger = logging.getLogger(__name__)


def read_page(record: RawFileRecord) -> str:
    """Read a page's text, replacing bytes that are not valid UTF-8."""
    return Path(record.path).read_text(encoding="utf-8", errors="replace")


def shallow_node_for(record: RawFileRecord, extractor: ReferenceExtractor) -> ShallowNode:
    """
    Build the shallow node of a single page.

    A page that cannot be read or scanned still gets a node, with no
    references.
    """
    nested: List[str] = []
    try:
        nested = extractor.extract(read_page(record), record.root)
    except OSError as e:
        logger.error("Cannot read %s: %s", record.path, e)
    except Exception:
        logger.exception("Failed to extract references from %s", record.path)

    return ShallowNode(name=record.name, path=record.path, nested=tuple(nested))


def sort_by_path(nodes: Iterable[ShallowNode]) -> List[ShallowNode]:
    """Sort nodes by path, ignoring case. Ties keep their input order."""
    return sorted(nodes, key=lambda node: node.path.casefold())


def build_shallow_nodes(
    records: Iterable[RawFileRecord],
    resolver: PathResolver,
    workers: Optional[int] = None,
) -> List[ShallowNode]:
    """
    Build the shallow node of every page.

    Pages are read and scanned in a thread pool; the result is sorted by
    path once every page is done, so it does not depend on scheduling.

    Args:
        records: Pages to scan.
        resolver: Path resolver configured for the corpus.
        workers: Maximum number of worker threads (default: executor default).

    Returns:
        Shallow nodes sorted by path, case-insensitively.
    """
    extractor = ReferenceExtractor(resolver)
    records = list(records)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ShallowScan") as executor:
        nodes = list(executor.map(lambda record: shallow_node_for(record, extractor), records))

    logger.info(
        "Built %d shallow nodes with %d references",
        len(nodes), sum(len(node.nested) for node in nodes),
    )
    return sort_by_path(nodes)


def build_corpus(
    root: Path,
    layout: CorpusLayout,
    exclude_dirs: Optional[Set[str]] = None,
    workers: Optional[int] = None,
) -> List[ShallowNode]:
    """
    Discover every page under `root` and build its shallow node.

    Args:
        root: Directory to scan.
        layout: Corpus layout used to resolve references.
        exclude_dirs: Directory names to skip.
        workers: Maximum number of worker threads.

    Returns:
        Shallow nodes sorted by path.
    """
    records = collect_pages(root, layout.extensions, exclude_dirs)
    return build_shallow_nodes(records, PathResolver(layout), workers=workers)
