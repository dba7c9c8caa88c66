"""Page discovery for scanning a template tree."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from graph.model import RawFileRecord

logger = logging.getLogger(__name__)


DEFAULT_EXTENSIONS = {".jsp", ".jspf"}
DEFAULT_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    "node_modules", "__pycache__",
    ".idea", ".vscode",
    "build", "dist", "bin", "classes",
}


def normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    """Lowercase extensions and make sure each starts with a dot."""
    normalized = set()
    for ext in extensions:
        ext = ext.lower()
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext)
    return normalized


def iter_pages(
    root: Path,
    extensions: Optional[Iterable[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
) -> Iterator[RawFileRecord]:
    """
    Iterate over the pages in a directory tree.

    Args:
        root: Root directory to scan.
        extensions: Page extensions to include (e.g., {'.jsp', '.jspf'}).
                    If None, uses DEFAULT_EXTENSIONS.
        exclude_dirs: Directory names to skip.
                      If None, uses DEFAULT_EXCLUDE_DIRS.

    Yields:
        A RawFileRecord per page, directories visited in sorted order.
    """
    include_ext = normalize_extensions(extensions or DEFAULT_EXTENSIONS)
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    root = Path(root).resolve()

    def _walk(current: Path) -> Iterator[RawFileRecord]:
        try:
            entries = sorted(current.iterdir())
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", current, e)
            return

        for entry in entries:
            if entry.is_dir():
                if entry.name in exclude_dirs:
                    continue
                yield from _walk(entry)
            elif entry.is_file() and entry.suffix.lower() in include_ext:
                yield _record_for(entry)

    yield from _walk(root)


def collect_pages(
    root: Path,
    extensions: Optional[Iterable[str]] = None,
    exclude_dirs: Optional[Set[str]] = None,
) -> List[RawFileRecord]:
    """Collect every page under `root` into a list."""
    records = list(iter_pages(root, extensions, exclude_dirs))
    logger.info("Discovered %d pages under %s", len(records), root)
    return records


def _record_for(path: Path) -> RawFileRecord:
    size = modified = None
    try:
        stat = path.stat()
        size, modified = stat.st_size, stat.st_mtime
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
    return RawFileRecord(
        path=str(path),
        root=str(path.parent),
        name=path.name,
        size=size,
        modified=modified,
    )
