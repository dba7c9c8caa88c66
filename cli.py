#!/usr/bin/env python3
"""
Page Mapper CLI

A tool for scanning a tree of template pages for inclusion references and
resolving them into cycle-safe inclusion trees.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from graph.deep import resolve_all
from graph.model import ShallowNode, find_unreferenced
from scanner.builder import build_shallow_nodes
from scanner.discovery import DEFAULT_EXCLUDE_DIRS, collect_pages
from scanner.layout import CorpusLayout, LayoutError, default_layout, load_layout
from scanner.resolver import PathResolver
from exporters import to_ascii, to_json, load_shallow_json

logger = logging.getLogger("pagemap")

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pagemap",
        description="Scan template pages for inclusion references and resolve inclusion trees.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pagemap ./Stores                          # Deep inclusion trees, JSON output
  pagemap ./Stores -f ascii                 # Deep inclusion trees as text
  pagemap ./Stores --stage shallow -o shallow.json
  pagemap ./Stores --from-shallow shallow.json -o deep.json
  pagemap ./Stores --layout layout.yaml     # Custom store layout
  pagemap ./Stores --unreferenced           # List pages nothing includes
        """,
    )

    # Positional arguments
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory holding the pages (default: current directory)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["json", "ascii"],
        default="json",
        help="Output format (default: json); ascii only applies to the deep stage",
    )

    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    parser.add_argument(
        "--stage",
        choices=["raw", "shallow", "deep"],
        default="deep",
        help="Stop after listing pages (raw), direct references (shallow) "
             "or full inclusion trees (deep, default)",
    )

    parser.add_argument(
        "--unreferenced",
        action="store_true",
        help="Print the pages that no other page includes, one per line",
    )

    # Scanning options
    parser.add_argument(
        "--layout",
        type=str,
        default=None,
        help="YAML file overriding the corpus layout",
    )

    parser.add_argument(
        "--from-shallow",
        type=str,
        default=None,
        help="Read shallow nodes from a JSON file instead of scanning",
    )

    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Directory names to exclude",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads reading pages (default: automatic)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or debugging details (-vv) to stderr",
    )

    return parser.parse_args(args)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr at a level chosen by the verbosity count."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def load_shallow_nodes(path: Path) -> List[ShallowNode]:
    """Read shallow nodes previously written with `--stage shallow`."""
    return load_shallow_json(path.read_text(encoding="utf-8"))


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    configure_logging(parsed.verbose)

    root = Path(parsed.root).resolve()
    if not root.is_dir():
        print(f"Error: '{parsed.root}' is not a directory", file=sys.stderr)
        return 1

    if parsed.from_shallow and parsed.stage == "raw":
        print("Error: --stage raw cannot be used with --from-shallow", file=sys.stderr)
        return 1

    if parsed.workers is not None and parsed.workers < 1:
        print("Error: --workers must be at least 1", file=sys.stderr)
        return 1

    try:
        layout: CorpusLayout = (
            load_layout(Path(parsed.layout), root) if parsed.layout else default_layout(root)
        )
    except LayoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    exclude_dirs = None
    if parsed.exclude_dir:
        exclude_dirs = set(parsed.exclude_dir) | DEFAULT_EXCLUDE_DIRS

    if parsed.from_shallow:
        try:
            shallow = load_shallow_nodes(Path(parsed.from_shallow))
        except (OSError, ValueError) as e:
            print(f"Error reading shallow nodes: {e}", file=sys.stderr)
            return 1
        logger.info("Loaded %d shallow nodes from %s", len(shallow), parsed.from_shallow)
    else:
        records = collect_pages(root, layout.extensions, exclude_dirs)
        if parsed.stage == "raw" and not parsed.unreferenced:
            return _emit(to_json(records), parsed.output)
        shallow = build_shallow_nodes(records, PathResolver(layout), workers=parsed.workers)

    if parsed.unreferenced:
        lines = [node.path for node in find_unreferenced(shallow)]
        return _emit("\n".join(lines), parsed.output)

    if parsed.stage == "shallow":
        return _emit(to_json(shallow), parsed.output)

    trees = resolve_all(shallow)
    if parsed.format == "ascii":
        output = to_ascii(trees, base=layout.content_root, style=parsed.ascii_style)
    else:
        output = to_json(trees)
    return _emit(output, parsed.output)


def _emit(output: str, destination: Optional[str]) -> int:
    if destination:
        try:
            output_path = Path(destination)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
