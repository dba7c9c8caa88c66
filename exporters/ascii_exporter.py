"""ASCII tree-style exporter for resolved inclusion trees."""

from pathlib import PurePath
from typing import Iterable, List, Optional, Tuple

from graph.model import DeepNode


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    trees: Iterable[DeepNode],
    base: Optional[str] = None,
    style: str = "tree",
    show_leaves: bool = True,
) -> str:
    """
    Convert resolved inclusion trees to ASCII tree representation.

    Args:
        trees: Deep nodes to render, one tree each.
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        show_leaves: If False, skip top-level pages that include nothing.

    Returns:
        ASCII tree string, one blank line between trees.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    blocks: List[str] = []
    for tree in trees:
        if not show_leaves and not tree.nested:
            continue
        lines = [_label(tree, base)]
        _render_children(tree, base, "", chars, lines)
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def _render_children(
    node: DeepNode,
    base: Optional[str],
    prefix: str,
    chars: Tuple[str, str, str, str],
    lines: List[str],
) -> None:
    branch, last, vertical, space = chars

    for index, child in enumerate(node.nested):
        is_last = index == len(node.nested) - 1
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{_label(child, base)}")
        _render_children(
            child,
            base,
            prefix + (space if is_last else vertical),
            chars,
            lines,
        )


def _label(node: DeepNode, base: Optional[str]) -> str:
    label = _get_display_path(node.path, base)
    if node.circular is not None:
        by = node.circular.last_included_by
        label += (
            f" [circular: first included at depth "
            f"{node.circular.first_included_depth} by "
            f"{_get_display_path(by.path, base)}]"
        )
    return label


def _get_display_path(path: str, base: Optional[str]) -> str:
    """Get the display path for a page."""
    if base:
        try:
            return PurePath(path).relative_to(base).as_posix()
        except ValueError:
            pass
    return path.replace("\\", "/")
