"""Data model for pages and their inclusion references."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple


@dataclass(frozen=True)
class RawFileRecord:
    """
    A page discovered on disk.

    Attributes:
        path: Canonical absolute path of the page.
        root: Directory that contains the page.
        name: File name of the page.
        size: Size in bytes (passed through, never interpreted).
        modified: Modification timestamp (passed through, never interpreted).
    """
    path: str
    root: str
    name: str
    size: Optional[int] = None
    modified: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "root": self.root,
            "size": self.size,
            "modified": self.modified,
        }


@dataclass(frozen=True)
class ShallowNode:
    """
    A page and the pages it references directly.

    `nested` holds absolute paths in the order they were found in the
    page's text. Duplicates are kept.
    """
    name: str
    path: str
    nested: Tuple[str, ...] = ()
    parent: Optional[str] = None
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "parent": self.parent,
            "depth": self.depth,
            "nested": list(self.nested),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShallowNode":
        """Rebuild a node from the output of `to_dict`."""
        return cls(
            name=data["name"],
            path=data["path"],
            nested=tuple(data.get("nested") or ()),
            parent=data.get("parent"),
            depth=data.get("depth") or 0,
        )


@dataclass(frozen=True)
class IncludedBy:
    """The occurrence that re-introduced an already visited page."""
    path: str
    depth: int


@dataclass(frozen=True)
class CircularMarker:
    """
    Marks an occurrence whose path is already on its ancestor chain.

    Attributes:
        first_included_depth: 0-based position, counted from the root,
            of the ancestor with the same path.
        last_included_by: The page (and its depth) that included this
            page again.
    """
    first_included_depth: int
    last_included_by: IncludedBy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "firstIncludedDepth": self.first_included_depth,
            "lastIncludedBy": {
                "path": self.last_included_by.path,
                "depth": self.last_included_by.depth,
            },
        }


@dataclass
class DeepNode:
    """
    One occurrence of a page inside a resolved inclusion tree.

    The same page reached from two places gives two DeepNode instances,
    each with its own parent, depth and children. When `circular` is set,
    `nested` is empty and the unexpanded references are kept in
    `raw_nested`.
    """
    name: str
    path: str
    depth: int = 0
    parent: Optional[str] = None
    nested: List["DeepNode"] = field(default_factory=list)
    circular: Optional[CircularMarker] = None
    raw_nested: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "parent": self.parent,
            "depth": self.depth,
            "nested": [child.to_dict() for child in self.nested],
        }
        if self.circular is not None:
            data["rawNested"] = list(self.raw_nested or [])
            data["circular"] = self.circular.to_dict()
        return data


def iter_occurrences(node: DeepNode) -> Iterator[DeepNode]:
    """Walk a deep tree in pre-order, yielding every occurrence."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.nested))


def has_circular(node: DeepNode) -> bool:
    """Check whether the node or any of its descendants is circular."""
    return any(occ.circular is not None for occ in iter_occurrences(node))


def find_unreferenced(nodes: Iterable[ShallowNode]) -> List[ShallowNode]:
    """
    Get pages that no other page in the corpus references.

    A page that only references itself still counts as unreferenced.
    """
    nodes = list(nodes)
    referenced: Set[str] = set()
    for node in nodes:
        referenced.update(path for path in node.nested if path != node.path)

    return [node for node in nodes if node.path not in referenced]
