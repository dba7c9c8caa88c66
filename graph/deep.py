"""Deep resolution: expand shallow references into nested inclusion trees."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .model import CircularMarker, DeepNode, IncludedBy, ShallowNode

logger = logging.getLogger(__name__)


class DeepResolver:
    """
    Expands every page of a shallow corpus into a tree of occurrences.

    The whole corpus is the lookup universe: a reference is replaced by the
    shallow node with exactly the same path, wherever it sits in the corpus.
    When the corpus holds the same path twice, the first one wins.
    References that match no node are dropped.
    """

    def __init__(self, shallow_nodes: Iterable[ShallowNode]):
        self._nodes: List[ShallowNode] = list(shallow_nodes)
        self._by_path: Dict[str, ShallowNode] = {}
        for node in self._nodes:
            self._by_path.setdefault(node.path, node)

    def __len__(self) -> int:
        return len(self._nodes)

    def lookup(self, path: str) -> Optional[ShallowNode]:
        """Get the shallow node for a path, or None if it is not in the corpus."""
        return self._by_path.get(path)

    def resolve_all(self) -> List[DeepNode]:
        """Resolve one tree per shallow node, in corpus order."""
        trees = [self.resolve(node) for node in self._nodes]
        logger.info("Resolved %d inclusion trees", len(trees))
        return trees

    def resolve(self, node: ShallowNode) -> DeepNode:
        """
        Resolve a single page as the root of its own tree.

        The root has depth 0 and no parent. Each expansion gets a fresh
        ancestor chain, so nothing leaks between sibling top-level pages.
        """
        root = DeepNode(name=node.name, path=node.path)
        self._expand(root, node.nested, [node.path])
        return root

    def _expand(
        self,
        occurrence: DeepNode,
        references: Sequence[str],
        chain: List[str],
    ) -> None:
        # chain[i] is the path of the ancestor at depth i; chain[-1] is
        # `occurrence` itself.
        for reference in references:
            target = self._by_path.get(reference)
            if target is None:
                logger.debug(
                    "Dropping reference %s from %s: not in corpus",
                    reference, occurrence.path,
                )
                continue

            child = DeepNode(
                name=target.name,
                path=target.path,
                depth=occurrence.depth + 1,
                parent=occurrence.path,
            )

            if target.path in chain:
                child.circular = CircularMarker(
                    first_included_depth=chain.index(target.path),
                    last_included_by=IncludedBy(
                        path=occurrence.path,
                        depth=occurrence.depth,
                    ),
                )
                child.raw_nested = list(target.nested)
            elif target.nested:
                chain.append(target.path)
                try:
                    self._expand(child, target.nested, chain)
                finally:
                    chain.pop()

            occurrence.nested.append(child)


def resolve_all(shallow_nodes: Iterable[ShallowNode]) -> List[DeepNode]:
    """Resolve every page of a shallow corpus into its inclusion tree."""
    return DeepResolver(shallow_nodes).resolve_all()
