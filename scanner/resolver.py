"""Path resolution: turn raw inclusion strings into absolute page paths."""

import os
from typing import List

from .layout import CorpusLayout


class PathResolver:
    """
    Resolves raw, possibly templated, references against a corpus layout.

    Rules are tried in order and the first match wins:

    1. A cross-store marker anywhere in the reference: rooted at the
       content root, after the last ``../``.
    2. The style directory macro: replaced by the style assets directory.
    3. The store directory macro: replaced by the including page's store
       directory.
    4. A leading separator: relative to the content root.
    5. Anything else: relative to the including page's directory.

    The multi-store macro is expanded into one candidate per storefront
    variant before the rules run. Unknown macros are left in place.
    """

    def __init__(self, layout: CorpusLayout):
        self.layout = layout

    def resolve(self, source_dir: str, raw: str) -> List[str]:
        """
        Resolve a raw reference found in a page located in `source_dir`.

        Args:
            source_dir: Directory of the including page.
            raw: The reference as written in the page.

        Returns:
            One absolute path, or one per storefront variant when the
            reference uses the multi-store macro.
        """
        candidate = raw.strip().replace("\\", "/")
        return [self._apply_rules(source_dir, c) for c in self.expand(candidate)]

    def expand(self, candidate: str) -> List[str]:
        """Expand the multi-store macro; other references pass through."""
        token = self.layout.multi_store_token
        if token not in candidate:
            return [candidate]

        rest = candidate.split(token, 1)[1].lstrip("/")
        return [f"{variant}/{rest}" for variant in self.layout.storefront_variants]

    def store_dir_of(self, source_dir: str) -> str:
        """
        Get the store directory a page lives in.

        This is the path segment right after the content root marker, if it
        is a known store directory, and the default store directory otherwise.
        """
        segments = source_dir.replace("\\", "/").split("/")
        marker = self.layout.content_root_marker
        if marker in segments:
            index = segments.index(marker) + 1
            if index < len(segments) and segments[index] in self.layout.store_dirs:
                return segments[index]
        return self.layout.default_store_dir

    def _apply_rules(self, source_dir: str, candidate: str) -> str:
        layout = self.layout

        if any(marker in candidate for marker in layout.cross_store_markers):
            return self._under_content_root(candidate.split("../")[-1])

        if layout.style_dir_token in candidate:
            rest = candidate.split(layout.style_dir_token, 1)[1]
            return self._under_content_root(layout.style_subpath, rest)

        if layout.store_dir_token in candidate:
            rest = candidate.split(layout.store_dir_token, 1)[1]
            return self._under_content_root(self.store_dir_of(source_dir), rest)

        if candidate.startswith("/"):
            return self._under_content_root(candidate)

        return os.path.abspath(os.path.join(source_dir, candidate))

    def _under_content_root(self, *parts: str) -> str:
        # Leading separators are stripped so every part stays below the root
        stripped = [part.strip("/") for part in parts if part.strip("/")]
        return os.path.abspath(os.path.join(self.layout.content_root, *stripped))
