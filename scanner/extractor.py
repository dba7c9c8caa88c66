"""Reference extraction: find inclusion declarations in a page's text."""

import re
from typing import Iterable, List

from .resolver import PathResolver


def build_reference_pattern(
    attributes: Iterable[str],
    extensions: Iterable[str],
) -> "re.Pattern[str]":
    """
    Build the regex that finds inclusion declarations.

    Matches ``attr="value"`` or ``attr='value'`` for any of the given
    attribute names, where the value ends in one of the page extensions.
    The value is captured in the ``value`` group.

    Args:
        attributes: Attribute names, e.g. ``file`` or ``page``.
        extensions: Page extensions without the dot, e.g. ``jsp``.

    Returns:
        Compiled pattern.
    """
    names = "|".join(re.escape(a) for a in attributes)
    # Longest first so "jspf" is not cut short by "jsp"
    exts = "|".join(re.escape(e) for e in sorted(extensions, key=len, reverse=True))
    return re.compile(
        rf"\b(?:{names})\s*=\s*(?P<quote>[\"'])"
        rf"(?P<value>[^\"'\r\n]*?\.(?:{exts}))\s*(?P=quote)"
    )


def is_valid_reference(value: str, invalid_placeholders: Iterable[str]) -> bool:
    """Check that a value holds none of the placeholders that never name a page."""
    return not any(placeholder in value for placeholder in invalid_placeholders)


class ReferenceExtractor:
    """Scans page text and resolves every inclusion it declares."""

    def __init__(self, resolver: PathResolver):
        self.resolver = resolver
        layout = resolver.layout
        self._pattern = build_reference_pattern(layout.attributes, layout.extensions)
        self._invalid = layout.invalid_placeholders

    def candidates(self, text: str) -> List[str]:
        """Get raw reference values in the order they appear in `text`."""
        return [
            value
            for value in (m.group("value").strip() for m in self._pattern.finditer(text))
            if value and is_valid_reference(value, self._invalid)
        ]

    def extract(self, text: str, source_dir: str) -> List[str]:
        """
        Get the absolute paths a page references.

        Args:
            text: Raw page content.
            source_dir: Directory of the page.

        Returns:
            Paths in first-seen order, duplicates kept, with multi-store
            references expanded in place.
        """
        paths: List[str] = []
        for value in self.candidates(text):
            paths.extend(self.resolver.resolve(source_dir, value))
        return paths
