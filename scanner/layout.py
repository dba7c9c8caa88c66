"""Corpus layout: the directory names and macro tokens pages are resolved against."""

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml


class LayoutError(ValueError):
    """Raised when a layout file cannot be read or holds invalid settings."""


CONTENT_ROOT_MARKER = "WebContent"

CROSS_STORE_MARKERS = (
    "CABC",
    "companyCABCCatalogAssetStore",
    "companyCABCStorefrontAssetStore",
    "companyCAStorefrontAssetStore",
    "companyGLOBALSAS",
    "companyUSBCCatalogAssetStore",
    "companyUSBCStorefrontAssetStore",
    "companyUSStorefrontAssetStore",
    "USBC",
)

STOREFRONT_VARIANTS = (
    "companyUSStorefrontAssetStore",
    "companyCAStorefrontAssetStore",
    "companyUSBCCatalogAssetStore",
    "companyCABCCatalogAssetStore",
)

# Embedded expressions picked up by the attribute scan that never name a page
INVALID_PLACEHOLDERS = (
    "${richMediaFileParam}",
    "${element.elementInnerContent.objectId}",
    "${jsp_name}",
)

STORE_DIRS_BY_ID = {
    "10001": "ExtendedSitesHub",
    "10051": "AssetStoreOrganization",
    "10101": "companyUSBCCatalogAssetStore",
    "10151": "companyCABCCatalogAssetStore",
    "10201": "companyUSStorefrontAssetStore",
    "10251": "companyCAStorefrontAssetStore",
    "10301": "USBC",
    "10302": "CABC",
    "10801": "companyGLOBALCAS",
    "10851": "companyGLOBALSAS",
}

_TUPLE_FIELDS = {
    "cross_store_markers",
    "store_dirs",
    "storefront_variants",
    "invalid_placeholders",
    "extensions",
    "attributes",
}


@dataclass(frozen=True)
class CorpusLayout:
    """
    Immutable description of where pages live and how macros expand.

    Attributes:
        content_root: Absolute path of the top-level content directory.
        content_root_marker: Directory name whose next path segment is the
            store directory of a page.
        cross_store_markers: Substrings that mark a reference as rooted at
            the content directory.
        style_dir_token: Macro replaced by `style_subpath`.
        style_subpath: Style assets directory, relative to `content_root`.
        store_dir_token: Macro replaced by the including page's store
            directory.
        store_dirs: Directory names accepted as store directories.
        default_store_dir: Store directory used when none can be derived.
        multi_store_token: Macro expanded once per storefront variant.
        storefront_variants: Store directories `multi_store_token` expands to.
        invalid_placeholders: Substrings that disqualify a reference.
        extensions: Page file extensions, without the dot.
        attributes: Attribute names that declare an inclusion.
        store_dirs_by_id: Store ID to store directory table, read-only.
    """
    content_root: str
    content_root_marker: str = CONTENT_ROOT_MARKER
    cross_store_markers: Tuple[str, ...] = CROSS_STORE_MARKERS
    style_dir_token: str = "${StyleDir}"
    style_subpath: str = "companyGLOBALSAS/include/styles/style1"
    store_dir_token: str = "${jspStoreDir}"
    store_dirs: Tuple[str, ...] = CROSS_STORE_MARKERS
    default_store_dir: str = "companyGLOBALSAS"
    multi_store_token: str = "${jspEsitesStoreDir}"
    storefront_variants: Tuple[str, ...] = STOREFRONT_VARIANTS
    invalid_placeholders: Tuple[str, ...] = INVALID_PLACEHOLDERS
    extensions: Tuple[str, ...] = ("jsp", "jspf")
    attributes: Tuple[str, ...] = ("file", "url", "page", "value")
    store_dirs_by_id: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(STORE_DIRS_BY_ID)),
        hash=False,
    )

    def __post_init__(self):
        object.__setattr__(
            self, "store_dirs_by_id", MappingProxyType(dict(self.store_dirs_by_id))
        )

    def store_dir_path(self, store_id: Optional[str]) -> str:
        """
        Get the absolute directory of a store by its ID.

        Unknown, empty or missing IDs map to the content root.
        """
        store_dir = self.store_dirs_by_id.get(str(store_id or "0"))
        if store_dir is None:
            return self.content_root
        return os.path.join(self.content_root, store_dir)


def default_layout(root: Path) -> CorpusLayout:
    """
    Build the default layout for a corpus scanned from `root`.

    The content root is `root` itself when it is named after the marker,
    `root/<marker>` when that directory exists, the nearest parent named
    after the marker when `root` lies inside one, and `root` otherwise.
    """
    root = Path(root).resolve()
    if root.name != CONTENT_ROOT_MARKER:
        if (root / CONTENT_ROOT_MARKER).is_dir():
            root = root / CONTENT_ROOT_MARKER
        else:
            root = next(
                (parent for parent in root.parents if parent.name == CONTENT_ROOT_MARKER),
                root,
            )
    return CorpusLayout(content_root=str(root))


def load_layout(path: Path, root: Path) -> CorpusLayout:
    """
    Load a layout from a YAML file, on top of the defaults for `root`.

    Args:
        path: YAML file holding a mapping of layout field overrides.
        root: Directory being scanned, used for the default content root.

    Returns:
        The resulting CorpusLayout.

    Raises:
        LayoutError: If the file is unreadable, is not a mapping, or holds
            unknown or mistyped keys.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise LayoutError(f"cannot read layout file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise LayoutError(f"invalid YAML in layout file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LayoutError(f"layout file {path} must contain a mapping")

    return _apply_overrides(default_layout(root), data, path.parent)


def _apply_overrides(
    layout: CorpusLayout,
    data: Dict[str, Any],
    base_dir: Path,
) -> CorpusLayout:
    known = {f.name for f in dataclasses.fields(CorpusLayout)}
    unknown = sorted(str(key) for key in set(data) - known)
    if unknown:
        raise LayoutError(f"unknown layout keys: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _TUPLE_FIELDS:
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise LayoutError(f"layout key '{key}' must be a list of strings")
            overrides[key] = tuple(value)
        elif key == "store_dirs_by_id":
            if not isinstance(value, dict):
                raise LayoutError("layout key 'store_dirs_by_id' must be a mapping")
            overrides[key] = MappingProxyType({str(k): str(v) for k, v in value.items()})
        else:
            if not isinstance(value, str):
                raise LayoutError(f"layout key '{key}' must be a string")
            overrides[key] = value

    if "content_root" in overrides:
        content_root = Path(overrides["content_root"])
        if not content_root.is_absolute():
            content_root = base_dir / content_root
        overrides["content_root"] = str(content_root.resolve())

    return dataclasses.replace(layout, **overrides)
