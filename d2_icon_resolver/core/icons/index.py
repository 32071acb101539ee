"""
Icon Index
==========

Scans a local icon directory once and builds the lookup maps used by
the resolver. The index is owned by an IconIndexService which builds it
lazily on first use and never rebuilds it.
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple
import os
import re
import threading
import time

from d2_icon_resolver.config.logging import get_logger
from d2_icon_resolver.config.settings import get_settings
from d2_icon_resolver.core.icons.tables import IconTables, get_icon_tables

logger = get_logger(__name__)

ICON_EXTENSION = ".svg"

_NORMALIZE_PATTERN = re.compile(r"[\s&,]+")


class IconAsset(NamedTuple):
    """A single indexed SVG file."""

    relative_path: str
    absolute_path: str

    @property
    def filename(self) -> str:
        return PurePath(self.relative_path).name


def normalize_path(path: str) -> str:
    """
    Normalize a path for comparison.

    Lowercases and collapses runs of whitespace, ``&`` and ``,`` into a
    single underscore so URL-decoded paths match sanitized directory names.
    """
    return _NORMALIZE_PATTERN.sub("_", path.lower())


def strip_prefixes(filename: str, tables: Optional[IconTables] = None) -> str:
    """Remove known vendor prefixes (``Amazon-``, ``AWS-``, ...) from a filename."""
    tables = tables or get_icon_tables()
    for pattern in tables.vendor_prefixes:
        filename = pattern.sub("", filename, count=1)
    return filename


def stripped_key(filename: str, tables: Optional[IconTables] = None) -> str:
    """Lowercase, prefix-stripped form of a filename used as a fuzzy key."""
    return strip_prefixes(filename, tables).lower()


@dataclass(frozen=True)
class AssetIndex:
    """Immutable lookup maps over the local icon tree.

    Every map is keyed by a string and valued by an absolute asset path.
    On key collisions the asset whose relative path sorts first wins.
    """

    root: Path
    root_exists: bool
    tables: IconTables
    assets: Tuple[IconAsset, ...] = ()
    by_exact_path: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    by_normalized_path: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    by_filename: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    by_stripped_name: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    by_alias: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.assets)

    def stats(self) -> Dict[str, Any]:
        """Size of each lookup map, for diagnostics."""
        return {
            "root": str(self.root),
            "root_exists": self.root_exists,
            "assets": len(self.assets),
            "exact_paths": len(self.by_exact_path),
            "normalized_paths": len(self.by_normalized_path),
            "filenames": len(self.by_filename),
            "stripped_names": len(self.by_stripped_name),
            "aliases": len(self.by_alias),
        }


def scan_icon_files(root: Path) -> List[IconAsset]:
    """
    Recursively collect SVG files under ``root``.

    Directory symlinks are followed; a directory already visited through
    another link is pruned so cycles terminate. Unreadable directories are
    skipped. The result is sorted by relative POSIX path so map insertion
    order does not depend on the filesystem.
    """
    assets: List[IconAsset] = []
    visited = {os.path.realpath(root)}
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        kept = []
        for name in sorted(dirnames):
            real = os.path.realpath(os.path.join(dirpath, name))
            if real not in visited:
                visited.add(real)
                kept.append(name)
        dirnames[:] = kept

        for name in filenames:
            if not name.lower().endswith(ICON_EXTENSION):
                continue
            absolute = os.path.join(dirpath, name)
            relative = PurePath(os.path.relpath(absolute, root)).as_posix()
            assets.append(IconAsset(relative, absolute))

    assets.sort(key=lambda asset: asset.relative_path)
    return assets


def build_index(root: Path, tables: Optional[IconTables] = None) -> AssetIndex:
    """
    Build the icon index for a directory.

    Args:
        root: Icon directory to scan
        tables: Lookup tables; defaults to the packaged tables

    Returns:
        AssetIndex, empty when ``root`` does not exist
    """
    tables = tables or get_icon_tables()
    root = Path(root).expanduser().absolute()
    log = logger.bind(component="icon_index", icons_dir=str(root))

    if not root.is_dir():
        log.warning("Icons directory not found")
        return AssetIndex(root=root, root_exists=False, tables=tables)

    start_time = time.time()
    assets = scan_icon_files(root)

    by_exact_path: Dict[str, str] = {}
    by_normalized_path: Dict[str, str] = {}
    by_filename: Dict[str, str] = {}
    by_stripped_name: Dict[str, str] = {}

    for asset in assets:
        filename = asset.filename
        by_exact_path.setdefault(asset.relative_path, asset.absolute_path)
        by_normalized_path.setdefault(normalize_path(asset.relative_path), asset.absolute_path)
        by_filename.setdefault(filename.lower(), asset.absolute_path)
        by_stripped_name.setdefault(stripped_key(filename, tables), asset.absolute_path)

    by_alias: Dict[str, str] = {}
    for alias, canonical in tables.aliases.items():
        match = next((a for a in assets if canonical in a.filename), None)
        if match is not None:
            by_alias[alias + ICON_EXTENSION] = match.absolute_path

    log.info(
        "Indexed icons",
        count=len(by_exact_path),
        aliases=len(by_alias),
        duration=round(time.time() - start_time, 4),
    )

    return AssetIndex(
        root=root,
        root_exists=True,
        tables=tables,
        assets=tuple(assets),
        by_exact_path=MappingProxyType(by_exact_path),
        by_normalized_path=MappingProxyType(by_normalized_path),
        by_filename=MappingProxyType(by_filename),
        by_stripped_name=MappingProxyType(by_stripped_name),
        by_alias=MappingProxyType(by_alias),
    )


class IconIndexService:
    """Owns the icon index and builds it exactly once, on first use."""

    def __init__(self, root: Optional[Path] = None, tables: Optional[IconTables] = None):
        self.root = Path(root) if root is not None else get_settings().icons_dir
        self.tables = tables
        self._index: Optional[AssetIndex] = None
        self._lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def get_index(self) -> AssetIndex:
        """Return the index, scanning the icon directory on the first call."""
        index = self._index
        if index is not None:
            return index

        with self._lock:
            if self._index is None:
                self._index = build_index(self.root, self.tables)
            return self._index


# Global service instance - will be initialized when needed
_default_service: Optional[IconIndexService] = None
_default_lock = threading.Lock()


def get_icon_index_service() -> IconIndexService:
    """Get the process-wide icon index service for the configured directory."""
    global _default_service
    with _default_lock:
        if _default_service is None:
            _default_service = IconIndexService()
        return _default_service


def reset_icon_index_service() -> None:
    """Drop the process-wide service so the next caller rebuilds it."""
    global _default_service
    with _default_lock:
        _default_service = None
