"""
Icon Lookup Tables
==================

Static configuration for icon resolution: vendor prefixes, abbreviation
aliases and simplified category labels. The tables ship as YAML next to
this module and are exposed through read-only mappings.
"""

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from re import Pattern
from typing import Any, Dict, Mapping, Optional, Tuple
import re

import yaml  # type: ignore[import-untyped]

TABLES_RESOURCE = "icon_tables.yaml"


class IconTablesError(Exception):
    """Exception raised when the icon tables file is malformed."""

    pass


@dataclass(frozen=True)
class IconTables:
    """Immutable lookup tables consumed by the index builder and resolver."""

    vendor_prefixes: Tuple[Pattern[str], ...]
    aliases: Mapping[str, str]
    categories: Mapping[str, Tuple[str, ...]]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IconTables":
        """
        Build tables from parsed YAML data.

        Args:
            data: Mapping with ``vendor_prefixes``, ``aliases`` and ``categories``

        Returns:
            IconTables instance

        Raises:
            IconTablesError: If a section has the wrong shape
        """
        prefixes = data.get("vendor_prefixes") or []
        aliases = data.get("aliases") or {}
        categories = data.get("categories") or {}

        if not isinstance(prefixes, list):
            raise IconTablesError("vendor_prefixes must be a list")
        if not isinstance(aliases, dict):
            raise IconTablesError("aliases must be a mapping")
        if not isinstance(categories, dict):
            raise IconTablesError("categories must be a mapping")

        compiled = tuple(re.compile("^" + str(p), re.IGNORECASE) for p in prefixes)
        alias_map = {str(k).lower(): str(v) for k, v in aliases.items()}
        category_map: Dict[str, Tuple[str, ...]] = {}
        for label, canonical in categories.items():
            if isinstance(canonical, str):
                canonical = [canonical]
            category_map[str(label).lower()] = tuple(str(c) for c in canonical)

        return cls(
            vendor_prefixes=compiled,
            aliases=MappingProxyType(alias_map),
            categories=MappingProxyType(category_map),
        )


def load_icon_tables(path: Optional[Path] = None) -> IconTables:
    """
    Load icon tables from a YAML file.

    Args:
        path: Optional override; defaults to the packaged tables

    Returns:
        IconTables instance
    """
    if path is None:
        content = resources.files(__package__).joinpath(TABLES_RESOURCE).read_text(encoding="utf-8")
    else:
        content = Path(path).read_text(encoding="utf-8")

    data = yaml.safe_load(content) or {}
    if not isinstance(data, dict):
        raise IconTablesError(f"Icon tables must be a mapping, got {type(data).__name__}")
    return IconTables.from_dict(data)


@lru_cache(maxsize=1)
def get_icon_tables() -> IconTables:
    """Get the packaged icon tables, loading them on first use."""
    return load_icon_tables()
