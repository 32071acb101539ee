"""
Icon Resolution Module
======================

Offline resolution of icons.terrastruct.com references.

Components:
- tables: Vendor prefix, alias and category lookup tables
- index: Lazily built lookup maps over the local icon directory
- extractor: Catalog URL detection in source text
- resolver: Ordered matching cascade for a single URL
- rewriter: In-place substitution with diagnostics
"""

from d2_icon_resolver.core.icons.index import (
    AssetIndex,
    IconIndexService,
    build_index,
    get_icon_index_service,
)
from d2_icon_resolver.core.icons.extractor import extract_icon_urls
from d2_icon_resolver.core.icons.resolver import IconMatch, IconResolver
from d2_icon_resolver.core.icons.rewriter import IconRewriter, resolve_icon_urls

__all__ = [
    "AssetIndex",
    "IconIndexService",
    "IconMatch",
    "IconResolver",
    "IconRewriter",
    "build_index",
    "extract_icon_urls",
    "get_icon_index_service",
    "resolve_icon_urls",
]
