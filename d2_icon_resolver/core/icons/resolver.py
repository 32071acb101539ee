"""
Icon Resolver
=============

Resolves a single catalog URL to a local asset path.

Incoming URLs are frequently malformed: wrong casing, simplified
category names, ``%2F``-encoded separators, invented abbreviations.
After decoding, the path runs through an ordered cascade of matching
strategies, cheapest and most precise first. Map lookups answer the
common case in constant time; the final two strategies scan the index.
"""

from dataclasses import dataclass
from posixpath import splitext
from re import Pattern
from typing import Callable, List, NamedTuple, Optional, Tuple
from urllib.parse import unquote
import re

from d2_icon_resolver.config.settings import get_settings
from d2_icon_resolver.core.icons.index import (
    AssetIndex,
    IconIndexService,
    get_icon_index_service,
    normalize_path,
    stripped_key,
)

MAX_DECODE_ROUNDS = 3
MIN_STEM_LENGTH = 3

# Extensions dropped before the stem comparison; other dotted names keep their suffix
IMAGE_EXTENSIONS = frozenset({".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp"})

_ENCODED_SLASH = re.compile(r"%2F", re.IGNORECASE)


def compile_base_pattern(base_url: Optional[str] = None) -> Pattern[str]:
    """Pattern matching the catalog base URL plus a literal or encoded ``/``."""
    base_url = (base_url or get_settings().icons_base_url).rstrip("/")
    host = re.sub(r"^[a-zA-Z]+://", "", base_url)
    return re.compile(rf"^https?://{re.escape(host)}(?:/|%2F)", re.IGNORECASE)


def decode_icon_path(encoded: str, max_rounds: int = MAX_DECODE_ROUNDS) -> str:
    """
    Percent-decode a path, unwinding up to ``max_rounds`` layers of encoding.

    Decoding stops as soon as the string is stable. A round that yields
    invalid UTF-8 is discarded and the last good value is returned.
    """
    current = encoded
    for _ in range(max_rounds):
        try:
            decoded = unquote(current, errors="strict")
        except UnicodeDecodeError:
            break
        if decoded == current:
            break
        current = decoded
    return current


@dataclass(frozen=True)
class ResolutionQuery:
    """Decoded URL path and the derived keys every strategy compares against."""

    decoded: str
    path: str
    parts: Tuple[str, ...]
    filename: str
    stripped: str

    @classmethod
    def from_decoded(cls, decoded: str, index: AssetIndex) -> "ResolutionQuery":
        path = _ENCODED_SLASH.sub("/", decoded)
        parts = tuple(path.split("/"))
        filename = parts[-1]
        return cls(
            decoded=decoded,
            path=path,
            parts=parts,
            filename=filename,
            stripped=stripped_key(filename, index.tables),
        )

    @property
    def filename_key(self) -> str:
        return self.filename.lower()


Strategy = Callable[[AssetIndex, ResolutionQuery], Optional[str]]


def image_stem(filename: str) -> str:
    """Lowercase filename with a known image extension removed."""
    root, ext = splitext(filename)
    if ext.lower() in IMAGE_EXTENSIONS:
        return root.lower()
    return filename.lower()


def match_exact_path(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    return index.by_exact_path.get(query.decoded)


def match_slash_normalized_path(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    """Exact lookup after turning residual ``%2F`` sequences into separators."""
    return index.by_exact_path.get(query.path)


def match_normalized_path(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    return index.by_normalized_path.get(normalize_path(query.path))


def match_filename(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    return index.by_filename.get(query.filename_key)


def match_alias(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    """Abbreviations such as ``ECS.svg`` mapped through the alias table."""
    return index.by_alias.get(query.filename_key)


def match_stripped_name(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    return index.by_stripped_name.get(query.stripped)


def match_category(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    """
    Translate a simplified category label into canonical category directories.

    ``aws/networking/CloudFront.svg`` is retried as
    ``aws/Networking & Content Delivery/CloudFront.svg`` and then against
    every asset in that directory by prefix-stripped filename.
    """
    if len(query.parts) < 3:
        return None

    provider = query.parts[0]
    label = "/".join(query.parts[1:-1]).lower()

    for category in index.tables.categories.get(label, ()):
        found = index.by_exact_path.get(f"{provider}/{category}/{query.filename}")
        if found:
            return found

        prefix = f"{provider}/{category}/".lower()
        for asset in index.assets:
            if (
                asset.relative_path.lower().startswith(prefix)
                and stripped_key(asset.filename, index.tables) == query.stripped
            ):
                return asset.absolute_path

    return None


def match_stem(index: AssetIndex, query: ResolutionQuery) -> Optional[str]:
    """
    Last resort: exact stem comparison against every asset.

    Only exact equality counts; substring matching turns ``c.svg`` into a
    match for everything. Stems shorter than three characters never scan.
    """
    stem = image_stem(query.filename)
    if len(stem) < MIN_STEM_LENGTH:
        return None

    stripped_stem = image_stem(query.stripped)
    if len(stripped_stem) < MIN_STEM_LENGTH:
        stripped_stem = stem

    for asset in index.assets:
        candidate_stem = image_stem(asset.filename)
        candidate_stripped = image_stem(stripped_key(asset.filename, index.tables))
        if stem in (candidate_stem, candidate_stripped) or stripped_stem == candidate_stripped:
            return asset.absolute_path

    return None


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("exact_path", match_exact_path),
    ("slash_normalized_path", match_slash_normalized_path),
    ("normalized_path", match_normalized_path),
    ("filename", match_filename),
    ("alias", match_alias),
    ("stripped_name", match_stripped_name),
    ("category", match_category),
    ("stem", match_stem),
)


class IconMatch(NamedTuple):
    """A resolved asset and the strategy that found it."""

    path: str
    strategy: str


class IconResolver:
    """Resolves catalog URLs against the index owned by an IconIndexService."""

    def __init__(
        self,
        service: Optional[IconIndexService] = None,
        base_url: Optional[str] = None,
        strategies: Optional[List[Tuple[str, Strategy]]] = None,
    ):
        self.service = service or get_icon_index_service()
        self.base_url = (base_url or get_settings().icons_base_url).rstrip("/")
        self.base_pattern = compile_base_pattern(self.base_url)
        self.strategies = tuple(strategies) if strategies is not None else STRATEGIES

    @property
    def index(self) -> AssetIndex:
        return self.service.get_index()

    def strip_base(self, url: str) -> Optional[str]:
        """Return the encoded path after the base URL, or None for foreign URLs."""
        match = self.base_pattern.match(url)
        if match is None:
            return None
        return url[match.end():]

    def match(self, url: str) -> Optional[IconMatch]:
        """
        Resolve a URL and report which strategy matched.

        Args:
            url: Raw URL as it appears in the source

        Returns:
            IconMatch, or None if the URL is foreign or nothing matched
        """
        encoded = self.strip_base(url)
        if encoded is None:
            return None

        index = self.index
        query = ResolutionQuery.from_decoded(decode_icon_path(encoded), index)

        for name, strategy in self.strategies:
            found = strategy(index, query)
            if found:
                return IconMatch(found, name)

        return None

    def resolve(self, url: str) -> Optional[str]:
        """Resolve a URL to an absolute local path, or None if unresolved."""
        found = self.match(url)
        return found.path if found else None
