"""
Icon URL Extractor
==================

Finds references to the remote icon catalog in arbitrary source text.
"""

from re import Pattern
from typing import List, Optional
import re

from d2_icon_resolver.config.settings import get_settings

# Characters that terminate a URL inside d2 source
URL_TERMINATORS = r"\s)}\]\"'`,;\\"


def compile_url_pattern(base_url: Optional[str] = None) -> Pattern[str]:
    """
    Build the extraction pattern for a catalog base URL.

    The scheme may be ``http`` or ``https`` in any case; the match runs
    until the first whitespace, quote, comma, semicolon, backslash or
    closing bracket.
    """
    base_url = (base_url or get_settings().icons_base_url).rstrip("/")
    host = re.sub(r"^[a-zA-Z]+://", "", base_url)
    return re.compile(rf"https?://{re.escape(host)}[^{URL_TERMINATORS}]*", re.IGNORECASE)


def extract_icon_urls(text: str, pattern: Optional[Pattern[str]] = None) -> List[str]:
    """Return every icon URL occurrence in ``text``, in source order."""
    pattern = pattern or compile_url_pattern()
    return [match.group(0) for match in pattern.finditer(text)]
