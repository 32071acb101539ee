"""
Icon URL Rewriter
=================

Replaces catalog URLs in source text with local asset paths.
"""

from re import Match, Pattern
from typing import List, Optional

from d2_icon_resolver.core.icons.extractor import compile_url_pattern
from d2_icon_resolver.core.icons.resolver import IconResolver
from d2_icon_resolver.models.schemas import ResolutionDiagnostics, RewriteResult


class IconRewriter:
    """Rewrites every resolvable icon URL in a text, leaving the rest verbatim."""

    def __init__(self, resolver: Optional[IconResolver] = None, pattern: Optional[Pattern[str]] = None):
        self.resolver = resolver or IconResolver()
        self.pattern = pattern or compile_url_pattern(self.resolver.base_url)

    def rewrite(self, text: str) -> RewriteResult:
        """
        Rewrite icon URLs in ``text``.

        Args:
            text: Source text, typically d2 diagram code

        Returns:
            RewriteResult with the new text and resolution diagnostics
        """
        resolved_count = 0
        unresolved: List[str] = []

        def substitute(match: Match[str]) -> str:
            nonlocal resolved_count
            url = match.group(0)
            local_path = self.resolver.resolve(url)
            if local_path:
                resolved_count += 1
                return local_path
            unresolved.append(url)
            return url

        rewritten = self.pattern.sub(substitute, text)
        return RewriteResult(
            text=rewritten,
            diagnostics=ResolutionDiagnostics(
                resolved_count=resolved_count, unresolved_urls=unresolved
            ),
        )


def resolve_icon_urls(text: str, resolver: Optional[IconResolver] = None) -> RewriteResult:
    """Rewrite icon URLs in ``text`` using ``resolver`` or the process-wide index."""
    return IconRewriter(resolver).rewrite(text)
