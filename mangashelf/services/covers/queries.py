"""Search-query construction for the Google Books cover lookup.

Queries run from most specific (known English title plus a first-volume
qualifier) to least specific (bare title), so the first high-confidence
match ends the search early.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from .catalog import DEFAULT_TITLE_ALIASES
from .normalization import title_key

FIRST_VOLUME_SUFFIXES: tuple[str, ...] = ("Volume 1", "Vol.1", "First Volume")

# (volume phrase, qualifier) pairs appended to every title, in order.
_VOLUME_QUALIFIED_VARIANTS: tuple[tuple[str, str], ...] = (
    ('"volume 1"', "manga"),
    ('"vol.1"', "manga"),
    ('"first volume"', "manga"),
    ('"volume 1"', "comic"),
    ('"vol.1"', "comic"),
    ('"first volume"', "comic"),
    ('"volume 1"', '"english edition"'),
    ('"vol.1"', '"english edition"'),
    ('"first volume"', '"english edition"'),
    ('"volume 1"', '"english version"'),
    ('"vol.1"', '"english version"'),
    ('"volume 1"', '"japanese manga"'),
    ('"vol.1"', '"japanese manga"'),
    ('"first volume"', '"japanese manga"'),
    ('"volume 1"', '"anime manga"'),
    ('"vol.1"', '"anime manga"'),
)

_FALLBACK_QUALIFIERS: tuple[str, ...] = ("manga", "comic", '"graphic novel"')


class QueryBuilder:
    """Build ordered Google Books queries for a manga title."""

    def __init__(self, aliases: Mapping[str, Sequence[str]] = DEFAULT_TITLE_ALIASES) -> None:
        self._aliases = aliases

    def first_volume_aliases(self, title: str) -> List[str]:
        """Return ``"<English title> Volume 1"``-style aliases for a known title."""
        aliases: List[str] = []
        for canonical in self._aliases.get(title_key(title), ()):
            for suffix in FIRST_VOLUME_SUFFIXES:
                aliases.append(f"{canonical} {suffix}")
        return aliases

    def build(self, title: str, author: Optional[str] = None) -> List[str]:
        title = (title or "").strip()
        author = (author or "").strip() or None
        queries: List[str] = []

        for alias in self.first_volume_aliases(title):
            queries.append(f"{alias} manga")
            queries.append(f"{alias} comic")
            queries.append(f'{alias} "graphic novel"')
            queries.append(alias)
            if author:
                queries.append(f"{alias} {author} manga")
                queries.append(f"{alias} {author} comic")

        if title:
            for phrase, qualifier in _VOLUME_QUALIFIED_VARIANTS:
                queries.append(f"{title} {phrase} {qualifier}")
            for qualifier in _FALLBACK_QUALIFIERS:
                queries.append(f"{title} {qualifier}")

        return _dedupe(queries)


def _dedupe(queries: Sequence[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for query in queries:
        if not query.strip() or query in seen:
            continue
        seen.add(query)
        ordered.append(query)
    return ordered


def build_queries(
    title: str,
    author: Optional[str] = None,
    aliases: Mapping[str, Sequence[str]] = DEFAULT_TITLE_ALIASES,
) -> List[str]:
    """Return the ordered, deduplicated query list for ``title``."""
    return QueryBuilder(aliases).build(title, author)


__all__ = ["FIRST_VOLUME_SUFFIXES", "QueryBuilder", "build_queries"]
