"""Core type definitions for the cover resolution pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


class CoverSource(str, Enum):
    """Identifiers of the sources that can produce a cover URL."""

    GOOGLE_BOOKS = "google_books"
    MANGA_DATABASE = "manga_database"
    ANIME_DATABASE = "anime_database"
    FALLBACK = "fallback"
    DEFAULT = "default"  # Generated placeholder, not a real source


def _normalize_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for blank and non-string values."""
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _parse_year(value: Any) -> Optional[int]:
    text = _normalize_text(value)
    if not text:
        return None
    match = re.match(r"(\d{4})", text)
    if not match:
        return None
    return int(match.group(1))


@dataclass(frozen=True, slots=True)
class Candidate:
    """A single book search result, before filtering."""

    title: Optional[str]
    subtitle: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    authors: Tuple[str, ...] = ()
    categories: FrozenSet[str] = frozenset()
    image_url: Optional[str] = None
    page_count: Optional[int] = None
    published_year: Optional[int] = None

    @classmethod
    def from_volume(cls, item: Any) -> Optional["Candidate"]:
        """Build a candidate from a Google Books ``items[]`` entry.

        Every field is type-checked; anything malformed becomes absent.
        Returns None when the entry has no usable ``volumeInfo`` mapping.
        """
        if not isinstance(item, Mapping):
            return None
        volume_info = item.get("volumeInfo")
        if not isinstance(volume_info, Mapping):
            return None

        authors_raw = volume_info.get("authors")
        authors: Tuple[str, ...] = ()
        if isinstance(authors_raw, list):
            authors = tuple(
                name.strip() for name in authors_raw if isinstance(name, str) and name.strip()
            )

        categories_raw = volume_info.get("categories")
        categories: FrozenSet[str] = frozenset()
        if isinstance(categories_raw, list):
            categories = frozenset(
                cat.strip() for cat in categories_raw if isinstance(cat, str) and cat.strip()
            )

        image_url = None
        image_links = volume_info.get("imageLinks")
        if isinstance(image_links, Mapping):
            image_url = _normalize_text(image_links.get("thumbnail")) or _normalize_text(
                image_links.get("smallThumbnail")
            )

        page_count = volume_info.get("pageCount")
        if isinstance(page_count, bool) or not isinstance(page_count, int):
            page_count = None

        language = _normalize_text(volume_info.get("language"))

        return cls(
            title=_normalize_text(volume_info.get("title")),
            subtitle=_normalize_text(volume_info.get("subtitle")),
            description=_normalize_text(volume_info.get("description")),
            language=language.lower() if language else None,
            authors=authors,
            categories=categories,
            image_url=image_url,
            page_count=page_count,
            published_year=_parse_year(volume_info.get("publishedDate")),
        )


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """A candidate that survived filtering, with its final score."""

    candidate: Candidate
    score: float
    title_similarity: float


@dataclass(frozen=True, slots=True)
class SourceResult:
    """What a source adapter returns on success."""

    url: str
    score: float
    source: CoverSource


@dataclass(frozen=True, slots=True)
class ResolutionRequest:
    """One caller invocation of the resolver."""

    title: str
    author: Optional[str] = None
    force_refresh: bool = False

    def __post_init__(self) -> None:
        title = self.title.strip() if isinstance(self.title, str) else ""
        if not title:
            raise ValueError("title must be a non-empty string")
        object.__setattr__(self, "title", title)
        author = self.author.strip() if isinstance(self.author, str) else ""
        object.__setattr__(self, "author", author or None)


@dataclass(frozen=True, slots=True)
class MangaTitle:
    """A (title, author) pair accepted by the batch resolver."""

    title: str
    author: Optional[str] = None

    @classmethod
    def coerce(cls, value: Any) -> "MangaTitle":
        if isinstance(value, MangaTitle):
            return value
        if isinstance(value, Mapping):
            return cls(title=value.get("title"), author=value.get("author"))
        if isinstance(value, str):
            return cls(title=value)
        raise TypeError(f"Unsupported manga item: {value!r}")


@dataclass(slots=True)
class CacheEntry:
    """A resolved cover URL held by the cache store."""

    key: str
    url: str
    created_at: datetime
    expires_at: datetime
    score: float
    source: str
    schema_version: str

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Counts of cache entries by validity."""

    total: int = 0
    valid: int = 0
    expired: int = 0
    version_mismatch: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "valid": self.valid,
            "expired": self.expired,
            "version_mismatch": self.version_mismatch,
        }


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Additive weights used by the candidate scorer.

    The values are empirically tuned and can be overridden per resolver.
    """

    title_similarity: float = 0.5
    first_volume_bonus: float = 0.3
    not_first_volume_penalty: float = 0.2
    english_bonus: float = 0.15
    japanese_penalty: float = 0.3
    other_language_penalty: float = 0.15
    english_edition_bonus: float = 0.1
    author_match_bonus: float = 0.1
    page_count_bonus: float = 0.05
    page_count_range: Tuple[int, int] = (150, 400)
    recent_publication_bonus: float = 0.05
    recent_publication_year: int = 2000


DEFAULT_WEIGHTS = ScoringWeights()


__all__ = [
    "CacheEntry",
    "CacheStats",
    "Candidate",
    "CoverSource",
    "DEFAULT_WEIGHTS",
    "MangaTitle",
    "ResolutionRequest",
    "ScoredCandidate",
    "ScoringWeights",
    "SourceResult",
]
