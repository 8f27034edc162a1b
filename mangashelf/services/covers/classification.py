"""Heuristic predicates over book metadata text.

Each function works on plain strings so it can be exercised on its own.
Matching is case-insensitive throughout.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

_FIRST_VOLUME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"volume\s*1\b",
        r"\bvol\.?\s*1\b",
        r"first\s+volume",
        r"1st\s+volume",
        r"volume\s+one\b",
        r"\bvol\.?\s*one\b",
        r"english\s+(?:edition|version)\s+volume\s*1\b",
        r"english\s+volume\s*1\b",
        r"(?:us|american)\s+edition\s+volume\s*1\b",
        r"(?:manga|comic|graphic\s+novel)\s+volume\s*1\b",
        r"\bchapter\s*1\b",
        r"\bch\.?\s*1\b",
        r"(?:first|1st)\s+chapter",
        r"\bbook\s*1\b",
        r"(?:first|1st)\s+book",
    )
)

_LATER_VOLUME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"volume\s*[2-9]|\b[2-9]\s*volume",
        r"\bvol\.?\s*[2-9]|\b[2-9]\s*vol",
        r"\b(?:second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth)\b",
        r"\b(?:2nd|3rd|4th|5th|6th|7th|8th|9th|10th)\b",
        r"\bbook\s*[2-9]|\b[2-9]\s*book",
        r"\bpart\s*[2-9]|\b[2-9]\s*part",
        r"\bchapter\s*[2-9]|\b[2-9]\s*chapter",
        r"\bedition\s*[2-9]|\b[2-9]\s*edition",
        r"\bversion\s*[2-9]|\b[2-9]\s*version",
    )
)

# "volume 1-5", "books 1 & 2", "volumes 1 and 2"
_BUNDLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:volumes?|\bvol\.?|books?|parts?|chapters?)\s*1\s*[-–]\s*[0-9]", re.IGNORECASE),
    re.compile(r"(?:volumes?|books?)\s*1\s*(?:&|and)\s*[0-9]", re.IGNORECASE),
)

MANGA_KEYWORDS: tuple[str, ...] = (
    "manga",
    "comic",
    "graphic novel",
    "japanese",
    "anime",
    "volume",
    "chapter",
    "series",
    "serialization",
    "shonen",
    "shoujo",
    "seinen",
    "josei",
    "one piece",
    "naruto",
    "dragon ball",
    "bleach",
    "attack on titan",
    "demon slayer",
    "jujutsu kaisen",
)

COMPLETE_SET_KEYWORDS: tuple[str, ...] = (
    "complete",
    "collection",
    "box set",
    "boxed set",
    "full set",
    "entire series",
    "all volumes",
    "omnibus",
    "deluxe edition",
    "collector's edition",
)

ENGLISH_EDITION_KEYWORDS: tuple[str, ...] = (
    "english edition",
    "english version",
    "us edition",
    "american edition",
    "english manga",
    "english comic",
    "english graphic novel",
)

_WORD_MIN_LENGTH = 3
AUTHOR_WORD_OVERLAP = 0.7


def combine_text(*parts: Optional[str]) -> str:
    """Join the non-empty parts into one lower-cased haystack."""
    return " ".join(part for part in parts if part).lower()


def is_first_volume(title: str, subtitle: Optional[str] = None, description: Optional[str] = None) -> bool:
    """Return True when the text names volume one and nothing later.

    A later-volume marker, a range such as ``volume 1-5`` or a pairing such
    as ``books 1 & 2`` disqualifies the item even if a first-volume phrase
    is present.
    """
    text = combine_text(title, subtitle, description)
    if not any(pattern.search(text) for pattern in _FIRST_VOLUME_PATTERNS):
        return False
    if any(pattern.search(text) for pattern in _LATER_VOLUME_PATTERNS):
        return False
    if any(pattern.search(text) for pattern in _BUNDLE_PATTERNS):
        return False
    return True


def is_complete_set(title: str, subtitle: Optional[str] = None, description: Optional[str] = None) -> bool:
    text = combine_text(title, subtitle, description)
    return any(keyword in text for keyword in COMPLETE_SET_KEYWORDS)


def is_manga_content(
    title: str,
    subtitle: Optional[str] = None,
    description: Optional[str] = None,
    categories: Iterable[str] = (),
) -> bool:
    """Return True when categories or text carry a manga/comic keyword."""
    for category in categories:
        lowered = (category or "").lower()
        if any(keyword in lowered for keyword in MANGA_KEYWORDS):
            return True
    text = combine_text(title, subtitle, description)
    return any(keyword in text for keyword in MANGA_KEYWORDS)


def has_english_edition_phrase(text: str) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in ENGLISH_EDITION_KEYWORDS)


def _significant_words(text: str) -> list[str]:
    return [word for word in text.split() if len(word) >= _WORD_MIN_LENGTH]


def _word_overlap(requested: str, candidate: str) -> Optional[float]:
    """Share of the requested words found in the candidate, None if either has none."""
    requested_words = _significant_words(requested)
    candidate_words = set(_significant_words(candidate))
    if not requested_words or not candidate_words:
        return None
    common = [word for word in requested_words if word in candidate_words]
    return len(common) / len(requested_words)


def author_matches(authors: Sequence[str], requested_author: Optional[str]) -> bool:
    """Return True when any listed author matches the requested one.

    Exact, substring (either direction) and word-overlap matches count.
    """
    if not requested_author or not isinstance(requested_author, str):
        return False
    requested = requested_author.strip().lower()
    if not requested:
        return False

    for author in authors or ():
        if not isinstance(author, str) or not author.strip():
            continue
        candidate = author.strip().lower()
        if candidate == requested or requested in candidate or candidate in requested:
            return True
        overlap = _word_overlap(requested, candidate)
        if overlap is not None and overlap >= AUTHOR_WORD_OVERLAP:
            return True
    return False


def title_similarity(candidate_title: Optional[str], requested_title: Optional[str]) -> float:
    """Score how closely a result title matches the requested title (0-1)."""
    candidate = (candidate_title or "").strip().lower()
    requested = (requested_title or "").strip().lower()
    if not candidate or not requested:
        return 0.0

    if candidate == requested:
        return 1.0
    if requested in candidate:
        return 0.98
    if candidate in requested:
        return 0.95

    overlap = _word_overlap(requested, candidate)
    if overlap is None:
        return 0.0
    if overlap >= 0.9:
        return 0.9
    if overlap >= 0.8:
        return 0.85
    if overlap >= 0.7:
        return 0.8
    if overlap >= 0.6:
        return 0.75
    return 0.0


__all__ = [
    "COMPLETE_SET_KEYWORDS",
    "ENGLISH_EDITION_KEYWORDS",
    "MANGA_KEYWORDS",
    "author_matches",
    "combine_text",
    "has_english_edition_phrase",
    "is_complete_set",
    "is_first_volume",
    "is_manga_content",
    "title_similarity",
]
