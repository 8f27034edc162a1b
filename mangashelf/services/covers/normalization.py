"""Key normalization and URL post-processing helpers."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from .catalog import PLACEHOLDER_COLORS

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")

PLACEHOLDER_BASE_URL = "https://via.placeholder.com/192x288"


def title_key(title: str) -> str:
    """Return the lookup key used by the alias and image tables.

    ``"ONE PIECE"`` becomes ``"one-piece"``; runs of non-alphanumeric
    characters collapse into one hyphen and edge hyphens are dropped.
    """
    return _NON_ALNUM_RE.sub("-", (title or "").lower()).strip("-")


def _fold(value: Optional[str]) -> str:
    return _WHITESPACE_RE.sub(" ", (value or "").casefold()).strip()


def cache_fingerprint(title: str, author: Optional[str] = None) -> str:
    """Return the cache key for a (title, author) pair."""
    return f"{_fold(title)}|{_fold(author)}"


def normalize_image_url(url: str) -> str:
    """Force https and drop the ``edge=curl`` page-curl effect from cover URLs."""
    cleaned = url.strip()
    if cleaned.startswith("http://"):
        cleaned = "https://" + cleaned[len("http://"):]

    parts = urlsplit(cleaned)
    if not parts.query:
        return cleaned
    params = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(name, value) for name, value in params if not (name == "edge" and value == "curl")]
    if len(kept) == len(params):
        return cleaned
    return urlunsplit(parts._replace(query=urlencode(kept)))


def stable_hash(text: str) -> int:
    """Sum of code points; stable across processes, unlike :func:`hash`."""
    return sum(ord(char) for char in text)


def pick_stable(pool: Sequence[str], text: str) -> str:
    return pool[stable_hash(text) % len(pool)]


def default_placeholder_url(title: str) -> str:
    """Return the generated placeholder cover for ``title``.

    The image shows the title's first character on a background color
    chosen from a fixed palette by that character.
    """
    text = (title or "").strip() or "?"
    first_char = text[0].upper()
    color = PLACEHOLDER_COLORS[ord(text[0]) % len(PLACEHOLDER_COLORS)]
    return f"{PLACEHOLDER_BASE_URL}/{color}/FFFFFF?text={quote(first_char)}"


__all__ = [
    "PLACEHOLDER_BASE_URL",
    "cache_fingerprint",
    "default_placeholder_url",
    "normalize_image_url",
    "pick_stable",
    "stable_hash",
    "title_key",
]
