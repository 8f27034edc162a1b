from __future__ import annotations

import pytest

from mangashelf.services.covers.normalization import (
    cache_fingerprint,
    default_placeholder_url,
    normalize_image_url,
    title_key,
)

pytestmark = pytest.mark.covers


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("ONE PIECE", "one-piece"),
        ("Spy x Family", "spy-x-family"),
        ("  Haikyu!!  ", "haikyu"),
        ("20th Century Boys", "20th-century-boys"),
        ("Mob Psycho 100", "mob-psycho-100"),
        ("", ""),
    ],
)
def test_title_key(title: str, expected: str) -> None:
    assert title_key(title) == expected


def test_fingerprint_folds_case_and_whitespace() -> None:
    assert cache_fingerprint("  One   Piece ", "Eiichiro  ODA") == cache_fingerprint("one piece", "eiichiro oda")
    assert cache_fingerprint("One Piece") == cache_fingerprint("One Piece", "   ")
    assert cache_fingerprint("One Piece") != cache_fingerprint("One Piece", "Oda")


def test_normalize_image_url_forces_https_and_drops_curl() -> None:
    url = "http://books.google.com/books/content?id=x1&printsec=frontcover&img=1&zoom=1&edge=curl&source=gbs_api"

    assert normalize_image_url(url) == (
        "https://books.google.com/books/content?id=x1&printsec=frontcover&img=1&zoom=1&source=gbs_api"
    )


def test_normalize_image_url_leaves_other_urls_alone() -> None:
    assert normalize_image_url("https://example.com/a.jpg?edge=flat") == "https://example.com/a.jpg?edge=flat"
    assert normalize_image_url("https://example.com/a.jpg") == "https://example.com/a.jpg"


def test_placeholder_uses_first_character_and_palette() -> None:
    # ord("N") == 78 -> palette index 8
    assert default_placeholder_url("Naruto") == "https://via.placeholder.com/192x288/BB8FCE/FFFFFF?text=N"
    # Lowercase first letters are shown upper-cased but pick their own color
    assert default_placeholder_url("naruto").endswith("?text=N")
    assert default_placeholder_url("naruto") != default_placeholder_url("Naruto")


def test_placeholder_for_blank_title() -> None:
    # ord("?") == 63 -> palette index 3
    assert default_placeholder_url("  ") == "https://via.placeholder.com/192x288/96CEB4/FFFFFF?text=%3F"
