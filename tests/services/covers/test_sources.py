from __future__ import annotations

import asyncio
from types import MappingProxyType

import pytest

from mangashelf.config_manager import MangaShelfSettings
from mangashelf.services.covers.catalog import DEFAULT_FALLBACK_IMAGES
from mangashelf.services.covers.clients import (
    DeterministicFallbackSource,
    GoogleBooksSource,
    StaticTableSource,
    create_anime_database_source,
    create_manga_database_source,
)
from mangashelf.services.covers.registry import (
    DEFAULT_CHAIN,
    CoverSourceRegistry,
    create_registry_from_config,
)
from mangashelf.services.covers.types import CoverSource

pytestmark = pytest.mark.covers


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

def test_manga_database_hit_uses_title_key() -> None:
    result = asyncio.run(create_manga_database_source().search("ONE PIECE"))

    assert result is not None
    assert result.source is CoverSource.MANGA_DATABASE
    assert result.score == 0.8
    assert result.url.startswith("https://images.unsplash.com/")


def test_anime_database_hit_and_miss() -> None:
    source = create_anime_database_source()

    hit = asyncio.run(source.search("Vinland Saga"))
    miss = asyncio.run(source.search("Naruto"))

    assert hit is not None
    assert hit.score == 0.7
    assert hit.source is CoverSource.ANIME_DATABASE
    assert miss is None


def test_static_table_accepts_injected_table() -> None:
    table = MappingProxyType({"my-series": "https://example.com/my-series.jpg"})
    source = StaticTableSource(CoverSource.MANGA_DATABASE, table, 0.8)

    result = asyncio.run(source.search("My Series"))

    assert result is not None
    assert result.url == "https://example.com/my-series.jpg"
    assert StaticTableSource(CoverSource.MANGA_DATABASE, {}, 0.8).is_available is False


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

def test_fallback_is_deterministic() -> None:
    source = DeterministicFallbackSource()

    first = asyncio.run(source.search("Some Obscure Manga"))
    second = asyncio.run(DeterministicFallbackSource().search("Some Obscure Manga"))

    assert first is not None and second is not None
    assert first.url == second.url
    assert first.score == 0.5
    assert first.source is CoverSource.FALLBACK


def test_fallback_picks_by_code_point_sum() -> None:
    pool = ("a", "b", "c")
    source = DeterministicFallbackSource(pool)

    # ord("A") + ord("B") = 131 -> 131 % 3 == 2
    assert asyncio.run(source.search("AB")).url == "c"
    assert asyncio.run(DeterministicFallbackSource().search("AB")).url == DEFAULT_FALLBACK_IMAGES[131 % 4]


def test_fallback_requires_images() -> None:
    with pytest.raises(ValueError):
        DeterministicFallbackSource(())


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_registry_from_default_settings_follows_default_chain() -> None:
    registry = create_registry_from_config(MangaShelfSettings())

    chain = registry.get_chain()

    assert [source.name for source in chain] == DEFAULT_CHAIN
    assert isinstance(chain[0], GoogleBooksSource)
    assert isinstance(chain[-1], DeterministicFallbackSource)


def test_registry_honours_configured_order_and_skips_unknown_names() -> None:
    settings = MangaShelfSettings(cover_sources=["fallback", "bogus", "manga_database"])

    registry = create_registry_from_config(settings)

    assert [source.name for source in registry.get_chain()] == [
        CoverSource.FALLBACK,
        CoverSource.MANGA_DATABASE,
    ]
    assert registry.get_source(CoverSource.GOOGLE_BOOKS) is None


def test_registry_with_empty_chain_uses_default() -> None:
    registry = create_registry_from_config(MangaShelfSettings(cover_sources=[]))
    assert [source.name for source in registry.get_chain()] == DEFAULT_CHAIN


def test_registry_uses_active_settings_when_none_given(monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_BOOKS_API_KEY", "from-env")

    registry = create_registry_from_config()
    source = registry.get_source(CoverSource.GOOGLE_BOOKS)

    assert isinstance(source, GoogleBooksSource)
    assert source._params("q")["key"] == "from-env"


@pytest.mark.parametrize(
    ("configured", "expected"),
    [("  file-key  ", "file-key"), ("   ", None), (None, None)],
)
def test_registry_passes_trimmed_api_key(configured, expected) -> None:
    settings = MangaShelfSettings(google_books_api_key=configured)

    source = create_registry_from_config(settings).get_source(CoverSource.GOOGLE_BOOKS)

    assert source._params("q").get("key") == expected


def test_registry_gives_google_books_its_own_time_budget() -> None:
    settings = MangaShelfSettings(
        cover_source_timeout_seconds=5,
        google_books_request_timeout_seconds=3,
        google_books_time_budget_seconds=45,
    )

    registry = create_registry_from_config(settings)
    google_books = registry.get_source(CoverSource.GOOGLE_BOOKS)

    assert google_books.time_budget_seconds == 45
    assert google_books._timeout == 3
    assert registry.get_source(CoverSource.FALLBACK).time_budget_seconds is None


def test_registry_rejects_duplicate_sources() -> None:
    with pytest.raises(ValueError):
        CoverSourceRegistry([DeterministicFallbackSource(), DeterministicFallbackSource()])


def test_available_sources_skip_empty_tables() -> None:
    empty = StaticTableSource(CoverSource.ANIME_DATABASE, {}, 0.7)
    fallback = DeterministicFallbackSource()
    registry = CoverSourceRegistry([empty, fallback])

    assert registry.get_available_sources() == [fallback]
