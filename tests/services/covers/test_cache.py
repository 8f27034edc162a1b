from __future__ import annotations

from datetime import timedelta

import pytest

from mangashelf.services.covers.cache import CoverCache
from mangashelf.services.covers.types import CacheEntry, CacheStats

pytestmark = pytest.mark.covers


def _seed(cache: CoverCache, entry: CacheEntry) -> None:
    """Store an entry built by another cache, keeping its stamps."""
    cache._entries[entry.key] = entry


def test_put_then_get_returns_entry(clock) -> None:
    cache = CoverCache(clock=clock)

    stored = cache.put("naruto|", "https://example.com/n.jpg", 0.9, "google_books")
    entry = cache.get("naruto|")

    assert entry is stored
    assert entry.url == "https://example.com/n.jpg"
    assert entry.score == 0.9
    assert entry.source == "google_books"
    assert entry.schema_version == cache.schema_version
    assert entry.created_at == clock.now
    assert entry.expires_at - entry.created_at == timedelta(hours=24)


def test_missing_key_returns_none(clock) -> None:
    assert CoverCache(clock=clock).get("absent|") is None


def test_entries_expire_after_ttl(clock) -> None:
    cache = CoverCache(ttl_hours=24, clock=clock)
    cache.put("naruto|", "https://example.com/n.jpg", 0.9, "google_books")

    clock.advance(hours=24)
    assert cache.get("naruto|") is not None

    clock.advance(seconds=1)
    assert cache.get("naruto|") is None
    assert "naruto|" not in cache


def test_schema_version_mismatch_is_a_miss(clock) -> None:
    old = CoverCache(schema_version="v3.0", clock=clock)
    entry = old.put("naruto|", "https://example.com/n.jpg", 0.9, "google_books")

    current = CoverCache(schema_version="v4.0", clock=clock)
    _seed(current, entry)

    assert current.stats() == CacheStats(total=1, valid=0, expired=0, version_mismatch=1)
    assert current.get("naruto|") is None
    assert len(current) == 0


def test_oldest_entries_are_evicted_first(clock) -> None:
    cache = CoverCache(max_entries=3, clock=clock)
    for key in ("a", "b", "c"):
        cache.put(key, f"https://example.com/{key}.jpg", 0.5, "fallback")
        clock.advance(minutes=1)

    cache.put("d", "https://example.com/d.jpg", 0.5, "fallback")

    assert len(cache) == 3
    assert "a" not in cache
    assert all(key in cache for key in ("b", "c", "d"))


def test_overwrite_refreshes_creation_time(clock) -> None:
    cache = CoverCache(max_entries=3, clock=clock)
    for key in ("a", "b", "c"):
        cache.put(key, f"https://example.com/{key}.jpg", 0.5, "fallback")
        clock.advance(minutes=1)

    cache.put("a", "https://example.com/a2.jpg", 0.7, "google_books")
    clock.advance(minutes=1)
    cache.put("d", "https://example.com/d.jpg", 0.5, "fallback")

    assert "b" not in cache
    assert cache.get("a").url == "https://example.com/a2.jpg"
    assert len(cache) == 3


def test_delete_and_clear(clock) -> None:
    cache = CoverCache(clock=clock)
    cache.put("a", "https://example.com/a.jpg", 0.5, "fallback")
    cache.put("b", "https://example.com/b.jpg", 0.5, "fallback")

    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert cache.clear() == 1
    assert len(cache) == 0


def test_stats_and_purge_stale(clock) -> None:
    cache = CoverCache(ttl_hours=1, clock=clock)
    legacy = CoverCache(ttl_hours=1, schema_version="v1", clock=clock)

    cache.put("expired", "https://example.com/e.jpg", 0.5, "fallback")
    clock.advance(hours=2)
    cache.put("fresh", "https://example.com/f.jpg", 0.5, "fallback")
    _seed(cache, legacy.put("legacy", "https://example.com/l.jpg", 0.5, "fallback"))

    assert cache.stats() == CacheStats(total=3, valid=1, expired=1, version_mismatch=1)
    assert cache.stats().to_dict()["valid"] == 1

    assert cache.purge_stale() == 2
    assert cache.stats() == CacheStats(total=1, valid=1, expired=0, version_mismatch=0)


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CoverCache(max_entries=0)
