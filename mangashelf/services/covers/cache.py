"""In-memory cache for resolved cover URLs."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from mangashelf import logging_manager as log_mgr
from mangashelf.config_manager.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_SCHEMA_VERSION,
    DEFAULT_CACHE_TTL_HOURS,
)

from .types import CacheEntry, CacheStats

logger = log_mgr.get_logger().getChild("services.covers.cache")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseCoverCache(ABC):
    """Interface shared by cover cache implementations."""

    @abstractmethod
    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key`` or None."""

    @abstractmethod
    def put(self, key: str, url: str, score: float, source: str) -> CacheEntry:
        """Store ``url`` under ``key``, replacing any previous entry."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        ...

    @abstractmethod
    def clear(self) -> int:
        ...

    @abstractmethod
    def stats(self) -> CacheStats:
        ...

    @abstractmethod
    def purge_stale(self) -> int:
        ...


class CoverCache(BaseCoverCache):
    """Process-local cover cache with TTL expiry and a bounded size.

    Entries carry a schema version; an entry written under a different
    version is treated as absent and dropped on read. When the store grows
    past ``max_entries`` the entries with the oldest ``created_at`` are
    evicted first.
    """

    def __init__(
        self,
        *,
        ttl_hours: float = DEFAULT_CACHE_TTL_HOURS,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        schema_version: str = DEFAULT_CACHE_SCHEMA_VERSION,
        clock: Optional[Clock] = None,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_hours: Time-to-live in hours for each entry.
            max_entries: Maximum number of entries kept.
            schema_version: Tag written into every entry and checked on read.
            clock: Returns the current timezone-aware time; used by tests.
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = timedelta(hours=ttl_hours)
        self._max_entries = max_entries
        self._schema_version = schema_version
        self._clock = clock or _utcnow
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def schema_version(self) -> str:
        return self._schema_version

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _is_valid(self, entry: CacheEntry, now: datetime) -> bool:
        return entry.schema_version == self._schema_version and not entry.is_expired(now)

    def get(self, key: str) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.schema_version != self._schema_version:
                logger.debug("Dropping cache entry %s with schema %s", key, entry.schema_version)
                del self._entries[key]
                return None
            if entry.is_expired(now):
                logger.debug("Cache entry expired for key %s", key)
                del self._entries[key]
                return None
        logger.debug("Cache hit for key %s", key)
        return entry

    def put(self, key: str, url: str, score: float, source: str) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(
            key=key,
            url=url,
            created_at=now,
            expires_at=now + self._ttl,
            score=score,
            source=source,
            schema_version=self._schema_version,
        )
        with self._lock:
            # Reinsert so the newest entry sits at the end.
            self._entries.pop(key, None)
            self._entries[key] = entry
            evicted = self._evict_locked()
        if evicted:
            logger.debug("Evicted %d cache entries over capacity", evicted)
        logger.debug("Cached %s for key %s (source=%s)", url, key, source)
        return entry

    def _evict_locked(self) -> int:
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return 0
        oldest = sorted(self._entries.values(), key=lambda item: item.created_at)[:overflow]
        for entry in oldest:
            del self._entries[entry.key]
        return len(oldest)

    def delete(self, key: str) -> bool:
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Deleted cache entry for key %s", key)
        return removed

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cleared %d cover cache entries", count, extra={"event": "covers.cache.cleared"})
        return count

    def stats(self) -> CacheStats:
        now = self._clock()
        valid = expired = version_mismatch = 0
        with self._lock:
            for entry in self._entries.values():
                if entry.schema_version != self._schema_version:
                    version_mismatch += 1
                elif entry.is_expired(now):
                    expired += 1
                else:
                    valid += 1
            total = len(self._entries)
        return CacheStats(total=total, valid=valid, expired=expired, version_mismatch=version_mismatch)

    def purge_stale(self) -> int:
        """Remove expired entries and entries from other schema versions.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            stale = [key for key, entry in self._entries.items() if not self._is_valid(entry, now)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info("Purged %d stale cover cache entries", len(stale))
        return len(stale)


__all__ = ["BaseCoverCache", "Clock", "CoverCache"]
