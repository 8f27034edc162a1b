"""Cover resolution orchestration."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Iterable, List, Optional

import httpx

from mangashelf import config_manager as cfg
from mangashelf import logging_manager as log_mgr
from mangashelf.config_manager.constants import (
    DEFAULT_BATCH_DELAY_SECONDS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_SOURCE_TIMEOUT_SECONDS,
)

from .cache import BaseCoverCache, CoverCache
from .clients.base import BaseCoverSource
from .metrics import BATCH_CANCELLATIONS, COVER_RESOLUTIONS, SOURCE_DURATION, SOURCE_FAILURES
from .normalization import cache_fingerprint, default_placeholder_url
from .registry import CoverSourceRegistry, create_registry_from_config
from .types import CacheStats, CoverSource, MangaTitle, ResolutionRequest, SourceResult

logger = log_mgr.get_logger().getChild("services.covers.resolver")

PLACEHOLDER_SCORE = 0.0


class CoverResolver:
    """Resolve a manga title to a single cover image URL.

    The resolver:
    1. Returns a cached URL unless a refresh is forced
    2. Tries sources in chain order, each under a timeout
    3. Caches and returns the first answer
    4. Falls back to a generated placeholder when every source comes up empty

    :meth:`resolve` never raises and never returns an empty string.
    """

    def __init__(
        self,
        registry: CoverSourceRegistry,
        cache: Optional[BaseCoverCache] = None,
        *,
        timeout_seconds: Optional[float] = DEFAULT_SOURCE_TIMEOUT_SECONDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> None:
        """Initialize the resolver.

        Args:
            registry: Ordered chain of cover sources.
            cache: Cache store. A default :class:`CoverCache` is used if None.
            timeout_seconds: Time limit for sources without their own
                ``time_budget_seconds``; None disables it.
            batch_size: Titles resolved concurrently by :meth:`resolve_many`.
            batch_delay_seconds: Pause between batches.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._registry = registry
        self._cache = cache if cache is not None else CoverCache()
        self._timeout = timeout_seconds
        self._batch_size = batch_size
        self._batch_delay = batch_delay_seconds

    @property
    def cache(self) -> BaseCoverCache:
        return self._cache

    @property
    def registry(self) -> CoverSourceRegistry:
        return self._registry

    async def resolve(self, title: str, author: Optional[str] = None, force_refresh: bool = False) -> str:
        """Return the best cover URL for ``title``.

        A blank title yields the generic placeholder without touching the
        cache or any source.
        """
        try:
            request = ResolutionRequest(title=title, author=author, force_refresh=force_refresh)
        except ValueError:
            logger.debug("Blank title requested; returning generic placeholder")
            return default_placeholder_url("")
        return await self.resolve_request(request)

    async def resolve_request(self, request: ResolutionRequest) -> str:
        key = cache_fingerprint(request.title, request.author)
        with log_mgr.log_context(cover_title=request.title, cover_author=request.author):
            try:
                if not request.force_refresh:
                    cached = self._read_cache(key)
                    if cached is not None:
                        COVER_RESOLUTIONS.labels(outcome="cache").inc()
                        return cached

                for source in self._registry.get_available_sources():
                    result = await self._run_source(source, request)
                    if result is None:
                        continue
                    self._write_cache(key, result.url, result.score, result.source.value)
                    COVER_RESOLUTIONS.labels(outcome=result.source.value).inc()
                    return result.url
            except Exception as exc:
                logger.warning(
                    "Cover resolution failed for %r: %s",
                    request.title,
                    exc,
                    extra={"event": "covers.resolve.error"},
                )

            url = default_placeholder_url(request.title)
            logger.info(
                "No cover found for %r; using placeholder",
                request.title,
                extra={"event": "covers.resolve.placeholder", "source": CoverSource.DEFAULT.value},
            )
            self._write_cache(key, url, PLACEHOLDER_SCORE, CoverSource.DEFAULT.value)
            COVER_RESOLUTIONS.labels(outcome=CoverSource.DEFAULT.value).inc()
            return url

    def _read_cache(self, key: str) -> Optional[str]:
        try:
            entry = self._cache.get(key)
        except Exception as exc:
            logger.warning("Cover cache read failed for %s: %s", key, exc)
            return None
        if entry is None or not entry.url:
            return None
        logger.debug("Cache hit for %s (source=%s)", key, entry.source)
        return entry.url

    def _write_cache(self, key: str, url: str, score: float, source: str) -> None:
        try:
            self._cache.put(key, url, score, source)
        except Exception as exc:
            logger.warning("Failed to cache cover for %s: %s", key, exc)

    def _budget_for(self, source: BaseCoverSource) -> Optional[float]:
        """Return the source's own time budget, else the resolver default."""
        budget = source.time_budget_seconds
        return budget if budget is not None else self._timeout

    async def _call_source(self, source: BaseCoverSource, request: ResolutionRequest) -> Optional[SourceResult]:
        started = time.perf_counter()
        try:
            search = source.search(request.title, request.author)
            budget = self._budget_for(source)
            if budget is None:
                return await search
            return await asyncio.wait_for(search, timeout=budget)
        finally:
            SOURCE_DURATION.labels(source=source.name.value).observe(time.perf_counter() - started)

    async def _run_source(self, source: BaseCoverSource, request: ResolutionRequest) -> Optional[SourceResult]:
        started = time.perf_counter()
        try:
            result = await self._call_source(source, request)
        except asyncio.TimeoutError:
            SOURCE_FAILURES.labels(source=source.name.value, reason="timeout").inc()
            logger.warning(
                "Source %s timed out after %.1fs",
                source.name.value,
                self._budget_for(source),
                extra={"event": "covers.source.timeout", "source": source.name.value},
            )
            return None
        except Exception as exc:
            SOURCE_FAILURES.labels(source=source.name.value, reason="error").inc()
            logger.warning(
                "Source %s failed: %s",
                source.name.value,
                exc,
                extra={"event": "covers.source.error", "source": source.name.value},
            )
            return None

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        if result is None or not result.url:
            logger.debug(
                "Source %s returned no cover",
                source.name.value,
                extra={"source": source.name.value, "duration_ms": duration_ms},
            )
            return None

        logger.info(
            "Source %s answered with score %.2f",
            source.name.value,
            result.score,
            extra={
                "event": "covers.source.hit",
                "source": source.name.value,
                "duration_ms": duration_ms,
            },
        )
        return result

    async def _resolve_item(self, item: MangaTitle, force_refresh: bool) -> str:
        return await self.resolve(item.title, item.author, force_refresh=force_refresh)

    async def resolve_many(
        self,
        items: Iterable[Any],
        force_refresh: bool = False,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Dict[str, str]:
        """Resolve many titles in fixed-size concurrent batches.

        Args:
            items: :class:`MangaTitle` values, ``{"title", "author"}``
                mappings or plain title strings.
            force_refresh: Bypass cached entries for every title.
            cancel_event: When set, batches that have not started are
                skipped. Items already in flight always finish.

        Returns:
            Mapping of title to URL. A title whose resolution failed maps to
            an empty string.
        """
        titles: List[MangaTitle] = []
        for item in items:
            try:
                titles.append(MangaTitle.coerce(item))
            except TypeError as exc:
                logger.warning("Skipping batch item: %s", exc)

        results: Dict[str, str] = {}
        batches = [titles[i : i + self._batch_size] for i in range(0, len(titles), self._batch_size)]

        for index, batch in enumerate(batches):
            if index > 0 and self._batch_delay > 0:
                await asyncio.sleep(self._batch_delay)
            if cancel_event is not None and cancel_event.is_set():
                BATCH_CANCELLATIONS.inc()
                logger.info(
                    "Batch resolution cancelled with %d of %d batches done",
                    index,
                    len(batches),
                    extra={"event": "covers.batch.cancelled"},
                )
                break

            # Shielded so cancelling the caller lets the current batch finish.
            outcomes = await asyncio.shield(
                asyncio.gather(
                    *(self._resolve_item(item, force_refresh) for item in batch),
                    return_exceptions=True,
                )
            )
            for item, outcome in zip(batch, outcomes):
                key = item.title if isinstance(item.title, str) else ""
                if isinstance(outcome, BaseException):
                    logger.warning(
                        "Failed to resolve cover for %r: %s",
                        item.title,
                        outcome,
                        extra={"event": "covers.batch.item_error"},
                    )
                    results[key] = ""
                else:
                    results[key] = outcome

        return results

    def invalidate(self, title: str, author: Optional[str] = None) -> bool:
        """Drop the cached cover for ``title``.

        Returns:
            True if an entry was deleted, False otherwise.
        """
        return self._cache.delete(cache_fingerprint(title, author))

    def clear_cache(self) -> int:
        """Clear all cached covers.

        Returns:
            Number of entries deleted.
        """
        return self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def purge_stale(self) -> int:
        return self._cache.purge_stale()

    async def aclose(self) -> None:
        """Release resources."""
        await self._registry.aclose()

    async def __aenter__(self) -> "CoverResolver":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


def create_resolver(
    settings: Optional[cfg.MangaShelfSettings] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
    cache: Optional[BaseCoverCache] = None,
) -> CoverResolver:
    """Create a configured cover resolver.

    Args:
        settings: Settings to build from. If None, uses the active settings.
        client: Optional shared HTTP client for network-backed sources.
        cache: Optional cache store; one is built from settings if None.

    Returns:
        Configured CoverResolver.
    """
    if settings is None:
        settings = cfg.get_settings()

    registry = create_registry_from_config(settings, client=client)
    if cache is None:
        cache = CoverCache(
            ttl_hours=settings.cover_cache_ttl_hours,
            max_entries=settings.cover_cache_max_entries,
            schema_version=settings.cover_cache_schema_version,
        )

    return CoverResolver(
        registry,
        cache,
        timeout_seconds=settings.cover_source_timeout_seconds,
        batch_size=settings.cover_batch_size,
        batch_delay_seconds=settings.cover_batch_delay_seconds,
    )


__all__ = ["CoverResolver", "PLACEHOLDER_SCORE", "create_resolver"]
