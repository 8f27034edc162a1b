"""Source registry and fallback chain configuration for cover lookup."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

import httpx

from mangashelf import logging_manager as log_mgr
from mangashelf.config_manager import MangaShelfSettings, get_google_books_api_key

from .clients.base import BaseCoverSource
from .clients.google_books import GoogleBooksSource
from .clients.static_table import (
    DeterministicFallbackSource,
    create_anime_database_source,
    create_manga_database_source,
)
from .types import CoverSource

logger = log_mgr.get_logger().getChild("services.covers.registry")


DEFAULT_CHAIN: List[CoverSource] = [
    CoverSource.GOOGLE_BOOKS,  # Primary: live search, API key optional
    CoverSource.MANGA_DATABASE,  # Known series covers
    CoverSource.ANIME_DATABASE,  # Known anime adaptations
    CoverSource.FALLBACK,  # Always answers
]

SourceFactory = Callable[[MangaShelfSettings, Optional[httpx.AsyncClient]], BaseCoverSource]


def _build_google_books(
    settings: MangaShelfSettings, client: Optional[httpx.AsyncClient]
) -> BaseCoverSource:
    return GoogleBooksSource(
        client=client,
        api_key=get_google_books_api_key(settings),
        base_url=settings.google_books_base_url,
        timeout_seconds=settings.google_books_request_timeout_seconds,
        time_budget_seconds=settings.google_books_time_budget_seconds,
        max_results=settings.google_books_max_results,
        subject=settings.google_books_subject or None,
        accept_threshold=settings.cover_query_accept_threshold,
        best_match_threshold=settings.cover_best_match_threshold,
    )


SOURCE_FACTORIES: Dict[CoverSource, SourceFactory] = {
    CoverSource.GOOGLE_BOOKS: _build_google_books,
    CoverSource.MANGA_DATABASE: lambda settings, client: create_manga_database_source(),
    CoverSource.ANIME_DATABASE: lambda settings, client: create_anime_database_source(),
    CoverSource.FALLBACK: lambda settings, client: DeterministicFallbackSource(),
}


class CoverSourceRegistry:
    """Ordered chain of cover sources.

    The resolver walks :meth:`get_chain` front to back and stops at the
    first source that answers.
    """

    def __init__(self, sources: Iterable[BaseCoverSource]) -> None:
        self._sources: List[BaseCoverSource] = []
        seen: set[CoverSource] = set()
        for source in sources:
            if source.name in seen:
                raise ValueError(f"Duplicate cover source: {source.name.value}")
            seen.add(source.name)
            self._sources.append(source)

    def get_chain(self) -> Sequence[BaseCoverSource]:
        """Return every registered source in priority order."""
        return tuple(self._sources)

    def get_available_sources(self) -> List[BaseCoverSource]:
        return [source for source in self._sources if source.is_available]

    def get_source(self, name: CoverSource) -> Optional[BaseCoverSource]:
        for source in self._sources:
            if source.name == name:
                return source
        return None

    async def aclose(self) -> None:
        """Close all sources and release resources."""
        for source in self._sources:
            try:
                await source.aclose()
            except Exception as exc:
                logger.debug("Failed to close source %s: %s", source.name.value, exc)

    async def __aenter__(self) -> "CoverSourceRegistry":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()


def create_registry_from_config(
    settings: Optional[MangaShelfSettings] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> CoverSourceRegistry:
    """Create a registry from configuration.

    Args:
        settings: Settings to read the chain and source options from. If
            None, uses the active settings.
        client: Optional shared HTTP client for network-backed sources.

    Returns:
        Configured CoverSourceRegistry.
    """
    from mangashelf import config_manager as cfg

    if settings is None:
        settings = cfg.get_settings()

    chain: List[CoverSource] = []
    for name in settings.cover_sources:
        try:
            chain.append(CoverSource(name))
        except ValueError:
            logger.warning(
                "Ignoring unknown cover source %r",
                name,
                extra={"event": "covers.registry.unknown_source"},
            )
    if not chain:
        chain = list(DEFAULT_CHAIN)

    sources: List[BaseCoverSource] = []
    for source_name in chain:
        factory = SOURCE_FACTORIES.get(source_name)
        if factory is None:
            logger.warning("No factory registered for cover source %s", source_name.value)
            continue
        sources.append(factory(settings, client))

    return CoverSourceRegistry(sources)


__all__ = [
    "CoverSourceRegistry",
    "DEFAULT_CHAIN",
    "SOURCE_FACTORIES",
    "create_registry_from_config",
]
