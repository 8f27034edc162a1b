"""Cover sources backed by fixed lookup tables."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from mangashelf import logging_manager as log_mgr

from ..catalog import (
    ANIME_DATABASE_SCORE,
    DEFAULT_ANIME_DATABASE_IMAGES,
    DEFAULT_FALLBACK_IMAGES,
    DEFAULT_MANGA_DATABASE_IMAGES,
    FALLBACK_SCORE,
    MANGA_DATABASE_SCORE,
)
from ..normalization import pick_stable, title_key
from ..types import CoverSource, SourceResult
from .base import BaseCoverSource

logger = log_mgr.get_logger().getChild("services.covers.clients.static_table")


class StaticTableSource(BaseCoverSource):
    """Return a known cover URL for titles present in a fixed table."""

    def __init__(self, name: CoverSource, table: Mapping[str, str], score: float) -> None:
        self.name = name
        self._table = table
        self._score = score

    @property
    def is_available(self) -> bool:
        return bool(self._table)

    async def search(self, title: str, author: Optional[str] = None) -> Optional[SourceResult]:
        url = self._table.get(title_key(title))
        if not url:
            return None
        logger.debug("Static table %s matched %r", self.name.value, title)
        return SourceResult(url=url, score=self._score, source=self.name)


def create_manga_database_source(table: Mapping[str, str] = DEFAULT_MANGA_DATABASE_IMAGES) -> StaticTableSource:
    return StaticTableSource(CoverSource.MANGA_DATABASE, table, MANGA_DATABASE_SCORE)


def create_anime_database_source(table: Mapping[str, str] = DEFAULT_ANIME_DATABASE_IMAGES) -> StaticTableSource:
    return StaticTableSource(CoverSource.ANIME_DATABASE, table, ANIME_DATABASE_SCORE)


class DeterministicFallbackSource(BaseCoverSource):
    """Always answer with a stock image picked by a stable hash of the title.

    The same title maps to the same image across calls and processes.
    """

    name = CoverSource.FALLBACK

    def __init__(self, pool: Sequence[str] = DEFAULT_FALLBACK_IMAGES, score: float = FALLBACK_SCORE) -> None:
        if not pool:
            raise ValueError("fallback image pool must not be empty")
        self._pool = tuple(pool)
        self._score = score

    async def search(self, title: str, author: Optional[str] = None) -> Optional[SourceResult]:
        return SourceResult(url=pick_stable(self._pool, title), score=self._score, source=self.name)


__all__ = [
    "DeterministicFallbackSource",
    "StaticTableSource",
    "create_anime_database_source",
    "create_manga_database_source",
]
