"""Cover image sources."""

from .base import BaseCoverSource
from .google_books import GoogleBooksSource
from .static_table import (
    DeterministicFallbackSource,
    StaticTableSource,
    create_anime_database_source,
    create_manga_database_source,
)

__all__ = [
    "BaseCoverSource",
    "DeterministicFallbackSource",
    "GoogleBooksSource",
    "StaticTableSource",
    "create_anime_database_source",
    "create_manga_database_source",
]
