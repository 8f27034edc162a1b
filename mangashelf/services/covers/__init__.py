"""Cover image resolution for manga titles.

Finds the first-volume, English-edition cover for a title by walking an
ordered chain of sources, with caching and a generated placeholder as the
last resort.
"""

from __future__ import annotations

from .types import (
    CacheEntry,
    CacheStats,
    Candidate,
    CoverSource,
    DEFAULT_WEIGHTS,
    MangaTitle,
    ResolutionRequest,
    ScoredCandidate,
    ScoringWeights,
    SourceResult,
)
from .cache import BaseCoverCache, CoverCache
from .queries import QueryBuilder, build_queries
from .classification import (
    author_matches,
    has_english_edition_phrase,
    is_complete_set,
    is_first_volume,
    is_manga_content,
    title_similarity,
)
from .scoring import passes_filters, rejection_reason, score_candidate, select_best
from .normalization import (
    cache_fingerprint,
    default_placeholder_url,
    normalize_image_url,
    title_key,
)
from .clients import (
    BaseCoverSource,
    DeterministicFallbackSource,
    GoogleBooksSource,
    StaticTableSource,
)
from .registry import CoverSourceRegistry, DEFAULT_CHAIN, create_registry_from_config
from .resolver import CoverResolver, create_resolver

__all__ = [
    # Types
    "CacheEntry",
    "CacheStats",
    "Candidate",
    "CoverSource",
    "DEFAULT_WEIGHTS",
    "MangaTitle",
    "ResolutionRequest",
    "ScoredCandidate",
    "ScoringWeights",
    "SourceResult",
    # Cache
    "BaseCoverCache",
    "CoverCache",
    # Queries
    "QueryBuilder",
    "build_queries",
    # Classification and scoring
    "author_matches",
    "has_english_edition_phrase",
    "is_complete_set",
    "is_first_volume",
    "is_manga_content",
    "passes_filters",
    "rejection_reason",
    "score_candidate",
    "select_best",
    "title_similarity",
    # Normalization
    "cache_fingerprint",
    "default_placeholder_url",
    "normalize_image_url",
    "title_key",
    # Sources
    "BaseCoverSource",
    "DeterministicFallbackSource",
    "GoogleBooksSource",
    "StaticTableSource",
    # Registry
    "CoverSourceRegistry",
    "DEFAULT_CHAIN",
    "create_registry_from_config",
    # Resolver
    "CoverResolver",
    "create_resolver",
]
