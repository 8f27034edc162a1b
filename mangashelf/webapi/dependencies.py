"""Dependency providers for the FastAPI routes."""

from __future__ import annotations

from functools import lru_cache

from ..services.covers import CoverResolver, create_resolver


@lru_cache
def get_cover_resolver() -> CoverResolver:
    """Return the process-wide :class:`CoverResolver`."""

    return create_resolver()


__all__ = ["get_cover_resolver"]
