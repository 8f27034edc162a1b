"""Pydantic schemas for the FastAPI web backend."""

from __future__ import annotations

from .covers import (
    CoverBatchItem,
    CoverBatchRequest,
    CoverBatchResponse,
    CoverCacheClearResponse,
    CoverCacheStatsResponse,
    CoverLookupResponse,
)

__all__ = [
    "CoverBatchItem",
    "CoverBatchRequest",
    "CoverBatchResponse",
    "CoverCacheClearResponse",
    "CoverCacheStatsResponse",
    "CoverLookupResponse",
]
