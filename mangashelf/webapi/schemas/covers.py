"""Schemas for cover lookup endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class CoverLookupResponse(BaseModel):
    """Resolved cover for a single title."""

    title: str
    author: Optional[str] = None
    url: str


class CoverBatchItem(BaseModel):
    """One title in a batch cover request."""

    title: str
    author: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _require_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("title must not be blank")
        return cleaned

    @field_validator("author")
    @classmethod
    def _blank_author_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class CoverBatchRequest(BaseModel):
    """Request payload for resolving several covers at once."""

    items: List[CoverBatchItem] = Field(default_factory=list)
    force: bool = False


class CoverBatchResponse(BaseModel):
    """Mapping of requested titles to cover URLs; failed titles map to ``""``."""

    covers: Dict[str, str]


class CoverCacheStatsResponse(BaseModel):
    total: int
    valid: int
    expired: int
    version_mismatch: int


class CoverCacheClearResponse(BaseModel):
    cleared: int
