"""Routes for manga cover lookup."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from mangashelf import logging_manager as log_mgr
from mangashelf.services.covers import CoverResolver, MangaTitle

from ..dependencies import get_cover_resolver
from ..schemas.covers import (
    CoverBatchRequest,
    CoverBatchResponse,
    CoverCacheClearResponse,
    CoverCacheStatsResponse,
    CoverLookupResponse,
)

logger = log_mgr.get_logger().getChild("webapi.routes.covers")

router = APIRouter(prefix="/covers", tags=["covers"])


@router.get("", response_model=CoverLookupResponse)
async def lookup_cover(
    title: str = Query(..., description="Manga title to resolve."),
    author: Optional[str] = Query(None, description="Optional author used to disambiguate."),
    force: bool = Query(False, description="Ignore any cached cover."),
    resolver: CoverResolver = Depends(get_cover_resolver),
) -> CoverLookupResponse:
    """Return the best first-volume cover URL for a manga title.

    Sources are tried in order (Google Books, built-in tables, stock
    fallback); a generated placeholder is returned when none answers.
    """
    cleaned_title = title.strip()
    if not cleaned_title:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="title must not be blank",
        )
    cleaned_author = (author or "").strip() or None

    url = await resolver.resolve(cleaned_title, cleaned_author, force_refresh=force)
    return CoverLookupResponse(title=cleaned_title, author=cleaned_author, url=url)


@router.post("/batch", response_model=CoverBatchResponse)
async def lookup_cover_batch(
    request: CoverBatchRequest,
    resolver: CoverResolver = Depends(get_cover_resolver),
) -> CoverBatchResponse:
    """Resolve covers for several titles; failed titles map to an empty string."""

    items = [MangaTitle(title=item.title, author=item.author) for item in request.items]
    logger.info("Batch cover lookup for %d titles", len(items))
    covers = await resolver.resolve_many(items, force_refresh=request.force)
    return CoverBatchResponse(covers=covers)


@router.get("/cache/stats", response_model=CoverCacheStatsResponse)
async def cover_cache_stats(
    resolver: CoverResolver = Depends(get_cover_resolver),
) -> CoverCacheStatsResponse:
    stats = resolver.cache_stats()
    return CoverCacheStatsResponse(**stats.to_dict())


@router.delete("/cache", response_model=CoverCacheClearResponse)
async def clear_cover_cache(
    resolver: CoverResolver = Depends(get_cover_resolver),
) -> CoverCacheClearResponse:
    cleared = resolver.clear_cache()
    return CoverCacheClearResponse(cleared=cleared)


__all__ = ["router"]
