"""Google Books search source for first-volume manga covers."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from mangashelf import logging_manager as log_mgr
from mangashelf.config_manager.constants import (
    DEFAULT_BEST_MATCH_THRESHOLD,
    DEFAULT_GOOGLE_BOOKS_MAX_RESULTS,
    DEFAULT_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_GOOGLE_BOOKS_SUBJECT,
    DEFAULT_GOOGLE_BOOKS_TIME_BUDGET_SECONDS,
    DEFAULT_GOOGLE_BOOKS_URL,
    DEFAULT_QUERY_ACCEPT_THRESHOLD,
)

from ..normalization import normalize_image_url
from ..queries import QueryBuilder
from ..scoring import select_best
from ..types import DEFAULT_WEIGHTS, Candidate, CoverSource, ScoringWeights, SourceResult
from .base import BaseCoverSource

logger = log_mgr.get_logger().getChild("services.covers.clients.google_books")


class GoogleBooksSource(BaseCoverSource):
    """Search Google Books volume listings for a first-volume cover.

    Queries from :class:`QueryBuilder` run in order. Each response is
    filtered and scored, and the first selected candidate with an image whose
    score beats ``accept_threshold`` wins. An API key is optional; without
    one the public quota applies.
    """

    name = CoverSource.GOOGLE_BOOKS

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_GOOGLE_BOOKS_URL,
        timeout_seconds: float = DEFAULT_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS,
        time_budget_seconds: Optional[float] = DEFAULT_GOOGLE_BOOKS_TIME_BUDGET_SECONDS,
        max_results: int = DEFAULT_GOOGLE_BOOKS_MAX_RESULTS,
        subject: Optional[str] = DEFAULT_GOOGLE_BOOKS_SUBJECT,
        accept_threshold: float = DEFAULT_QUERY_ACCEPT_THRESHOLD,
        best_match_threshold: float = DEFAULT_BEST_MATCH_THRESHOLD,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        query_builder: Optional[QueryBuilder] = None,
    ) -> None:
        """Initialize the source.

        Args:
            client: Shared async client. When omitted a client is opened for
                each search and closed afterwards.
            api_key: Optional Google Books API key.
            base_url: API root, without the ``/volumes`` endpoint.
            timeout_seconds: Timeout applied to each HTTP request.
            time_budget_seconds: Time the resolver allows the whole search,
                across every query; None uses the resolver default.
            max_results: ``maxResults`` sent with every query.
            subject: Subject filter sent with every query.
            accept_threshold: Score a selected candidate must exceed.
            best_match_threshold: Minimum score for the selector to pick a
                candidate at all.
            weights: Scoring weights handed to the selector.
            query_builder: Builds the ordered query list for a title.
        """
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self.time_budget_seconds = time_budget_seconds
        self._max_results = max_results
        self._subject = subject
        self._accept_threshold = accept_threshold
        self._best_match_threshold = best_match_threshold
        self._weights = weights
        self._query_builder = query_builder or QueryBuilder()

    def _params(self, query: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "q": query,
            "maxResults": self._max_results,
            "printType": "books",
            "langRestrict": "en",
            "orderBy": "relevance",
        }
        if self._subject:
            params["subject"] = self._subject
        if self._api_key:
            params["key"] = self._api_key
        return params

    async def _get_json(self, client: httpx.AsyncClient, query: str) -> Optional[dict]:
        """Run one volumes query and return the JSON body, or None on error."""
        try:
            response = await client.get(
                f"{self._base_url}/volumes",
                params=self._params(query),
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "Google Books request failed for %r: %s",
                query,
                exc,
                extra={"event": "covers.google_books.request_error", "source": self.name.value},
            )
            return None

        if response.status_code != 200:
            logger.warning(
                "Google Books returned HTTP %d for %r",
                response.status_code,
                query,
                extra={
                    "event": "covers.google_books.http_error",
                    "source": self.name.value,
                    "status": response.status_code,
                },
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Google Books returned invalid JSON for %r", query)
            return None
        if not isinstance(payload, dict):
            return None
        return payload

    @staticmethod
    def _parse_candidates(payload: Dict[str, Any]) -> List[Candidate]:
        items = payload.get("items")
        if not isinstance(items, list):
            return []
        candidates: List[Candidate] = []
        for item in items:
            candidate = Candidate.from_volume(item)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    async def search(self, title: str, author: Optional[str] = None) -> Optional[SourceResult]:
        if self._client is not None:
            return await self._search_with(self._client, title, author)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._search_with(client, title, author)

    async def _search_with(
        self, client: httpx.AsyncClient, title: str, author: Optional[str]
    ) -> Optional[SourceResult]:
        queries = self._query_builder.build(title, author)
        logger.debug("Searching Google Books for %r with %d queries", title, len(queries))

        for query in queries:
            payload = await self._get_json(client, query)
            if not payload:
                continue
            candidates = self._parse_candidates(payload)
            if not candidates:
                continue

            best = select_best(
                candidates,
                title,
                author,
                weights=self._weights,
                min_score=self._best_match_threshold,
            )
            if best is None or not best.candidate.image_url:
                continue
            if best.score <= self._accept_threshold:
                continue

            url = normalize_image_url(best.candidate.image_url)
            logger.info(
                "Google Books matched %r to %r (score %.2f)",
                title,
                best.candidate.title,
                best.score,
                extra={"event": "covers.google_books.match", "source": self.name.value},
            )
            return SourceResult(url=url, score=best.score, source=self.name)

        return None


__all__ = ["GoogleBooksSource"]
