"""Prometheus exporter for the mangashelf API.

HTTP traffic is instrumented by prometheus-fastapi-instrumentator; cover
lookup metrics come from :mod:`mangashelf.services.covers.metrics`. Cache
occupancy is a gauge refreshed by a background task while the app runs.

Usage:
    setup_metrics(app)  # once in create_app(), before routers
"""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Gauge, Info, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator

from mangashelf import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("webapi.metrics")

APP_INFO = Info("mangashelf", "mangashelf application information")

COVER_CACHE_ENTRIES = Gauge(
    "mangashelf_cover_cache_entries",
    "Cover cache entries by validity",
    ["state"],
)

_GAUGE_UPDATE_INTERVAL_SECONDS = 15

_gauge_task: Optional[asyncio.Task] = None
_instrumented = False


def collect_cache_gauges() -> None:
    """Copy the resolver's cache statistics into :data:`COVER_CACHE_ENTRIES`."""
    from .dependencies import get_cover_resolver

    stats = get_cover_resolver().cache_stats()
    COVER_CACHE_ENTRIES.labels(state="valid").set(stats.valid)
    COVER_CACHE_ENTRIES.labels(state="expired").set(stats.expired)
    COVER_CACHE_ENTRIES.labels(state="version_mismatch").set(stats.version_mismatch)


async def _periodic_gauge_update() -> None:
    while True:
        try:
            collect_cache_gauges()
        except Exception as exc:
            logger.debug("Cache gauge refresh failed: %s", exc)
        await asyncio.sleep(_GAUGE_UPDATE_INTERVAL_SECONDS)


def setup_metrics(app: FastAPI) -> None:
    """Wire Prometheus metrics into ``app``.

    Safe to call for several apps in one process (the test suite does). Only
    the first app gets HTTP instrumentation because the instrumentator's
    metrics live in the global registry; every app gets ``/metrics``.
    """
    global _instrumented

    APP_INFO.info({"title": app.title, "version": app.version})

    if not _instrumented:
        try:
            instrumentator = Instrumentator(
                should_group_status_codes=False,
                should_ignore_untemplated=True,
                should_respect_env_var=False,
                excluded_handlers=["/metrics", "/_health"],
            )
            instrumentator.instrument(app)
            instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
        except ValueError:
            logger.debug("HTTP metrics already registered; skipping instrumentation")
        _instrumented = True

    if not any(getattr(route, "path", None) == "/metrics" for route in app.routes):

        @app.get("/metrics", include_in_schema=False)
        async def _metrics() -> Response:
            return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    async def _start_gauge_collector() -> None:
        global _gauge_task
        _gauge_task = asyncio.create_task(_periodic_gauge_update())

    @app.on_event("shutdown")
    async def _stop_gauge_collector() -> None:
        global _gauge_task
        if _gauge_task is not None:
            _gauge_task.cancel()
            _gauge_task = None


__all__ = ["APP_INFO", "COVER_CACHE_ENTRIES", "collect_cache_gauges", "setup_metrics"]
