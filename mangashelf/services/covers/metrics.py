"""Prometheus metrics for cover resolution.

Metrics live in the default ``prometheus_client`` registry and are exported
by the web API at ``/metrics``.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Outcome is a source name, "cache" for cache hits or "default" for placeholders.
COVER_RESOLUTIONS = Counter(
    "mangashelf_cover_resolutions_total",
    "Cover lookups by where the returned URL came from",
    ["outcome"],
)

SOURCE_DURATION = Histogram(
    "mangashelf_cover_source_duration_seconds",
    "Time spent waiting on each cover source",
    ["source"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10],
)

SOURCE_FAILURES = Counter(
    "mangashelf_cover_source_failures_total",
    "Cover source calls that timed out or raised",
    ["source", "reason"],
)

BATCH_CANCELLATIONS = Counter(
    "mangashelf_cover_batch_cancellations_total",
    "Batch resolutions stopped early by their cancel event",
)

__all__ = [
    "BATCH_CANCELLATIONS",
    "COVER_RESOLUTIONS",
    "SOURCE_DURATION",
    "SOURCE_FAILURES",
]
