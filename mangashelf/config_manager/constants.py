"""Defaults and file locations for mangashelf configuration."""
from __future__ import annotations

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONF_DIR = PROJECT_ROOT / "conf"
DEFAULT_CONFIG_PATH = CONF_DIR / "config.json"
DEFAULT_LOCAL_CONFIG_PATH = CONF_DIR / "config.local.json"

SENSITIVE_CONFIG_KEYS = {"google_books_api_key"}

DEFAULT_GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1"
DEFAULT_GOOGLE_BOOKS_MAX_RESULTS = 40
DEFAULT_GOOGLE_BOOKS_SUBJECT = "comics graphic novels"
DEFAULT_SOURCE_TIMEOUT_SECONDS = 10.0
# A Google Books search runs its queries one after another; each request is
# bounded by the request timeout and the whole search by the time budget.
DEFAULT_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_GOOGLE_BOOKS_TIME_BUDGET_SECONDS = 60.0

# Scoring thresholds are empirically tuned; keep them configurable.
DEFAULT_QUERY_ACCEPT_THRESHOLD = 0.4
DEFAULT_BEST_MATCH_THRESHOLD = 0.6

DEFAULT_CACHE_TTL_HOURS = 24
DEFAULT_CACHE_MAX_ENTRIES = 100
# Bump when resolution logic changes so older cache entries are re-resolved.
DEFAULT_CACHE_SCHEMA_VERSION = "v4.0"

DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY_SECONDS = 1.0

DEFAULT_SOURCE_CHAIN = (
    "google_books",
    "manga_database",
    "anime_database",
    "fallback",
)
