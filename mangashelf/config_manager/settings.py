"""Settings models for cover resolution."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from mangashelf import logging_manager

from .constants import (
    DEFAULT_BATCH_DELAY_SECONDS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_BEST_MATCH_THRESHOLD,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_SCHEMA_VERSION,
    DEFAULT_CACHE_TTL_HOURS,
    DEFAULT_GOOGLE_BOOKS_MAX_RESULTS,
    DEFAULT_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_GOOGLE_BOOKS_SUBJECT,
    DEFAULT_GOOGLE_BOOKS_TIME_BUDGET_SECONDS,
    DEFAULT_GOOGLE_BOOKS_URL,
    DEFAULT_QUERY_ACCEPT_THRESHOLD,
    DEFAULT_SOURCE_CHAIN,
    DEFAULT_SOURCE_TIMEOUT_SECONDS,
)

logger = logging_manager.get_logger().getChild("config")


def _split_source_names(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    names: list[str] = []
    for entry in value or ():
        name = str(entry).strip().lower()
        if name and name not in names:
            names.append(name)
    return names


class MangaShelfSettings(BaseModel):
    """Every tunable of the cover resolver.

    ``cover_sources`` accepts a list or a comma separated string; names are
    lower-cased and deduplicated. Unknown names survive validation and are
    skipped, with a warning, when the source chain is built.
    """

    model_config = ConfigDict(extra="allow")

    google_books_api_key: Optional[SecretStr] = None
    google_books_base_url: str = DEFAULT_GOOGLE_BOOKS_URL
    google_books_max_results: int = Field(default=DEFAULT_GOOGLE_BOOKS_MAX_RESULTS, ge=1, le=40)
    google_books_subject: str = DEFAULT_GOOGLE_BOOKS_SUBJECT
    google_books_request_timeout_seconds: float = Field(
        default=DEFAULT_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS, gt=0
    )
    google_books_time_budget_seconds: float = Field(
        default=DEFAULT_GOOGLE_BOOKS_TIME_BUDGET_SECONDS, gt=0
    )
    cover_source_timeout_seconds: float = Field(default=DEFAULT_SOURCE_TIMEOUT_SECONDS, gt=0)
    cover_query_accept_threshold: float = Field(default=DEFAULT_QUERY_ACCEPT_THRESHOLD, ge=0, le=1)
    cover_best_match_threshold: float = Field(default=DEFAULT_BEST_MATCH_THRESHOLD, ge=0, le=1)
    cover_cache_ttl_hours: float = Field(default=DEFAULT_CACHE_TTL_HOURS, gt=0)
    cover_cache_max_entries: int = Field(default=DEFAULT_CACHE_MAX_ENTRIES, ge=1)
    cover_cache_schema_version: str = DEFAULT_CACHE_SCHEMA_VERSION
    cover_batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    cover_batch_delay_seconds: float = Field(default=DEFAULT_BATCH_DELAY_SECONDS, ge=0)
    cover_sources: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_CHAIN))

    @field_validator("cover_sources", mode="before")
    @classmethod
    def _normalize_sources(cls, value: Any) -> list[str]:
        return _split_source_names(value)


class EnvironmentOverrides(BaseSettings):
    """Values read from ``MANGASHELF_*`` environment variables.

    The API key also honours the unprefixed ``GOOGLE_BOOKS_API_KEY``.
    """

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")

    google_books_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("MANGASHELF_GOOGLE_BOOKS_API_KEY", "GOOGLE_BOOKS_API_KEY"),
    )
    google_books_base_url: Optional[str] = Field(
        default=None, validation_alias="MANGASHELF_GOOGLE_BOOKS_BASE_URL"
    )
    google_books_request_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias="MANGASHELF_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS"
    )
    google_books_time_budget_seconds: Optional[float] = Field(
        default=None, validation_alias="MANGASHELF_GOOGLE_BOOKS_TIME_BUDGET_SECONDS"
    )
    cover_source_timeout_seconds: Optional[float] = Field(
        default=None, validation_alias="MANGASHELF_COVER_SOURCE_TIMEOUT_SECONDS"
    )
    cover_cache_ttl_hours: Optional[float] = Field(
        default=None, validation_alias="MANGASHELF_COVER_CACHE_TTL_HOURS"
    )
    cover_cache_max_entries: Optional[int] = Field(
        default=None, validation_alias="MANGASHELF_COVER_CACHE_MAX_ENTRIES"
    )
    cover_batch_size: Optional[int] = Field(
        default=None, validation_alias="MANGASHELF_COVER_BATCH_SIZE"
    )
    cover_batch_delay_seconds: Optional[float] = Field(
        default=None, validation_alias="MANGASHELF_COVER_BATCH_DELAY_SECONDS"
    )
    # Kept as text so a comma separated list works; split by the settings model.
    cover_sources: Optional[str] = Field(
        default=None, validation_alias="MANGASHELF_COVER_SOURCES"
    )


def load_environment_overrides() -> Dict[str, Any]:
    """Return the environment overrides that are set, keyed by setting name."""

    try:
        overrides = EnvironmentOverrides()
    except ValidationError as exc:
        logger.warning(
            "Ignoring invalid environment configuration: %s",
            exc,
            extra={"event": "config.env.validation_error"},
        )
        return {}
    return overrides.model_dump(exclude_none=True)


def apply_settings_updates(
    settings: MangaShelfSettings, updates: Dict[str, Any]
) -> MangaShelfSettings:
    """Return ``settings`` with ``updates`` applied and re-validated.

    Raises:
        ValidationError: If an update breaks a field constraint.
    """

    if not updates:
        return settings
    merged = settings.model_dump()
    merged.update(updates)
    return MangaShelfSettings.model_validate(merged)


__all__ = [
    "EnvironmentOverrides",
    "MangaShelfSettings",
    "apply_settings_updates",
    "load_environment_overrides",
]
