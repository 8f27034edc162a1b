"""High-level configuration management for mangashelf."""
from __future__ import annotations

from .constants import (
    CONF_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOCAL_CONFIG_PATH,
    SENSITIVE_CONFIG_KEYS,
)
from .loader import get_settings, load_configuration, reset_settings
from .settings import (
    EnvironmentOverrides,
    MangaShelfSettings,
    apply_settings_updates,
    load_environment_overrides,
)


def get_google_books_api_key(settings: MangaShelfSettings | None = None) -> str | None:
    """Return the Google Books API key from ``settings`` (or the active ones).

    Blank keys count as unset.
    """

    if settings is None:
        settings = get_settings()
    secret = settings.google_books_api_key
    if secret is None:
        return None
    value = secret.get_secret_value().strip()
    return value or None


__all__ = [
    "CONF_DIR",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOCAL_CONFIG_PATH",
    "SENSITIVE_CONFIG_KEYS",
    "EnvironmentOverrides",
    "MangaShelfSettings",
    "apply_settings_updates",
    "get_google_books_api_key",
    "get_settings",
    "load_configuration",
    "load_environment_overrides",
    "reset_settings",
]
