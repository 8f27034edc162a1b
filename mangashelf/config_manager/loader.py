"""Layered configuration loading."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from mangashelf import logging_manager

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_LOCAL_CONFIG_PATH, SENSITIVE_CONFIG_KEYS
from .settings import MangaShelfSettings, apply_settings_updates, load_environment_overrides

logger = logging_manager.get_logger().getChild("config")

_ACTIVE_SETTINGS: Optional[MangaShelfSettings] = None


def _read_layer(path: Path) -> Dict[str, Any]:
    """Return the JSON object stored at ``path``; missing or broken files yield {}."""
    if not path.is_file():
        logger.debug("No configuration file at %s", path)
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning(
            "Skipping unreadable configuration file %s: %s",
            path,
            exc,
            extra={"event": "config.file.invalid"},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Skipping configuration file %s: top level must be an object",
            path,
            extra={"event": "config.file.invalid"},
        )
        return {}
    return data


def _override_path(config_file: Optional[str]) -> Path:
    if not config_file:
        return DEFAULT_LOCAL_CONFIG_PATH
    return Path(config_file).expanduser().resolve()


def load_configuration(config_file: Optional[str] = None) -> Dict[str, Any]:
    """Rebuild the active settings and return them without secrets.

    Layers, lowest precedence first: ``conf/config.json``, then
    ``conf/config.local.json`` (or ``config_file`` when given), then
    ``MANGASHELF_*`` environment variables.

    Raises:
        RuntimeError: If the merged values fail validation.
    """
    global _ACTIVE_SETTINGS

    payload = _read_layer(DEFAULT_CONFIG_PATH)
    payload.update(_read_layer(_override_path(config_file)))

    try:
        settings = MangaShelfSettings.model_validate(payload)
        settings = apply_settings_updates(settings, load_environment_overrides())
    except ValidationError as exc:
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    _ACTIVE_SETTINGS = settings
    logger.debug(
        "Configuration loaded (sources=%s)",
        ",".join(settings.cover_sources),
        extra={"event": "config.loaded"},
    )
    return settings.model_dump(mode="python", exclude=SENSITIVE_CONFIG_KEYS)


def get_settings() -> MangaShelfSettings:
    """Return the active settings, building defaults plus environment on first use."""
    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        try:
            _ACTIVE_SETTINGS = apply_settings_updates(
                MangaShelfSettings(), load_environment_overrides()
            )
        except ValidationError as exc:
            logger.warning(
                "Environment overrides rejected; using defaults: %s",
                exc,
                extra={"event": "config.env.validation_error"},
            )
            _ACTIVE_SETTINGS = MangaShelfSettings()
    return _ACTIVE_SETTINGS


def reset_settings() -> None:
    """Forget the active settings so the next access rebuilds them."""
    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None


__all__ = ["get_settings", "load_configuration", "reset_settings"]
