"""Structured logging for mangashelf.

Every module logs through a child of the ``mangashelf`` logger. Records are
rendered as one JSON object per line, written to a rotating file under
``log/`` and echoed to stderr. While a cover is being resolved,
:func:`log_context` tags each record with the title and author so the lines
of one lookup can be grouped.

Environment variables:

``MANGASHELF_LOG_LEVEL``
    Initial level name (``DEBUG``, ``INFO``, ...). Defaults to ``INFO``.
``MANGASHELF_LOG_DIR``
    Directory for ``app.log``. Defaults to ``<project>/log``.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

ROOT_LOGGER_NAME = "mangashelf"
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_LOG_DIR = PROJECT_ROOT / "log"
LOG_FILE_NAME = "app.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DEFAULT_LOG_LEVEL = logging.INFO

# Keys promoted to the top level of each JSON line when present.
STRUCTURED_FIELDS: tuple[str, ...] = (
    "event",
    "cover_title",
    "cover_author",
    "source",
    "duration_ms",
    "status",
)

# Attributes every LogRecord carries; anything else came from ``extra=``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}

_logger: Optional[logging.Logger] = None
_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "mangashelf_log_context", default={}
)


class JSONLogFormatter(logging.Formatter):
    """Format a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pid": record.process,
        }

        extra: Dict[str, object] = {}
        for key, value in vars(record).items():
            if key in STRUCTURED_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _RECORD_ATTRIBUTES:
                extra[key] = value
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _context.get().items():
            if getattr(record, key, None) is None:
                setattr(record, key, value)
        return True


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.environ.get("MANGASHELF_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        return resolved if isinstance(resolved, int) else DEFAULT_LOG_LEVEL
    return level


def _log_dir() -> Path:
    configured = os.environ.get("MANGASHELF_LOG_DIR")
    return Path(configured).expanduser() if configured else DEFAULT_LOG_DIR


def _build_handlers() -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_dir = _log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / LOG_FILE_NAME,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    except OSError:
        # Read-only checkouts still get stderr output.
        pass

    formatter = JSONLogFormatter()
    context_filter = LogContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        # Attached per handler so records from child loggers are tagged too.
        handler.addFilter(context_filter)
    return handlers


def get_logger() -> logging.Logger:
    """Return the ``mangashelf`` logger, configuring it on first use."""
    global _logger
    if _logger is None:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        logger.propagate = False
        for handler in _build_handlers():
            logger.addHandler(handler)
        _logger = logger
        set_log_level(None)
    return _logger


def set_log_level(level: Union[int, str, None]) -> int:
    """Apply ``level`` to the logger and its handlers and return it.

    ``None`` re-reads ``MANGASHELF_LOG_LEVEL``.
    """
    resolved = _resolve_level(level)
    logger = get_logger()
    logger.setLevel(resolved)
    for handler in logger.handlers:
        handler.setLevel(resolved)
    return resolved


def get_log_context() -> Dict[str, object]:
    return dict(_context.get())


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Tag records logged inside the block with ``values``.

    ``None`` values are skipped. Each asyncio task works on its own copy of
    the context, so concurrent lookups keep their own tags.
    """
    merged = dict(_context.get())
    merged.update({key: value for key, value in values.items() if value is not None})
    token = _context.set(merged)
    try:
        yield
    finally:
        _context.reset(token)


__all__ = [
    "JSONLogFormatter",
    "LogContextFilter",
    "STRUCTURED_FIELDS",
    "get_log_context",
    "get_logger",
    "log_context",
    "set_log_level",
]
