"""FastAPI web backend for mangashelf."""

from __future__ import annotations

from .application import create_app

__all__ = ["create_app"]
