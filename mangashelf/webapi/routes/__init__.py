"""Route groups exposed by the web backend."""

from __future__ import annotations

from .cover_routes import router as cover_router

__all__ = ["cover_router"]
