"""Application factory for the FastAPI backend."""

from __future__ import annotations

from fastapi import FastAPI

from mangashelf import config_manager as cfg
from mangashelf import logging_manager as log_mgr
from mangashelf import load_environment

from .metrics import setup_metrics
from .routes import cover_router

load_environment()

LOGGER = log_mgr.get_logger().getChild("webapi.application")


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    app = FastAPI(title="mangashelf API", version="0.1.0")
    setup_metrics(app)

    @app.on_event("startup")
    async def _load_configuration() -> None:
        try:
            cfg.load_configuration()
        except Exception:
            LOGGER.exception("Failed to load configuration; using defaults")

    @app.get("/_health", tags=["health"])
    def healthcheck() -> dict[str, str]:
        """Simple healthcheck endpoint for smoke-testing the server."""

        return {"status": "ok"}

    app.include_router(cover_router)

    return app


__all__ = ["create_app"]
