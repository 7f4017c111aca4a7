"""FastAPI application entrypoint for the media generation server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.client import MediaClient, create_media_client
from .core.errors import MediaGenError
from .core.logging_setup import setup_logging
from .core.settings import Settings, get_settings
from .routers import api_router
from .schemas.common import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def create_lifespan(settings: Settings, client: MediaClient | None = None):
    """Create a lifespan that owns the shared media client."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        media_client = client or create_media_client(settings)
        app.state.media_client = media_client
        logger.info(
            "Media client ready for project %s in %s", settings.project_id, settings.location
        )
        try:
            yield
        finally:
            app.state.media_client = None
            if client is None:
                await media_client.aclose()

    return lifespan


async def media_error_handler(_: Request, exc: MediaGenError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("Tool call failed: %s", exc)
    else:
        logger.info("Tool call rejected: %s", exc)
    body = ErrorResponse(
        error=ErrorDetail(type=type(exc).__name__, message=str(exc), details=exc.details())
    )
    return JSONResponse(status_code=exc.http_status, content=body.model_dump())


def create_app(settings: Settings | None = None, client: MediaClient | None = None) -> FastAPI:
    """Application factory for the media generation server."""

    app_settings = settings or get_settings()
    setup_logging(app_settings.log_level)
    lifespan = create_lifespan(app_settings, client)

    app = FastAPI(title="Media Generation Server", version="0.1.0", lifespan=lifespan)
    app.state.settings = app_settings
    app.add_exception_handler(MediaGenError, media_error_handler)

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router)

    return app


app = create_app()

__all__ = ["app", "create_app"]
