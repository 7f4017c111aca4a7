"""FastAPI routers for the media generation server."""

from fastapi import APIRouter

from . import models, tools

api_router = APIRouter()
api_router.include_router(tools.router)
api_router.include_router(models.router)

__all__ = ["api_router", "models", "tools"]
