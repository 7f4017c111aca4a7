from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from ..core.models import registry_listing
from ..schemas.multimodal import GeminiVoice, LanguageCode
from ..services.multimodal import gemini_language_codes, gemini_voices

router = APIRouter(prefix="/v1/models", tags=["models"])


@router.get("")
async def list_models() -> dict[str, Any]:
    """Supported models with their aliases and constraints."""

    return registry_listing()


@router.get("/gemini/voices", response_model=list[GeminiVoice])
async def list_gemini_voices() -> list[GeminiVoice]:
    return gemini_voices()


@router.get("/gemini/language-codes", response_model=list[LanguageCode])
async def list_gemini_language_codes() -> list[LanguageCode]:
    """Language codes accepted by Gemini speech synthesis."""

    return gemini_language_codes()
