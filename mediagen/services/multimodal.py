"""Gemini ``generateContent`` tools for image and speech output."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Mapping, Sequence

from ..core.client import MediaClient
from ..core.models import GEMINI_MODELS, GeminiModel, model_ids, resolve_gemini
from ..core.settings import Settings
from ..schemas.common import ContentItem, TextContent
from ..schemas.multimodal import (
    GEMINI_LANGUAGE_CODES,
    GEMINI_STYLES,
    GEMINI_VOICES,
    GeminiVoice,
    LanguageCode,
    MultimodalImageRequest,
    MultimodalListVoicesRequest,
    MultimodalSpeechRequest,
)
from .dispatch import Destination, GeneratedArtifact
from .inputs import ResolvedMedia
from .orchestrator import MediaOperation, Tool, select_destination
from .validation import ValidationError, check_choice, require_text, unknown_model

logger = logging.getLogger(__name__)

GENERATE_CONTENT = "generateContent"


def inline_data_artifacts(response: Mapping[str, Any], default_mime: str) -> list[GeneratedArtifact]:
    """Return the first ``inlineData`` part found across the response candidates."""

    for candidate in response.get("candidates") or []:
        for part in (candidate.get("content") or {}).get("parts") or []:
            inline = part.get("inlineData")
            if inline and inline.get("data"):
                return [GeneratedArtifact(mime_type=inline.get("mimeType") or default_mime, data=inline["data"])]
    return []


def user_text(text: str) -> list[dict[str, Any]]:
    return [{"role": "user", "parts": [{"text": text}]}]


def _check_gemini_model(
    errors: list[ValidationError], name: str, capability: str, label: str
) -> GeminiModel | None:
    model = resolve_gemini(name)
    if model is None:
        errors.append(unknown_model("model", name, model_ids(GEMINI_MODELS)))
    elif not getattr(model, capability):
        errors.append(ValidationError("model", f"Model {model.id} does not support {label}"))
    return model


def _gemini_endpoint(settings: Settings, name: str) -> str:
    model = resolve_gemini(name)
    return settings.vertex_model_endpoint(model.id if model else name, GENERATE_CONTENT)


class MultimodalImageOperation(MediaOperation[MultimodalImageRequest]):
    name = "multimodal_image_generate"
    description = "Generate an image from a text prompt with Gemini."
    request_model = MultimodalImageRequest
    default_stem = "image"
    result_label = "Image"
    empty_result_message = "No image data found in response"

    def validate(self, request: MultimodalImageRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        _check_gemini_model(errors, request.model, "supports_image_generation", "image generation")
        require_text(errors, "prompt", request.prompt, "Prompt")
        return errors

    def endpoint(self, settings: Settings, request: MultimodalImageRequest) -> str:
        return _gemini_endpoint(settings, request.model)

    def build_request(
        self, request: MultimodalImageRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        return {
            "contents": user_text(f"Generate an image of: {request.prompt}"),
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": {"aspectRatio": "1:1"},
            },
        }

    def extract_artifacts(
        self, response: Mapping[str, Any], request: MultimodalImageRequest
    ) -> list[GeneratedArtifact]:
        return inline_data_artifacts(response, "image/png")

    def destination(
        self, request: MultimodalImageRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, None)


class MultimodalSpeechOperation(MediaOperation[MultimodalSpeechRequest]):
    name = "multimodal_speech_synthesize"
    description = "Synthesize speech with a Gemini prebuilt voice and optional style."
    request_model = MultimodalSpeechRequest
    default_stem = "audio"
    result_label = "Audio"
    empty_result_message = "No audio data found in response"

    def validate(self, request: MultimodalSpeechRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        _check_gemini_model(errors, request.model, "supports_tts", "speech synthesis")
        require_text(errors, "text", request.text, "Text")
        if request.voice is not None:
            check_choice(
                errors,
                "voice",
                request.voice,
                GEMINI_VOICES,
                f"Invalid voice '{request.voice}'. Available voices: {', '.join(GEMINI_VOICES)}",
            )
        if request.style is not None:
            check_choice(
                errors,
                "style",
                request.style,
                GEMINI_STYLES,
                f"Invalid style '{request.style}'. Available styles: {', '.join(GEMINI_STYLES)}",
            )
        return errors

    def endpoint(self, settings: Settings, request: MultimodalSpeechRequest) -> str:
        return _gemini_endpoint(settings, request.model)

    def build_request(
        self, request: MultimodalSpeechRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        text = request.text
        if request.style:
            text = f"Say the following text in a {request.style} tone: {request.text}"
        return {
            "contents": user_text(text),
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": request.voice_name()}}
                },
            },
        }

    def extract_artifacts(
        self, response: Mapping[str, Any], request: MultimodalSpeechRequest
    ) -> list[GeneratedArtifact]:
        return inline_data_artifacts(response, "audio/wav")

    def destination(
        self, request: MultimodalSpeechRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, None)


def gemini_voices() -> list[GeminiVoice]:
    return [GeminiVoice(name=name, description=f"Gemini TTS voice: {name}") for name in GEMINI_VOICES]


def gemini_language_codes() -> list[LanguageCode]:
    return [LanguageCode(code=code, name=name) for code, name in GEMINI_LANGUAGE_CODES]


class MultimodalListVoicesTool(Tool[MultimodalListVoicesRequest]):
    name = "multimodal_list_voices"
    description = "List the available Gemini TTS voices."
    request_model = MultimodalListVoicesRequest

    async def invoke(self, client: MediaClient, arguments: Mapping[str, Any]) -> list[ContentItem]:
        self.parse(arguments)
        logger.info("Listing %d Gemini TTS voices", len(GEMINI_VOICES))
        payload = [voice.model_dump() for voice in gemini_voices()]
        return [TextContent(text=json.dumps(payload, indent=2))]


@lru_cache()
def get_multimodal_tools() -> tuple[MultimodalImageOperation, MultimodalSpeechOperation, MultimodalListVoicesTool]:
    return MultimodalImageOperation(), MultimodalSpeechOperation(), MultimodalListVoicesTool()
