from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.models import DEFAULT_GEMINI_IMAGE_MODEL, DEFAULT_GEMINI_TTS_MODEL
from .common import ToolRequest

DEFAULT_GEMINI_VOICE = "Kore"
GEMINI_VOICES: tuple[str, ...] = ("Zephyr", "Puck", "Charon", "Kore", "Fenrir", "Leda", "Orus", "Aoede")
GEMINI_STYLES: tuple[str, ...] = ("neutral", "cheerful", "sad", "angry", "fearful", "surprised", "calm")
GEMINI_LANGUAGE_CODES: tuple[tuple[str, str], ...] = (
    ("en-US", "English (US)"),
    ("en-GB", "English (UK)"),
    ("es-ES", "Spanish (Spain)"),
    ("es-MX", "Spanish (Mexico)"),
    ("fr-FR", "French (France)"),
    ("de-DE", "German (Germany)"),
    ("it-IT", "Italian (Italy)"),
    ("pt-BR", "Portuguese (Brazil)"),
    ("ja-JP", "Japanese (Japan)"),
    ("ko-KR", "Korean (Korea)"),
    ("zh-CN", "Chinese (Simplified)"),
    ("zh-TW", "Chinese (Traditional)"),
    ("ar-XA", "Arabic"),
    ("hi-IN", "Hindi (India)"),
    ("ru-RU", "Russian (Russia)"),
)


class MultimodalImageRequest(ToolRequest):
    prompt: str = Field(default="", description="Text description of the image to generate.")
    model: str = Field(default=DEFAULT_GEMINI_IMAGE_MODEL, description="Gemini model id or alias.")
    output_file: str | None = Field(default=None, description="Local path to save the image.")


class MultimodalSpeechRequest(ToolRequest):
    text: str = Field(default="", description="Text to synthesize.")
    voice: str | None = Field(default=None, description="Gemini prebuilt voice name.")
    style: str | None = Field(default=None, description="Tone such as cheerful or calm.")
    model: str = Field(default=DEFAULT_GEMINI_TTS_MODEL, description="Gemini model id or alias.")
    output_file: str | None = Field(default=None, description="Local path to save the audio.")

    def voice_name(self) -> str:
        return self.voice or DEFAULT_GEMINI_VOICE


class MultimodalListVoicesRequest(ToolRequest):
    pass


class GeminiVoice(BaseModel):
    name: str
    description: str


class LanguageCode(BaseModel):
    code: str
    name: str
