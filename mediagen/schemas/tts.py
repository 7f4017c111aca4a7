from __future__ import annotations

from pydantic import BaseModel, Field

from .common import ToolRequest

DEFAULT_VOICE = "en-US-Chirp3-HD-Achernar"
DEFAULT_LANGUAGE_CODE = "en-US"


class Pronunciation(BaseModel):
    word: str = ""
    phonetic: str = ""
    alphabet: str = Field(default="ipa", description="Either ipa or x-sampa.")


class SpeechSynthesizeRequest(ToolRequest):
    text: str = Field(default="", description="Text to synthesize.")
    voice: str | None = Field(default=None, description="Chirp3-HD voice name.")
    language_code: str = Field(default=DEFAULT_LANGUAGE_CODE)
    speaking_rate: float = Field(default=1.0, description="0.25 to 4.0.")
    pitch: float = Field(default=0.0, description="Semitones, -20 to 20.")
    pronunciations: list[Pronunciation] | None = Field(default=None)
    output_file: str | None = Field(default=None)
    output_gcs_uri: str | None = Field(default=None)

    def voice_name(self) -> str:
        return self.voice or DEFAULT_VOICE


class SpeechListVoicesRequest(ToolRequest):
    language_code: str | None = Field(default=None, description="Optional language filter.")


class VoiceInfo(BaseModel):
    name: str
    language_codes: list[str] = Field(default_factory=list)
    ssml_gender: str | None = None
    natural_sample_rate_hertz: int | None = None
