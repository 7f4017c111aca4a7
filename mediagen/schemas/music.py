from __future__ import annotations

from pydantic import Field

from ..core.models import DEFAULT_LYRIA_MODEL
from .common import ToolRequest


class MusicGenerateRequest(ToolRequest):
    prompt: str = Field(default="", description="Description of the music to generate.")
    negative_prompt: str | None = Field(default=None)
    model: str = Field(default=DEFAULT_LYRIA_MODEL, description="Lyria model id or alias.")
    sample_count: int = Field(default=1, description="Number of clips to generate (1-4).")
    seed: int | None = Field(default=None)
    output_file: str | None = Field(default=None)
    output_gcs_uri: str | None = Field(default=None)
