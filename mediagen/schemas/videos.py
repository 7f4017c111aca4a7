from __future__ import annotations

from pydantic import Field

from ..core.models import DEFAULT_VEO_MODEL
from .common import ToolRequest


class VideoGenerateRequest(ToolRequest):
    prompt: str = Field(default="", description="Text description of the video to generate.")
    model: str = Field(default=DEFAULT_VEO_MODEL, description="Veo model id or alias.")
    aspect_ratio: str = Field(default="16:9")
    duration_seconds: int = Field(default=8, description="Clip length in seconds (4, 6 or 8).")
    output_gcs_uri: str = Field(default="", description="gs:// prefix the video is written to.")
    generate_audio: bool | None = Field(default=None, description="Veo 3 models only.")
    seed: int | None = Field(default=None)
    download_local: bool = Field(default=False)
    local_path: str | None = Field(default=None)


class VideoFromImageRequest(ToolRequest):
    image: str = Field(default="", description="First frame as base64 data, local path, or gs:// URI.")
    prompt: str = Field(default="")
    last_frame_image: str | None = Field(
        default=None, description="Optional last frame for interpolation."
    )
    model: str = Field(default=DEFAULT_VEO_MODEL)
    aspect_ratio: str = Field(default="16:9")
    duration_seconds: int = Field(default=8)
    output_gcs_uri: str = Field(default="")
    seed: int | None = Field(default=None)
    download_local: bool = Field(default=False)
    local_path: str | None = Field(default=None)


class VideoExtendRequest(ToolRequest):
    video_input: str = Field(default="", description="gs:// URI of the video to extend.")
    prompt: str = Field(default="")
    model: str = Field(default=DEFAULT_VEO_MODEL)
    duration_seconds: int = Field(default=8)
    output_gcs_uri: str = Field(default="")
    seed: int | None = Field(default=None)
    download_local: bool = Field(default=False)
    local_path: str | None = Field(default=None)
