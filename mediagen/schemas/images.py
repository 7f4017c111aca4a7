from __future__ import annotations

from pydantic import Field

from ..core.models import DEFAULT_IMAGEN_MODEL
from .common import ToolRequest


class ImageGenerateRequest(ToolRequest):
    prompt: str = Field(default="", description="Text description of the image to generate.")
    negative_prompt: str | None = Field(default=None, description="What to avoid in the image.")
    model: str = Field(default=DEFAULT_IMAGEN_MODEL, description="Imagen model id or alias.")
    aspect_ratio: str = Field(default="1:1", description="One of 1:1, 3:4, 4:3, 9:16, 16:9.")
    number_of_images: int = Field(default=1, description="Number of images to generate (1-4).")
    seed: int | None = Field(default=None)
    output_file: str | None = Field(default=None, description="Local path to save the image(s).")
    output_uri: str | None = Field(default=None, description="gs:// URI to upload the image(s).")


class ImageUpscaleRequest(ToolRequest):
    image: str = Field(default="", description="Image as base64 data, local path, or gs:// URI.")
    upscale_factor: str = Field(default="x2", description="Either x2 or x4.")
    output_file: str | None = Field(default=None)
    output_uri: str | None = Field(default=None)
