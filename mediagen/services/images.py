from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Sequence

from ..core.models import (
    IMAGEN_ASPECT_RATIOS,
    IMAGEN_MODELS,
    IMAGEN_UPSCALE_MODEL,
    model_ids,
    resolve_imagen,
)
from ..core.settings import Settings
from ..schemas.images import ImageGenerateRequest, ImageUpscaleRequest
from .dispatch import Destination, GeneratedArtifact
from .inputs import ResolvedMedia
from .orchestrator import MediaOperation, select_destination
from .validation import (
    ValidationError,
    check_choice,
    check_max_length,
    check_range,
    check_single_destination,
    check_storage_uri,
    require_text,
    unknown_model,
)

UPSCALE_FACTORS = ("x2", "x4")
MAX_IMAGES = 4


def predictions_to_artifacts(response: Mapping[str, Any], default_mime: str) -> list[GeneratedArtifact]:
    """Collect base64 payloads from a Vertex ``predictions`` array."""

    artifacts: list[GeneratedArtifact] = []
    for prediction in response.get("predictions") or []:
        data = prediction.get("bytesBase64Encoded")
        if data:
            artifacts.append(
                GeneratedArtifact(mime_type=prediction.get("mimeType") or default_mime, data=data)
            )
    return artifacts


class ImageGenerateOperation(MediaOperation[ImageGenerateRequest]):
    name = "image_generate"
    description = "Generate images from a text prompt with Imagen."
    request_model = ImageGenerateRequest
    default_stem = "image"
    result_label = "Images"
    empty_result_message = "No images returned from API"

    def validate(self, request: ImageGenerateRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        model = resolve_imagen(request.model)

        if model is None:
            errors.append(unknown_model("model", request.model, model_ids(IMAGEN_MODELS)))
            check_choice(
                errors,
                "aspect_ratio",
                request.aspect_ratio,
                IMAGEN_ASPECT_RATIOS,
                f"Invalid aspect ratio '{request.aspect_ratio}'. "
                f"Valid options: {', '.join(IMAGEN_ASPECT_RATIOS)}",
            )
            max_images = MAX_IMAGES
        else:
            check_max_length(errors, "prompt", request.prompt, model.max_prompt_length, model.id)
            check_choice(
                errors,
                "aspect_ratio",
                request.aspect_ratio,
                model.supported_aspect_ratios,
                f"Invalid aspect ratio '{request.aspect_ratio}'. Valid options for {model.id}: "
                f"{', '.join(model.supported_aspect_ratios)}",
            )
            max_images = model.max_images

        check_range(errors, "number_of_images", request.number_of_images, 1, max_images)
        require_text(errors, "prompt", request.prompt, "Prompt")
        check_storage_uri(errors, "output_uri", request.output_uri)
        check_single_destination(
            errors, "output_file", request.output_file, "output_uri", request.output_uri
        )
        return errors

    def endpoint(self, settings: Settings, request: ImageGenerateRequest) -> str:
        model = resolve_imagen(request.model)
        return settings.vertex_model_endpoint(model.id if model else request.model)

    def build_request(
        self, request: ImageGenerateRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        instance: dict[str, Any] = {"prompt": request.prompt}
        if request.negative_prompt:
            instance["negativePrompt"] = request.negative_prompt
        parameters: dict[str, Any] = {
            "sampleCount": request.number_of_images,
            "aspectRatio": request.aspect_ratio,
        }
        if request.seed is not None:
            parameters["seed"] = request.seed
        return {"instances": [instance], "parameters": parameters}

    def extract_artifacts(
        self, response: Mapping[str, Any], request: ImageGenerateRequest
    ) -> list[GeneratedArtifact]:
        return predictions_to_artifacts(response, "image/png")

    def destination(
        self, request: ImageGenerateRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, request.output_uri)


class ImageUpscaleOperation(MediaOperation[ImageUpscaleRequest]):
    name = "image_upscale"
    description = "Upscale an image 2x or 4x with the Imagen upscaler."
    request_model = ImageUpscaleRequest
    default_stem = "image"
    result_label = "Upscaled image"
    empty_result_message = "No upscaled image returned from API"

    def validate(self, request: ImageUpscaleRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        require_text(errors, "image", request.image, "Image")
        check_choice(
            errors,
            "upscale_factor",
            request.upscale_factor,
            UPSCALE_FACTORS,
            f"Invalid upscale factor '{request.upscale_factor}'. "
            f"Valid options: {', '.join(UPSCALE_FACTORS)}",
        )
        check_storage_uri(errors, "output_uri", request.output_uri)
        check_single_destination(
            errors, "output_file", request.output_file, "output_uri", request.output_uri
        )
        return errors

    def media_references(self, request: ImageUpscaleRequest) -> dict[str, tuple[str, str]]:
        return {"image": (request.image, "image/png")}

    def model_id(self, request: ImageUpscaleRequest) -> str:
        return IMAGEN_UPSCALE_MODEL

    def endpoint(self, settings: Settings, request: ImageUpscaleRequest) -> str:
        return settings.vertex_model_endpoint(IMAGEN_UPSCALE_MODEL)

    def build_request(
        self, request: ImageUpscaleRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        return {
            "instances": [{"image": {"bytesBase64Encoded": media["image"].to_base64()}}],
            "parameters": {
                "upscaleFactor": request.upscale_factor,
                "outputMimeType": "image/png",
            },
        }

    def extract_artifacts(
        self, response: Mapping[str, Any], request: ImageUpscaleRequest
    ) -> list[GeneratedArtifact]:
        return predictions_to_artifacts(response, "image/png")[:1]

    def destination(
        self, request: ImageUpscaleRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, request.output_uri)


@lru_cache()
def get_image_operations() -> tuple[ImageGenerateOperation, ImageUpscaleOperation]:
    return ImageGenerateOperation(), ImageUpscaleOperation()
