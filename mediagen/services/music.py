from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Sequence

from ..core.models import LYRIA_MODELS, model_ids, resolve_lyria
from ..core.settings import Settings
from ..schemas.music import MusicGenerateRequest
from .dispatch import Destination, GeneratedArtifact
from .images import predictions_to_artifacts
from .inputs import ResolvedMedia
from .orchestrator import MediaOperation, select_destination
from .validation import (
    ValidationError,
    check_range,
    check_single_destination,
    check_storage_uri,
    require_text,
    unknown_model,
)

MAX_SAMPLES = 4


class MusicGenerateOperation(MediaOperation[MusicGenerateRequest]):
    name = "music_generate"
    description = "Generate instrumental music clips from a text prompt with Lyria."
    request_model = MusicGenerateRequest
    default_stem = "audio"
    result_label = "Audio"
    empty_result_message = "No audio returned from API"

    def validate(self, request: MusicGenerateRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        model = resolve_lyria(request.model)
        if model is None:
            errors.append(unknown_model("model", request.model, model_ids(LYRIA_MODELS)))
        require_text(errors, "prompt", request.prompt, "Prompt")
        check_range(
            errors, "sample_count", request.sample_count, 1, model.max_samples if model else MAX_SAMPLES
        )
        check_storage_uri(errors, "output_gcs_uri", request.output_gcs_uri)
        check_single_destination(
            errors, "output_file", request.output_file, "output_gcs_uri", request.output_gcs_uri
        )
        return errors

    def endpoint(self, settings: Settings, request: MusicGenerateRequest) -> str:
        model = resolve_lyria(request.model)
        return settings.vertex_model_endpoint(model.endpoint_model if model else request.model)

    def build_request(
        self, request: MusicGenerateRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        instance: dict[str, Any] = {"prompt": request.prompt}
        if request.negative_prompt:
            instance["negativePrompt"] = request.negative_prompt
        parameters: dict[str, Any] = {"sampleCount": request.sample_count}
        if request.seed is not None:
            parameters["seed"] = request.seed
        return {"instances": [instance], "parameters": parameters}

    def extract_artifacts(
        self, response: Mapping[str, Any], request: MusicGenerateRequest
    ) -> list[GeneratedArtifact]:
        return predictions_to_artifacts(response, "audio/wav")

    def destination(
        self, request: MusicGenerateRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, request.output_gcs_uri)


@lru_cache()
def get_music_operation() -> MusicGenerateOperation:
    return MusicGenerateOperation()
