"""Veo video generation: text-to-video, image-to-video and extension.

Veo runs as a long-running operation and writes its output straight to the
caller's bucket, so artifacts arrive as ``gs://`` references. They are passed
through as-is, or downloaded when a local copy is requested.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Sequence, TypeVar

from ..core.models import VEO_ASPECT_RATIOS, VEO_DURATIONS, VEO_MODELS, VeoModel, model_ids, resolve_veo
from ..core.settings import Settings
from ..core.storage import GcsUri
from ..schemas.common import ContentItem, TextContent
from ..schemas.videos import VideoExtendRequest, VideoFromImageRequest, VideoGenerateRequest
from .dispatch import (
    Destination,
    GeneratedArtifact,
    LocalFileDestination,
    LocalPaths,
    OutputResult,
    RemoteDestination,
)
from .inputs import ResolvedMedia
from .orchestrator import MediaOperation
from .validation import (
    ValidationError,
    check_choice,
    check_storage_uri,
    require_text,
    unknown_model,
)

VideoRequestT = TypeVar(
    "VideoRequestT", VideoGenerateRequest, VideoFromImageRequest, VideoExtendRequest
)


def check_model_constraints(
    errors: list[ValidationError],
    model_name: str,
    duration_seconds: int,
    aspect_ratio: str | None = None,
) -> VeoModel | None:
    """Validate model, aspect ratio and duration; fall back to common limits for unknown models."""

    model = resolve_veo(model_name)
    if model is None:
        errors.append(unknown_model("model", model_name, model_ids(VEO_MODELS)))
        if aspect_ratio is not None:
            check_choice(
                errors,
                "aspect_ratio",
                aspect_ratio,
                VEO_ASPECT_RATIOS,
                f"Invalid aspect ratio '{aspect_ratio}'. Valid options: {', '.join(VEO_ASPECT_RATIOS)}",
            )
        check_choice(
            errors,
            "duration_seconds",
            duration_seconds,
            VEO_DURATIONS,
            f"duration_seconds must be one of [{', '.join(map(str, VEO_DURATIONS))}], "
            f"got {duration_seconds}",
        )
        return None

    if aspect_ratio is not None:
        check_choice(
            errors,
            "aspect_ratio",
            aspect_ratio,
            model.supported_aspect_ratios,
            f"Invalid aspect ratio '{aspect_ratio}'. Valid options for {model.id}: "
            f"{', '.join(model.supported_aspect_ratios)}",
        )
    check_choice(
        errors,
        "duration_seconds",
        duration_seconds,
        model.supported_durations,
        f"duration_seconds must be one of [{', '.join(map(str, model.supported_durations))}] "
        f"for model {model.id}, got {duration_seconds}",
    )
    return model


def default_local_path(gcs_uri: str) -> str:
    """``./<last object segment>`` for a downloaded video."""

    segment = GcsUri.parse(gcs_uri).object.rstrip("/").split("/")[-1]
    return f"./{segment or 'output.mp4'}"


class VideoOperation(MediaOperation[VideoRequestT]):
    long_running = True
    default_stem = "video"
    result_label = "Video"
    empty_result_message = "No video generated"

    def model_id(self, request: VideoRequestT) -> str:
        model = resolve_veo(request.model)
        return model.id if model else request.model

    def endpoint(self, settings: Settings, request: VideoRequestT) -> str:
        return settings.vertex_model_endpoint(self.model_id(request), "predictLongRunning")

    def status_endpoint(self, settings: Settings, request: VideoRequestT) -> str:
        return settings.vertex_model_endpoint(self.model_id(request), "fetchPredictOperation")

    def base_parameters(self, request: VideoRequestT) -> dict[str, Any]:
        parameters: dict[str, Any] = {
            "storageUri": request.output_gcs_uri,
            "durationSeconds": request.duration_seconds,
        }
        if request.seed is not None:
            parameters["seed"] = request.seed
        return parameters

    def extract_artifacts(
        self, response: Mapping[str, Any], request: VideoRequestT
    ) -> list[GeneratedArtifact]:
        artifacts: list[GeneratedArtifact] = []
        for video in response.get("videos") or []:
            mime_type = video.get("mimeType") or "video/mp4"
            if video.get("bytesBase64Encoded"):
                artifacts.append(
                    GeneratedArtifact(mime_type=mime_type, data=video["bytesBase64Encoded"])
                )
            else:
                artifacts.append(
                    GeneratedArtifact(
                        mime_type=mime_type,
                        remote_uri=video.get("gcsUri") or request.output_gcs_uri,
                    )
                )
        return artifacts

    def destination(
        self, request: VideoRequestT, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        if request.download_local:
            if request.local_path:
                return LocalFileDestination(request.local_path)
            first = artifacts[0].remote_uri if artifacts else None
            return LocalFileDestination(default_local_path(first or request.output_gcs_uri))
        return RemoteDestination(request.output_gcs_uri)

    def to_content(
        self,
        request: VideoRequestT,
        result: OutputResult,
        artifacts: Sequence[GeneratedArtifact],
    ) -> list[ContentItem]:
        remote = [artifact.remote_uri for artifact in artifacts if artifact.remote_uri]
        lines = [f"Video generated: {', '.join(remote) or request.output_gcs_uri}"]
        if isinstance(result, LocalPaths):
            lines.append(f"Downloaded to: {', '.join(result.paths)}")
        elif not remote:
            return super().to_content(request, result, artifacts)
        return [TextContent(text="\n".join(lines))]


class VideoGenerateOperation(VideoOperation[VideoGenerateRequest]):
    name = "video_generate"
    description = "Generate a video from a text prompt with Veo."
    request_model = VideoGenerateRequest

    def validate(self, request: VideoGenerateRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        model = check_model_constraints(
            errors, request.model, request.duration_seconds, request.aspect_ratio
        )
        if model is not None and request.generate_audio is not None and not model.supports_audio:
            errors.append(
                ValidationError(
                    "generate_audio",
                    f"generate_audio is only supported on Veo 3.x models, not {model.id}",
                )
            )
        require_text(errors, "prompt", request.prompt, "Prompt")
        check_storage_uri(errors, "output_gcs_uri", request.output_gcs_uri, required=True)
        return errors

    def build_request(
        self, request: VideoGenerateRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        parameters = self.base_parameters(request)
        parameters["aspectRatio"] = request.aspect_ratio
        if request.generate_audio is not None:
            parameters["generateAudio"] = request.generate_audio
        return {"instances": [{"prompt": request.prompt}], "parameters": parameters}


class VideoFromImageOperation(VideoOperation[VideoFromImageRequest]):
    name = "video_from_image"
    description = "Animate an image into a video with Veo, optionally towards a last frame."
    request_model = VideoFromImageRequest

    def validate(self, request: VideoFromImageRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        check_model_constraints(
            errors, request.model, request.duration_seconds, request.aspect_ratio
        )
        require_text(errors, "image", request.image, "Image")
        if request.last_frame_image is not None:
            require_text(errors, "last_frame_image", request.last_frame_image, "Last frame image")
        require_text(errors, "prompt", request.prompt, "Prompt")
        check_storage_uri(errors, "output_gcs_uri", request.output_gcs_uri, required=True)
        return errors

    def media_references(self, request: VideoFromImageRequest) -> dict[str, tuple[str, str]]:
        references = {"image": (request.image, "image/png")}
        if request.last_frame_image:
            references["last_frame"] = (request.last_frame_image, "image/png")
        return references

    def build_request(
        self, request: VideoFromImageRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        image = media["image"]
        instance = {
            "prompt": request.prompt,
            "image": {"bytesBase64Encoded": image.to_base64(), "mimeType": image.mime_type},
        }
        parameters = self.base_parameters(request)
        parameters["aspectRatio"] = request.aspect_ratio
        last_frame = media.get("last_frame")
        if last_frame is not None:
            parameters["lastFrame"] = {
                "bytesBase64Encoded": last_frame.to_base64(),
                "mimeType": last_frame.mime_type,
            }
        return {"instances": [instance], "parameters": parameters}


class VideoExtendOperation(VideoOperation[VideoExtendRequest]):
    name = "video_extend"
    description = "Extend an existing Veo video stored in Cloud Storage."
    request_model = VideoExtendRequest

    def validate(self, request: VideoExtendRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        check_model_constraints(errors, request.model, request.duration_seconds)
        if not request.video_input.startswith("gs://"):
            errors.append(
                ValidationError(
                    "video_input",
                    f"video_input must be a GCS URI starting with 'gs://', got '{request.video_input}'",
                )
            )
        require_text(errors, "prompt", request.prompt, "Prompt")
        check_storage_uri(errors, "output_gcs_uri", request.output_gcs_uri, required=True)
        return errors

    def build_request(
        self, request: VideoExtendRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        instance = {
            "prompt": request.prompt,
            "video": {"gcsUri": request.video_input, "mimeType": "video/mp4"},
        }
        return {"instances": [instance], "parameters": self.base_parameters(request)}


@lru_cache()
def get_video_operations() -> tuple[VideoGenerateOperation, VideoFromImageOperation, VideoExtendOperation]:
    return VideoGenerateOperation(), VideoFromImageOperation(), VideoExtendOperation()
