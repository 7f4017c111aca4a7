"""Static registry of supported generation models and their constraints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, TypeVar

IMAGEN_ASPECT_RATIOS: tuple[str, ...] = ("1:1", "3:4", "4:3", "9:16", "16:9")
VEO_ASPECT_RATIOS: tuple[str, ...] = ("16:9", "9:16")
VEO_DURATIONS: tuple[int, ...] = (4, 6, 8)

IMAGEN_UPSCALE_MODEL = "imagen-4.0-upscale-preview"


@dataclass(frozen=True)
class ImagenModel:
    id: str
    aliases: tuple[str, ...]
    supported_aspect_ratios: tuple[str, ...]
    max_prompt_length: int
    max_images: int


@dataclass(frozen=True)
class VeoModel:
    id: str
    aliases: tuple[str, ...]
    supported_aspect_ratios: tuple[str, ...]
    supported_durations: tuple[int, ...]
    supports_audio: bool


@dataclass(frozen=True)
class LyriaModel:
    id: str
    aliases: tuple[str, ...]
    endpoint_model: str
    max_samples: int


@dataclass(frozen=True)
class GeminiModel:
    id: str
    aliases: tuple[str, ...]
    supports_image_generation: bool
    supports_tts: bool


IMAGEN_MODELS: tuple[ImagenModel, ...] = (
    ImagenModel(
        id="imagen-3.0-generate-002",
        aliases=("imagen-3", "imagen-3.0", "imagen3"),
        supported_aspect_ratios=IMAGEN_ASPECT_RATIOS,
        max_prompt_length=480,
        max_images=4,
    ),
    ImagenModel(
        id="imagen-3.0-fast-generate-001",
        aliases=("imagen-3-fast", "imagen-3.0-fast"),
        supported_aspect_ratios=IMAGEN_ASPECT_RATIOS,
        max_prompt_length=480,
        max_images=4,
    ),
    ImagenModel(
        id="imagen-4.0-generate-preview-06-06",
        aliases=("imagen-4", "imagen-4.0", "imagen4", "imagen-4-preview"),
        supported_aspect_ratios=IMAGEN_ASPECT_RATIOS,
        max_prompt_length=2000,
        max_images=4,
    ),
)

VEO_MODELS: tuple[VeoModel, ...] = (
    VeoModel(
        id="veo-2.0-generate-001",
        aliases=("veo-2", "veo-2.0", "veo2"),
        supported_aspect_ratios=VEO_ASPECT_RATIOS,
        supported_durations=VEO_DURATIONS,
        supports_audio=False,
    ),
    VeoModel(
        id="veo-3.0-generate-preview",
        aliases=("veo-3", "veo-3.0", "veo3", "veo-3-preview"),
        supported_aspect_ratios=VEO_ASPECT_RATIOS,
        supported_durations=VEO_DURATIONS,
        supports_audio=True,
    ),
)

LYRIA_MODELS: tuple[LyriaModel, ...] = (
    LyriaModel(
        id="lyria-1.0",
        aliases=("lyria", "lyria-1", "music-generation"),
        endpoint_model="lyria-002",
        max_samples=4,
    ),
)

GEMINI_MODELS: tuple[GeminiModel, ...] = (
    GeminiModel(
        id="gemini-2.0-flash",
        aliases=("gemini-flash", "gemini-2-flash"),
        supports_image_generation=True,
        supports_tts=True,
    ),
    GeminiModel(
        id="gemini-2.0-flash-lite",
        aliases=("gemini-flash-lite", "gemini-2-flash-lite"),
        supports_image_generation=True,
        supports_tts=True,
    ),
    GeminiModel(
        id="gemini-2.5-flash-image",
        aliases=("gemini-image",),
        supports_image_generation=True,
        supports_tts=False,
    ),
    GeminiModel(
        id="gemini-2.5-flash-preview-tts",
        aliases=("gemini-tts",),
        supports_image_generation=False,
        supports_tts=True,
    ),
)

DEFAULT_IMAGEN_MODEL = "imagen-4.0-generate-preview-06-06"
DEFAULT_VEO_MODEL = "veo-3.0-generate-preview"
DEFAULT_LYRIA_MODEL = "lyria-1.0"
DEFAULT_GEMINI_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"

_M = TypeVar("_M", ImagenModel, VeoModel, LyriaModel, GeminiModel)


def _resolve(models: Iterable[_M], name: str) -> Optional[_M]:
    key = name.strip().lower()
    for model in models:
        if model.id == key or key in model.aliases:
            return model
    return None


def resolve_imagen(name: str) -> Optional[ImagenModel]:
    """Resolve an Imagen model by canonical id or alias."""

    return _resolve(IMAGEN_MODELS, name)


def resolve_veo(name: str) -> Optional[VeoModel]:
    """Resolve a Veo model by canonical id or alias."""

    return _resolve(VEO_MODELS, name)


def resolve_lyria(name: str) -> Optional[LyriaModel]:
    """Resolve a Lyria model by canonical id or alias."""

    return _resolve(LYRIA_MODELS, name)


def resolve_gemini(name: str) -> Optional[GeminiModel]:
    """Resolve a Gemini model by canonical id or alias."""

    return _resolve(GEMINI_MODELS, name)


def model_ids(models: Iterable[ImagenModel | VeoModel | LyriaModel | GeminiModel]) -> str:
    return ", ".join(model.id for model in models)


def registry_listing() -> dict[str, list[dict[str, object]]]:
    """Return the registry as plain data for the models resource."""

    return {
        "image": [
            {
                "id": model.id,
                "aliases": list(model.aliases),
                "aspect_ratios": list(model.supported_aspect_ratios),
                "max_prompt_length": model.max_prompt_length,
                "max_images": model.max_images,
            }
            for model in IMAGEN_MODELS
        ],
        "video": [
            {
                "id": model.id,
                "aliases": list(model.aliases),
                "aspect_ratios": list(model.supported_aspect_ratios),
                "durations": list(model.supported_durations),
                "supports_audio": model.supports_audio,
            }
            for model in VEO_MODELS
        ],
        "music": [
            {
                "id": model.id,
                "aliases": list(model.aliases),
                "max_samples": model.max_samples,
            }
            for model in LYRIA_MODELS
        ],
        "multimodal": [
            {
                "id": model.id,
                "aliases": list(model.aliases),
                "supports_image_generation": model.supports_image_generation,
                "supports_tts": model.supports_tts,
            }
            for model in GEMINI_MODELS
        ],
    }


__all__ = [
    "DEFAULT_GEMINI_IMAGE_MODEL",
    "DEFAULT_GEMINI_TTS_MODEL",
    "DEFAULT_IMAGEN_MODEL",
    "DEFAULT_LYRIA_MODEL",
    "DEFAULT_VEO_MODEL",
    "GEMINI_MODELS",
    "GeminiModel",
    "IMAGEN_ASPECT_RATIOS",
    "IMAGEN_MODELS",
    "IMAGEN_UPSCALE_MODEL",
    "ImagenModel",
    "LYRIA_MODELS",
    "LyriaModel",
    "VEO_ASPECT_RATIOS",
    "VEO_DURATIONS",
    "VEO_MODELS",
    "VeoModel",
    "model_ids",
    "registry_listing",
    "resolve_gemini",
    "resolve_imagen",
    "resolve_lyria",
    "resolve_veo",
]
