from __future__ import annotations

import pytest

from mediagen.core.errors import ValidationFailed
from mediagen.services.images import ImageGenerateOperation, ImageUpscaleOperation
from mediagen.services.music import MusicGenerateOperation
from mediagen.services.tts import SpeechSynthesizeOperation
from mediagen.services.validation import ValidationError, check_storage_uri
from mediagen.services.videos import (
    VideoExtendOperation,
    VideoFromImageOperation,
    VideoGenerateOperation,
)


def _fields(errors: list[ValidationError]) -> list[str]:
    return [error.field for error in errors]


def _validate(operation, **arguments):
    return operation.validate(operation.parse(arguments))


def test_music_reports_every_violation() -> None:
    errors = _validate(MusicGenerateOperation(), prompt="", sample_count=10)
    assert set(_fields(errors)) == {"prompt", "sample_count"}
    assert "sample_count must be between 1 and 4, got 10" in [e.message for e in errors]


def test_image_defaults_are_valid() -> None:
    assert _validate(ImageGenerateOperation(), prompt="a lighthouse at dusk") == []


def test_image_empty_prompt_and_too_many_images() -> None:
    errors = _validate(ImageGenerateOperation(), prompt="   ", number_of_images=10)
    assert _fields(errors) == ["number_of_images", "prompt"]
    assert errors[1].message == "Prompt cannot be empty"


def test_unknown_model_also_checks_fallback_constraints() -> None:
    errors = _validate(
        ImageGenerateOperation(), prompt="cat", model="imagen-99", aspect_ratio="2:1"
    )
    assert _fields(errors) == ["model", "aspect_ratio"]
    assert errors[0].message.startswith("Unknown model 'imagen-99'. Valid models: ")
    assert "Valid options: 1:1, 3:4, 4:3, 9:16, 16:9" in errors[1].message


def test_image_alias_resolves_model_prompt_limit() -> None:
    errors = _validate(ImageGenerateOperation(), prompt="x" * 481, model="imagen-3")
    assert _fields(errors) == ["prompt"]
    assert "480" in errors[0].message

    assert _validate(ImageGenerateOperation(), prompt="x" * 481, model="imagen-4") == []


def test_image_rejects_two_destinations_and_bad_uri() -> None:
    errors = _validate(
        ImageGenerateOperation(),
        prompt="cat",
        output_file="out.png",
        output_uri="s3://bucket/out.png",
    )
    assert _fields(errors) == ["output_uri", "output_uri"]


def test_upscale_factor_and_empty_image() -> None:
    errors = _validate(ImageUpscaleOperation(), image="", upscale_factor="x3")
    assert _fields(errors) == ["image", "upscale_factor"]
    assert errors[1].message == "Invalid upscale factor 'x3'. Valid options: x2, x4"


def test_video_duration_and_output_uri() -> None:
    errors = _validate(
        VideoGenerateOperation(), prompt="waves", duration_seconds=5, output_gcs_uri="bucket/out"
    )
    messages = {error.field: error.message for error in errors}
    assert messages["duration_seconds"] == (
        "duration_seconds must be one of [4, 6, 8] for model veo-3.0-generate-preview, got 5"
    )
    assert messages["output_gcs_uri"] == (
        "output_gcs_uri must be a GCS URI starting with 'gs://', got 'bucket/out'"
    )


def test_generate_audio_only_on_audio_capable_models() -> None:
    errors = _validate(
        VideoGenerateOperation(),
        prompt="waves",
        model="veo-2",
        generate_audio=True,
        output_gcs_uri="gs://bucket/out/",
    )
    assert _fields(errors) == ["generate_audio"]

    assert (
        _validate(
            VideoGenerateOperation(),
            prompt="waves",
            model="veo3",
            generate_audio=True,
            output_gcs_uri="gs://bucket/out/",
        )
        == []
    )


def test_video_from_image_requires_image_and_output() -> None:
    errors = _validate(VideoFromImageOperation(), image=" ", prompt="zoom in")
    assert set(_fields(errors)) == {"image", "output_gcs_uri"}


def test_video_extend_requires_gcs_input() -> None:
    errors = _validate(
        VideoExtendOperation(),
        video_input="./clip.mp4",
        prompt="keep going",
        output_gcs_uri="gs://bucket/ext/",
    )
    assert _fields(errors) == ["video_input"]


def test_speech_ranges_and_pronunciations() -> None:
    errors = _validate(
        SpeechSynthesizeOperation(),
        text="",
        speaking_rate=5.0,
        pitch=-25,
        pronunciations=[
            {"word": "tomato", "phonetic": "təˈmeɪtoʊ", "alphabet": "IPA"},
            {"word": "", "phonetic": "x", "alphabet": "arpabet"},
        ],
    )
    assert _fields(errors) == [
        "text",
        "speaking_rate",
        "pitch",
        "pronunciations[1].word",
        "pronunciations[1].alphabet",
    ]
    assert errors[2].message == "pitch must be between -20 and 20 semitones, got -25"
    assert errors[4].message == "Invalid alphabet 'arpabet'. Must be one of: ipa, x-sampa"


def test_type_errors_are_reported_as_validation_failures() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        ImageGenerateOperation().parse({"prompt": "cat", "number_of_images": "many"})
    assert [error.field for error in excinfo.value.errors] == ["number_of_images"]


def test_type_errors_do_not_hide_rule_violations() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        ImageGenerateOperation().parse({"prompt": "", "number_of_images": "many", "aspect_ratio": "2:1"})
    fields = [error.field for error in excinfo.value.errors]
    assert fields[0] == "number_of_images"
    assert set(fields) == {"number_of_images", "aspect_ratio", "prompt"}


def test_missing_text_fields_are_rule_violations() -> None:
    errors = _validate(MusicGenerateOperation(), sample_count=10)
    assert set(_fields(errors)) == {"prompt", "sample_count"}
    assert _validate(VideoExtendOperation(), output_gcs_uri="gs://bucket/out/") != []


def test_malformed_pronunciations_still_check_other_fields() -> None:
    with pytest.raises(ValidationFailed) as excinfo:
        SpeechSynthesizeOperation().parse({"text": "", "pronunciations": [{"word": 3}], "pitch": 40})
    fields = {error.field.split("[")[0] for error in excinfo.value.errors}
    assert fields == {"pronunciations", "text", "pitch"}


def test_check_storage_uri_requires_bucket_and_path() -> None:
    errors: list[ValidationError] = []
    check_storage_uri(errors, "output_uri", "gs://bucket-only")
    check_storage_uri(errors, "output_uri", "gs://bucket/key.png")
    assert len(errors) == 1
    assert "bucket and path" in errors[0].message
