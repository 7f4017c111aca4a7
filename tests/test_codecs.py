from __future__ import annotations

from conftest import PNG_BYTES, b64, make_settings

from mediagen.schemas.tts import Pronunciation
from mediagen.services.dispatch import GeneratedArtifact, LocalFileDestination, RemoteDestination
from mediagen.services.images import ImageGenerateOperation, ImageUpscaleOperation
from mediagen.services.inputs import ResolvedMedia
from mediagen.services.music import MusicGenerateOperation
from mediagen.services.tts import SpeechSynthesizeOperation, build_ssml
from mediagen.services.videos import (
    VideoExtendOperation,
    VideoFromImageOperation,
    VideoGenerateOperation,
)

IMAGE = ResolvedMedia(data=PNG_BYTES, mime_type="image/png")
VERTEX = "https://us-central1-aiplatform.googleapis.com/v1/projects/test-project/locations/us-central1/publishers/google/models"


def test_image_request_and_endpoint() -> None:
    operation = ImageGenerateOperation()
    request = operation.parse(
        {"prompt": "a fox", "negative_prompt": "blur", "model": "imagen-3", "number_of_images": 2, "seed": 7}
    )
    assert operation.build_request(request, {}) == {
        "instances": [{"prompt": "a fox", "negativePrompt": "blur"}],
        "parameters": {"sampleCount": 2, "aspectRatio": "1:1", "seed": 7},
    }
    assert operation.endpoint(make_settings(), request) == f"{VERTEX}/imagen-3.0-generate-002:predict"


def test_image_artifacts_default_to_png() -> None:
    operation = ImageGenerateOperation()
    request = operation.parse({"prompt": "a fox"})
    artifacts = operation.extract_artifacts(
        {"predictions": [{"bytesBase64Encoded": "AAAA"}, {"bytesBase64Encoded": "BBBB", "mimeType": "image/jpeg"}, {}]},
        request,
    )
    assert artifacts == [
        GeneratedArtifact(mime_type="image/png", data="AAAA"),
        GeneratedArtifact(mime_type="image/jpeg", data="BBBB"),
    ]


def test_upscale_request() -> None:
    operation = ImageUpscaleOperation()
    request = operation.parse({"image": "./in.png", "upscale_factor": "x4"})
    assert operation.media_references(request) == {"image": ("./in.png", "image/png")}
    assert operation.build_request(request, {"image": IMAGE}) == {
        "instances": [{"image": {"bytesBase64Encoded": b64(PNG_BYTES)}}],
        "parameters": {"upscaleFactor": "x4", "outputMimeType": "image/png"},
    }
    assert operation.endpoint(make_settings(), request).endswith("/imagen-4.0-upscale-preview:predict")


def test_music_request_uses_lyria_endpoint_model() -> None:
    operation = MusicGenerateOperation()
    request = operation.parse({"prompt": "calm piano", "sample_count": 2})
    assert operation.build_request(request, {}) == {
        "instances": [{"prompt": "calm piano"}],
        "parameters": {"sampleCount": 2},
    }
    assert operation.endpoint(make_settings(), request) == f"{VERTEX}/lyria-002:predict"
    artifacts = operation.extract_artifacts({"predictions": [{"bytesBase64Encoded": "UklG"}]}, request)
    assert artifacts[0].mime_type == "audio/wav"


def test_text_to_video_request() -> None:
    operation = VideoGenerateOperation()
    request = operation.parse(
        {"prompt": "waves", "output_gcs_uri": "gs://bucket/out/", "generate_audio": True, "seed": 1}
    )
    assert operation.build_request(request, {}) == {
        "instances": [{"prompt": "waves"}],
        "parameters": {
            "storageUri": "gs://bucket/out/",
            "durationSeconds": 8,
            "seed": 1,
            "aspectRatio": "16:9",
            "generateAudio": True,
        },
    }
    settings = make_settings()
    assert operation.endpoint(settings, request) == f"{VERTEX}/veo-3.0-generate-preview:predictLongRunning"
    assert operation.status_endpoint(settings, request) == (
        f"{VERTEX}/veo-3.0-generate-preview:fetchPredictOperation"
    )


def test_image_to_video_with_last_frame() -> None:
    operation = VideoFromImageOperation()
    request = operation.parse(
        {
            "image": "gs://bucket/first.png",
            "last_frame_image": "gs://bucket/last.png",
            "prompt": "morph",
            "output_gcs_uri": "gs://bucket/out/",
            "duration_seconds": 6,
        }
    )
    assert set(operation.media_references(request)) == {"image", "last_frame"}
    body = operation.build_request(request, {"image": IMAGE, "last_frame": IMAGE})
    assert body["instances"][0]["image"] == {"bytesBase64Encoded": b64(PNG_BYTES), "mimeType": "image/png"}
    assert body["parameters"]["lastFrame"]["bytesBase64Encoded"] == b64(PNG_BYTES)
    assert body["parameters"]["durationSeconds"] == 6
    assert "generateAudio" not in body["parameters"]


def test_extend_video_request() -> None:
    operation = VideoExtendOperation()
    request = operation.parse(
        {"video_input": "gs://bucket/in.mp4", "prompt": "more", "output_gcs_uri": "gs://bucket/ext/"}
    )
    assert operation.build_request(request, {}) == {
        "instances": [{"prompt": "more", "video": {"gcsUri": "gs://bucket/in.mp4", "mimeType": "video/mp4"}}],
        "parameters": {"storageUri": "gs://bucket/ext/", "durationSeconds": 8},
    }


def test_video_artifacts_and_destinations() -> None:
    operation = VideoGenerateOperation()
    request = operation.parse({"prompt": "waves", "output_gcs_uri": "gs://bucket/out/"})
    artifacts = operation.extract_artifacts(
        {"videos": [{"gcsUri": "gs://bucket/out/sample_0.mp4", "mimeType": "video/mp4"}, {}]},
        request,
    )
    assert [artifact.remote_uri for artifact in artifacts] == [
        "gs://bucket/out/sample_0.mp4",
        "gs://bucket/out/",
    ]
    assert operation.destination(request, artifacts) == RemoteDestination("gs://bucket/out/")

    local = operation.parse({"prompt": "waves", "output_gcs_uri": "gs://bucket/out/", "download_local": True})
    assert operation.destination(local, artifacts) == LocalFileDestination("./sample_0.mp4")


def test_speech_request_plain_text() -> None:
    operation = SpeechSynthesizeOperation()
    request = operation.parse({"text": "Hello there"})
    assert operation.build_request(request, {}) == {
        "input": {"text": "Hello there"},
        "voice": {"languageCode": "en-US", "name": "en-US-Chirp3-HD-Achernar"},
        "audioConfig": {
            "audioEncoding": "LINEAR16",
            "speakingRate": 1.0,
            "pitch": 0.0,
            "sampleRateHertz": 24000,
        },
    }
    assert operation.endpoint(make_settings(), request) == "https://texttospeech.googleapis.com/v1/text:synthesize"


def test_speech_request_uses_ssml_for_pronunciations() -> None:
    operation = SpeechSynthesizeOperation()
    request = operation.parse(
        {
            "text": "I say tomato",
            "pronunciations": [{"word": "tomato", "phonetic": "təˈmeɪtoʊ", "alphabet": "IPA"}],
        }
    )
    body = operation.build_request(request, {})
    assert body["input"] == {
        "ssml": '<speak>I say <phoneme alphabet="ipa" ph="təˈmeɪtoʊ">tomato</phoneme></speak>'
    }


def test_build_ssml_escapes_text() -> None:
    ssml = build_ssml("Salt & pepper", [Pronunciation(word="pepper", phonetic="ˈpɛpər")])
    assert ssml == '<speak>Salt &amp; <phoneme alphabet="ipa" ph="ˈpɛpər">pepper</phoneme></speak>'


def test_build_ssml_never_rewrites_inserted_markup() -> None:
    ssml = build_ssml(
        "say tomato ph",
        [Pronunciation(word="tomato", phonetic="x"), Pronunciation(word="ph", phonetic="f")],
    )
    assert ssml == (
        '<speak>say <phoneme alphabet="ipa" ph="x">tomato</phoneme> '
        '<phoneme alphabet="ipa" ph="f">ph</phoneme></speak>'
    )


def test_build_ssml_prefers_longest_word() -> None:
    ssml = build_ssml(
        "New York",
        [Pronunciation(word="New", phonetic="n"), Pronunciation(word="New York", phonetic="ny")],
    )
    assert ssml == '<speak><phoneme alphabet="ipa" ph="ny">New York</phoneme></speak>'
