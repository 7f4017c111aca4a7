from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, Mapping, Sequence
from xml.sax.saxutils import escape, quoteattr

from ..core.client import MediaClient
from ..core.settings import Settings
from ..schemas.common import ContentItem, TextContent
from ..schemas.tts import Pronunciation, SpeechListVoicesRequest, SpeechSynthesizeRequest, VoiceInfo
from .dispatch import Destination, GeneratedArtifact
from .inputs import ResolvedMedia
from .orchestrator import MediaOperation, Tool, select_destination
from .validation import (
    ValidationError,
    check_range,
    check_single_destination,
    check_storage_uri,
    require_text,
)

logger = logging.getLogger(__name__)

MIN_SPEAKING_RATE = 0.25
MAX_SPEAKING_RATE = 4.0
MIN_PITCH = -20.0
MAX_PITCH = 20.0
VALID_ALPHABETS = ("ipa", "x-sampa")
SAMPLE_RATE_HERTZ = 24000
CHIRP3_HD_MARKER = "Chirp3-HD"


def validate_pronunciation(index: int, pronunciation: Pronunciation) -> list[ValidationError]:
    prefix = f"pronunciations[{index}]"
    errors: list[ValidationError] = []
    if not pronunciation.word.strip():
        errors.append(ValidationError(f"{prefix}.word", "Word cannot be empty"))
    if not pronunciation.phonetic.strip():
        errors.append(
            ValidationError(f"{prefix}.phonetic", "Phonetic representation cannot be empty")
        )
    if pronunciation.alphabet.lower() not in VALID_ALPHABETS:
        errors.append(
            ValidationError(
                f"{prefix}.alphabet",
                f"Invalid alphabet '{pronunciation.alphabet}'. Must be one of: "
                f"{', '.join(VALID_ALPHABETS)}",
            )
        )
    return errors


def phoneme_ssml(pronunciation: Pronunciation) -> str:
    return (
        f"<phoneme alphabet={quoteattr(pronunciation.alphabet.lower())} "
        f"ph={quoteattr(pronunciation.phonetic)}>{escape(pronunciation.word)}</phoneme>"
    )


def build_ssml(text: str, pronunciations: Sequence[Pronunciation]) -> str:
    """Wrap ``text`` in ``<speak>`` with each overridden word replaced by a phoneme tag.

    Substitution is a single pass over the escaped text, so inserted markup is
    never rescanned. Longer words win over their prefixes and the first entry
    for a repeated word is used.
    """

    body = escape(text)
    by_word: dict[str, Pronunciation] = {}
    for pronunciation in pronunciations:
        if pronunciation.word:
            by_word.setdefault(escape(pronunciation.word), pronunciation)
    if not by_word:
        return f"<speak>{body}</speak>"
    pattern = re.compile(
        "|".join(re.escape(word) for word in sorted(by_word, key=len, reverse=True))
    )
    body = pattern.sub(lambda match: phoneme_ssml(by_word[match.group(0)]), body)
    return f"<speak>{body}</speak>"


class SpeechSynthesizeOperation(MediaOperation[SpeechSynthesizeRequest]):
    name = "speech_synthesize"
    description = "Synthesize speech from text with Cloud Text-to-Speech Chirp3-HD voices."
    request_model = SpeechSynthesizeRequest
    default_stem = "audio"
    result_label = "Audio"
    empty_result_message = "No audio content returned from API"

    def validate(self, request: SpeechSynthesizeRequest) -> list[ValidationError]:
        errors: list[ValidationError] = []
        require_text(errors, "text", request.text, "Text")
        check_range(errors, "speaking_rate", request.speaking_rate, MIN_SPEAKING_RATE, MAX_SPEAKING_RATE)
        if request.pitch < MIN_PITCH or request.pitch > MAX_PITCH:
            errors.append(
                ValidationError(
                    "pitch",
                    f"pitch must be between {MIN_PITCH:g} and {MAX_PITCH:g} semitones, "
                    f"got {request.pitch:g}",
                )
            )
        for index, pronunciation in enumerate(request.pronunciations or []):
            errors.extend(validate_pronunciation(index, pronunciation))
        check_storage_uri(errors, "output_gcs_uri", request.output_gcs_uri)
        check_single_destination(
            errors, "output_file", request.output_file, "output_gcs_uri", request.output_gcs_uri
        )
        return errors

    def model_id(self, request: SpeechSynthesizeRequest) -> str:
        return request.voice_name()

    def endpoint(self, settings: Settings, request: SpeechSynthesizeRequest) -> str:
        return f"{settings.tts_base_url.rstrip('/')}/v1/text:synthesize"

    def build_request(
        self, request: SpeechSynthesizeRequest, media: Mapping[str, ResolvedMedia]
    ) -> dict[str, Any]:
        if request.pronunciations:
            speech_input = {"ssml": build_ssml(request.text, request.pronunciations)}
        else:
            speech_input = {"text": request.text}
        return {
            "input": speech_input,
            "voice": {"languageCode": request.language_code, "name": request.voice_name()},
            "audioConfig": {
                "audioEncoding": "LINEAR16",
                "speakingRate": request.speaking_rate,
                "pitch": request.pitch,
                "sampleRateHertz": SAMPLE_RATE_HERTZ,
            },
        }

    def extract_artifacts(
        self, response: Mapping[str, Any], request: SpeechSynthesizeRequest
    ) -> list[GeneratedArtifact]:
        audio = response.get("audioContent")
        if not audio:
            return []
        return [GeneratedArtifact(mime_type="audio/wav", data=audio)]

    def destination(
        self, request: SpeechSynthesizeRequest, artifacts: Sequence[GeneratedArtifact]
    ) -> Destination:
        return select_destination(request.output_file, request.output_gcs_uri)


class SpeechListVoicesTool(Tool[SpeechListVoicesRequest]):
    name = "speech_list_voices"
    description = "List the available Chirp3-HD voices."
    request_model = SpeechListVoicesRequest

    async def list_voices(self, client: MediaClient, request: SpeechListVoicesRequest) -> list[VoiceInfo]:
        endpoint = f"{client.settings.tts_base_url.rstrip('/')}/v1/voices"
        params = {"languageCode": request.language_code} if request.language_code else None
        body = await client.get_json(endpoint, params=params)
        voices = [
            VoiceInfo(
                name=voice["name"],
                language_codes=voice.get("languageCodes") or [],
                ssml_gender=voice.get("ssmlGender"),
                natural_sample_rate_hertz=voice.get("naturalSampleRateHertz"),
            )
            for voice in body.get("voices") or []
            if CHIRP3_HD_MARKER in voice.get("name", "")
        ]
        logger.info("Found %d Chirp3-HD voices", len(voices))
        return voices

    async def invoke(self, client: MediaClient, arguments: Mapping[str, Any]) -> list[ContentItem]:
        request = self.parse(arguments)
        voices = await self.list_voices(client, request)
        payload = [voice.model_dump() for voice in voices]
        return [TextContent(text=json.dumps(payload, indent=2))]


@lru_cache()
def get_tts_tools() -> tuple[SpeechSynthesizeOperation, SpeechListVoicesTool]:
    return SpeechSynthesizeOperation(), SpeechListVoicesTool()
