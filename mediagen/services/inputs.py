"""Resolve a media reference string into bytes and a MIME type.

A single field may carry inline base64, a local path or a ``gs://`` URI,
and the forms overlap in shape (base64 may contain ``/``). The predicates
below are tried in a fixed order and the first match wins:

1. ``is_remote_uri``   fetch from object storage
2. ``is_path_like``    read the local file, missing file is ``InputNotFound``
3. ``is_base64_like``  long string that decodes as strict base64
4. an existing local file without a recognised extension
5. lenient base64 for long strings, unless strict resolution is enabled
"""

from __future__ import annotations

import binascii
import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import InputNotFound, InputUnresolvable, MediaIoError
from ..core.storage import GcsClient, GcsUri, is_gcs_uri
from ..utils import (
    decode_base64_lenient,
    decode_base64_strict,
    encode_bytes_to_base64,
    guess_mime_type,
    read_file_bytes,
    sniff_mime_type,
)

logger = logging.getLogger(__name__)

MIN_BASE64_LENGTH = 100
PATH_PREFIXES = ("/", "./", "../", "~/")
MEDIA_EXTENSIONS = (
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp", ".tiff", ".tif",
    ".mp4", ".mov", ".webm", ".wav", ".mp3", ".flac", ".ogg",
)


@dataclass(frozen=True)
class ResolvedMedia:
    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        return encode_bytes_to_base64(self.data)


def is_remote_uri(reference: str) -> bool:
    return is_gcs_uri(reference)


def has_media_extension(reference: str) -> bool:
    return reference.lower().endswith(MEDIA_EXTENSIONS)


def is_path_like(reference: str) -> bool:
    if reference.startswith(PATH_PREFIXES):
        return True
    has_separator = "/" in reference or os.sep in reference
    return has_separator and has_media_extension(reference)


def is_base64_like(reference: str) -> bool:
    if len(reference) <= MIN_BASE64_LENGTH:
        return False
    try:
        decode_base64_strict(reference)
    except (binascii.Error, ValueError):
        return False
    return True


def _read_local(reference: str, default_mime: str) -> ResolvedMedia:
    path = Path(reference).expanduser()
    try:
        data = read_file_bytes(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise InputNotFound(reference) from exc
    except OSError as exc:
        if exc.errno == errno.ENAMETOOLONG:
            raise InputNotFound(reference) from exc
        raise MediaIoError(str(path), str(exc)) from exc
    return ResolvedMedia(data=data, mime_type=guess_mime_type(path.name, data, default_mime))


def _inline(data: bytes, default_mime: str) -> ResolvedMedia:
    return ResolvedMedia(data=data, mime_type=sniff_mime_type(data) or default_mime)


async def resolve_media(
    reference: str,
    storage: GcsClient,
    default_mime: str = "image/png",
    strict: bool = False,
) -> ResolvedMedia:
    """Resolve ``reference`` following the documented precedence."""

    reference = reference.strip()
    if not reference:
        raise InputUnresolvable(reference, "reference is empty")

    if is_remote_uri(reference):
        uri = GcsUri.parse(reference)
        data = await storage.download(uri)
        logger.debug("Resolved media from object storage %s", reference)
        return ResolvedMedia(data=data, mime_type=guess_mime_type(uri.object, data, default_mime))

    if is_path_like(reference):
        logger.debug("Resolved media from local path %s", reference)
        return _read_local(reference, default_mime)

    if is_base64_like(reference):
        return _inline(decode_base64_strict(reference), default_mime)

    if os.path.isfile(os.path.expanduser(reference)):
        return _read_local(reference, default_mime)

    if not strict and len(reference) > MIN_BASE64_LENGTH:
        decoded = decode_base64_lenient(reference)
        if decoded:
            logger.warning("Accepted media input through lenient base64 decoding")
            return _inline(decoded, default_mime)

    raise InputUnresolvable(
        reference, "expected base64 data, a local file path, or a gs:// URI"
    )


__all__ = [
    "MEDIA_EXTENSIONS",
    "ResolvedMedia",
    "has_media_extension",
    "is_base64_like",
    "is_path_like",
    "is_remote_uri",
    "resolve_media",
]
