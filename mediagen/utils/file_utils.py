from __future__ import annotations

import base64
import binascii
import mimetypes
from pathlib import Path

_MAGIC_PREFIXES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"ID3", "audio/mpeg"),
    (b"fLaC", "audio/flac"),
    (b"OggS", "audio/ogg"),
    (b"\x1aE\xdf\xa3", "video/webm"),
)

_EXTENSIONS_BY_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "video/mp4": "mp4",
}


def encode_bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def decode_base64_strict(data: str) -> bytes:
    """Decode standard base64, raising ``binascii.Error`` on any invalid input."""

    return base64.b64decode(data, validate=True)


def decode_base64_lenient(data: str) -> bytes | None:
    """Decode base64 after dropping whitespace and fixing padding."""

    cleaned = "".join(data.split())
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=False)
    except (binascii.Error, ValueError):
        return None


def read_file_bytes(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read()


def write_bytes(path: Path, data: bytes) -> Path:
    """Write ``data`` to ``path``, creating the parent directory when absent."""

    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        f.write(data)
    return path


def sniff_mime_type(data: bytes) -> str | None:
    for prefix, mime_type in _MAGIC_PREFIXES:
        if data.startswith(prefix):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:4] == b"RIFF" and data[8:12] == b"WAVE":
        return "audio/wav"
    if data[4:8] == b"ftyp":
        return "video/mp4"
    return None


def guess_mime_type(name: str, data: bytes, default: str) -> str:
    guessed, _ = mimetypes.guess_type(name)
    if guessed:
        return guessed
    return sniff_mime_type(data) or default


def extension_for_mime(mime_type: str, default: str = "bin") -> str:
    known = _EXTENSIONS_BY_MIME.get(mime_type)
    if known:
        return known
    guessed = mimetypes.guess_extension(mime_type)
    return guessed.lstrip(".") if guessed else default
