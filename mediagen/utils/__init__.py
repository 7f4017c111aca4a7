"""Utility helpers for the media generation server."""

from .file_utils import (
    decode_base64_lenient,
    decode_base64_strict,
    encode_bytes_to_base64,
    extension_for_mime,
    guess_mime_type,
    read_file_bytes,
    sniff_mime_type,
    write_bytes,
)

__all__ = [
    "decode_base64_lenient",
    "decode_base64_strict",
    "encode_bytes_to_base64",
    "extension_for_mime",
    "guess_mime_type",
    "read_file_bytes",
    "sniff_mime_type",
    "write_bytes",
]
