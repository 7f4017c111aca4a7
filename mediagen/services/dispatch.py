"""Deliver generated artifacts inline, to local files, or to object storage.

For a single artifact the destination name is used verbatim. For N > 1
artifacts item ``i`` (zero-based) is named ``stem_{i}.ext``; for storage
URIs only the object path is split and the bucket is kept as given.
"""

from __future__ import annotations

import binascii
import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Sequence, Union

from ..core.errors import MediaIoError, ValidationFailed
from ..core.storage import GCS_SCHEME, GcsClient, GcsUri
from ..utils import decode_base64_strict, extension_for_mime, write_bytes
from .validation import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedArtifact:
    """One generated image, clip or video.

    ``data`` holds base64 text exactly as transported; it is decoded only when
    bytes are needed. ``remote_uri`` is set instead for outputs the remote API
    already wrote to object storage.
    """

    mime_type: str
    data: str | None = None
    remote_uri: str | None = None

    def to_bytes(self) -> bytes:
        if self.data is None:
            raise ValidationFailed([ValidationError("data", "Artifact carries no data")])
        try:
            return decode_base64_strict(self.data)
        except (binascii.Error, ValueError) as exc:
            raise ValidationFailed(
                [ValidationError("data", f"Invalid base64 data: {exc}")]
            ) from exc


@dataclass(frozen=True)
class InlineDestination:
    pass


@dataclass(frozen=True)
class LocalFileDestination:
    path: str


@dataclass(frozen=True)
class RemoteDestination:
    uri: str


Destination = Union[InlineDestination, LocalFileDestination, RemoteDestination]


@dataclass(frozen=True)
class InlineOutput:
    artifacts: list[GeneratedArtifact] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.artifacts)


@dataclass(frozen=True)
class LocalPaths:
    paths: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.paths)


@dataclass(frozen=True)
class RemoteUris:
    uris: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.uris)


OutputResult = Union[InlineOutput, LocalPaths, RemoteUris]


def _indexed_filename(filename: str, index: int, default_stem: str, default_ext: str | None) -> str:
    name = PurePosixPath(filename)
    stem = name.stem if filename else ""
    suffix = name.suffix
    if not stem:
        stem = default_stem
    if not suffix and default_ext:
        suffix = f".{default_ext}"
    return f"{stem}_{index}{suffix}"


def indexed_path(
    path: str, index: int, default_stem: str = "output", default_ext: str | None = None
) -> str:
    """Return ``parent/stem_{index}.ext`` for a local destination path."""

    target = Path(path)
    return str(target.with_name(_indexed_filename(target.name, index, default_stem, default_ext)))


def indexed_uri(
    uri: str, index: int, default_stem: str = "output", default_ext: str | None = None
) -> str:
    """Return the indexed form of a ``gs://bucket/object`` URI.

    A URI without an object path just gets ``_{index}`` appended.
    """

    if not uri.startswith(GCS_SCHEME):
        return f"{uri}_{index}"
    bucket, sep, obj = uri[len(GCS_SCHEME):].partition("/")
    if not sep:
        return f"{uri}_{index}"
    directory, slash, filename = obj.rpartition("/")
    indexed = _indexed_filename(filename, index, default_stem, default_ext)
    return f"{GCS_SCHEME}{bucket}/{directory}{slash}{indexed}"


async def _artifact_bytes(artifact: GeneratedArtifact, storage: GcsClient) -> bytes:
    if artifact.data is not None:
        return artifact.to_bytes()
    if artifact.remote_uri is None:
        raise ValidationFailed([ValidationError("data", "Artifact carries no data")])
    return await storage.download(GcsUri.parse(artifact.remote_uri))


async def dispatch(
    artifacts: Sequence[GeneratedArtifact],
    destination: Destination,
    storage: GcsClient,
    default_stem: str = "output",
) -> OutputResult:
    """Write ``artifacts`` to ``destination``; result arity equals ``len(artifacts)``."""

    count = len(artifacts)

    if isinstance(destination, InlineDestination):
        return InlineOutput(list(artifacts))

    if isinstance(destination, LocalFileDestination):
        paths: list[str] = []
        for index, artifact in enumerate(artifacts):
            target = destination.path
            if count > 1:
                target = indexed_path(
                    destination.path, index, default_stem, extension_for_mime(artifact.mime_type)
                )
            data = await _artifact_bytes(artifact, storage)
            try:
                write_bytes(Path(target).expanduser(), data)
            except OSError as exc:
                raise MediaIoError(target, str(exc)) from exc
            logger.info("Saved %s artifact to %s", artifact.mime_type, target)
            paths.append(target)
        return LocalPaths(paths)

    if isinstance(destination, RemoteDestination):
        uris: list[str] = []
        for index, artifact in enumerate(artifacts):
            if artifact.remote_uri is not None and artifact.data is None:
                uris.append(artifact.remote_uri)
                continue
            target = destination.uri
            if count > 1:
                target = indexed_uri(
                    destination.uri, index, default_stem, extension_for_mime(artifact.mime_type)
                )
            await storage.upload(GcsUri.parse(target), artifact.to_bytes(), artifact.mime_type)
            uris.append(target)
        return RemoteUris(uris)

    raise TypeError(f"Unsupported destination: {destination!r}")


__all__ = [
    "Destination",
    "GeneratedArtifact",
    "InlineDestination",
    "InlineOutput",
    "LocalFileDestination",
    "LocalPaths",
    "OutputResult",
    "RemoteDestination",
    "RemoteUris",
    "dispatch",
    "indexed_path",
    "indexed_uri",
]
