"""Cloud Storage URI handling and a small async client for the JSON API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from .auth import STORAGE_READ_ONLY_SCOPE, STORAGE_READ_WRITE_SCOPE, TokenSource
from .errors import InvalidUri, StorageError, StorageOperation

logger = logging.getLogger(__name__)

GCS_SCHEME = "gs://"


@dataclass(frozen=True)
class GcsUri:
    bucket: str
    object: str

    @classmethod
    def parse(cls, uri: str) -> "GcsUri":
        if not uri.startswith(GCS_SCHEME):
            raise InvalidUri(uri, "URI must start with gs://")
        remainder = uri[len(GCS_SCHEME):]
        bucket, sep, obj = remainder.partition("/")
        if not sep:
            raise InvalidUri(uri, "URI must contain bucket and path")
        if not bucket:
            raise InvalidUri(uri, "Bucket name cannot be empty")
        return cls(bucket=bucket, object=obj)

    def __str__(self) -> str:
        return f"{GCS_SCHEME}{self.bucket}/{self.object}"


def is_gcs_uri(value: str) -> bool:
    return value.startswith(GCS_SCHEME)


class GcsClient:
    """Upload, download and existence checks against Cloud Storage."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        tokens: TokenSource,
        base_url: str = "https://storage.googleapis.com",
    ) -> None:
        self._http = http
        self._tokens = tokens
        self._base_url = base_url.rstrip("/")

    def _object_url(self, uri: GcsUri) -> str:
        return f"{self._base_url}/storage/v1/b/{uri.bucket}/o/{quote(uri.object, safe='')}"

    async def _headers(self, scope: str) -> dict[str, str]:
        token = await self._tokens.get_token([scope])
        return {"Authorization": f"Bearer {token}"}

    async def upload(self, uri: GcsUri, data: bytes, mime_type: str) -> None:
        url = f"{self._base_url}/upload/storage/v1/b/{uri.bucket}/o"
        headers = await self._headers(STORAGE_READ_WRITE_SCOPE)
        headers["Content-Type"] = mime_type
        try:
            response = await self._http.post(
                url,
                params={"uploadType": "media", "name": uri.object},
                headers=headers,
                content=data,
            )
        except httpx.HTTPError as exc:
            raise StorageError(str(uri), StorageOperation.UPLOAD, str(exc)) from exc
        if response.status_code >= 400:
            raise StorageError(
                str(uri),
                StorageOperation.UPLOAD,
                f"HTTP {response.status_code}: {response.text}",
            )
        logger.info("Uploaded %d bytes to %s", len(data), uri)

    async def download(self, uri: GcsUri) -> bytes:
        headers = await self._headers(STORAGE_READ_ONLY_SCOPE)
        try:
            response = await self._http.get(
                self._object_url(uri), params={"alt": "media"}, headers=headers
            )
        except httpx.HTTPError as exc:
            raise StorageError(str(uri), StorageOperation.DOWNLOAD, str(exc)) from exc
        if response.status_code >= 400:
            raise StorageError(
                str(uri),
                StorageOperation.DOWNLOAD,
                f"HTTP {response.status_code}: {response.text}",
            )
        logger.debug("Downloaded %d bytes from %s", len(response.content), uri)
        return response.content

    async def exists(self, uri: GcsUri) -> bool:
        headers = await self._headers(STORAGE_READ_ONLY_SCOPE)
        try:
            response = await self._http.get(self._object_url(uri), headers=headers)
        except httpx.HTTPError as exc:
            raise StorageError(str(uri), StorageOperation.EXISTS, str(exc)) from exc
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise StorageError(
            str(uri),
            StorageOperation.EXISTS,
            f"HTTP {response.status_code}: {response.text}",
        )


__all__ = ["GCS_SCHEME", "GcsClient", "GcsUri", "is_gcs_uri"]
