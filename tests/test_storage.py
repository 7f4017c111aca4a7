from __future__ import annotations

import asyncio

import httpx
import pytest

from mediagen.core.auth import StaticTokenSource
from mediagen.core.errors import AuthUnavailable, InvalidUri, StorageError, StorageOperation
from mediagen.core.storage import GcsClient, GcsUri


@pytest.mark.parametrize(
    "uri",
    ["gs://bucket/path", "gs://my-bucket/a/b/c.png", "gs://bucket/dir/", "gs://b/x y.wav"],
)
def test_parse_then_format_round_trips(uri: str) -> None:
    parsed = GcsUri.parse(uri)
    assert str(parsed) == uri
    assert GcsUri.parse(str(parsed)) == parsed


@pytest.mark.parametrize("uri", ["s3://bucket/key", "gs://", "gs://bucket", "gs:///key"])
def test_parse_rejects_malformed(uri: str) -> None:
    with pytest.raises(InvalidUri):
        GcsUri.parse(uri)


def _client(handler) -> GcsClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GcsClient(http, StaticTokenSource("tok"), "https://storage.test")


def test_upload_posts_media_with_object_name() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"name": "dir/out.wav"})

    asyncio.run(_client(handler).upload(GcsUri("bucket", "dir/out.wav"), b"abc", "audio/wav"))

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/upload/storage/v1/b/bucket/o"
    assert request.url.params["uploadType"] == "media"
    assert request.url.params["name"] == "dir/out.wav"
    assert request.headers["Content-Type"] == "audio/wav"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.content == b"abc"


def test_download_and_exists() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if "missing" in str(request.url):
            return httpx.Response(404)
        if request.url.params.get("alt") == "media":
            return httpx.Response(200, content=b"payload")
        return httpx.Response(200, json={"name": "x"})

    client = _client(handler)
    assert asyncio.run(client.download(GcsUri("bucket", "a/b.png"))) == b"payload"
    assert asyncio.run(client.exists(GcsUri("bucket", "a/b.png"))) is True
    assert asyncio.run(client.exists(GcsUri("bucket", "missing.png"))) is False


def test_failures_carry_uri_and_operation() -> None:
    client = _client(lambda request: httpx.Response(403, text="denied"))
    with pytest.raises(StorageError) as excinfo:
        asyncio.run(client.download(GcsUri("bucket", "a.png")))
    assert excinfo.value.uri == "gs://bucket/a.png"
    assert excinfo.value.operation is StorageOperation.DOWNLOAD
    assert "denied" in str(excinfo.value)

    with pytest.raises(StorageError) as excinfo:
        asyncio.run(client.exists(GcsUri("bucket", "a.png")))
    assert excinfo.value.operation is StorageOperation.EXISTS


def test_missing_token_is_auth_unavailable() -> None:
    with pytest.raises(AuthUnavailable):
        asyncio.run(StaticTokenSource("").get_token(["scope"]))
