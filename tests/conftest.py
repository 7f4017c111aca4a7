from __future__ import annotations

import base64
import json
from typing import Any, Callable

import httpx
import pytest

from mediagen.core.settings import Settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 120
WAV_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt " + b"\x00" * 64


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "project_id": "test-project",
        "location": "us-central1",
        "access_token": "test-token",
        "lro_initial_delay_seconds": 0.0,
        "lro_max_delay_seconds": 0.0,
        "lro_max_attempts": 5,
    }
    values.update(overrides)
    return Settings(**values)


Responder = Callable[[httpx.Request], httpx.Response]


class FakeRemote:
    """Routes requests by method and URL fragment; records every request."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: list[tuple[str, str, Responder]] = []

    def add(self, method: str, fragment: str, responder: Responder) -> None:
        self._routes.append((method, fragment, responder))

    def add_json(self, method: str, fragment: str, body: Any, status_code: int = 200) -> None:
        self.add(method, fragment, lambda _: httpx.Response(status_code, json=body))

    def add_sequence(self, method: str, fragment: str, bodies: list[Any]) -> None:
        pending = list(bodies)

        def responder(_: httpx.Request) -> httpx.Response:
            body = pending.pop(0) if len(pending) > 1 else pending[0]
            return httpx.Response(200, json=body)

        self.add(method, fragment, responder)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, fragment, responder in self._routes:
            if request.method == method and fragment in str(request.url):
                return responder(request)
        return httpx.Response(404, json={"error": {"message": "no route"}})

    def json_bodies(self, fragment: str) -> list[Any]:
        return [
            json.loads(request.content)
            for request in self.requests
            if fragment in str(request.url) and request.content
        ]


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote()

