"""Shared, read-only handle used by every tool call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from .auth import CLOUD_PLATFORM_SCOPE, StaticTokenSource, TokenSource
from .errors import ConfigurationError, RemoteApiError
from .settings import Settings
from .storage import GcsClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaClient:
    """HTTP client, token source, storage client and settings bundled together.

    Built once at startup and passed to each request handler. Nothing on it is
    mutated after construction, so concurrent tool calls share it freely.
    """

    settings: Settings
    http: httpx.AsyncClient
    tokens: TokenSource
    storage: GcsClient

    async def _auth_headers(self, scope: str) -> dict[str, str]:
        token = await self.tokens.get_token([scope])
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def post_json(
        self,
        endpoint: str,
        payload: Mapping[str, Any],
        scope: str = CLOUD_PLATFORM_SCOPE,
    ) -> dict[str, Any]:
        headers = await self._auth_headers(scope)
        logger.debug("POST %s", endpoint)
        try:
            response = await self.http.post(endpoint, json=dict(payload), headers=headers)
        except httpx.HTTPError as exc:
            raise RemoteApiError(endpoint, 0, f"Request failed: {exc}") from exc
        return self._decode(endpoint, response)

    async def get_json(
        self,
        endpoint: str,
        params: Mapping[str, str] | None = None,
        scope: str = CLOUD_PLATFORM_SCOPE,
    ) -> dict[str, Any]:
        headers = await self._auth_headers(scope)
        logger.debug("GET %s", endpoint)
        try:
            response = await self.http.get(endpoint, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise RemoteApiError(endpoint, 0, f"Request failed: {exc}") from exc
        return self._decode(endpoint, response)

    @staticmethod
    def _decode(endpoint: str, response: httpx.Response) -> dict[str, Any]:
        if not response.is_success:
            logger.error(
                "Remote API error for %s: HTTP %d", endpoint, response.status_code
            )
            raise RemoteApiError(endpoint, response.status_code, response.text)
        try:
            body = response.json()
        except ValueError as exc:
            raise RemoteApiError(
                endpoint, response.status_code, f"Failed to parse response: {exc}"
            ) from exc
        if not isinstance(body, dict):
            raise RemoteApiError(
                endpoint, response.status_code, "Expected a JSON object in response"
            )
        return body

    async def aclose(self) -> None:
        await self.http.aclose()


def create_media_client(
    settings: Settings,
    http: httpx.AsyncClient | None = None,
    tokens: TokenSource | None = None,
) -> MediaClient:
    """Build the shared client handle from settings."""

    if not settings.project_id.strip():
        raise ConfigurationError("PROJECT_ID", "environment variable is required")
    http_client = http or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    token_source = tokens or StaticTokenSource(settings.access_token)
    storage = GcsClient(http_client, token_source, settings.storage_base_url)
    return MediaClient(
        settings=settings,
        http=http_client,
        tokens=token_source,
        storage=storage,
    )


__all__ = ["MediaClient", "create_media_client"]
