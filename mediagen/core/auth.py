"""Bearer token sources used for remote API calls."""

from __future__ import annotations

from typing import Protocol, Sequence

from .errors import AuthUnavailable

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
STORAGE_READ_WRITE_SCOPE = "https://www.googleapis.com/auth/devstorage.read_write"
STORAGE_READ_ONLY_SCOPE = "https://www.googleapis.com/auth/devstorage.read_only"


class TokenSource(Protocol):
    async def get_token(self, scopes: Sequence[str]) -> str:
        ...


class StaticTokenSource:
    """Token source returning a pre-issued access token.

    Refresh and credential discovery happen outside the server; the token is
    typically exported with ``gcloud auth print-access-token``.
    """

    def __init__(self, token: str | None) -> None:
        self._token = (token or "").strip()

    async def get_token(self, scopes: Sequence[str]) -> str:
        if not self._token:
            raise AuthUnavailable(
                "ADC not configured: set ACCESS_TOKEN to a valid bearer token"
            )
        return self._token


__all__ = [
    "CLOUD_PLATFORM_SCOPE",
    "STORAGE_READ_ONLY_SCOPE",
    "STORAGE_READ_WRITE_SCOPE",
    "StaticTokenSource",
    "TokenSource",
]
