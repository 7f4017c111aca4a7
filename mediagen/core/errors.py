"""Exception hierarchy for media generation tool calls."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from ..services.validation import ValidationError


class MediaGenError(RuntimeError):
    """Base exception for every failure surfaced by a tool call."""

    http_status = 500

    def details(self) -> dict[str, Any]:
        return {}


class ConfigurationError(MediaGenError):
    """Raised when a required setting is missing or invalid."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Configuration error for {name}: {message}")

    def details(self) -> dict[str, Any]:
        return {"setting": self.name}


class ValidationFailed(MediaGenError):
    """Raised with the full list of violations found for a request."""

    http_status = 422

    def __init__(self, errors: Sequence["ValidationError"]) -> None:
        self.errors = list(errors)
        joined = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Validation failed: {joined}")

    def details(self) -> dict[str, Any]:
        return {
            "errors": [
                {"field": error.field, "message": error.message} for error in self.errors
            ]
        }


class InputUnresolvable(MediaGenError):
    """Raised when a media reference matches none of the accepted forms."""

    http_status = 400

    def __init__(self, reference: str, reason: str | None = None) -> None:
        self.reference = reference
        self.reason = reason
        preview = reference if len(reference) <= 50 else f"{reference[:50]}..."
        message = f"Could not resolve media input '{preview}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        preview = self.reference if len(self.reference) <= 50 else self.reference[:50]
        return {"reference": preview}


class InputNotFound(InputUnresolvable):
    """Raised when a path-like media reference points at a missing file."""

    http_status = 404

    def __init__(self, reference: str) -> None:
        super().__init__(reference, "file not found")


class RemoteApiError(MediaGenError):
    """Raised for a non-success response from a remote generation API."""

    http_status = 502

    def __init__(self, endpoint: str, status_code: int, message: str) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error for {endpoint} (HTTP {status_code}): {message}")

    def details(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "status_code": self.status_code,
            "body": self.message,
        }


class OperationFailed(MediaGenError):
    """Raised when a long-running operation completes with an error payload."""

    http_status = 502

    def __init__(self, code: int | str | None, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"Operation failed (code {code}): {message}")

    def details(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class OperationTimedOut(MediaGenError):
    """Raised when polling exhausts its attempt ceiling."""

    http_status = 504

    def __init__(self, elapsed_bound: float) -> None:
        self.elapsed_bound = elapsed_bound
        super().__init__(f"Operation timed out after {elapsed_bound:g} seconds")

    def details(self) -> dict[str, Any]:
        return {"elapsed_bound_seconds": self.elapsed_bound}


class StorageOperation(str, Enum):
    UPLOAD = "upload"
    DOWNLOAD = "download"
    EXISTS = "exists"
    DELETE = "delete"


class StorageError(MediaGenError):
    """Raised when an object storage call fails."""

    http_status = 502

    def __init__(self, uri: str, operation: StorageOperation | str, message: str) -> None:
        self.uri = uri
        self.operation = StorageOperation(operation)
        self.message = message
        super().__init__(f"GCS {self.operation.value} failed for {uri}: {message}")

    def details(self) -> dict[str, Any]:
        return {"uri": self.uri, "operation": self.operation.value, "message": self.message}


class InvalidUri(MediaGenError):
    """Raised when an object storage URI cannot be parsed."""

    http_status = 400

    def __init__(self, uri: str, message: str) -> None:
        self.uri = uri
        super().__init__(f"Invalid GCS URI '{uri}': {message}")

    def details(self) -> dict[str, Any]:
        return {"uri": self.uri}


class AuthUnavailable(MediaGenError):
    """Raised when no bearer token can be produced."""

    http_status = 503


class MediaIoError(MediaGenError):
    """Raised when writing or reading a local file fails."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"I/O error for {path}: {message}")

    def details(self) -> dict[str, Any]:
        return {"path": self.path}


__all__ = [
    "AuthUnavailable",
    "ConfigurationError",
    "InputNotFound",
    "InputUnresolvable",
    "InvalidUri",
    "MediaGenError",
    "MediaIoError",
    "OperationFailed",
    "OperationTimedOut",
    "RemoteApiError",
    "StorageError",
    "StorageOperation",
    "ValidationFailed",
]
