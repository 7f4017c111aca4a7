"""Validation primitives shared by every tool.

Each tool's ``validate`` builds a list with these helpers and never raises;
an empty list means the request is accepted. Helpers append at most one
error each so every violated rule is reported exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import InvalidUri
from ..core.storage import GcsUri


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def require_text(errors: list[ValidationError], field: str, value: str | None, label: str) -> None:
    if value is None or not value.strip():
        errors.append(ValidationError(field, f"{label} cannot be empty"))


def check_range(
    errors: list[ValidationError],
    field: str,
    value: float | None,
    minimum: float,
    maximum: float,
) -> None:
    if value is None:
        return
    if value < minimum or value > maximum:
        errors.append(
            ValidationError(field, f"{field} must be between {minimum:g} and {maximum:g}, got {value:g}")
        )


def check_choice(
    errors: list[ValidationError],
    field: str,
    value: object,
    choices: Sequence[object],
    message: str,
) -> None:
    if value not in choices:
        errors.append(ValidationError(field, message))


def check_max_length(
    errors: list[ValidationError], field: str, value: str, maximum: int, model_id: str
) -> None:
    if len(value) > maximum:
        errors.append(
            ValidationError(
                field,
                f"Prompt length {len(value)} exceeds maximum {maximum} characters for model {model_id}",
            )
        )


def check_storage_uri(
    errors: list[ValidationError], field: str, value: str | None, required: bool = False
) -> None:
    """Require ``value`` to be a parseable ``gs://bucket/path`` URI."""

    if value is None:
        if required:
            errors.append(ValidationError(field, f"{field} is required"))
        return
    if not value.startswith("gs://"):
        errors.append(
            ValidationError(
                field, f"{field} must be a GCS URI starting with 'gs://', got '{value}'"
            )
        )
        return
    try:
        GcsUri.parse(value)
    except InvalidUri as exc:
        errors.append(ValidationError(field, str(exc)))


def check_single_destination(
    errors: list[ValidationError], local_field: str, local: str | None, remote_field: str, remote: str | None
) -> None:
    if local and remote:
        errors.append(
            ValidationError(
                remote_field,
                f"Only one of {local_field} and {remote_field} may be set",
            )
        )


def unknown_model(field: str, name: str, valid: str) -> ValidationError:
    return ValidationError(field, f"Unknown model '{name}'. Valid models: {valid}")


def from_pydantic(exc: PydanticValidationError) -> list[ValidationError]:
    """Translate pydantic shape errors into field/message pairs."""

    errors: list[ValidationError] = []
    for item in exc.errors():
        field = _format_location(item.get("loc", ()))
        errors.append(ValidationError(field or "arguments", item.get("msg", "Invalid value")))
    return errors


def _format_location(location: Iterable[object]) -> str:
    parts: list[str] = []
    for part in location:
        if isinstance(part, int) and parts:
            parts[-1] = f"{parts[-1]}[{part}]"
        else:
            parts.append(str(part))
    return ".".join(parts)


__all__ = [
    "ValidationError",
    "check_choice",
    "check_max_length",
    "check_range",
    "check_single_destination",
    "check_storage_uri",
    "from_pydantic",
    "require_text",
    "unknown_model",
]
