"""Generic tool pipeline shared by every modality.

validate -> resolve media -> build request -> submit -> [poll] ->
extract artifacts -> dispatch -> content items
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.client import MediaClient
from ..core.errors import RemoteApiError, ValidationFailed
from ..core.settings import Settings
from ..schemas.common import AudioContent, ContentItem, ImageContent, TextContent
from .dispatch import (
    Destination,
    GeneratedArtifact,
    InlineDestination,
    InlineOutput,
    LocalFileDestination,
    LocalPaths,
    OutputResult,
    RemoteDestination,
    RemoteUris,
    dispatch,
)
from .inputs import ResolvedMedia, resolve_media
from .polling import OperationHandle, OperationPoller, PollConfig
from .validation import ValidationError, from_pydantic

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


class Tool(ABC, Generic[RequestT]):
    """A named operation invocable with a JSON argument object."""

    name: ClassVar[str]
    description: ClassVar[str]
    request_model: ClassVar[type[BaseModel]]

    def input_schema(self) -> dict[str, Any]:
        return self.request_model.model_json_schema()

    def parse(self, arguments: Mapping[str, Any]) -> RequestT:
        """Build the request model, reporting shape and rule violations together.

        Arguments that fail to parse are dropped and the remainder is checked
        with ``validate`` so one malformed field never hides the others.
        """

        try:
            return self.request_model.model_validate(dict(arguments))  # type: ignore[return-value]
        except PydanticValidationError as exc:
            errors = from_pydantic(exc)
            rejected = {str(item["loc"][0]) for item in exc.errors() if item.get("loc")}
            errors.extend(self._validate_remaining(arguments, rejected))
            raise ValidationFailed(errors) from exc

    def _validate_remaining(self, arguments: Mapping[str, Any], rejected: set[str]) -> list[ValidationError]:
        remaining = {key: value for key, value in arguments.items() if key not in rejected}
        try:
            partial = self.request_model.model_validate(remaining)
        except PydanticValidationError:
            return []
        return [
            error
            for error in self.validate(partial)  # type: ignore[arg-type]
            if _root_field(error.field) not in rejected
        ]

    def validate(self, request: RequestT) -> list[ValidationError]:
        return []

    @abstractmethod
    async def invoke(self, client: MediaClient, arguments: Mapping[str, Any]) -> list[ContentItem]:
        ...


class MediaOperation(Tool[RequestT]):
    """A tool that submits one generation request and dispatches its artifacts."""

    long_running: ClassVar[bool] = False
    default_stem: ClassVar[str] = "output"
    result_label: ClassVar[str] = "Output"
    empty_result_message: ClassVar[str] = "No output returned from API"

    def media_references(self, request: RequestT) -> dict[str, tuple[str, str]]:
        """Map wire slot name to ``(reference, default_mime)`` for each media input."""

        return {}

    @abstractmethod
    def endpoint(self, settings: Settings, request: RequestT) -> str:
        ...

    @abstractmethod
    def build_request(self, request: RequestT, media: Mapping[str, ResolvedMedia]) -> dict[str, Any]:
        ...

    @abstractmethod
    def extract_artifacts(self, response: Mapping[str, Any], request: RequestT) -> list[GeneratedArtifact]:
        ...

    @abstractmethod
    def destination(self, request: RequestT, artifacts: Sequence[GeneratedArtifact]) -> Destination:
        ...

    def model_id(self, request: RequestT) -> str:
        return str(getattr(request, "model", ""))

    def status_endpoint(self, settings: Settings, request: RequestT) -> str:
        raise NotImplementedError(f"{self.name} is not a long-running operation")

    def operation_handle(self, response: Mapping[str, Any], request: RequestT, endpoint: str) -> OperationHandle:
        name = response.get("name")
        if not name:
            raise RemoteApiError(endpoint, 200, "No operation name in response")
        return OperationHandle(operation_id=str(name), model_id=self.model_id(request))

    def to_content(
        self, request: RequestT, result: OutputResult, artifacts: Sequence[GeneratedArtifact]
    ) -> list[ContentItem]:
        return output_content(result, self.result_label)

    async def invoke(self, client: MediaClient, arguments: Mapping[str, Any]) -> list[ContentItem]:
        return await run_operation(client, self, arguments)


def _root_field(field: str) -> str:
    return field.split(".", 1)[0].split("[", 1)[0]


def output_content(result: OutputResult, label: str) -> list[ContentItem]:
    """Render a dispatch result as tool content items."""

    if isinstance(result, LocalPaths):
        return [TextContent(text=f"{label} saved to: {', '.join(result.paths)}")]
    if isinstance(result, RemoteUris):
        return [TextContent(text=f"{label} uploaded to: {', '.join(result.uris)}")]
    items: list[ContentItem] = []
    for artifact in result.artifacts:
        if artifact.data is None:
            items.append(TextContent(text=f"{label} available at: {artifact.remote_uri}"))
        elif artifact.mime_type.startswith("audio/"):
            items.append(AudioContent(data=artifact.data, mime_type=artifact.mime_type))
        else:
            items.append(ImageContent(data=artifact.data, mime_type=artifact.mime_type))
    return items


def select_destination(local: str | None, remote: str | None) -> Destination:
    if local:
        return LocalFileDestination(local)
    if remote:
        return RemoteDestination(remote)
    return InlineDestination()


async def run_operation(
    client: MediaClient,
    operation: MediaOperation[RequestT],
    arguments: Mapping[str, Any],
    poller: OperationPoller | None = None,
) -> list[ContentItem]:
    """Run one tool call through the full pipeline."""

    request = operation.parse(arguments)
    errors = operation.validate(request)
    if errors:
        logger.info("Rejected %s call with %d validation errors", operation.name, len(errors))
        raise ValidationFailed(errors)

    settings = client.settings
    media: dict[str, ResolvedMedia] = {}
    for slot, (reference, default_mime) in operation.media_references(request).items():
        media[slot] = await resolve_media(
            reference,
            client.storage,
            default_mime=default_mime,
            strict=settings.strict_input_resolution,
        )

    payload = operation.build_request(request, media)
    endpoint = operation.endpoint(settings, request)
    logger.info("Submitting %s request to %s", operation.name, endpoint)
    response = await client.post_json(endpoint, payload)

    if operation.long_running:
        handle = operation.operation_handle(response, request, endpoint)
        status_endpoint = operation.status_endpoint(settings, request)
        logger.info("Started long-running operation %s", handle.operation_id)

        async def fetch(current: OperationHandle) -> dict[str, Any]:
            return await client.post_json(
                status_endpoint, {"operationName": current.operation_id}
            )

        active = poller or OperationPoller(PollConfig.from_settings(settings))
        response = await active.poll(handle, fetch)

    artifacts = operation.extract_artifacts(response, request)
    if not artifacts:
        raise RemoteApiError(endpoint, 200, operation.empty_result_message)
    result = await dispatch(
        artifacts, operation.destination(request, artifacts), client.storage, operation.default_stem
    )
    logger.info("%s produced %d artifact(s)", operation.name, len(result))
    return operation.to_content(request, result, artifacts)


__all__ = [
    "MediaOperation",
    "Tool",
    "output_content",
    "run_operation",
    "select_destination",
]
