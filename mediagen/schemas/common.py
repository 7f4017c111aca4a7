"""Common request and response schemas for tool invocation."""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class ToolRequest(BaseModel):
    """Base for tool argument models: immutable once parsed."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class TextContent(BaseModel):
    """Plain text content item."""

    type: Literal["text"] = "text"
    text: str = Field(..., description="Human readable result text.")


class ImageContent(BaseModel):
    """Inline image content item."""

    type: Literal["image"] = "image"
    data: str = Field(..., description="Base64 encoded image bytes.")
    mime_type: str = Field(default="image/png", description="MIME type of the image data")


class AudioContent(BaseModel):
    """Inline audio content item."""

    type: Literal["audio"] = "audio"
    data: str = Field(..., description="Base64 encoded audio bytes.")
    mime_type: str = Field(default="audio/wav", description="MIME type of the audio data")


ContentItem = Union[TextContent, ImageContent, AudioContent]


class ToolCallResponse(BaseModel):
    """Result of a tool invocation."""

    request_id: str = Field(..., description="Unique identifier for the tool call.")
    duration_ms: float = Field(..., description="Wall-clock time spent handling the call.")
    content: list[ContentItem] = Field(default_factory=list)
    is_error: bool = Field(default=False)


class ToolDescriptor(BaseModel):
    """Name, description and argument schema of one tool."""

    name: str
    description: str
    input_schema: dict[str, Any]


class ErrorDetail(BaseModel):
    type: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: ErrorDetail
