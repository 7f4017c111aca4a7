"""Pydantic schemas for tool arguments and results."""

from .common import (
    AudioContent,
    ContentItem,
    ErrorResponse,
    ImageContent,
    TextContent,
    ToolCallResponse,
    ToolDescriptor,
    ToolRequest,
)
from .images import ImageGenerateRequest, ImageUpscaleRequest
from .multimodal import (
    GeminiVoice,
    LanguageCode,
    MultimodalImageRequest,
    MultimodalListVoicesRequest,
    MultimodalSpeechRequest,
)
from .music import MusicGenerateRequest
from .tts import Pronunciation, SpeechListVoicesRequest, SpeechSynthesizeRequest, VoiceInfo
from .videos import VideoExtendRequest, VideoFromImageRequest, VideoGenerateRequest

__all__ = [
    "AudioContent",
    "ContentItem",
    "ErrorResponse",
    "ImageContent",
    "TextContent",
    "ToolCallResponse",
    "ToolDescriptor",
    "ToolRequest",
    "ImageGenerateRequest",
    "ImageUpscaleRequest",
    "GeminiVoice",
    "LanguageCode",
    "MultimodalImageRequest",
    "MultimodalListVoicesRequest",
    "MultimodalSpeechRequest",
    "MusicGenerateRequest",
    "Pronunciation",
    "SpeechListVoicesRequest",
    "SpeechSynthesizeRequest",
    "VoiceInfo",
    "VideoExtendRequest",
    "VideoFromImageRequest",
    "VideoGenerateRequest",
]
