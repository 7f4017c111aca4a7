"""Tool implementations and the shared orchestration core."""

from __future__ import annotations

from functools import lru_cache

from .images import get_image_operations
from .multimodal import get_multimodal_tools
from .music import get_music_operation
from .orchestrator import MediaOperation, Tool, run_operation
from .tts import get_tts_tools
from .videos import get_video_operations


@lru_cache()
def get_tool_registry() -> dict[str, Tool]:
    """Return every tool keyed by its public name."""

    tools: list[Tool] = [
        *get_image_operations(),
        *get_video_operations(),
        get_music_operation(),
        *get_tts_tools(),
        *get_multimodal_tools(),
    ]
    return {tool.name: tool for tool in tools}


__all__ = ["MediaOperation", "Tool", "get_tool_registry", "run_operation"]
