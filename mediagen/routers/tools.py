from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from ..core.client import MediaClient
from ..schemas.common import ToolCallResponse, ToolDescriptor
from ..services import get_tool_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/tools", tags=["tools"])


def get_media_client(request: Request) -> MediaClient:
    client = getattr(request.app.state, "media_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Media client is not initialised")
    return client


@router.get("", response_model=list[ToolDescriptor])
async def list_tools() -> list[ToolDescriptor]:
    return [
        ToolDescriptor(name=tool.name, description=tool.description, input_schema=tool.input_schema())
        for tool in get_tool_registry().values()
    ]


@router.post("/{tool_name}", response_model=ToolCallResponse)
async def call_tool(
    tool_name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    client: MediaClient = Depends(get_media_client),
) -> ToolCallResponse:
    tool = get_tool_registry().get(tool_name)
    if tool is None:
        raise HTTPException(status_code=400, detail=f"Unknown tool: {tool_name}")

    request_id = str(uuid.uuid4())
    start = time.perf_counter()
    logger.info("Tool call %s started (request_id=%s)", tool_name, request_id)
    content = await tool.invoke(client, arguments or {})
    duration_ms = (time.perf_counter() - start) * 1000.0
    logger.info("Tool call %s finished in %.1f ms", tool_name, duration_ms)
    return ToolCallResponse(request_id=request_id, duration_ms=duration_ms, content=content)
