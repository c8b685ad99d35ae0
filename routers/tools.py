"""Tool router: tool definitions and structured tool-call execution."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body

from dependencies.providers import ToolServiceDep
from infrastructure.models.memory import ToolResult

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get("", summary="List memory tool definitions")
async def list_tools(tool_service: ToolServiceDep) -> List[Dict[str, Any]]:
    return tool_service.definitions()


@router.post("/{tool_name}", response_model=ToolResult, summary="Execute a memory tool")
async def execute_tool(
    tool_name: str,
    tool_service: ToolServiceDep,
    params: Optional[Dict[str, Any]] = Body(None),
) -> ToolResult:
    """Failures of the memory service come back as a normal result with `details.error`."""

    return await tool_service.execute(tool_name, params)
