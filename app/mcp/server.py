"""
Minimal MCP-style tool server: exposes the agent's tool dispatch table through
a standardized interface so external agents can discover and call the same
calculator, weather and search tools the tool loop uses.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from app.agent.tools import TOOL_DEFINITIONS, execute_tool
from app.core.errors import UnknownToolError

logger = logging.getLogger(__name__)

mcp_router = APIRouter(tags=["mcp"])


@mcp_router.get(
    "/tools",
    summary="MCP tool discovery",
    description="List registered tools with their parameter schemas (OpenAI function format).",
)
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    logger.info("MCP tools listed")
    return {"tools": TOOL_DEFINITIONS}


@mcp_router.post(
    "/tools/{name}",
    summary="MCP tool call",
    description="Call a registered tool by name. The body is the tool's arguments object.",
)
def mcp_call_tool(name: str, arguments: dict[str, Any] | None = Body(None)):
    """Dispatch one tool call. Unknown tool names answer 404."""
    logger.info("MCP tool called: %s", name)
    try:
        result = execute_tool(name, arguments or {})
    except UnknownToolError as e:
        return JSONResponse(status_code=404, content={"error": e.message})
    return {"result": result}
