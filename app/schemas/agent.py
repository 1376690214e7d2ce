"""Schemas for the agent and tool-calling endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class AgentRequest(BaseModel):
    """Request body for POST /agent."""

    task: str | None = Field(None, description="Free-text task to plan, execute and summarize.")


class StepResultOut(BaseModel):
    action: str = Field(..., description="'<step name>: <step description>'.")
    status: str = Field(..., description="Always 'Completed' for returned steps.")
    result: str = Field(..., description="Model output for the step.")


class AgentResponse(BaseModel):
    """Response for POST /agent. Steps are in execution order."""

    steps: list[StepResultOut]
    result: str = Field(..., description="Final summary of the execution results.")


class ToolsRequest(BaseModel):
    """Request body for POST /tools."""

    prompt: str | None = Field(None, description="Prompt for the tool-calling assistant.")


class ToolCallOut(BaseModel):
    name: str
    arguments: dict[str, Any]
    result: str


class ToolsResponse(BaseModel):
    """Response for POST /tools. toolCalls are in the order the model requested them."""

    response: str = Field(..., description="Final answer from the model.")
    tool_calls: list[ToolCallOut] = Field(default_factory=list, alias="toolCalls")

    model_config = {"populate_by_name": True}
