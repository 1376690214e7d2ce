"""Schemas for the direct-prompt and RAG query endpoints."""

from pydantic import BaseModel, Field


class PromptRequest(BaseModel):
    """Request body for POST /basic. A missing prompt is rejected with 400 by the handler."""

    prompt: str | None = Field(None, description="Prompt sent to the model as-is.")


class RAGQueryRequest(BaseModel):
    """Request body for POST /rag/query."""

    query: str | None = Field(None, description="Question answered from the uploaded documents.")


class TextResponse(BaseModel):
    """Response for POST /basic and POST /rag/query."""

    response: str = Field(..., description="Model answer.")


class ErrorResponse(BaseModel):
    """Body returned with any non-2xx status."""

    error: str = Field(..., description="Caller-safe error message.")
