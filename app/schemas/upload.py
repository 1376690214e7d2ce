"""Schemas for the RAG upload endpoint."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response after splitting, embedding and storing an uploaded document."""

    success: bool = Field(True, description="True when every chunk was stored.")
    chunks: int = Field(..., description="Number of paragraphs embedded and upserted.")

    model_config = {
        "json_schema_extra": {
            "examples": [{"success": True, "chunks": 12}]
        }
    }
