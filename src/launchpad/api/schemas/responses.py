"""
Pydantic response schemas for API endpoints.
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Acknowledgement for operations without a record body."""

    message: str = Field(..., description="Outcome message")
    id: str | None = Field(None, description="Affected application id")


class IconTable(BaseModel):
    """Supported icon names."""

    icons: list[str]
    fallback: str


class ChatReply(BaseModel):
    """Assistant reply."""

    reply: str


class HealthResponse(BaseModel):
    """Health check result."""

    status: str = Field(..., description="ok or error")
    database: str = Field(..., description="connected or unavailable")
    version: str
    timestamp: str
