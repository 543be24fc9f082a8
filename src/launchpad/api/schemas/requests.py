"""
Pydantic request schemas for API endpoints.

App records travel as free-form JSON objects and are mapped by the
presentation adapter; only fixed-shape bodies are modelled here.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ReorderRequest(BaseModel):
    """Full id sequence in the desired display order."""

    order: list[str] = Field(
        ...,
        description="Every application id, in display order",
        examples=[["chat", "agent", "project"]],
    )

    model_config = {"extra": "forbid"}


class ChatTurn(BaseModel):
    """One prior turn of the conversation."""

    role: Literal["user", "model"]
    text: str

    model_config = {"extra": "ignore"}


class ChatRequestBody(BaseModel):
    """Message for the assistant side-panel."""

    message: str = Field(..., description="User message", max_length=8000)
    history: list[ChatTurn] = Field(default_factory=list, max_length=100)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Reject blank messages."""
        if not v.strip():
            raise ValueError("message must not be empty")
        return v

    model_config = {"extra": "forbid"}
