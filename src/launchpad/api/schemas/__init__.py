"""
Pydantic schemas and API exceptions.
"""

from launchpad.api.schemas.exceptions import (
    APIException,
    AuthRequiredError,
    ForbiddenError,
)
from launchpad.api.schemas.requests import ChatRequestBody, ChatTurn, ReorderRequest
from launchpad.api.schemas.responses import (
    ChatReply,
    HealthResponse,
    IconTable,
    MessageResponse,
)

__all__ = [
    # Exceptions
    "APIException",
    "AuthRequiredError",
    "ForbiddenError",
    # Requests
    "ReorderRequest",
    "ChatTurn",
    "ChatRequestBody",
    # Responses
    "MessageResponse",
    "IconTable",
    "ChatReply",
    "HealthResponse",
]
