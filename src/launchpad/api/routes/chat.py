"""
Assistant side-panel endpoint.

Provider failures never surface as HTTP errors; the user gets a
readable reply and the failure is logged.
"""

import logging

from fastapi import APIRouter, Depends

from launchpad.api.dependencies import get_chat_client
from launchpad.api.schemas.requests import ChatRequestBody
from launchpad.api.schemas.responses import ChatReply
from launchpad.core.exceptions import LLMAuthenticationError, LLMError
from launchpad.llm.client import ChatClient, ChatMessage, ChatRequest

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_CONFIGURED_REPLY = "API Key not configured. Please check your environment settings."
ERROR_REPLY = "Sorry, I encountered an error connecting to the AI service."
EMPTY_REPLY = "I couldn't generate a response."


@router.post("", response_model=ChatReply)
def chat(body: ChatRequestBody, client: ChatClient = Depends(get_chat_client)) -> ChatReply:
    """Send one message (with prior turns) to the assistant."""
    if not client.is_configured:
        return ChatReply(reply=NOT_CONFIGURED_REPLY)

    request = ChatRequest(
        message=body.message,
        history=[ChatMessage(role=turn.role, text=turn.text) for turn in body.history],
    )
    try:
        response = client.complete(request)
    except LLMAuthenticationError as e:
        logger.error(f"Chat provider rejected credentials: {e}")
        return ChatReply(reply=ERROR_REPLY)
    except LLMError as e:
        logger.error(f"Chat request failed: {e}")
        return ChatReply(reply=ERROR_REPLY)

    return ChatReply(reply=response.content or EMPTY_REPLY)
