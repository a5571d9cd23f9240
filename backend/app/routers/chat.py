"""
Chat Router

The single endpoint behind the lesson pages' chat widget.

Refusals and answers share the same {"reply": ...} shape so the widget can
render them the same way. Failures come back as plain text with no internal
detail; the full error is logged.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from app.core.exceptions import CompletionServiceError, ConfigurationError, LoadError
from app.services.chat_tutor import ChatTutor, get_chat_tutor
from app.services.llm.models import ChatMessage

logger = logging.getLogger(__name__)

router = APIRouter()


SERVER_ERROR_TEXT = "Server error"
CONFIGURATION_ERROR_TEXT = "Configuration error"


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []


class ChatResponse(BaseModel):
    reply: str


@router.post("", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    tutor: ChatTutor = Depends(get_chat_tutor),
):
    """Answer the latest user message from the lesson notes."""
    try:
        reply = await tutor.reply(data.messages)
    except ConfigurationError as e:
        logger.error("[Chat] Configuration error: %s", e)
        return PlainTextResponse(
            CONFIGURATION_ERROR_TEXT,
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except (LoadError, CompletionServiceError) as e:
        logger.exception("[Chat] Request failed: %s", e)
        return PlainTextResponse(
            SERVER_ERROR_TEXT,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except Exception:
        logger.exception("[Chat] Unexpected failure")
        return PlainTextResponse(
            SERVER_ERROR_TEXT,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return ChatResponse(reply=reply)
