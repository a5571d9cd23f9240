"""
Pydantic models for chat messages.

Shared by the chat router (request body) and the chat tutor.
"""

from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


def latest_user_message(messages: list[ChatMessage]) -> str:
    """Content of the most recent user turn, or "" when there is none."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""
