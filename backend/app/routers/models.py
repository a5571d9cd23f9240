"""
Models Router

Exposes the completion models the tutor can be configured with.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import get_settings
from app.services.llm.registry import list_models


router = APIRouter()


class ModelInfo(BaseModel):
    id: str
    display_name: str
    tier: str
    description: str
    active: bool = False


@router.get("", response_model=list[ModelInfo])
async def get_available_models():
    """Return the registered models, flagging the one in use."""
    active_model = get_settings().chat_model
    return [
        ModelInfo(**info, active=info["id"] == active_model)
        for info in list_models()
    ]
