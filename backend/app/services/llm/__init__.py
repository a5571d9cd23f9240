"""
LLM Provider Abstraction Layer

Provides a unified interface for the completion service (OpenAI Chat
Completions and Responses APIs) with a model registry and a shared
orchestrator that owns the timeout and error mapping.
"""

from app.services.llm.orchestrator import LLMOrchestrator, get_orchestrator
from app.services.llm.registry import MODEL_REGISTRY, get_provider, list_models
from app.services.llm.models import ChatMessage, latest_user_message

__all__ = [
    "LLMOrchestrator",
    "get_orchestrator",
    "MODEL_REGISTRY",
    "get_provider",
    "list_models",
    "ChatMessage",
    "latest_user_message",
]
