"""
Model Registry

Maps model IDs to their metadata and provider types.
Used by the orchestrator to select the correct provider per request.
"""

from app.core.exceptions import ConfigurationError
from app.services.llm.base import LLMProvider


# ── Model Registry ────────────────────────────────────────────────────────────
# Each entry maps a model_id (the value of the CHAT_MODEL setting) to:
#   - display_name: Human-readable name
#   - provider:     Which LLMProvider class to use
#   - api_model:    The actual model string sent to the provider API
#   - tier:         Pricing tier

MODEL_REGISTRY: dict[str, dict] = {
    # ── OpenAI Chat Completions API ──
    "gpt-4.1-mini": {
        "display_name": "GPT-4.1 Mini",
        "provider": "openai_chat",
        "api_model": "gpt-4.1-mini",
        "tier": "standard",
        "description": "Fast and cheap. Follows the grounding rules well. Recommended default.",
    },
    "gpt-4o-mini": {
        "display_name": "GPT-4o Mini (Budget)",
        "provider": "openai_chat",
        "api_model": "gpt-4o-mini",
        "tier": "budget",
        "description": "Cheapest option. Fine for definitions and unit conversions.",
    },
    "gpt-4o": {
        "display_name": "GPT-4o",
        "provider": "openai_chat",
        "api_model": "gpt-4o",
        "tier": "premium",
        "description": "Stronger reasoning for multi-step calculations.",
    },
    # ── OpenAI Responses API (GPT-5.x) ──
    "gpt-5-mini": {
        "display_name": "GPT-5 Mini",
        "provider": "openai_responses",
        "api_model": "gpt-5-mini",
        "tier": "premium",
        "description": "Reasoning model. Slowest; raise COMPLETION_TIMEOUT_SECONDS when using it.",
    },
}

# Default model when nothing else is specified
DEFAULT_MODEL_ID = "gpt-4.1-mini"


# ── Provider Factory ──────────────────────────────────────────────────────────

# Provider class registry (lazy-loaded singletons)
_provider_instances: dict[str, LLMProvider] = {}


def _create_provider(provider_type: str) -> LLMProvider:
    """Create a provider instance by type string."""
    if provider_type == "openai_responses":
        from app.services.llm.openai_responses import OpenAIResponsesProvider
        return OpenAIResponsesProvider()
    elif provider_type == "openai_chat":
        from app.services.llm.openai_chat import OpenAIChatProvider
        return OpenAIChatProvider()
    else:
        raise ConfigurationError(f"Unknown provider type: {provider_type}")


def get_provider(model_id: str) -> tuple[LLMProvider, str]:
    """
    Get the provider instance and API model name for a given model_id.

    Args:
        model_id: The model identifier (e.g., "gpt-4.1-mini")

    Returns:
        Tuple of (provider_instance, api_model_name)

    Raises:
        ConfigurationError: If the model_id is not in the registry
    """
    if model_id not in MODEL_REGISTRY:
        raise ConfigurationError(
            f"Unknown model: {model_id}. "
            f"Available models: {', '.join(MODEL_REGISTRY.keys())}"
        )

    model_info = MODEL_REGISTRY[model_id]
    provider_type = model_info["provider"]

    # Lazy singleton creation
    if provider_type not in _provider_instances:
        _provider_instances[provider_type] = _create_provider(provider_type)

    return _provider_instances[provider_type], model_info["api_model"]


def list_models() -> list[dict]:
    """
    Return the list of available models.

    Returns:
        List of dicts with id, display_name, tier, description
    """
    return [
        {
            "id": model_id,
            "display_name": info["display_name"],
            "tier": info["tier"],
            "description": info.get("description", ""),
        }
        for model_id, info in MODEL_REGISTRY.items()
    ]
