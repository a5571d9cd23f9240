"""
Abstract base class for all LLM providers.

Each provider implements the API-specific translation layer.
Timeouts and error mapping are handled by the orchestrator.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base class for all LLM providers."""

    provider_name: str = "base"

    @abstractmethod
    async def chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        max_output_tokens: int = 1024,
        temperature: float = 0.2,
    ) -> str:
        """
        Text-only chat completion.

        Args:
            system_prompt: The system prompt
            messages: List of message dicts with "role" and "content"
            model: The API model identifier (e.g., "gpt-4.1-mini")
            max_output_tokens: Maximum tokens in the response
            temperature: Sampling temperature

        Returns:
            Raw text response from the LLM

        Raises:
            CompletionServiceError: If the API returns no text
        """
        ...
