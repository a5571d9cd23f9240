"""
LLM Orchestrator

Shared logic for all providers:
- Model lookup through the registry
- A hard timeout around the single provider call
- Mapping provider failures onto CompletionServiceError

No retry: one chat request makes exactly one completion call.
"""

import asyncio
import logging
from time import monotonic

from openai import OpenAIError

from app.core.exceptions import CompletionServiceError
from app.services.llm.registry import get_provider, DEFAULT_MODEL_ID

logger = logging.getLogger(__name__)


class LLMOrchestrator:
    """Orchestrates a single completion call with timeout and error mapping."""

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model_id: str | None = None,
        temperature: float = 0.2,
        max_output_tokens: int = 1024,
        timeout: float = 30.0,
    ) -> str:
        """
        Send a system + user prompt pair to the selected model.

        Args:
            system_prompt: The fixed tutor instructions
            user_prompt: Retrieved context followed by the question
            model_id: Optional model identifier; falls back to DEFAULT_MODEL_ID
            temperature: Sampling temperature
            max_output_tokens: Maximum tokens in the answer
            timeout: Seconds to wait before giving up on the provider

        Returns:
            The completion text

        Raises:
            ConfigurationError: If model_id is not registered
            CompletionServiceError: On provider failure, timeout or empty output
        """
        model_id = model_id or DEFAULT_MODEL_ID

        start = monotonic()
        try:
            # Building the client can fail too, e.g. missing credentials
            provider, api_model = get_provider(model_id)
            content = await asyncio.wait_for(
                provider.chat(
                    system_prompt=system_prompt,
                    messages=[{"role": "user", "content": user_prompt}],
                    model=api_model,
                    max_output_tokens=max_output_tokens,
                    temperature=temperature,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise CompletionServiceError(
                "Completion service timed out",
                {"model": model_id, "timeout": timeout},
            ) from e
        except OpenAIError as e:
            raise CompletionServiceError(
                "Completion service call failed",
                {"model": model_id, "error": str(e)},
            ) from e

        elapsed_ms = 1000 * (monotonic() - start)
        logger.info(
            "[LLM] model=%s provider=%s latency=%.0fms chars=%d",
            model_id,
            provider.provider_name,
            elapsed_ms,
            len(content),
        )
        logger.debug("[LLM] Content: %s...", content[:200])
        return content


# ── Singleton ─────────────────────────────────────────────────────────────────

_orchestrator: LLMOrchestrator | None = None


def get_orchestrator() -> LLMOrchestrator:
    """Get or create the LLM orchestrator singleton."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = LLMOrchestrator()
    return _orchestrator
