"""
OpenAI Responses API Provider

Handles GPT-5.x models using the newer Responses API format:
- client.responses.create()
- input (not messages)
- response.output_text

GPT-5.x reasoning models reject a custom temperature, so it is not sent.
"""

from openai import AsyncOpenAI

from app.core.config import get_settings
from app.core.exceptions import CompletionServiceError
from app.services.llm.base import LLMProvider

settings = get_settings()


class OpenAIResponsesProvider(LLMProvider):
    """Provider for OpenAI Responses API (GPT-5.x models)."""

    provider_name = "openai_responses"

    def __init__(self):
        self.client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.completion_timeout_seconds,
            max_retries=0,
        )

    async def chat(
        self,
        system_prompt: str,
        messages: list[dict],
        model: str,
        max_output_tokens: int = 1024,
        temperature: float = 0.2,
    ) -> str:
        input_messages = [{"role": "system", "content": system_prompt}] + messages

        response = await self.client.responses.create(
            model=model,
            input=input_messages,
            max_output_tokens=max_output_tokens,
        )

        content = response.output_text
        if not content:
            raise CompletionServiceError(
                "Empty response from OpenAI Responses API", {"model": model}
            )
        return content
