"""
OpenAI Chat Completions API Provider

Handles GPT-4.1 / GPT-4o family models:
- client.chat.completions.create()
- messages (not input)
- response.choices[0].message.content

The SDK's own retries are switched off (max_retries=0): one request makes
exactly one call to the completion service.
"""

from openai import AsyncOpenAI

from app.core.config import get_settings
from app.core.exceptions import CompletionServiceError
from app.services.llm.base import LLMProvider

settings = get_settings()


class OpenAIChatProvider(LLMProvider):
    """Provider for OpenAI Chat Completions API (GPT-4.1, GPT-4o, etc.)."""

    provider_name = "openai_chat"

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
        chat_messages = [{"role": "system", "content": system_prompt}] + messages

        response = await self.client.chat.completions.create(
            model=model,
            messages=chat_messages,
            max_completion_tokens=max_output_tokens,
            temperature=temperature,
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise CompletionServiceError(
                "Empty response from OpenAI Chat Completions API", {"model": model}
            )
        return content
