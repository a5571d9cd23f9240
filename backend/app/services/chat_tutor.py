"""
Chat Tutor Service

Runs the per-request pipeline behind the chat widget:

    scope gate → load lessons → chunk → retrieve top-K → build prompts → one completion call

Only the latest user message is used, for both the scope gate and retrieval.
Earlier turns are accepted so the widget can send its whole history, but they
are not consulted. A refusal from the scope gate short-circuits everything
after it: no lesson is read and the completion service is never called.
"""

import logging

from app.core.config import Settings, get_settings
from app.services.llm.models import ChatMessage, latest_user_message
from app.services.llm.orchestrator import LLMOrchestrator, get_orchestrator
from app.services.prompt_builder import build_system_prompt, build_user_prompt
from app.services.rag.chunker import chunk_documents
from app.services.rag.classifier import classify_scope
from app.services.rag.loader import DocumentSource, get_document_source
from app.services.rag.retriever import retrieve_top_chunks

logger = logging.getLogger(__name__)


EMPTY_COMPLETION_REPLY = "No response."


class ChatTutor:
    """Sequences the retrieval pipeline and the completion call for one request."""

    def __init__(
        self,
        documents: DocumentSource,
        orchestrator: LLMOrchestrator,
        settings: Settings,
    ) -> None:
        self.documents = documents
        self.orchestrator = orchestrator
        self.settings = settings

    async def reply(self, messages: list[ChatMessage]) -> str:
        """
        Answer the latest user message from the lesson notes.

        Args:
            messages: Conversation history from the widget, oldest first

        Returns:
            The tutor's answer, or the fixed refusal text for out-of-scope questions

        Raises:
            LoadError: If the lesson content cannot be read
            ConfigurationError: If chunk settings or the model id are invalid
            CompletionServiceError: If the completion call fails or times out
        """
        query = latest_user_message(messages)

        # 1) Scope gate
        decision = classify_scope(query)
        if not decision.allowed:
            return decision.refusal

        # 2) Load + chunk lessons
        documents = await self.documents.load()
        chunks = chunk_documents(
            documents,
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )

        # 3) Retrieve
        top = retrieve_top_chunks(query, chunks, self.settings.retrieval_top_k)
        if not top:
            logger.info("[Chat] No lesson material matched; answering without context")

        # 4) Complete
        content = await self.orchestrator.complete(
            system_prompt=build_system_prompt(),
            user_prompt=build_user_prompt(query, top),
            model_id=self.settings.chat_model,
            temperature=self.settings.chat_temperature,
            max_output_tokens=self.settings.chat_max_output_tokens,
            timeout=self.settings.completion_timeout_seconds,
        )

        logger.info(
            "[Chat] Answered from %d chunk(s) across %d document(s)",
            len(top),
            len(documents),
        )
        return content.strip() or EMPTY_COMPLETION_REPLY


def get_chat_tutor() -> ChatTutor:
    """FastAPI dependency: a tutor wired to the configured lessons and model."""
    return ChatTutor(
        documents=get_document_source(),
        orchestrator=get_orchestrator(),
        settings=get_settings(),
    )
