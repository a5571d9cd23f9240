"""
RAG Admin Router

Provides endpoints to inspect the lesson content and drop the lesson cache.
"""

import logging
from pathlib import Path

from fastapi import APIRouter
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.exceptions import TutorError
from app.services.rag.chunker import chunk_documents
from app.services.rag.loader import get_document_source, invalidate_lesson_cache

logger = logging.getLogger(__name__)

router = APIRouter()


class RAGStatusResponse(BaseModel):
    available: bool
    document_count: int
    chunk_count: int
    documents: list[str] = []
    content_dir: str
    chunk_size: int
    chunk_overlap: int
    cache_enabled: bool
    message: str = ""


@router.get("/status", response_model=RAGStatusResponse)
async def rag_status():
    """Check which lessons the tutor can currently see."""
    settings = get_settings()
    base = {
        "content_dir": str(Path(settings.content_dir).resolve()),
        "chunk_size": settings.chunk_size,
        "chunk_overlap": settings.chunk_overlap,
        "cache_enabled": settings.content_cache_enabled,
    }

    try:
        documents = await get_document_source().load()
        chunks = chunk_documents(
            documents,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        )
    except TutorError as e:
        logger.warning("[RAG] Status check failed: %s", e)
        return RAGStatusResponse(
            available=False,
            document_count=0,
            chunk_count=0,
            message=e.message,
            **base,
        )

    return RAGStatusResponse(
        available=bool(documents),
        document_count=len(documents),
        chunk_count=len(chunks),
        documents=[doc.identifier for doc in documents],
        message="" if documents else "No lesson files found.",
        **base,
    )


@router.post("/invalidate")
async def invalidate_cache():
    """
    Drop the cached lesson snapshot.

    Useful after editing lesson files when the cache TTL is long.
    Has no effect when caching is disabled (every request already reads from disk).
    """
    if not get_settings().content_cache_enabled:
        return {"status": "skipped", "message": "Lesson cache is disabled."}

    if not invalidate_lesson_cache():
        return {"status": "skipped", "message": "Lesson cache has not been built yet."}

    return {"status": "success", "message": "Lesson cache invalidated."}
