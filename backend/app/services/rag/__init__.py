"""
RAG (Retrieval-Augmented Generation) Pipeline

Provides lesson-grounded context to the LLM by:
1. Gating the question by syllabus scope before any work is done
2. Loading the lesson files and splitting them into overlapping chunks
3. Ranking chunks against the question by keyword overlap (no embeddings)
"""

from app.services.rag.classifier import classify_scope, OUT_OF_SCOPE_REFUSAL
from app.services.rag.chunker import chunk_text, chunk_documents
from app.services.rag.loader import LessonDocumentCache, LessonLoader, get_document_source
from app.services.rag.models import Chunk, Document, ScopeDecision, ScoredChunk
from app.services.rag.retriever import retrieve_top_chunks, tokenize

__all__ = [
    "classify_scope",
    "OUT_OF_SCOPE_REFUSAL",
    "chunk_text",
    "chunk_documents",
    "LessonDocumentCache",
    "LessonLoader",
    "get_document_source",
    "Chunk",
    "Document",
    "ScopeDecision",
    "ScoredChunk",
    "retrieve_top_chunks",
    "tokenize",
]
