"""
Fixed-window chunker.

Slides a window of ``chunk_size`` characters over the lesson text, stepping by
``chunk_size - chunk_overlap``. The overlap keeps a sentence that straddles a
boundary readable in at least one chunk. The last chunk holds whatever tail is
left, so no text is ever dropped.
"""

from collections.abc import Iterable, Iterator

from app.core.exceptions import ConfigurationError
from app.services.rag.models import Chunk, Document


def validate_chunking(chunk_size: int, chunk_overlap: int) -> None:
    """Reject settings that would make the window stand still or go backwards."""
    if chunk_size <= 0:
        raise ConfigurationError(
            "chunk_size must be > 0", {"chunk_size": chunk_size}
        )
    if chunk_overlap < 0:
        raise ConfigurationError(
            "chunk_overlap must be >= 0", {"chunk_overlap": chunk_overlap}
        )
    if chunk_overlap >= chunk_size:
        raise ConfigurationError(
            "chunk_overlap must be < chunk_size",
            {"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
        )


def chunk_text(
    text: str,
    *,
    chunk_size: int,
    chunk_overlap: int,
    source_label: str,
) -> Iterator[Chunk]:
    """
    Split one document's text into overlapping chunks.

    Validation happens eagerly, before the first chunk is requested, so a bad
    configuration fails at the call site rather than deep inside a consumer.

    Args:
        text: Raw lesson text
        chunk_size: Window width in characters
        chunk_overlap: Characters shared by consecutive chunks
        source_label: Identifier of the parent document

    Returns:
        A generator of chunks in ascending index order. Call again to restart.

    Raises:
        ConfigurationError: If chunk_overlap >= chunk_size or either is out of range
    """
    validate_chunking(chunk_size, chunk_overlap)
    return _windows(text, chunk_size, chunk_size - chunk_overlap, source_label)


def _windows(text: str, size: int, step: int, source_label: str) -> Iterator[Chunk]:
    text_len = len(text)
    for index, start in enumerate(range(0, text_len, step)):
        end = min(start + size, text_len)
        yield Chunk(
            text=text[start:end],
            source_label=source_label,
            index=index,
            start=start,
            end=end,
        )
        if end == text_len:
            break


def chunk_documents(
    documents: Iterable[Document],
    *,
    chunk_size: int,
    chunk_overlap: int,
) -> list[Chunk]:
    """Chunk every document, keeping each document's chunks contiguous and in order."""
    validate_chunking(chunk_size, chunk_overlap)
    chunks: list[Chunk] = []
    for doc in documents:
        chunks.extend(
            chunk_text(
                doc.text,
                chunk_size=chunk_size,
                chunk_overlap=chunk_overlap,
                source_label=doc.identifier,
            )
        )
    return chunks
