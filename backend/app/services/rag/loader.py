"""
Lesson Document Loader

Reads every lesson file (.mdx / .md) under the content directory into
(identifier, text) pairs for the retrieval pipeline.

How it works:
1. WALK   – rglob the content directory, sorted by relative path so the chunk
            order (and therefore retrieval tie-breaks) is stable
2. READ   – each file is read as UTF-8; a file that cannot be read is skipped
            with a warning; the remaining lessons are still served
3. CLEAN  – MDX-only syntax (import/export lines, self-closing component tags
            such as <PracticeMCQ_Homogenity />) is stripped; Markdown and
            LaTeX math stay as written

By default every request reloads from disk. LessonDocumentCache can sit in
front of the loader and hand out immutable snapshots instead.
"""

import asyncio
import logging
import re
import time
from pathlib import Path
from typing import Protocol

from app.core.config import get_settings
from app.core.exceptions import LoadError
from app.services.rag.models import Document

logger = logging.getLogger(__name__)


LESSON_SUFFIXES = (".mdx", ".md")

# import Foo from "./foo"; / export const meta = {...}
MDX_ESM_LINE = re.compile(r"^(?:import|export)\s.*$", re.MULTILINE)
# <BaseUnitTable /> or <PracticeMCQ_BaseVsDerived title="x" />
JSX_SELF_CLOSING = re.compile(r"<[A-Z][\w.]*(?:\s[^<>]*)?/>")
EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class DocumentSource(Protocol):
    """Anything that can hand the pipeline the current set of lessons."""

    async def load(self) -> list[Document]:
        ...


# ── Reading ──────────────────────────────────────────────────────────────────

def clean_lesson_text(raw: str) -> str:
    """Strip MDX-only syntax that carries no teaching content."""
    text = MDX_ESM_LINE.sub("", raw)
    text = JSX_SELF_CLOSING.sub("", text)
    return EXTRA_BLANK_LINES.sub("\n\n", text).strip()


def find_lesson_files(content_dir: Path) -> list[Path]:
    """Return every lesson file under content_dir, sorted by relative path."""
    return sorted(
        (
            path
            for path in content_dir.rglob("*")
            if path.is_file() and path.suffix.lower() in LESSON_SUFFIXES
        ),
        key=lambda path: path.relative_to(content_dir).as_posix(),
    )


def read_lesson_documents(content_dir: str | Path) -> list[Document]:
    """
    Load all lesson documents under content_dir.

    Args:
        content_dir: Root of the lesson content tree

    Returns:
        Documents keyed by their path relative to content_dir. Empty if the
        directory holds no lesson files.

    Raises:
        LoadError: If content_dir is missing, or every lesson file failed to read
    """
    root = Path(content_dir)
    if not root.is_dir():
        raise LoadError(
            "Lesson content directory not found",
            {"content_dir": str(root.resolve())},
        )

    files = find_lesson_files(root)
    documents: list[Document] = []
    failed: list[str] = []

    for path in files:
        identifier = path.relative_to(root).as_posix()
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("[RAG] Skipping unreadable lesson %s: %s", identifier, e)
            failed.append(identifier)
            continue
        documents.append(Document(identifier=identifier, text=clean_lesson_text(raw)))

    if files and not documents:
        raise LoadError("Every lesson file failed to load", {"failed": failed})

    logger.info(
        "[RAG] Loaded %d lesson document(s) from %s (%d skipped)",
        len(documents),
        root,
        len(failed),
    )
    return documents


def content_fingerprint(content_dir: str | Path) -> tuple:
    """Cheap change detector: (path, mtime, size) of every lesson file."""
    root = Path(content_dir)
    if not root.is_dir():
        return ()
    fingerprint = []
    for path in find_lesson_files(root):
        try:
            stat = path.stat()
        except OSError:
            continue
        fingerprint.append((path.relative_to(root).as_posix(), stat.st_mtime_ns, stat.st_size))
    return tuple(fingerprint)


# ── Sources ──────────────────────────────────────────────────────────────────

class LessonLoader:
    """Request-scoped loader: every call goes back to disk."""

    def __init__(self, content_dir: str | Path):
        self.content_dir = Path(content_dir)

    async def load(self) -> list[Document]:
        return await asyncio.to_thread(read_lesson_documents, self.content_dir)


class LessonDocumentCache:
    """
    Process-wide lesson cache with a single owner.

    Holds an immutable tuple snapshot. Once the TTL has passed, the next load
    re-checks the lesson files' fingerprint and only re-reads them when
    something changed. The new snapshot replaces the old one in a single
    assignment, so concurrent readers never see a half-built list.
    """

    def __init__(self, loader: LessonLoader, ttl_seconds: float = 60.0):
        self.loader = loader
        self.ttl_seconds = ttl_seconds
        self._snapshot: tuple[Document, ...] | None = None
        self._fingerprint: tuple | None = None
        self._checked_at = 0.0
        self._lock = asyncio.Lock()

    def invalidate(self) -> None:
        """Drop the snapshot; the next load re-reads the content directory."""
        self._snapshot = None
        self._fingerprint = None
        logger.info("[RAG] Lesson cache invalidated")

    async def load(self) -> list[Document]:
        snapshot = self._snapshot
        if snapshot is not None and time.monotonic() - self._checked_at < self.ttl_seconds:
            return list(snapshot)

        async with self._lock:
            fingerprint = await asyncio.to_thread(content_fingerprint, self.loader.content_dir)
            if self._snapshot is None or fingerprint != self._fingerprint:
                documents = await self.loader.load()
                self._snapshot = tuple(documents)
                self._fingerprint = fingerprint
                logger.info("[RAG] Lesson cache refreshed: %d document(s)", len(documents))
            self._checked_at = time.monotonic()
            return list(self._snapshot)


# ── Singleton ────────────────────────────────────────────────────────────────

_lesson_cache: LessonDocumentCache | None = None


def get_document_source() -> DocumentSource:
    """Return the cache singleton when caching is enabled, else a fresh loader."""
    global _lesson_cache
    settings = get_settings()
    loader = LessonLoader(settings.content_dir)
    if not settings.content_cache_enabled:
        return loader
    if _lesson_cache is None:
        _lesson_cache = LessonDocumentCache(loader, ttl_seconds=settings.content_cache_ttl_seconds)
    return _lesson_cache


def invalidate_lesson_cache() -> bool:
    """Invalidate the cache singleton. Returns False when no cache exists."""
    if _lesson_cache is None:
        return False
    _lesson_cache.invalidate()
    return True
