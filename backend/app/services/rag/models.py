"""
Value types shared by the retrieval stages.

All of them are immutable and live for one request at most
(unless held by the lesson cache as part of a snapshot).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Document:
    identifier: str  # path relative to the content root, forward slashes
    text: str


@dataclass(frozen=True)
class Chunk:
    text: str
    source_label: str
    index: int
    start: int
    end: int


@dataclass(frozen=True)
class ScoredChunk:
    chunk: Chunk
    score: float


@dataclass(frozen=True)
class ScopeDecision:
    allowed: bool
    refusal: str | None = None
