"""
Prompt Builder Service

Turns the retrieved lesson chunks and the student's question into the two
messages sent to the completion service: a fixed system prompt and a
user prompt that carries the context.
"""

from collections.abc import Sequence

from app.services.rag.models import Chunk, ScoredChunk


CONTEXT_SEPARATOR = "\n\n---\n\n"

NO_CONTEXT_NOTICE = (
    "No relevant lesson material was found in the notes for this question."
)


def build_system_prompt() -> str:
    """Return the fixed system prompt: persona, scope and grounding rules."""
    return """You are a friendly H2 Physics tutor for students using the GCE A Level Physics Interactive Guide.

Scope:
1. Only answer questions that fall within the H2 Physics syllabus.
2. If a question is outside the syllabus, say so briefly and suggest a related physics topic instead.

Grounding:
1. Answer ONLY from the lesson context provided in the user message.
2. Do not invent facts, formulas, values or sources that are not in the context.
3. If the context says no relevant lesson material was found, or it does not cover the question,
   tell the student the notes do not cover it yet instead of guessing.
4. When you use a piece of context, mention the lesson it came from (the [Source: ...] label).

Answer Style:
- Be concise and clear; use short steps for calculations.
- State quantities with SI units and sensible significant figures.
- Wrap mathematical expressions in dollar signs for LaTeX rendering, e.g. $v = \\frac{d}{t}$.""".strip()


def _as_chunk(item: Chunk | ScoredChunk) -> Chunk:
    return item.chunk if isinstance(item, ScoredChunk) else item


def format_context(top_chunks: Sequence[Chunk | ScoredChunk]) -> str:
    """Render chunks as attributed blocks. Chunk text is never truncated."""
    if not top_chunks:
        return NO_CONTEXT_NOTICE
    blocks = []
    for item in top_chunks:
        chunk = _as_chunk(item)
        blocks.append(f"[Source: {chunk.source_label} #{chunk.index}]\n{chunk.text.strip()}")
    return CONTEXT_SEPARATOR.join(blocks)


def build_user_prompt(query: str, top_chunks: Sequence[Chunk | ScoredChunk]) -> str:
    """
    Compile the user prompt from the retrieved context and the question.

    Args:
        query: The student's latest message, passed through verbatim
        top_chunks: Retrieved chunks, highest score first; may be empty

    Returns:
        User prompt string
    """
    return f"""Lesson context:
{format_context(top_chunks)}

Question:
{query}"""
