"""
Keyword Retriever

Ranks lesson chunks against the student's question by lexical overlap.
There are no embeddings and no index: every request scores the chunk list
it is handed.

How scoring works:
1. The question and each chunk are tokenized into lowercase word tokens,
   with stopwords removed so "what is the" cannot dominate the ranking.
2. Every distinct question token found in a chunk adds 1 + log(1 + tf),
   where tf is how often the token appears in that chunk. Coverage of many
   question words beats repetition of one.
3. Chunks are sorted by score (stable, so ties keep their original order)
   and only chunks with a nonzero score are returned, at most K of them.
"""

import logging
import math
import re
from collections import Counter
from collections.abc import Sequence

from app.services.rag.models import Chunk, ScoredChunk

logger = logging.getLogger(__name__)


TOKEN_PATTERN = re.compile(r"[a-z0-9]+")

STOPWORDS = frozenset(
    """
    a about above after again all also am an and any are as at be because been
    before being below between both but by can could did do does doing down
    during each explain few for from further get give had has have having he her
    here hers him his how i if in into is it its itself just let me more most my
    no nor not now of off on once only or other our out over own please same she
    should so some such tell than that the their them then there these they this
    those through to too under until up us very was we were what when where which
    while who whom why will with would you your
    arent cant didnt doesnt dont heres hows im isnt ive lets thats theres
    wasnt whats whos wont youre
    """.split()
)


def tokenize(text: str) -> list[str]:
    """
    Split text into lowercase word tokens.

    Apostrophes are removed first so "what's" becomes "whats" rather than
    "what" + "s", and the contracted forms ("whats", "dont") are stopwords.
    Single letters are dropped (they are mostly variables in LaTeX snippets);
    single digits are kept.
    """
    normalized = text.lower().replace("'", "").replace("’", "")
    return [
        token
        for token in TOKEN_PATTERN.findall(normalized)
        if token not in STOPWORDS and (len(token) > 1 or token.isdigit())
    ]


def score_chunk(query_terms: set[str], chunk: Chunk) -> float:
    """Score a chunk by how many distinct query terms it contains, tf-damped."""
    counts = Counter(tokenize(chunk.text))
    return sum(1.0 + math.log1p(counts[term]) for term in query_terms if counts[term])


def retrieve_top_chunks(
    query: str,
    chunks: Sequence[Chunk],
    k: int,
) -> list[ScoredChunk]:
    """
    Return the K most relevant chunks for a question, highest score first.

    Args:
        query: The student's latest message
        chunks: Flat collection of chunks across all lessons
        k: Maximum number of chunks to return

    Returns:
        Up to K scored chunks, all with score > 0. May be empty; callers
        must handle fewer than K results.
    """
    if k <= 0 or not chunks:
        return []

    query_terms = set(tokenize(query))
    if not query_terms:
        logger.info("[RAG] Query has no searchable terms: %r", query)
        return []

    scored = [ScoredChunk(chunk=chunk, score=score_chunk(query_terms, chunk)) for chunk in chunks]
    # sorted() is stable, so equal scores keep the original chunk order
    ranked = sorted(
        (item for item in scored if item.score > 0),
        key=lambda item: item.score,
        reverse=True,
    )
    top = ranked[:k]

    logger.info(
        "[RAG] Retrieved %d/%d chunks (k=%d) for terms=%s",
        len(top),
        len(chunks),
        k,
        sorted(query_terms),
    )
    return top
