"""Similarity search and context assembly for retrieval-augmented prompts.

These are free functions over the two capabilities (an
:class:`~arielle.llm.base.LLMProvider` for the query embedding, a
:class:`~arielle.vector.store.VectorStore` for the search) so any caller can
reuse them without inheriting from anything.
"""

from __future__ import annotations

from arielle.llm.base import LLMProvider
from arielle.models import SearchMatch
from arielle.vector.store import VectorStore


async def search(
    query: str,
    provider: LLMProvider,
    store: VectorStore,
    top_k: int,
) -> list[SearchMatch]:
    """Embed *query* and return the *top_k* closest documents."""
    embedding = await provider.embed(query)
    return await store.query(embedding, n_results=top_k)


def format_match(match: SearchMatch) -> str:
    """Render one match as ``[METHOD path | Similarity: 0.87]`` followed by its text."""
    method = match.metadata.get("method") or "UNKNOWN"
    path = match.metadata.get("path") or ""
    similarity = match.similarity
    score = f"{similarity:.2f}" if similarity is not None else "N/A"
    return f"[{method} {path} | Similarity: {score}]\n{match.document}"


def format_context(matches: list[SearchMatch]) -> str:
    """Join formatted matches with blank lines; empty string when there are none."""
    return "\n\n".join(format_match(match) for match in matches)
