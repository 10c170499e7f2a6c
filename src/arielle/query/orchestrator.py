"""Retrieval-augmented query execution.

A single query is: embed the question, fetch the closest endpoint documents,
build a prompt from system framing, the retrieved context, recent
conversation history and the question, then ask the model. A batch runs
several such queries concurrently; each one is isolated, so a failing
sub-query becomes a failed :class:`~arielle.models.BatchQueryResult` in its
own slot and never disturbs its siblings.
"""

from __future__ import annotations

from typing import Optional

from arielle.concurrency import map_in_batches
from arielle.exceptions import ArielleError, QueryExecutionFailure
from arielle.llm.base import LLMProvider
from arielle.models import BatchQueryResult, ConversationMessage, QueryResult
from arielle.output import OutputManager
from arielle.query.conversation import ConversationState
from arielle.vector.searcher import format_context, search
from arielle.vector.store import VectorStore

SYSTEM_PROMPT = (
    "You are a helpful assistant that helps users find and understand API endpoints.\n"
    "Use the following context to answer the user's question. "
    "If you don't know the answer, say so."
)

_NO_CONTEXT = "(no matching endpoints found)"


def build_prompt(
    query: str,
    context: str,
    history: tuple[ConversationMessage, ...] = (),
) -> str:
    """Assemble the completion prompt for one retrieval-augmented query."""
    parts = [SYSTEM_PROMPT, f"Context:\n{context or _NO_CONTEXT}"]
    if history:
        turns = "\n".join(
            f"{'User' if message.role == 'user' else 'Assistant'}: {message.content}"
            for message in history
        )
        parts.append(f"Conversation so far:\n{turns}")
    parts.append(f"Question: {query}\nAnswer:")
    return "\n\n".join(parts)


class RetrievalOrchestrator:
    """Run retrieval-augmented queries against one provider and one store.

    The conversation is only read (its last ``history_window`` messages go
    into each prompt); appending to it is the session's job.

    Args:
        provider: Completion and embedding capability.
        store: Vector store holding the endpoint documents.
        conversation: History owned by the calling session.
        output: Diagnostics sink.
        top_k: Number of documents retrieved per query.
        history_window: Number of recent messages included in each prompt.
    """

    def __init__(
        self,
        provider: LLMProvider,
        store: VectorStore,
        conversation: ConversationState,
        output: OutputManager,
        top_k: int = 5,
        history_window: int = 5,
    ) -> None:
        self._provider = provider
        self._store = store
        self._conversation = conversation
        self._output = output
        self._top_k = top_k
        self._history_window = history_window

    async def execute_query(self, query: str) -> QueryResult:
        """Answer *query* from the indexed endpoints.

        Raises:
            QueryExecutionFailure: If retrieval or completion fails.
        """
        try:
            matches = await search(query, self._provider, self._store, self._top_k)
            self._output.debug(f"Retrieved {len(matches)} document(s) for: {query}")
            prompt = build_prompt(
                query,
                format_context(matches),
                self._conversation.last(self._history_window),
            )
            answer = await self._provider.complete(prompt)
        except ArielleError as exc:
            raise QueryExecutionFailure(f"Query failed: {exc}") from exc
        except Exception as exc:
            raise QueryExecutionFailure(f"Query failed: {type(exc).__name__}: {exc}") from exc

        return QueryResult(
            answer=answer,
            sources=[match.id for match in matches],
            metadata={
                "provider": self._provider.provider_name,
                "model": self._provider.model,
                "matches": len(matches),
            },
        )

    async def _execute_settled(self, query: str) -> BatchQueryResult:
        try:
            result = await self.execute_query(query)
        except Exception as exc:  # one sub-query must not abort the batch
            self._output.debug(f"Sub-query failed: {query!r}: {exc}")
            return BatchQueryResult(query=query, success=False, error=str(exc) or type(exc).__name__)
        return BatchQueryResult(query=query, success=True, result=result)

    async def execute_batch(
        self,
        queries: list[str],
        batch_size: Optional[int] = None,
    ) -> list[BatchQueryResult]:
        """Run *queries* concurrently and return one result per query, in input order.

        Args:
            queries: Sub-queries to answer.
            batch_size: Optional cap on queries in flight at once.
        """
        return await map_in_batches(self._execute_settled, queries, batch_size)
