"""One user's question-answering session.

:class:`QuerySession` ties the pieces together for each question: record it
in the conversation, detect intents, run them through the
:class:`~arielle.query.orchestrator.RetrievalOrchestrator`, aggregate the
answers and record the reply.
"""

from __future__ import annotations

from arielle.exceptions import ArielleError
from arielle.llm.base import LLMProvider
from arielle.models import BatchQueryResult, ConversationConfig, IntentResult, SessionAnswer
from arielle.output import OutputManager
from arielle.query.aggregator import aggregate_results, handle_partial_failures
from arielle.query.conversation import ConversationState
from arielle.query.intents import IntentDetector
from arielle.query.orchestrator import RetrievalOrchestrator
from arielle.vector.store import VectorStore

ALL_FAILED = "Failed to process any of the intents. Please try again."
ERROR_REPLY = "I encountered an error processing your request."


class QuerySession:
    """Answer questions about the indexed API, keeping conversation history.

    Args:
        provider: Completion and embedding capability.
        store: Vector store holding the endpoint documents.
        output: Diagnostics sink.
        conversation_config: History limits.
        top_k: Documents retrieved per query.
    """

    def __init__(
        self,
        provider: LLMProvider,
        store: VectorStore,
        output: OutputManager,
        conversation_config: ConversationConfig | None = None,
        top_k: int = 5,
    ) -> None:
        settings = conversation_config or ConversationConfig()
        self._store = store
        self._output = output
        self.conversation = ConversationState(settings.max_length)
        self._detector = IntentDetector(provider, output)
        self._orchestrator = RetrievalOrchestrator(
            provider,
            store,
            self.conversation,
            output,
            top_k=top_k,
            history_window=settings.history_window,
        )

    async def _check_collection(self) -> None:
        """Warn when the collection is empty. The count is read fresh every time."""
        count = await self._store.count()
        self._output.debug(f"Collection contains {count} documents")
        if count == 0:
            self._output.warning("Collection is empty. This may affect query results.")

    async def process_query(self, query: str) -> SessionAnswer:
        """Answer *query*.

        Returns:
            The answer text, the intents it was split into, and a separate
            partial-failure report (``None`` when every intent succeeded).

        Raises:
            VectorStoreError: If the store cannot be reached for the count.
            QueryExecutionFailure: If a single-intent question fails.
        """
        self.conversation.append("user", query)
        try:
            return await self._answer(query)
        except ArielleError:
            self.conversation.append("assistant", ERROR_REPLY)
            raise

    async def _answer(self, query: str) -> SessionAnswer:
        await self._check_collection()
        intents = await self._detector.detect_intents(query)

        if len(intents) == 1:
            result = await self._orchestrator.execute_query(intents[0])
            answer = aggregate_results([IntentResult(intent=intents[0], result=result)])
            self.conversation.append("assistant", answer)
            return SessionAnswer(answer=answer, intents=intents)

        self._output.info(f"Processing {len(intents)} intents in parallel...")
        batch = await self._orchestrator.execute_batch(intents)
        successes: list[BatchQueryResult] = [item for item in batch if item.success]
        failures: list[BatchQueryResult] = [item for item in batch if not item.success]

        if not successes:
            self.conversation.append("assistant", ALL_FAILED)
            return SessionAnswer(
                answer=ALL_FAILED,
                intents=intents,
                diagnostics=handle_partial_failures(successes, failures),
            )

        answer = aggregate_results(
            [IntentResult(intent=item.query, result=item.result) for item in batch]
        )
        self.conversation.append("assistant", answer)
        return SessionAnswer(
            answer=answer,
            intents=intents,
            diagnostics=handle_partial_failures(successes, failures),
        )
