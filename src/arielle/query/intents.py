"""Split a free-text question into atomic intents.

Detection is two completion calls at most:

1. **Classification** -- does the question hold more than one actionable
   intent? The model answers ``true`` or ``false``.
2. **Decomposition** -- only for multi-intent questions. The model lists
   each intent on its own line prefixed with ``- ``.

Both steps degrade instead of failing: any error during classification
means "single intent", and a decomposition that fails or
yields no usable lines falls back to the original question. The result is
never empty.
"""

from __future__ import annotations

from arielle.exceptions import IntentDetectionFailure
from arielle.llm.base import LLMProvider
from arielle.output import OutputManager

_CLASSIFY_PROMPT = """Analyze if this query contains multiple distinct intents that should be processed separately.
Respond with "true" if it contains multiple intents, "false" otherwise.

Examples:
- "create a customer and charge them" -> true
- "how do I create a customer" -> false
- "set up a payment and send receipt" -> true
- "what's the status of my order" -> false

Query: "{query}"
Answer:"""

_DECOMPOSE_PROMPT = """Break down the following query into individual intents.
Return each intent on a new line, prefixed with "- ".

For "create a customer and charge them", return:
- create a customer
- charge them

Query: "{query}"
"""

_BULLET = "- "


def parse_intent_lines(text: str) -> list[str]:
    """Return the non-empty ``- `` prefixed lines of *text*, prefix removed."""
    intents: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith(_BULLET):
            intent = line[len(_BULLET):].strip()
            if intent:
                intents.append(intent)
    return intents


class IntentDetector:
    """Classify and decompose questions with an LLM.

    Args:
        provider: Completion capability.
        output: Diagnostics sink.
    """

    def __init__(self, provider: LLMProvider, output: OutputManager) -> None:
        self._provider = provider
        self._output = output

    async def is_multi_intent(self, query: str) -> bool:
        """Ask the model whether *query* holds several intents.

        Raises:
            IntentDetectionFailure: If the completion call raises anything.
        """
        try:
            answer = await self._provider.complete(
                _CLASSIFY_PROMPT.format(query=query), temperature=0.1, max_tokens=10
            )
        except Exception as exc:
            raise IntentDetectionFailure(f"Intent classification failed: {exc}") from exc
        return answer.strip().lower().startswith("true")

    async def decompose(self, query: str) -> list[str]:
        """Ask the model to list the intents of *query*.

        Raises:
            IntentDetectionFailure: If the completion call raises anything.
        """
        try:
            answer = await self._provider.complete(
                _DECOMPOSE_PROMPT.format(query=query), temperature=0.3, max_tokens=200
            )
        except Exception as exc:
            raise IntentDetectionFailure(f"Intent decomposition failed: {exc}") from exc
        return parse_intent_lines(answer)

    async def detect_intents(self, query: str) -> list[str]:
        """Return the intents of *query*, in the order the model listed them.

        Always returns at least one element; ``[query]`` on any failure.
        """
        try:
            if not await self.is_multi_intent(query):
                return [query]
            intents = await self.decompose(query)
        except IntentDetectionFailure as exc:
            self._output.warning(f"{exc}; treating the question as a single intent")
            return [query]

        if not intents:
            self._output.debug("Decomposition returned no intents; using the original question")
            return [query]
        self._output.debug(f"Detected {len(intents)} intents: {intents}")
        return intents
