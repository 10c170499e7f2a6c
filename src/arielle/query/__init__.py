"""Question answering over the indexed API.

* :mod:`~arielle.query.conversation` -- bounded conversation history.
* :mod:`~arielle.query.intents` -- single/multi-intent classification and
  decomposition.
* :mod:`~arielle.query.orchestrator` -- retrieval-augmented query and batch
  execution.
* :mod:`~arielle.query.aggregator` -- answer synthesis and failure reports.
* :mod:`~arielle.query.session` -- one user's session tying these together.
"""

from arielle.query.aggregator import aggregate_results, handle_partial_failures
from arielle.query.conversation import ConversationState
from arielle.query.intents import IntentDetector
from arielle.query.orchestrator import RetrievalOrchestrator
from arielle.query.session import QuerySession

__all__ = [
    "ConversationState",
    "IntentDetector",
    "RetrievalOrchestrator",
    "aggregate_results",
    "handle_partial_failures",
    "QuerySession",
]
