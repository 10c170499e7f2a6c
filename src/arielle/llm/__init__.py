"""LLM backends behind a single completion/embedding capability.

* :mod:`~arielle.llm.base` -- the :class:`LLMProvider` protocol and the
  embedding-model catalogue.
* :mod:`~arielle.llm.factory` -- :func:`create_provider`, keyed on
  :class:`~arielle.models.LLMProviderName`.
* :mod:`~arielle.llm.openai_provider`, :mod:`~arielle.llm.google_provider`,
  :mod:`~arielle.llm.ollama_provider` -- one implementation per backend.
"""

from arielle.llm.base import EMBEDDING_MODELS, LLMProvider, get_embedding_dimensions
from arielle.llm.factory import create_provider

__all__ = ["LLMProvider", "EMBEDDING_MODELS", "get_embedding_dimensions", "create_provider"]
