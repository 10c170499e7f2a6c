"""The LLM capability and the embedding-model catalogue.

Every backend implements :class:`LLMProvider`: a completion call, an
embedding call, and a way to tell whether it has what it needs (an API key,
usually) to make either. Providers are built by
:func:`~arielle.llm.factory.create_provider`; nothing else in the package
knows which backend is in use.

Embedding vectors are checked against the dimensionality declared for the
model in :data:`EMBEDDING_MODELS`. A vector of the wrong length raises
:class:`~arielle.exceptions.EmbeddingDimensionMismatch` so that the caller
can drop that one document or query.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from arielle.exceptions import EmbeddingDimensionMismatch
from arielle.models import LLMProviderName
from arielle.output import OutputManager


@runtime_checkable
class LLMProvider(Protocol):
    """Completion and embedding capability of one LLM backend."""

    @property
    def provider_name(self) -> str:
        """Short backend name (``openai``, ``google``, ``ollama``)."""
        ...

    @property
    def model(self) -> str:
        """Completion model in use."""
        ...

    @property
    def embedding_model(self) -> str:
        """Embedding model in use."""
        ...

    def is_configured(self) -> bool:
        """Return True when the backend has every setting it needs."""
        ...

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Return the completion text for *prompt*.

        Raises:
            ProviderError: If the backend call fails or the provider is not
                configured.
        """
        ...

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for *text*.

        Raises:
            ProviderError: If the backend call fails or the provider is not
                configured.
            EmbeddingDimensionMismatch: If the vector length differs from the
                model's declared dimensionality.
        """
        ...


# --- Embedding model catalogue ---


class EmbeddingModel(BaseModel):
    """A known embedding model and the vector length it produces."""

    model_config = ConfigDict(frozen=True)

    name: str
    dimensions: int
    provider: LLMProviderName


EMBEDDING_MODELS: dict[str, EmbeddingModel] = {
    model.name: model
    for model in (
        EmbeddingModel(name="text-embedding-3-small", dimensions=1536, provider=LLMProviderName.OPENAI),
        EmbeddingModel(name="text-embedding-3-large", dimensions=3072, provider=LLMProviderName.OPENAI),
        EmbeddingModel(name="text-embedding-004", dimensions=768, provider=LLMProviderName.GOOGLE),
        EmbeddingModel(name="nomic-embed-text", dimensions=768, provider=LLMProviderName.OLLAMA),
    )
}

DEFAULT_EMBEDDING_MODELS: dict[LLMProviderName, str] = {
    LLMProviderName.OPENAI: "text-embedding-3-small",
    LLMProviderName.GOOGLE: "text-embedding-004",
    LLMProviderName.OLLAMA: "nomic-embed-text",
}

DEFAULT_COMPLETION_MODELS: dict[LLMProviderName, str] = {
    LLMProviderName.OPENAI: "gpt-4",
    LLMProviderName.GOOGLE: "gemini-1.5-flash-latest",
    LLMProviderName.OLLAMA: "gpt-oss:20b",
}


def get_embedding_dimensions(
    model_name: str,
    provider: LLMProviderName,
    output: Optional[OutputManager] = None,
) -> int:
    """Return the vector length *model_name* produces.

    Unknown models fall back to the dimensionality of *provider*'s default
    embedding model, with a warning.
    """
    model = EMBEDDING_MODELS.get(model_name)
    if model is not None:
        return model.dimensions

    fallback = EMBEDDING_MODELS[DEFAULT_EMBEDDING_MODELS[provider]]
    if output is not None:
        output.warning(
            f"Unknown embedding model: {model_name}. "
            f"Using default dimensions ({fallback.dimensions})."
        )
    return fallback.dimensions


def check_embedding(model_name: str, expected: int, embedding: list[float]) -> list[float]:
    """Return *embedding* unchanged if its length is *expected*.

    Raises:
        EmbeddingDimensionMismatch: Otherwise.
    """
    if len(embedding) != expected:
        raise EmbeddingDimensionMismatch(model_name, expected, len(embedding))
    return embedding
