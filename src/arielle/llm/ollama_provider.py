"""Self-hosted backend via a local Ollama server (:class:`ollama.AsyncClient`).

No API key is involved; ``llm.base_url`` selects the server (the client's
own default, ``http://localhost:11434``, otherwise).
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import ollama

from arielle.exceptions import ProviderError
from arielle.llm.base import (
    DEFAULT_COMPLETION_MODELS,
    DEFAULT_EMBEDDING_MODELS,
    check_embedding,
    get_embedding_dimensions,
)
from arielle.models import LLMConfig, LLMProviderName
from arielle.output import OutputManager

_SDK_ERRORS = (ollama.ResponseError, ConnectionError, httpx.HTTPError)


class OllamaProvider:
    """:class:`~arielle.llm.base.LLMProvider` backed by an Ollama server."""

    provider_name = LLMProviderName.OLLAMA.value

    def __init__(
        self,
        config: LLMConfig,
        output: OutputManager,
        client: Any = None,
    ) -> None:
        self._config = config
        self._output = output
        self._model = config.model or DEFAULT_COMPLETION_MODELS[LLMProviderName.OLLAMA]
        self._embedding_model = (
            config.embedding_model or DEFAULT_EMBEDDING_MODELS[LLMProviderName.OLLAMA]
        )
        self._dimensions = get_embedding_dimensions(
            self._embedding_model, LLMProviderName.OLLAMA, output
        )
        self._client = client if client is not None else ollama.AsyncClient(host=config.base_url)

    @property
    def model(self) -> str:
        return self._model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def is_configured(self) -> bool:
        return True

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        try:
            response = await self._client.chat(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                options={
                    "temperature": self._config.temperature if temperature is None else temperature,
                    "num_predict": max_tokens or self._config.max_tokens,
                },
            )
        except _SDK_ERRORS as exc:
            raise ProviderError(
                f"Ollama completion failed: {exc}. Make sure Ollama is running (ollama serve)"
            ) from exc
        return (response["message"]["content"] or "").strip()

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embed(model=self._embedding_model, input=text)
        except _SDK_ERRORS as exc:
            raise ProviderError(
                f"Ollama embedding failed: {exc}. Make sure Ollama is running (ollama serve)"
            ) from exc
        embeddings = response["embeddings"]
        if not embeddings:
            raise ProviderError("No embeddings returned from Ollama")
        return check_embedding(self._embedding_model, self._dimensions, list(embeddings[0]))
