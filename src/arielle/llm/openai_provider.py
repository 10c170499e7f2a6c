"""OpenAI backend (chat completions and embeddings via :class:`openai.AsyncOpenAI`)."""

from __future__ import annotations

from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from arielle.exceptions import ProviderError
from arielle.llm.base import (
    DEFAULT_COMPLETION_MODELS,
    DEFAULT_EMBEDDING_MODELS,
    check_embedding,
    get_embedding_dimensions,
)
from arielle.models import LLMConfig, LLMProviderName
from arielle.output import OutputManager


class OpenAIProvider:
    """:class:`~arielle.llm.base.LLMProvider` backed by the OpenAI API.

    Args:
        config: LLM settings (model names, sampling defaults, base URL).
        output: Diagnostics sink.
        api_key: Resolved API key. Without one (and without *client*) the
            provider reports itself as not configured.
        client: Pre-built client, mainly for tests.
    """

    provider_name = LLMProviderName.OPENAI.value

    def __init__(
        self,
        config: LLMConfig,
        output: OutputManager,
        api_key: Optional[str] = None,
        client: Any = None,
    ) -> None:
        self._config = config
        self._output = output
        self._model = config.model or DEFAULT_COMPLETION_MODELS[LLMProviderName.OPENAI]
        self._embedding_model = (
            config.embedding_model or DEFAULT_EMBEDDING_MODELS[LLMProviderName.OPENAI]
        )
        self._dimensions = get_embedding_dimensions(
            self._embedding_model, LLMProviderName.OPENAI, output
        )
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def is_configured(self) -> bool:
        return self._client is not None

    def _require_client(self) -> Any:
        if self._client is None:
            raise ProviderError(
                "OpenAI provider is not configured: set OPENAI_API_KEY or llm.api_key_source"
            )
        return self._client

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        client = self._require_client()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self._config.temperature if temperature is None else temperature,
                max_tokens=max_tokens or self._config.max_tokens,
            )
        except OpenAIError as exc:
            raise ProviderError(f"OpenAI completion failed: {exc}") from exc
        return (response.choices[0].message.content or "").strip()

    async def embed(self, text: str) -> list[float]:
        client = self._require_client()
        try:
            response = await client.embeddings.create(model=self._embedding_model, input=text)
        except OpenAIError as exc:
            raise ProviderError(f"OpenAI embedding failed: {exc}") from exc
        return check_embedding(
            self._embedding_model, self._dimensions, list(response.data[0].embedding)
        )
