"""Google Gemini backend (:mod:`google.generativeai`).

The SDK is configured process-wide with :func:`genai.configure`. Completions
use :meth:`GenerativeModel.generate_content_async`; embeddings go through the
synchronous :func:`genai.embed_content`, run in a worker thread.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError

from arielle.exceptions import ProviderError
from arielle.llm.base import (
    DEFAULT_COMPLETION_MODELS,
    DEFAULT_EMBEDDING_MODELS,
    check_embedding,
    get_embedding_dimensions,
)
from arielle.models import LLMConfig, LLMProviderName
from arielle.output import OutputManager

# ValueError: response.text on a blocked or empty candidate
_SDK_ERRORS = (GoogleAPIError, ValueError)


class GoogleProvider:
    """:class:`~arielle.llm.base.LLMProvider` backed by the Gemini API."""

    provider_name = LLMProviderName.GOOGLE.value

    def __init__(
        self,
        config: LLMConfig,
        output: OutputManager,
        api_key: Optional[str] = None,
    ) -> None:
        self._config = config
        self._output = output
        self._model = config.model or DEFAULT_COMPLETION_MODELS[LLMProviderName.GOOGLE]
        self._embedding_model = (
            config.embedding_model or DEFAULT_EMBEDDING_MODELS[LLMProviderName.GOOGLE]
        )
        self._dimensions = get_embedding_dimensions(
            self._embedding_model, LLMProviderName.GOOGLE, output
        )
        self._configured = bool(api_key)
        self._generative_model: Any = None
        if api_key:
            genai.configure(api_key=api_key)
            self._generative_model = genai.GenerativeModel(self._model)

    @property
    def model(self) -> str:
        return self._model

    @property
    def embedding_model(self) -> str:
        return self._embedding_model

    def is_configured(self) -> bool:
        return self._configured

    def _require_configured(self) -> None:
        if not self._configured:
            raise ProviderError(
                "Google provider is not configured: set GOOGLE_API_KEY or llm.api_key_source"
            )

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        self._require_configured()
        generation_config = {
            "temperature": self._config.temperature if temperature is None else temperature,
            "max_output_tokens": max_tokens or self._config.max_tokens,
        }
        try:
            response = await self._generative_model.generate_content_async(
                prompt, generation_config=generation_config
            )
            return response.text.strip()
        except _SDK_ERRORS as exc:
            raise ProviderError(f"Gemini completion failed: {exc}") from exc

    async def embed(self, text: str) -> list[float]:
        self._require_configured()
        try:
            result = await asyncio.to_thread(
                genai.embed_content,
                model=f"models/{self._embedding_model}",
                content=text,
            )
        except _SDK_ERRORS as exc:
            raise ProviderError(f"Gemini embedding failed: {exc}") from exc
        return check_embedding(self._embedding_model, self._dimensions, list(result["embedding"]))
