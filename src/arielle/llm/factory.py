"""Build the configured :class:`~arielle.llm.base.LLMProvider`."""

from __future__ import annotations

from typing import Optional

from arielle.config import resolve_credential
from arielle.exceptions import ConfigError, ProviderError
from arielle.llm.base import LLMProvider
from arielle.models import LLMConfig, LLMProviderName
from arielle.output import OutputManager

DEFAULT_KEY_SOURCES: dict[LLMProviderName, str] = {
    LLMProviderName.OPENAI: "env:OPENAI_API_KEY",
    LLMProviderName.GOOGLE: "env:GOOGLE_API_KEY",
}


def _resolve_api_key(config: LLMConfig, output: OutputManager) -> Optional[str]:
    """Resolve the API key for *config*, or ``None`` when it is unavailable.

    A missing key is not an error here: the provider reports itself as not
    configured and the caller decides what to do about it.
    """
    source = config.api_key_source or DEFAULT_KEY_SOURCES.get(config.provider)
    if source is None:
        return None
    try:
        return resolve_credential(source)
    except ConfigError as exc:
        output.debug(f"No API key for {config.provider.value}: {exc}")
        return None


def create_provider(config: LLMConfig, output: OutputManager) -> LLMProvider:
    """Create the provider selected by ``config.provider``.

    SDK modules are imported lazily so that only the selected backend's
    package is loaded.

    Raises:
        ProviderError: If the provider name is not supported.
    """
    if config.provider == LLMProviderName.OPENAI:
        from arielle.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(config, output, api_key=_resolve_api_key(config, output))

    if config.provider == LLMProviderName.GOOGLE:
        from arielle.llm.google_provider import GoogleProvider

        return GoogleProvider(config, output, api_key=_resolve_api_key(config, output))

    if config.provider == LLMProviderName.OLLAMA:
        from arielle.llm.ollama_provider import OllamaProvider

        return OllamaProvider(config, output)

    raise ProviderError(f"Unsupported LLM provider: {config.provider}")
