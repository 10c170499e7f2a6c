"""Tests for arielle.llm.factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from arielle.llm.factory import create_provider
from arielle.llm.google_provider import GoogleProvider
from arielle.llm.ollama_provider import OllamaProvider
from arielle.llm.openai_provider import OpenAIProvider
from arielle.models import LLMConfig, LLMProviderName


class TestCreateProvider:
    def test_openai_with_env_key(self, output, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        provider = create_provider(LLMConfig(), output)
        assert isinstance(provider, OpenAIProvider)
        assert provider.is_configured()

    def test_openai_without_key_is_unconfigured(self, output, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        provider = create_provider(LLMConfig(), output)
        assert not provider.is_configured()

    def test_custom_key_source(self, output, tmp_path: Path) -> None:
        key_file = tmp_path / "key"
        key_file.write_text("sk-file\n")
        provider = create_provider(LLMConfig(api_key_source=f"file:{key_file}"), output)
        assert provider.is_configured()

    def test_google_without_key(self, output, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        provider = create_provider(LLMConfig(provider=LLMProviderName.GOOGLE), output)
        assert isinstance(provider, GoogleProvider)
        assert not provider.is_configured()

    def test_ollama_needs_no_key(self, output) -> None:
        provider = create_provider(LLMConfig(provider=LLMProviderName.OLLAMA), output)
        assert isinstance(provider, OllamaProvider)
        assert provider.is_configured()

    def test_model_overrides(self, output) -> None:
        provider = create_provider(
            LLMConfig(provider=LLMProviderName.OLLAMA, model="llama3", embedding_model="mxbai"),
            output,
        )
        assert provider.model == "llama3"
        assert provider.embedding_model == "mxbai"
