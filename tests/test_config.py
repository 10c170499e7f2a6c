"""Tests for arielle.config -- XDG paths, atomic writes, precedence, credentials."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from arielle.config import (
    atomic_write,
    get_config_dir,
    get_data_dir,
    load_project_config,
    load_user_config,
    resolve_config,
    resolve_credential,
)
from arielle.exceptions import ConfigError
from arielle.models import LLMProviderName


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("arielle.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "arielle"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("arielle.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "arielle"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("arielle.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "arielle"
        assert result.is_dir()


class TestXDGPathsFallback:
    """Fallback paths on non-XDG platforms (macOS, Windows)."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("arielle.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".arielle"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("arielle.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".arielle" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        atomic_write(target, '{"a": 1}')
        assert target.read_text(encoding="utf-8") == '{"a": 1}'

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "file.txt", "data")
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]


# ---------------------------------------------------------------------------
# User / project config files
# ---------------------------------------------------------------------------


class TestUserConfig:
    def test_missing_file_is_empty(self, isolated_config: Path) -> None:
        assert load_user_config() == {}

    def test_reads_partial_config(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"llm": {"provider": "ollama", "model": "llama3"}})

        data = load_user_config()
        assert data["llm"]["provider"] == "ollama"
        assert data["llm"]["model"] == "llama3"

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        path = get_config_dir() / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid user config"):
            load_user_config()

    def test_non_object_raises(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", [1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_user_config()


class TestProjectConfig:
    def test_absent_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_reads_cwd_file(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "arielle.json", {"vector_store": {"top_k": 3}})
        assert load_project_config() == {"vector_store": {"top_k": 3}}


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.llm.provider == LLMProviderName.OPENAI
        assert config.llm.temperature == 0.7
        assert config.llm.max_tokens == 1000
        assert config.vector_store.url == "http://localhost:8000"
        assert config.vector_store.collection_name == "openapi_endpoints"
        assert config.vector_store.top_k == 5
        assert config.conversation.max_length == 10
        assert config.output_dir == Path("arielle-output")

    def test_project_overrides_user(self, isolated_config: Path) -> None:
        _write_json(
            get_config_dir() / "config.json",
            {"llm": {"provider": "google", "model": "gemini-pro"}},
        )
        _write_json(isolated_config / "arielle.json", {"llm": {"model": "gemini-flash"}})

        config = resolve_config()
        assert config.llm.provider == LLMProviderName.GOOGLE
        assert config.llm.model == "gemini-flash"

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "arielle.json", {"vector_store": {"url": "http://a:1"}})
        monkeypatch.setenv("CHROMA_SERVER_URL", "http://b:2")
        monkeypatch.setenv("CHROMA_COLLECTION_NAME", "docs")

        config = resolve_config()
        assert config.vector_store.url == "http://b:2"
        assert config.vector_store.collection_name == "docs"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ARIELLE_PROVIDER", "google")
        monkeypatch.setenv("ARIELLE_EMBEDDING_MODEL", "text-embedding-004")

        config = resolve_config(cli_provider="ollama", cli_output_dir="out", cli_verbose=True)
        assert config.llm.provider == LLMProviderName.OLLAMA
        assert config.llm.embedding_model == "text-embedding-004"
        assert config.output_dir == Path("out")
        assert config.verbose is True

    def test_invalid_value_raises_config_error(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(cli_provider="anthropic")

    def test_invalid_project_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "arielle.json").write_text("nope", encoding="utf-8")
        with pytest.raises(ConfigError):
            resolve_config()


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_KEY", "sk-123")
        assert resolve_credential("env:MY_KEY") == "sk-123"

    def test_missing_env_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_KEY", raising=False)
        with pytest.raises(ConfigError, match="MISSING_KEY"):
            resolve_credential("env:MISSING_KEY")

    def test_file_source_is_stripped(self, tmp_path: Path) -> None:
        key_file = tmp_path / "key.txt"
        key_file.write_text("  secret\n")
        assert resolve_credential(f"file:{key_file}") == "secret"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:secret")
