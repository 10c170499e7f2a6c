"""Shared test fixtures for arielle.

Provides spec fixtures, an isolated config environment, a plain-text output
manager, and in-memory stand-ins for the LLM and vector-store capabilities.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from arielle.exceptions import ProviderError, VectorStoreError
from arielle.models import SearchMatch
from arielle.output import OutputFormat, OutputManager


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Capability fakes
# ---------------------------------------------------------------------------


class FakeProvider:
    """In-memory :class:`~arielle.llm.base.LLMProvider`.

    Completions come from *responder* when given, otherwise from *responses*
    in order (an exception instance in the list is raised instead of
    returned), otherwise a fixed answer. Embeddings are deterministic
    vectors of length *dimensions*; texts listed in *embed_failures* raise
    :class:`ProviderError`.
    """

    provider_name = "fake"
    model = "fake-model"
    embedding_model = "fake-embedding"

    def __init__(
        self,
        responses: Optional[list[Any]] = None,
        responder: Optional[Callable[[str], str]] = None,
        dimensions: int = 4,
        embed_failures: Optional[set[str]] = None,
        configured: bool = True,
    ) -> None:
        self.responses = list(responses or [])
        self.responder = responder
        self.dimensions = dimensions
        self.embed_failures = embed_failures or set()
        self.configured = configured
        self.prompts: list[str] = []
        self.calls: list[dict[str, Any]] = []
        self.embedded: list[str] = []

    def is_configured(self) -> bool:
        return self.configured

    async def complete(
        self,
        prompt: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.prompts.append(prompt)
        self.calls.append({"temperature": temperature, "max_tokens": max_tokens})
        if self.responder is not None:
            return self.responder(prompt)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        return "fake answer"

    async def embed(self, text: str) -> list[float]:
        self.embedded.append(text)
        if text in self.embed_failures:
            raise ProviderError(f"embedding failed for {text!r}")
        return [float(len(text) % 10)] + [0.5] * (self.dimensions - 1)


class FakeStore:
    """In-memory :class:`~arielle.vector.store.VectorStore`.

    Queries return stored documents in insertion order with a fixed
    distance. Ids listed in *fail_ids* make :meth:`upsert` raise.
    """

    def __init__(self, fail_ids: Optional[set[str]] = None, distance: float = 0.25) -> None:
        self.records: dict[str, dict[str, Any]] = {}
        self.fail_ids = fail_ids or set()
        self.distance = distance
        self.queries: list[tuple[list[float], int]] = []
        self.count_calls = 0

    async def upsert(
        self,
        ids: list[str],
        documents: list[str],
        metadatas: list[dict[str, Any]],
        embeddings: list[list[float]],
    ) -> None:
        for doc_id, document, metadata, embedding in zip(ids, documents, metadatas, embeddings):
            if doc_id in self.fail_ids:
                raise VectorStoreError(f"upsert rejected {doc_id}")
            self.records[doc_id] = {
                "document": document,
                "metadata": metadata,
                "embedding": embedding,
            }

    async def query(
        self,
        embedding: list[float],
        n_results: int,
        where: Optional[dict[str, Any]] = None,
    ) -> list[SearchMatch]:
        self.queries.append((embedding, n_results))
        return [
            SearchMatch(
                id=doc_id,
                document=record["document"],
                metadata=record["metadata"],
                distance=self.distance,
            )
            for doc_id, record in list(self.records.items())[:n_results]
        ]

    async def count(self) -> int:
        self.count_calls += 1
        return len(self.records)

    async def delete(self, where: Optional[dict[str, Any]] = None) -> int:
        deleted = len(self.records)
        self.records.clear()
        return deleted


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore spec dict."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def minimal_spec() -> dict[str, Any]:
    """The smallest spec that makes it through the whole pipeline."""
    return {
        "openapi": "3.0.0",
        "info": {"title": "T", "version": "1"},
        "paths": {"/a": {"get": {"responses": {"200": {"description": "ok"}}}}},
    }


@pytest.fixture
def petstore_file(tmp_path: Path) -> Path:
    """A copy of the petstore spec inside tmp_path."""
    spec_path = tmp_path / "petstore.json"
    spec_path.write_text((FIXTURES_DIR / "petstore.json").read_text())
    return spec_path


# ---------------------------------------------------------------------------
# Capability fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all ARIELLE_* / CHROMA_* environment variables and
    changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "ARIELLE_PROVIDER",
        "ARIELLE_MODEL",
        "ARIELLE_EMBEDDING_MODEL",
        "ARIELLE_OUTPUT_DIR",
        "CHROMA_SERVER_URL",
        "CHROMA_COLLECTION_NAME",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def output() -> OutputManager:
    """Plain, colourless output so diagnostics land verbatim in capsys."""
    return OutputManager(format=OutputFormat.PLAIN, no_color=True)


@pytest.fixture
def verbose_output() -> OutputManager:
    return OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
