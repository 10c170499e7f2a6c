"""The vector-store capability and its Chroma implementation.

:class:`VectorStore` is what the indexer and the retrieval code depend on.
:class:`ChromaVectorStore` talks to a Chroma server through
:func:`chromadb.AsyncHttpClient`; it connects lazily on first use and keeps
only the collection handle. Counts and id lists are always fetched fresh,
since other processes may write to the same collection.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

import chromadb
import httpx
from chromadb.errors import ChromaError

from arielle.exceptions import VectorStoreError
from arielle.models import SearchMatch, VectorStoreConfig
from arielle.output import OutputManager

_STORE_ERRORS = (ChromaError, httpx.HTTPError, ConnectionError, ValueError)


@runtime_checkable
class VectorStore(Protocol):
    """Document store with similarity search over precomputed embeddings."""

    async def upsert(
        self,
        ids: list[str],
        documents: list[str],
        metadatas: list[dict[str, Any]],
        embeddings: list[list[float]],
    ) -> None:
        """Insert or replace documents by id."""
        ...

    async def query(
        self,
        embedding: list[float],
        n_results: int,
        where: Optional[dict[str, Any]] = None,
    ) -> list[SearchMatch]:
        """Return up to *n_results* nearest documents, closest first."""
        ...

    async def count(self) -> int:
        """Return the number of documents currently stored."""
        ...

    async def delete(self, where: Optional[dict[str, Any]] = None) -> int:
        """Delete documents matching *where* (all documents when ``None``).

        Returns:
            The number of documents deleted.
        """
        ...


class ChromaVectorStore:
    """:class:`VectorStore` backed by a Chroma server collection.

    Args:
        config: Server URL and collection name.
        output: Diagnostics sink.
        client: Pre-built async Chroma client, mainly for tests.
    """

    def __init__(
        self,
        config: VectorStoreConfig,
        output: OutputManager,
        client: Any = None,
    ) -> None:
        self._config = config
        self._output = output
        self._client = client
        self._collection: Any = None

    async def _get_collection(self) -> Any:
        if self._collection is not None:
            return self._collection
        try:
            if self._client is None:
                url = httpx.URL(self._config.url)
                self._output.debug(f"Connecting to Chroma at {self._config.url}")
                self._client = await chromadb.AsyncHttpClient(
                    host=url.host,
                    port=url.port or (443 if url.scheme == "https" else 8000),
                    ssl=url.scheme == "https",
                )
            self._collection = await self._client.get_or_create_collection(
                name=self._config.collection_name,
                metadata={"hnsw:space": "cosine"},
            )
        except _STORE_ERRORS as exc:
            raise VectorStoreError(
                f"Cannot open collection '{self._config.collection_name}' "
                f"at {self._config.url}: {exc}"
            ) from exc
        return self._collection

    async def upsert(
        self,
        ids: list[str],
        documents: list[str],
        metadatas: list[dict[str, Any]],
        embeddings: list[list[float]],
    ) -> None:
        collection = await self._get_collection()
        try:
            await collection.upsert(
                ids=ids, documents=documents, metadatas=metadatas, embeddings=embeddings
            )
        except _STORE_ERRORS as exc:
            raise VectorStoreError(f"Failed to upsert {len(ids)} document(s): {exc}") from exc

    async def query(
        self,
        embedding: list[float],
        n_results: int,
        where: Optional[dict[str, Any]] = None,
    ) -> list[SearchMatch]:
        collection = await self._get_collection()
        try:
            result = await collection.query(
                query_embeddings=[embedding],
                n_results=n_results,
                where=where,
                include=["documents", "metadatas", "distances"],
            )
        except _STORE_ERRORS as exc:
            raise VectorStoreError(f"Vector query failed: {exc}") from exc
        return _to_matches(result)

    async def count(self) -> int:
        collection = await self._get_collection()
        try:
            return await collection.count()
        except _STORE_ERRORS as exc:
            raise VectorStoreError(f"Failed to count documents: {exc}") from exc

    async def delete(self, where: Optional[dict[str, Any]] = None) -> int:
        collection = await self._get_collection()
        try:
            existing = await collection.get(where=where, include=[])
            ids = list(existing["ids"])
            if ids:
                await collection.delete(ids=ids)
        except _STORE_ERRORS as exc:
            raise VectorStoreError(f"Failed to delete documents: {exc}") from exc
        return len(ids)


def _to_matches(result: Any) -> list[SearchMatch]:
    """Flatten a single-query Chroma result into :class:`SearchMatch` objects."""
    ids = (result.get("ids") or [[]])[0]
    documents = (result.get("documents") or [[]])[0] or []
    metadatas = (result.get("metadatas") or [[]])[0] or []
    distances = (result.get("distances") or [[]])[0] or []

    matches: list[SearchMatch] = []
    for index, doc_id in enumerate(ids):
        document = documents[index] if index < len(documents) else None
        if document is None:
            continue
        matches.append(
            SearchMatch(
                id=doc_id,
                document=document,
                metadata=dict(metadatas[index] or {}) if index < len(metadatas) else {},
                distance=distances[index] if index < len(distances) else None,
            )
        )
    return matches
