"""Embed endpoint documents and upsert them into the vector store.

Documents are processed ``batch_size`` at a time: every document in a batch
is embedded and upserted concurrently, and the next batch starts once the
whole batch has settled. A document that fails (embedding error, dimension
mismatch, store error) is reported and skipped; the rest are still indexed.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from arielle.concurrency import map_in_batches
from arielle.exceptions import ArielleError
from arielle.llm.base import LLMProvider
from arielle.models import EmbeddingDocument, ExtractedInfo
from arielle.output import OutputManager
from arielle.vector.store import VectorStore

DEFAULT_BATCH_SIZE = 10


class IndexReport(BaseModel):
    """Outcome of one indexing run."""

    indexed: list[str] = Field(default_factory=list)
    failed: dict[str, str] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.indexed) + len(self.failed)


def build_metadata(document: EmbeddingDocument, info: Optional[ExtractedInfo]) -> dict[str, Any]:
    """Return the flat metadata stored alongside a document.

    Chroma metadata values must be scalars, so tags are comma-joined.
    """
    if info is None:
        return {"id": document.id}
    return {
        "id": document.id,
        "method": info.method.value,
        "path": info.path,
        "operation_id": info.context.get("operationId") or "",
        "tags": ",".join(info.context.get("tags") or []),
        "deprecated": bool(info.context.get("deprecated", False)),
    }


async def index_documents(
    documents: list[EmbeddingDocument],
    extracted: list[ExtractedInfo],
    provider: LLMProvider,
    store: VectorStore,
    output: OutputManager,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> IndexReport:
    """Embed and upsert *documents* in batches of *batch_size*.

    Args:
        documents: Rendered documents to index.
        extracted: The records the documents were rendered from; used for
            metadata, matched by id.
        provider: Embedding capability.
        store: Destination store.
        output: Diagnostics sink.
        batch_size: Maximum number of documents in flight at once.

    Returns:
        Which ids were indexed and why the others failed.
    """
    info_by_id = {info.id: info for info in extracted}
    report = IndexReport()

    async def _index_one(document: EmbeddingDocument) -> tuple[str, Optional[str]]:
        try:
            embedding = await provider.embed(document.content)
            await store.upsert(
                ids=[document.id],
                documents=[document.content],
                metadatas=[build_metadata(document, info_by_id.get(document.id))],
                embeddings=[embedding],
            )
        except ArielleError as exc:
            return document.id, str(exc)
        return document.id, None

    total = len(documents)
    for start in range(0, total, batch_size):
        batch = documents[start : start + batch_size]
        output.progress(f"Indexing documents {start + 1}-{start + len(batch)} of {total}...")
        for doc_id, error in await map_in_batches(_index_one, batch):
            if error is None:
                report.indexed.append(doc_id)
            else:
                output.warning(f"Failed to index {doc_id}: {error}")
                report.failed[doc_id] = error

    return report
