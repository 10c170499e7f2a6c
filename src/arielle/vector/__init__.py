"""Vector index: storage capability, indexing, and retrieval helpers.

* :mod:`~arielle.vector.store` -- :class:`VectorStore` protocol and
  :class:`ChromaVectorStore`.
* :mod:`~arielle.vector.indexer` -- batched embed-and-upsert of endpoint
  documents.
* :mod:`~arielle.vector.searcher` -- query embedding, search, and context
  formatting.
"""

from arielle.vector.indexer import IndexReport, index_documents
from arielle.vector.searcher import format_context, search
from arielle.vector.store import ChromaVectorStore, VectorStore

__all__ = [
    "VectorStore",
    "ChromaVectorStore",
    "IndexReport",
    "index_documents",
    "search",
    "format_context",
]
