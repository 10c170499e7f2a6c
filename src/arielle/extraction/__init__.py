"""Endpoint extraction and embedding-text rendering.

* :mod:`~arielle.extraction.extractor` -- "what / why / context" records
  with unique ids.
* :mod:`~arielle.extraction.formatter` -- deterministic Markdown rendering
  of those records for the vector index.
"""

from __future__ import annotations

from arielle.extraction.extractor import extract_endpoint_info, generate_endpoint_id
from arielle.extraction.formatter import format_for_embedding, render_document

__all__ = [
    "extract_endpoint_info",
    "generate_endpoint_id",
    "format_for_embedding",
    "render_document",
]
