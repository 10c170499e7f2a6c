"""The spec-to-documents pipeline: load, validate, normalize, enrich, extract, render.

:func:`run_pipeline` is what the ``start`` command runs before anything
touches the LLM or the vector store. Every stage reports through the same
injected :class:`~arielle.output.OutputManager`.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import BaseModel

from arielle.enrichment import enrich_endpoints
from arielle.extraction import extract_endpoint_info, format_for_embedding
from arielle.models import APIInfo, EmbeddingDocument, EnrichedEndpoint, ExtractedInfo
from arielle.output import OutputManager
from arielle.parser import extract_api_info, load_spec, process_spec, validate_spec


class PipelineResult(BaseModel):
    """Everything the pipeline produced for one spec."""

    api_info: APIInfo
    endpoints: list[EnrichedEndpoint]
    extracted: list[ExtractedInfo]
    documents: list[EmbeddingDocument]


async def run_pipeline(
    source: str,
    output: OutputManager,
    client: Optional[httpx.AsyncClient] = None,
) -> PipelineResult:
    """Turn the spec at *source* into embedding documents.

    Args:
        source: Spec file path or HTTP(S) URL.
        output: Diagnostics sink shared by every stage.
        client: Optional HTTP client for URL sources.

    Raises:
        LoadError: If the spec cannot be read or parsed.
        ValidationError: If the spec is structurally invalid.
        ReferenceError_: If a component reference cannot be resolved.
    """
    with output.status("Loading OpenAPI specification..."):
        raw = await load_spec(source, output, client)

    spec = validate_spec(raw, output)

    with output.status("Processing OpenAPI specification..."):
        endpoints = enrich_endpoints(process_spec(spec, output))
        extracted = extract_endpoint_info(endpoints, output)
        documents = format_for_embedding(extracted)

    return PipelineResult(
        api_info=extract_api_info(spec, endpoint_count=len(endpoints)),
        endpoints=endpoints,
        extracted=extracted,
        documents=documents,
    )
