"""Build the "what / why / context" view of each endpoint.

:func:`extract_endpoint_info` turns enriched endpoints into
:class:`~arielle.models.ExtractedInfo` records:

* **what** -- in fixed order: ``**Summary**``, the first description
  paragraph, ``**Purpose**``, one line per described parameter, the request
  body description, one line per described response.
* **why** -- the remaining description paragraphs (each ending with a
  period) and the external documentation link.
* **context** -- ``tags``, ``operationId`` and ``deprecated`` always; the
  parameter, request body, response and security details when present, in
  JSON-ready form for rendering and for the extraction artifact.

Ids come from the ``operationId`` when there is one, otherwise from a slug of
method and path. Ids are unique within one call: a repeated id gets a
``-2``, ``-3``, ... suffix and a warning.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from arielle.enrichment.purpose import derive_purpose
from arielle.models import ExtractedInfo, NormalizedEndpoint
from arielle.output import OutputManager

_SLUG_CHARS = re.compile(r"[{}/]")
_DASH_RUNS = re.compile(r"-{2,}")


def generate_endpoint_id(endpoint: NormalizedEndpoint) -> str:
    """Return the endpoint's ``operationId`` or a ``<method>-<path>`` slug.

    Example::

        >>> generate_endpoint_id(NormalizedEndpoint(path="/pets/{petId}", method="GET"))
        'get-pets-petId'
    """
    if endpoint.operation_id:
        return endpoint.operation_id
    slug = _DASH_RUNS.sub("-", _SLUG_CHARS.sub("-", endpoint.path)).strip("-")
    return f"{endpoint.method.value.lower()}-{slug}"


def split_paragraphs(text: str) -> list[str]:
    """Split *text* on blank lines, trimming each paragraph and dropping empty ones."""
    return [paragraph.strip() for paragraph in text.split("\n\n") if paragraph.strip()]


def _with_period(text: str) -> str:
    return text if text.endswith(".") else f"{text}."


def _build_what(endpoint: NormalizedEndpoint, paragraphs: list[str]) -> list[str]:
    what: list[str] = []
    if endpoint.summary:
        what.append(f"**Summary**: {endpoint.summary}")
    if paragraphs:
        what.append(f"**Description**: {paragraphs[0]}")

    purpose = getattr(endpoint, "purpose", None) or derive_purpose(endpoint.method, endpoint.path)
    what.append(f"**Purpose**: {purpose}")

    for param in endpoint.parameters:
        if param.description:
            what.append(f"{param.name} ({param.location.value}): {param.description}")

    if endpoint.request_body is not None and endpoint.request_body.description:
        what.append(f"Request Body: {endpoint.request_body.description}")

    for status, response in endpoint.responses.items():
        if response.description:
            what.append(f"Response ({status}): {response.description}")
    return what


def _build_why(endpoint: NormalizedEndpoint, paragraphs: list[str]) -> list[str]:
    why = [_with_period(paragraph) for paragraph in paragraphs[1:]]
    docs = endpoint.external_docs
    if docs is not None:
        suffix = f" - {docs.description}" if docs.description else ""
        why.append(f"External Documentation: {docs.url}{suffix}")
    return why


def _content_map(content_types: list[str], schemas: dict[str, Any]) -> dict[str, Any]:
    return {
        media_type: ({"schema": schemas[media_type]} if media_type in schemas else {})
        for media_type in content_types
    }


def _build_context(endpoint: NormalizedEndpoint) -> dict[str, Any]:
    context: dict[str, Any] = {
        "tags": list(endpoint.tags),
        "operationId": endpoint.operation_id,
        "deprecated": endpoint.deprecated,
    }

    if endpoint.parameters:
        context["parameters"] = [
            param.model_dump(mode="json", by_alias=True, exclude_none=True)
            for param in endpoint.parameters
        ]

    body = endpoint.request_body
    if body is not None:
        request_body: dict[str, Any] = {"required": body.required}
        if body.description:
            request_body["description"] = body.description
        if body.content_types:
            request_body["content"] = _content_map(body.content_types, body.schemas)
        context["requestBody"] = request_body

    if endpoint.responses:
        responses: dict[str, Any] = {}
        for status, response in endpoint.responses.items():
            entry: dict[str, Any] = {}
            if response.description:
                entry["description"] = response.description
            if response.content_types:
                entry["content"] = _content_map(response.content_types, response.schemas)
            responses[status] = entry
        context["responses"] = responses

    if endpoint.security:
        context["security"] = list(endpoint.security)

    return context


def extract_one(endpoint: NormalizedEndpoint, endpoint_id: Optional[str] = None) -> ExtractedInfo:
    """Extract a single endpoint. *endpoint_id* overrides the generated id."""
    paragraphs = split_paragraphs(endpoint.description)
    return ExtractedInfo(
        id=endpoint_id or generate_endpoint_id(endpoint),
        method=endpoint.method,
        path=endpoint.path,
        what=_build_what(endpoint, paragraphs),
        why=_build_why(endpoint, paragraphs),
        context=_build_context(endpoint),
    )


def extract_endpoint_info(
    endpoints: list[NormalizedEndpoint],
    output: OutputManager,
) -> list[ExtractedInfo]:
    """Extract every endpoint, making ids unique within the returned list.

    Args:
        endpoints: Enriched (or plain normalized) endpoints. The purpose is
            derived on the fly for endpoints that carry none.
        output: Diagnostics sink for id collision warnings.

    Returns:
        One :class:`ExtractedInfo` per endpoint, in input order.
    """
    used: set[str] = set()
    extracted: list[ExtractedInfo] = []

    for endpoint in endpoints:
        base_id = generate_endpoint_id(endpoint)
        endpoint_id = base_id
        suffix = 2
        while endpoint_id in used:
            endpoint_id = f"{base_id}-{suffix}"
            suffix += 1
        if endpoint_id != base_id:
            output.warning(
                f"Duplicate endpoint id '{base_id}' for {endpoint.method.value} "
                f"{endpoint.path}; using '{endpoint_id}'"
            )
        used.add(endpoint_id)
        extracted.append(extract_one(endpoint, endpoint_id))

    return extracted
