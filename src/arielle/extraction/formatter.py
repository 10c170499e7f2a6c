"""Render :class:`~arielle.models.ExtractedInfo` records as Markdown for embedding.

The rendering is deterministic: the same record always produces the same
bytes. Sections are separated by a blank line and appear in this order,
each only when it has content::

    # METHOD /path
    ## What This Endpoint Does
    ## Why This Endpoint Exists
    ## Parameters
    ## Request Body
    ## Responses
    ## Technical Details      (context beyond tags/operationId/deprecated)
"""

from __future__ import annotations

import json
from typing import Any

from arielle.models import EmbeddingDocument, ExtractedInfo

_BASELINE_CONTEXT_KEYS = 3


def format_schema(schema: Any) -> str:
    """Describe a schema in a few words.

    ``type`` (a list of types is joined with ``|``) plus ``format`` when set,
    ``Reference to <Name>`` for a ``$ref``, otherwise a pointer back to the
    spec.
    """
    if not schema:
        return "No schema defined"
    if not isinstance(schema, dict):
        return "Complex schema - see details in OpenAPI spec"

    schema_type = schema.get("type")
    if schema_type:
        type_text = " | ".join(schema_type) if isinstance(schema_type, list) else str(schema_type)
        schema_format = schema.get("format")
        return f"{type_text} ({schema_format})" if schema_format else type_text

    ref = schema.get("$ref")
    if isinstance(ref, str):
        return f"Reference to {ref.rsplit('/', 1)[-1]}"

    return "Complex schema - see details in OpenAPI spec"


def _bullets(heading: str, items: list[str]) -> str:
    return "\n".join([heading, *(f"- {item}" for item in items)])


def _format_parameters(parameters: list[dict[str, Any]]) -> str:
    lines = ["## Parameters"]
    for param in parameters:
        line = f"- **{param.get('name')}** ({param.get('in')})"
        if param.get("required"):
            line += " **[Required]**"
        lines.append(line)
        if param.get("description"):
            lines.append(f"  {param['description']}")
        if param.get("schema"):
            lines.append(f"  Type: {format_schema(param['schema'])}")
    return "\n".join(lines)


def _format_content(content: dict[str, Any], indent: str) -> list[str]:
    lines: list[str] = []
    for media_type, media in content.items():
        lines.append(f"{indent}- {media_type}:")
        if media.get("schema"):
            lines.append(f"{indent}  - Schema: {format_schema(media['schema'])}")
    return lines


def _format_request_body(body: dict[str, Any]) -> str:
    lines = ["## Request Body"]
    if body.get("description"):
        lines.append(f"**Description**: {body['description']}")
    if body.get("required"):
        lines.append("**Required**: yes")
    if body.get("content"):
        lines.append("**Content Types:**")
        lines.extend(_format_content(body["content"], ""))
    return "\n".join(lines)


def _format_responses(responses: dict[str, Any]) -> str:
    lines = ["## Responses"]
    for status, response in responses.items():
        line = f"- **{status}**"
        if response.get("description"):
            line += f": {response['description']}"
        lines.append(line)
        if response.get("content"):
            lines.append("  **Response Content:**")
            lines.extend(_format_content(response["content"], "  "))
    return "\n".join(lines)


def _format_technical_details(context: dict[str, Any]) -> str:
    details: dict[str, Any] = {
        "operationId": context.get("operationId"),
        "tags": context.get("tags"),
        "deprecated": context.get("deprecated"),
    }
    if context.get("security"):
        details["security"] = context["security"]
    return "\n".join(["## Technical Details", "```json", json.dumps(details, indent=2), "```"])


def render_document(info: ExtractedInfo) -> str:
    """Render one record as the Markdown text that gets embedded."""
    context = info.context
    sections = [f"# {info.method.value} {info.path}"]

    if info.what:
        sections.append(_bullets("## What This Endpoint Does", info.what))
    if info.why:
        sections.append(_bullets("## Why This Endpoint Exists", info.why))
    if context.get("parameters"):
        sections.append(_format_parameters(context["parameters"]))
    if context.get("requestBody"):
        sections.append(_format_request_body(context["requestBody"]))
    if context.get("responses"):
        sections.append(_format_responses(context["responses"]))
    if len(context) > _BASELINE_CONTEXT_KEYS:
        sections.append(_format_technical_details(context))

    return "\n\n".join(sections)


def format_for_embedding(extracted: list[ExtractedInfo]) -> list[EmbeddingDocument]:
    """Render every record into an :class:`EmbeddingDocument`, preserving order."""
    return [EmbeddingDocument(id=info.id, content=render_document(info)) for info in extracted]
