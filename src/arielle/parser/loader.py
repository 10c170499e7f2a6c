"""Load OpenAPI specifications from a URL or a local file.

This module handles all I/O for fetching raw OpenAPI documents and converting
them into Python objects. Both JSON and YAML are supported:

* **URLs** (``http://`` / ``https://``) are fetched with :mod:`httpx`; the
  response ``content-type`` selects the parser, and an ambiguous type falls
  back to "try JSON, then YAML".
* **Files** are parsed by extension: ``.yaml`` / ``.yml`` as YAML, anything
  else as JSON.

Loading is a single attempt with no retries. Structural checks belong to
:mod:`arielle.parser.validator`; this module only guarantees that the content
was reachable and parseable.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from arielle.exceptions import LoadError
from arielle.output import OutputManager

_FETCH_TIMEOUT = 30.0


def is_url(source: str) -> bool:
    """Return True if *source* looks like an HTTP(S) URL."""
    return source.startswith(("http://", "https://"))


async def load_spec(
    source: str,
    output: OutputManager,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """Load an OpenAPI spec from a URL or file path.

    Args:
        source: An HTTP(S) URL or a filesystem path.
        output: Diagnostics sink.
        client: Optional HTTP client to fetch with. When omitted a
            short-lived :class:`httpx.AsyncClient` is created.

    Returns:
        The parsed document (normally a dict; anything else is left for the
        validator to reject).

    Raises:
        LoadError: If the source cannot be read or fetched, the server
            answers with a non-2xx status, or the content cannot be parsed.
    """
    if is_url(source):
        output.debug(f"Fetching spec from {source}")
        return await _load_from_url(source, client)
    output.debug(f"Reading spec from {source}")
    return await _load_from_file(source)


async def _load_from_url(url: str, client: Optional[httpx.AsyncClient]) -> Any:
    """Fetch spec from URL. Supports JSON and YAML responses."""
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=_FETCH_TIMEOUT, follow_redirects=True) as owned:
                response = await owned.get(url)
        else:
            response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise LoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise LoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


async def _load_from_file(path: str) -> Any:
    """Load spec from a local file, choosing the parser by extension."""
    file_path = Path(path)
    if not file_path.is_file():
        raise LoadError(f"Spec file not found: {path}")

    try:
        content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Failed to read spec file {path}: {exc}") from exc

    if file_path.suffix.lower() in (".yaml", ".yml"):
        return _parse_content(content, hint="yaml")
    return _parse_content(content, hint="json")


def _parse_content(content: str, hint: str = "") -> Any:
    """Parse content as JSON or YAML.

    With an explicit *hint* only that parser is tried. Without one, JSON is
    tried first and YAML second, since valid JSON is also valid YAML but JSON
    parsing is stricter.

    Raises:
        LoadError: If the content cannot be parsed.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise LoadError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        if hint == "yaml":
            raise LoadError(f"Invalid YAML: {exc}") from exc
        yaml_error = exc

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise LoadError(msg)
