"""OpenAPI spec parser -- load, validate, and normalize operations.

This sub-package is the first half of the arielle pipeline: turning a raw
OpenAPI 3.0 document (JSON or YAML, local file or remote URL) into a list of
:class:`~arielle.models.NormalizedEndpoint` records.

Typical usage::

    from arielle.parser import load_spec, validate_spec, process_spec

    raw = await load_spec("https://petstore3.swagger.io/api/v3/openapi.json", output)
    spec = validate_spec(raw, output)
    endpoints = process_spec(spec, output)

Sub-modules:

* :mod:`~arielle.parser.loader` -- I/O layer (URL, file) plus format detection.
* :mod:`~arielle.parser.validator` -- structural, path and reference checks.
* :mod:`~arielle.parser.references` -- one-hop ``#/components/...`` lookups.
* :mod:`~arielle.parser.processor` -- walks the paths and produces the
  normalized endpoints.
"""

from arielle.parser.loader import load_spec
from arielle.parser.processor import extract_api_info, group_by_tag, process_spec
from arielle.parser.validator import validate_spec

__all__ = ["load_spec", "validate_spec", "process_spec", "extract_api_info", "group_by_tag"]
