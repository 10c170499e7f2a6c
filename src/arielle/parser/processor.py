"""Normalize every operation of a validated OpenAPI spec.

:func:`process_spec` walks the ``paths`` object in document order and, for each
path item, visits the HTTP methods in :class:`~arielle.models.HTTPMethod`
declaration order. Every operation that is present becomes one
:class:`~arielle.models.NormalizedEndpoint`.

Reference handling is deliberately shallow. A ``$ref`` on a parameter,
request body or response is looked up once in the matching ``components``
category via :func:`~arielle.parser.references.lookup_component`:

* unresolvable parameter references yield a ``unknown``/``query`` placeholder,
* references that point at yet another reference yield a partial object
  (parameters) or ``None`` (request bodies),

and each case is reported as a warning. Nothing here raises for the spec as
a whole: an operation that cannot be normalized is reported and skipped.

Two summary helpers round out the module: :func:`extract_api_info` for the
*Info Object* and :func:`group_by_tag` for the endpoint table.
"""

from __future__ import annotations

from typing import Any, Optional

from arielle.exceptions import ArielleError, OperationProcessingError
from arielle.models import (
    APIInfo,
    EndpointParameter,
    ExternalDocs,
    HTTPMethod,
    NormalizedEndpoint,
    ParameterLocation,
    RequestBodyInfo,
    ResponseInfo,
)
from arielle.output import OutputManager
from arielle.parser.references import is_reference, lookup_component, reference_name

_LOCATIONS = frozenset(loc.value for loc in ParameterLocation)

# Errors that only affect the operation being normalized
_OPERATION_ERRORS = (ArielleError, ValueError, TypeError, AttributeError, KeyError)

UNTAGGED = "untagged"


def process_spec(spec: dict[str, Any], output: OutputManager) -> list[NormalizedEndpoint]:
    """Build one :class:`NormalizedEndpoint` per (path, method) operation.

    Args:
        spec: A spec that passed :func:`~arielle.parser.validator.validate_spec`.
        output: Diagnostics sink for reference warnings and skipped operations.

    Returns:
        The endpoints in document path order, methods in fixed verb order.
    """
    endpoints: list[NormalizedEndpoint] = []

    for path, path_item in spec["paths"].items():
        if not isinstance(path_item, dict):
            continue

        for method in HTTPMethod:
            operation = path_item.get(method.value.lower())
            if operation is None:
                continue
            try:
                endpoints.append(
                    _process_operation(spec, path, method, path_item, operation, output)
                )
            except _OPERATION_ERRORS as exc:
                output.warning(f"Skipping operation {method.value} {path}: {exc}")

    output.debug(f"Processed {len(endpoints)} endpoints")
    return endpoints


def _process_operation(
    spec: dict[str, Any],
    path: str,
    method: HTTPMethod,
    path_item: dict[str, Any],
    operation: Any,
    output: OutputManager,
) -> NormalizedEndpoint:
    """Normalize a single operation.

    Raises:
        OperationProcessingError: If the operation or one of its sections has
            the wrong shape.
    """
    if not isinstance(operation, dict):
        raise OperationProcessingError("operation must be an object")

    where = f"{method.value} {path}"

    # Path-item parameters first, then operation parameters. No deduplication.
    raw_params = _as_list(path_item.get("parameters"), "path-item parameters")
    raw_params += _as_list(operation.get("parameters"), "parameters")
    parameters = [
        param
        for param in (_resolve_parameter(spec, raw, where, output) for raw in raw_params)
        if param is not None
    ]

    tags = operation.get("tags") or []
    if not isinstance(tags, list):
        raise OperationProcessingError("tags must be an array")

    security = operation.get("security") or []
    if not isinstance(security, list):
        raise OperationProcessingError("security must be an array")

    return NormalizedEndpoint(
        path=path,
        method=method,
        operation_id=_as_text(operation.get("operationId")),
        summary=_as_text(operation.get("summary")),
        description=_as_text(operation.get("description")),
        tags=[str(tag) for tag in tags],
        parameters=parameters,
        request_body=_resolve_request_body(spec, operation.get("requestBody"), where, output),
        responses=_resolve_responses(spec, operation.get("responses"), where, output),
        security=security,
        deprecated=bool(operation.get("deprecated", False)),
        external_docs=_extract_external_docs(operation.get("externalDocs")),
    )


# --- Parameters ---


def _resolve_parameter(
    spec: dict[str, Any],
    raw: Any,
    where: str,
    output: OutputManager,
) -> Optional[EndpointParameter]:
    """Resolve one raw parameter (inline or ``$ref``) into an :class:`EndpointParameter`.

    Returns ``None`` for parameters whose ``in`` location is not recognised.
    """
    if not isinstance(raw, dict):
        raise OperationProcessingError("parameter must be an object")

    data = raw
    if is_reference(raw):
        ref = raw["$ref"]
        target = lookup_component(spec, ref, "parameters")
        if not isinstance(target, dict):
            output.warning(f"Parameter reference not found: {ref} ({where})")
            data = {"name": "unknown", "in": "query"}
        elif is_reference(target):
            output.warning(f"Nested parameter references are not fully supported: {ref} ({where})")
            data = {"name": reference_name(ref), "in": "query", **target}
        else:
            data = target

    location = data.get("in")
    if location not in _LOCATIONS:
        output.warning(
            f"Ignoring parameter '{data.get('name')}' with unsupported location '{location}' ({where})"
        )
        return None

    schema = data.get("schema")
    return EndpointParameter(
        name=str(data.get("name", "")),
        location=ParameterLocation(location),
        description=data.get("description") or None,
        required=bool(data.get("required", False)),
        schema_=schema if isinstance(schema, dict) else None,
    )


# --- Request body ---


def _resolve_request_body(
    spec: dict[str, Any],
    raw: Any,
    where: str,
    output: OutputManager,
) -> Optional[RequestBodyInfo]:
    """Resolve an operation's ``requestBody``; unresolvable bodies become ``None``."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise OperationProcessingError("requestBody must be an object")

    body = raw
    if is_reference(raw):
        ref = raw["$ref"]
        target = lookup_component(spec, ref, "requestBodies")
        if not isinstance(target, dict):
            output.warning(f"Request body reference not found: {ref} ({where})")
            return None
        if is_reference(target):
            output.warning(f"Nested request body references are not fully supported: {ref} ({where})")
            return None
        body = target

    content_types, schemas = _read_content(body.get("content"))
    return RequestBodyInfo(
        description=body.get("description") or None,
        required=bool(body.get("required", False)),
        content_types=content_types,
        schemas=schemas,
    )


# --- Responses ---


def _resolve_responses(
    spec: dict[str, Any],
    raw: Any,
    where: str,
    output: OutputManager,
) -> dict[str, ResponseInfo]:
    """Build one :class:`ResponseInfo` per status code key, ``default`` included."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise OperationProcessingError("responses must be an object")

    responses: dict[str, ResponseInfo] = {}
    for status, response in raw.items():
        if is_reference(response):
            ref = response["$ref"]
            target = lookup_component(spec, ref, "responses")
            if not isinstance(target, dict) or is_reference(target):
                output.warning(f"Response reference could not be resolved: {ref} ({where})")
                responses[str(status)] = ResponseInfo()
                continue
            response = target
        if not isinstance(response, dict):
            raise OperationProcessingError(f"response '{status}' must be an object")

        content_types, schemas = _read_content(response.get("content"))
        responses[str(status)] = ResponseInfo(
            description=response.get("description") or None,
            content_types=content_types,
            schemas=schemas,
        )
    return responses


# --- Helpers ---


def _read_content(content: Any) -> tuple[list[str], dict[str, Any]]:
    """Return the media types of a ``content`` map and the schemas they declare."""
    if not isinstance(content, dict):
        return [], {}
    schemas = {
        media_type: media["schema"]
        for media_type, media in content.items()
        if isinstance(media, dict) and isinstance(media.get("schema"), dict)
    }
    return list(content), schemas


def _extract_external_docs(raw: Any) -> Optional[ExternalDocs]:
    if not isinstance(raw, dict) or not isinstance(raw.get("url"), str):
        return None
    return ExternalDocs(url=raw["url"], description=raw.get("description") or None)


def _as_list(value: Any, label: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise OperationProcessingError(f"{label} must be an array")
    return list(value)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


# --- Summaries ---


def extract_api_info(spec: dict[str, Any], endpoint_count: int = 0) -> APIInfo:
    """Extract API metadata from the spec's ``info`` object.

    Reads the title, version, description, terms of service, contact and
    license fields. Missing optional fields default to ``None``.

    Args:
        spec: The validated spec dictionary.
        endpoint_count: Number of normalized endpoints, for display.
    """
    info = spec.get("info", {})
    contact = info.get("contact") or {}
    license_info = info.get("license") or {}

    return APIInfo(
        title=info.get("title", "Untitled API"),
        version=info.get("version", "0.0.0"),
        description=info.get("description"),
        terms_of_service=info.get("termsOfService"),
        contact_name=contact.get("name"),
        contact_email=contact.get("email"),
        contact_url=contact.get("url"),
        license_name=license_info.get("name"),
        license_url=license_info.get("url"),
        endpoint_count=endpoint_count,
    )


def group_by_tag(endpoints: list[NormalizedEndpoint]) -> dict[str, list[NormalizedEndpoint]]:
    """Group endpoints by their first tag, keeping first-seen tag order.

    Endpoints without tags are grouped under ``"untagged"``.
    """
    groups: dict[str, list[NormalizedEndpoint]] = {}
    for endpoint in endpoints:
        tag = endpoint.tags[0] if endpoint.tags else UNTAGGED
        groups.setdefault(tag, []).append(endpoint)
    return groups
