"""Structural validation of raw OpenAPI documents.

Three checks run in order via :func:`validate_spec`:

1. :func:`validate_structure` -- required top-level fields and their types.
2. :func:`validate_paths` -- every path key starts with ``/``.
3. :func:`validate_references` -- every ``components`` entry that is itself a
   ``$ref`` points to an existing category and name.

Only defects that make the whole document unusable raise. Softer problems
(an OpenAPI version other than 3.0.x, an unused path-level path parameter, a
reference outside ``#/components/``) are reported through the injected
:class:`~arielle.output.OutputManager` and validation continues.
"""

from __future__ import annotations

from typing import Any

from arielle.exceptions import ReferenceError_, ValidationError
from arielle.output import OutputManager
from arielle.parser.references import (
    COMPONENTS_PREFIX,
    is_reference,
    lookup_component,
    parse_component_ref,
)

# Optional top-level fields and the container type each must have when present
_OPTIONAL_CONTAINERS: tuple[tuple[str, type, str], ...] = (
    ("components", dict, "an object"),
    ("servers", list, "an array"),
    ("security", list, "an array"),
    ("tags", list, "an array"),
)


def validate_structure(raw: Any, output: OutputManager) -> dict[str, Any]:
    """Check that *raw* has the shape of an OpenAPI 3 document.

    Args:
        raw: The parsed document as returned by
            :func:`~arielle.parser.loader.load_spec`.
        output: Diagnostics sink for the version warning.

    Returns:
        *raw*, now known to be a dict with valid ``openapi``, ``info`` and
        ``paths`` fields.

    Raises:
        ValidationError: If a required field is missing or has the wrong
            type, or an optional container field has the wrong type.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid OpenAPI spec: must be an object")

    version = raw.get("openapi")
    if not isinstance(version, str):
        raise ValidationError("Invalid OpenAPI spec: missing or invalid openapi version")
    if not version.startswith("3.0."):
        output.warning(
            f"OpenAPI version {version} detected. This tool is tested with OpenAPI 3.0.x"
        )

    info = raw.get("info")
    if not isinstance(info, dict):
        raise ValidationError("Invalid OpenAPI spec: missing or invalid info object")
    if not isinstance(info.get("title"), str):
        raise ValidationError("Invalid OpenAPI spec: missing or invalid info.title")
    if not isinstance(info.get("version"), str):
        raise ValidationError("Invalid OpenAPI spec: missing or invalid info.version")

    if not isinstance(raw.get("paths"), dict):
        raise ValidationError("Invalid OpenAPI spec: missing or invalid paths object")

    for field, expected, label in _OPTIONAL_CONTAINERS:
        value = raw.get(field)
        if value is not None and not isinstance(value, expected):
            raise ValidationError(f"Invalid OpenAPI spec: {field} must be {label}")

    return raw


def validate_paths(spec: dict[str, Any], output: OutputManager) -> None:
    """Check path keys and path-level path parameters.

    Raises:
        ValidationError: If a path does not start with ``/``.
    """
    for path, path_item in spec["paths"].items():
        if not isinstance(path, str) or not path.startswith("/"):
            raise ValidationError(f"Invalid path '{path}': must start with a forward slash")

        if not isinstance(path_item, dict):
            continue
        parameters = path_item.get("parameters")
        if not isinstance(parameters, list):
            continue

        for param in parameters:
            if is_reference(param):
                param = lookup_component(spec, param["$ref"], "parameters")
            if not isinstance(param, dict) or param.get("in") != "path":
                continue
            name = param.get("name")
            if f"{{{name}}}" not in path:
                output.warning(f"Path parameter '{name}' is defined but not used in path '{path}'")


def validate_references(spec: dict[str, Any], output: OutputManager) -> None:
    """Check every ``components`` entry that is itself a ``$ref``.

    References outside ``#/components/`` are reported and skipped.

    Raises:
        ReferenceError_: If a pointer is malformed or names a category or
            entry that does not exist.
    """
    components = spec.get("components")
    if not components:
        return

    for category, entries in components.items():
        if not isinstance(entries, dict):
            continue
        for name, entry in entries.items():
            if not is_reference(entry) or not isinstance(entry["$ref"], str):
                continue
            _check_component_ref(entry["$ref"], f"components.{category}.{name}", components, output)


def _check_component_ref(
    ref: str,
    context: str,
    components: dict[str, Any],
    output: OutputManager,
) -> None:
    """Verify that *ref* resolves to an existing component."""
    if not ref.startswith(COMPONENTS_PREFIX):
        output.warning(
            f"External reference '{ref}' found in {context}. "
            "External references are not fully supported."
        )
        return

    parsed = parse_component_ref(ref)
    if parsed is None:
        raise ReferenceError_(ref, context, "malformed reference")

    category, name = parsed
    entries = components.get(category)
    if not isinstance(entries, dict):
        raise ReferenceError_(ref, context, f"component type '{category}' not found")
    if name not in entries:
        raise ReferenceError_(ref, context, f"component '{name}' not found in {category}")


def validate_spec(raw: Any, output: OutputManager) -> dict[str, Any]:
    """Run structure, path and reference validation in that order.

    Returns:
        The validated spec dictionary.
    """
    spec = validate_structure(raw, output)
    validate_paths(spec, output)
    validate_references(spec, output)
    return spec
