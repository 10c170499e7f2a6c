"""Look up ``#/components/...`` JSON Reference pointers.

OpenAPI documents use ``$ref`` pointers (e.g.
``{"$ref": "#/components/parameters/Limit"}``) to reuse definitions held in
the ``components`` table. Unlike a full recursive resolver, the helpers here
follow exactly **one** hop: a pointer is looked up in its category and the
entry is returned as-is, even when that entry is itself another reference.
Callers decide what a nested reference means for them (a warning and a
partial object in the processor, a hard failure in the validator).

Only pointers of the shape ``#/components/<category>/<name>`` are handled.
Segments use RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).
"""

from __future__ import annotations

from typing import Any, Optional

COMPONENTS_PREFIX = "#/components/"


def is_reference(obj: Any) -> bool:
    """Return True if *obj* is a ``{"$ref": ...}`` dict."""
    return isinstance(obj, dict) and "$ref" in obj


def _unescape(segment: str) -> str:
    """Undo JSON Pointer escaping in one segment."""
    return segment.replace("~1", "/").replace("~0", "~")


def parse_component_ref(ref: str) -> Optional[tuple[str, str]]:
    """Split a components pointer into ``(category, name)``.

    Args:
        ref: The ``$ref`` string, e.g. ``"#/components/schemas/Pet"``.

    Returns:
        The unescaped category and name, or ``None`` when *ref* is not of
        the shape ``#/components/<category>/<name>``.

    Example::

        >>> parse_component_ref("#/components/schemas/Pet")
        ('schemas', 'Pet')
        >>> parse_component_ref("#/definitions/Pet") is None
        True
    """
    if not isinstance(ref, str) or not ref.startswith(COMPONENTS_PREFIX):
        return None
    parts = ref.split("/")
    if len(parts) != 4 or not parts[2] or not parts[3]:
        return None
    return _unescape(parts[2]), _unescape(parts[3])


def reference_name(ref: str) -> str:
    """Return the last segment of a pointer (``Pet`` for ``#/components/schemas/Pet``)."""
    return _unescape(ref.rsplit("/", 1)[-1])


def lookup_component(
    spec: dict[str, Any],
    ref: str,
    category: Optional[str] = None,
) -> Optional[Any]:
    """Return the ``components`` entry *ref* points to, following one hop only.

    Args:
        spec: The raw spec dictionary.
        ref: The ``$ref`` pointer string.
        category: When given, the pointer must point into this category
            (e.g. ``"parameters"``); a pointer into any other category is
            treated as unresolvable.

    Returns:
        The referenced entry, or ``None`` when the pointer is malformed,
        points elsewhere, or names a missing category or entry.
    """
    parsed = parse_component_ref(ref)
    if parsed is None:
        return None
    ref_category, name = parsed
    if category is not None and ref_category != category:
        return None

    components = spec.get("components")
    if not isinstance(components, dict):
        return None
    entries = components.get(ref_category)
    if not isinstance(entries, dict):
        return None
    return entries.get(name)
