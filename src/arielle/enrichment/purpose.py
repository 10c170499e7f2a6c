"""Infer a one-line purpose for an endpoint from REST naming conventions.

The purpose is built from the HTTP verb and the shape of the path alone, so
it exists even for operations that carry no summary or description::

    >>> derive_purpose("GET", "/pets/{id}")
    'Retrieve a specific pet by ID'
    >>> derive_purpose("POST", "/pets")
    'Create all pets'
    >>> derive_purpose("GET", "/users/me")
    'Get me for a specific user'
"""

from __future__ import annotations

from arielle.models import HTTPMethod

_ACTIONS: dict[str, str] = {
    "GET": "Retrieve",
    "POST": "Create",
    "PUT": "Update or replace",
    "PATCH": "Partially update",
    "DELETE": "Remove",
    "HEAD": "Check existence",
    "OPTIONS": "Get supported operations",
}

_DEFAULT_ACTION = "Process"

# Singular nouns that happen to end in "s"
_NOT_PLURAL = frozenset({"status", "settings"})


def derive_purpose(method: HTTPMethod | str, path: str) -> str:
    """Return a short purpose sentence for *method* on *path*.

    The first path segment is taken as the resource. Rules apply in order:

    1. The second segment is a placeholder (``{id}``):
       ``"<action> a specific <resource> by ID"``.
    2. ``GET`` with a second segment: ``"Get <segment> for a specific <resource>"``.
    3. Otherwise ``"<action> [all ]<resource>"``.

    Args:
        method: HTTP verb, any case.
        path: The path template, e.g. ``/pets/{petId}``.
    """
    verb = method.value if isinstance(method, HTTPMethod) else str(method).upper()
    segments = [segment for segment in path.split("/") if segment]

    resource = segments[0] if segments else "resource"
    plural = resource.endswith("s") and resource not in _NOT_PLURAL
    singular = resource[:-1] if plural else resource
    action = _ACTIONS.get(verb, _DEFAULT_ACTION)

    if len(segments) > 1 and segments[1].startswith("{"):
        return f"{action} a specific {singular} by ID"

    if verb == "GET" and len(segments) > 1:
        return f"Get {segments[1]} for a specific {singular}"

    if plural:
        return f"{action} all {singular}s"
    return f"{action} {singular}"
