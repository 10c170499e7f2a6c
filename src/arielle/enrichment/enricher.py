"""Derive :class:`~arielle.models.EnrichedEndpoint` records from normalized ones.

Enrichment never mutates its input. Each endpoint is copied into a new
record carrying the purpose sentence from
:func:`~arielle.enrichment.purpose.derive_purpose`.
"""

from __future__ import annotations

from arielle.enrichment.purpose import derive_purpose
from arielle.models import EnrichedEndpoint, NormalizedEndpoint


def enrich_endpoint(endpoint: NormalizedEndpoint) -> EnrichedEndpoint:
    """Return a copy of *endpoint* with its inferred purpose attached."""
    return EnrichedEndpoint(
        **dict(endpoint),
        purpose=derive_purpose(endpoint.method, endpoint.path),
    )


def enrich_endpoints(endpoints: list[NormalizedEndpoint]) -> list[EnrichedEndpoint]:
    """Enrich every endpoint, preserving order."""
    return [enrich_endpoint(endpoint) for endpoint in endpoints]
