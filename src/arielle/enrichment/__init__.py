"""Endpoint enrichment from REST conventions.

* :mod:`~arielle.enrichment.purpose` -- pure purpose inference from an HTTP
  verb and a path template.
* :mod:`~arielle.enrichment.enricher` -- turns
  :class:`~arielle.models.NormalizedEndpoint` records into
  :class:`~arielle.models.EnrichedEndpoint` records.
"""

from __future__ import annotations

from arielle.enrichment.enricher import enrich_endpoint, enrich_endpoints
from arielle.enrichment.purpose import derive_purpose

__all__ = ["derive_purpose", "enrich_endpoint", "enrich_endpoints"]
