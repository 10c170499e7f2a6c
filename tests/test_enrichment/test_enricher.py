"""Tests for arielle.enrichment.enricher."""

from __future__ import annotations

from arielle.enrichment import enrich_endpoint, enrich_endpoints
from arielle.models import EnrichedEndpoint, HTTPMethod, NormalizedEndpoint
from arielle.parser.processor import process_spec


class TestEnrichEndpoint:
    def test_adds_purpose_and_keeps_fields(self) -> None:
        endpoint = NormalizedEndpoint(
            path="/pets/{petId}",
            method=HTTPMethod.GET,
            operation_id="showPetById",
            summary="Info for a specific pet",
            tags=["pets"],
        )
        enriched = enrich_endpoint(endpoint)

        assert isinstance(enriched, EnrichedEndpoint)
        assert enriched.purpose == "Retrieve a specific pet by ID"
        assert enriched.operation_id == "showPetById"
        assert enriched.tags == ["pets"]

    def test_input_is_not_mutated(self) -> None:
        endpoint = NormalizedEndpoint(path="/pets", method=HTTPMethod.POST)
        enrich_endpoint(endpoint)
        assert not hasattr(endpoint, "purpose")


class TestEnrichEndpoints:
    def test_preserves_order(self, output, petstore_raw) -> None:
        endpoints = process_spec(petstore_raw, output)
        enriched = enrich_endpoints(endpoints)
        assert [e.path for e in enriched] == [e.path for e in endpoints]
        assert [e.purpose for e in enriched] == [
            "Retrieve all pets",
            "Create all pets",
            "Retrieve a specific pet by ID",
            "Remove a specific pet by ID",
            "Get inventory for a specific store",
        ]
