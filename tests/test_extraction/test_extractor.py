"""Tests for arielle.extraction.extractor."""

from __future__ import annotations

import pytest

from arielle.enrichment import enrich_endpoints
from arielle.extraction.extractor import (
    extract_endpoint_info,
    extract_one,
    generate_endpoint_id,
    split_paragraphs,
)
from arielle.models import (
    EndpointParameter,
    ExternalDocs,
    HTTPMethod,
    NormalizedEndpoint,
    RequestBodyInfo,
    ResponseInfo,
)
from arielle.parser.processor import process_spec


@pytest.fixture
def petstore_extracted(output, petstore_raw):
    return {
        info.id: info
        for info in extract_endpoint_info(enrich_endpoints(process_spec(petstore_raw, output)), output)
    }


class TestGenerateEndpointId:
    def test_prefers_operation_id(self) -> None:
        endpoint = NormalizedEndpoint(path="/pets", method=HTTPMethod.GET, operation_id="listPets")
        assert generate_endpoint_id(endpoint) == "listPets"

    @pytest.mark.parametrize(
        "method, path, expected",
        [
            (HTTPMethod.GET, "/a", "get-a"),
            (HTTPMethod.GET, "/pets/{petId}", "get-pets-petId"),
            (HTTPMethod.DELETE, "/users/{userId}/pets/{petId}", "delete-users-userId-pets-petId"),
            (HTTPMethod.GET, "/", "get-"),
        ],
    )
    def test_slug(self, method: HTTPMethod, path: str, expected: str) -> None:
        assert generate_endpoint_id(NormalizedEndpoint(path=path, method=method)) == expected


class TestSplitParagraphs:
    def test_splits_on_blank_lines(self) -> None:
        assert split_paragraphs("  One.\n\n\n\nTwo\n\n  ") == ["One.", "Two"]

    def test_empty(self) -> None:
        assert split_paragraphs("") == []


class TestWhat:
    def test_line_order(self) -> None:
        endpoint = NormalizedEndpoint(
            path="/pets/{petId}",
            method=HTTPMethod.PUT,
            summary="Update a pet",
            description="Replaces the pet.\n\nIdempotent",
            parameters=[
                EndpointParameter(name="petId", location="path", description="Pet id"),
                EndpointParameter(name="quiet", location="query"),
            ],
            request_body=RequestBodyInfo(description="The new pet"),
            responses={
                "200": ResponseInfo(description="Updated"),
                "400": ResponseInfo(),
            },
        )
        assert extract_one(endpoint).what == [
            "**Summary**: Update a pet",
            "**Description**: Replaces the pet.",
            "**Purpose**: Update or replace a specific pet by ID",
            "petId (path): Pet id",
            "Request Body: The new pet",
            "Response (200): Updated",
        ]

    def test_purpose_always_present(self) -> None:
        what = extract_one(NormalizedEndpoint(path="/a", method=HTTPMethod.GET)).what
        assert what == ["**Purpose**: Retrieve a"]


class TestWhy:
    def test_remaining_paragraphs_get_periods(self, petstore_extracted) -> None:
        assert petstore_extracted["listPets"].why == ["Results are paginated."]

    def test_external_docs(self) -> None:
        endpoint = NormalizedEndpoint(
            path="/a",
            method=HTTPMethod.GET,
            description="First.\n\nSecond.",
            external_docs=ExternalDocs(url="https://docs.example.com", description="Guide"),
        )
        assert extract_one(endpoint).why == [
            "Second.",
            "External Documentation: https://docs.example.com - Guide",
        ]

    def test_external_docs_without_description(self) -> None:
        endpoint = NormalizedEndpoint(
            path="/a", method=HTTPMethod.GET, external_docs=ExternalDocs(url="https://x.io")
        )
        assert extract_one(endpoint).why == ["External Documentation: https://x.io"]


class TestContext:
    def test_baseline_keys(self) -> None:
        context = extract_one(NormalizedEndpoint(path="/a", method=HTTPMethod.GET)).context
        assert context == {"tags": [], "operationId": "", "deprecated": False}

    def test_parameters_use_openapi_names(self, petstore_extracted) -> None:
        assert petstore_extracted["listPets"].context["parameters"] == [
            {
                "name": "limit",
                "in": "query",
                "description": "How many items to return",
                "required": False,
                "schema": {"type": "integer", "format": "int32"},
            }
        ]

    def test_request_body_and_security(self, petstore_extracted) -> None:
        context = petstore_extracted["createPet"].context
        assert context["requestBody"] == {
            "required": True,
            "description": "Pet to add",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}},
        }
        assert context["security"] == [{"apiKey": []}]

    def test_responses(self, petstore_extracted) -> None:
        responses = petstore_extracted["deletePet"].context["responses"]
        assert responses == {"204": {"description": "Deleted"}}


class TestExtractEndpointInfo:
    def test_ids_follow_operation_ids_and_slugs(self, petstore_extracted) -> None:
        assert list(petstore_extracted) == [
            "listPets",
            "createPet",
            "showPetById",
            "deletePet",
            "get-store-inventory",
        ]

    def test_duplicate_ids_get_suffixes(self, output, capsys) -> None:
        endpoints = [
            NormalizedEndpoint(path="/a", method=HTTPMethod.GET, operation_id="dup"),
            NormalizedEndpoint(path="/b", method=HTTPMethod.GET, operation_id="dup"),
            NormalizedEndpoint(path="/c", method=HTTPMethod.GET, operation_id="dup"),
        ]
        ids = [info.id for info in extract_endpoint_info(endpoints, output)]
        assert ids == ["dup", "dup-2", "dup-3"]
        assert "Duplicate endpoint id 'dup'" in capsys.readouterr().err

    def test_slug_collision(self, output) -> None:
        endpoints = [
            NormalizedEndpoint(path="/a/{b}", method=HTTPMethod.GET),
            NormalizedEndpoint(path="/a/b", method=HTTPMethod.GET),
        ]
        assert [info.id for info in extract_endpoint_info(endpoints, output)] == [
            "get-a-b",
            "get-a-b-2",
        ]
