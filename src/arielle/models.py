"""Canonical Pydantic models shared across all arielle modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory
or ``./arielle.json``:
    :class:`LLMProviderName`, :class:`LLMConfig`, :class:`VectorStoreConfig`,
    :class:`ConversationConfig`, and :class:`AppConfig`.

**Normalization models** -- produced by the spec pipeline:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`EndpointParameter`,
    :class:`RequestBodyInfo`, :class:`ResponseInfo`, :class:`ExternalDocs`,
    :class:`NormalizedEndpoint`, :class:`EnrichedEndpoint`, :class:`APIInfo`,
    :class:`ExtractedInfo`, and :class:`EmbeddingDocument`.

**Query models** -- produced by the question-answering loop:
    :class:`ConversationMessage`, :class:`SearchMatch`, :class:`QueryResult`,
    :class:`BatchQueryResult`, :class:`IntentResult`, and :class:`SessionAnswer`.

Records produced by the pipeline are frozen: a later stage derives a new
record instead of mutating an earlier one.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class LLMProviderName(str, enum.Enum):
    """LLM backends that :func:`~arielle.llm.factory.create_provider` can build."""

    OPENAI = "openai"
    GOOGLE = "google"
    OLLAMA = "ollama"


class LLMConfig(BaseModel):
    """Completion and embedding backend settings.

    ``model`` and ``embedding_model`` fall back to per-provider defaults when
    left unset. API keys are never stored here; ``api_key_source`` names where
    to read one from (``env:VAR`` or ``file:/path``), see
    :func:`~arielle.config.resolve_credential`.
    """

    provider: LLMProviderName = LLMProviderName.OPENAI
    model: Optional[str] = None
    embedding_model: Optional[str] = None
    api_key_source: Optional[str] = Field(
        default=None, description="Credential descriptor, e.g. env:OPENAI_API_KEY"
    )
    base_url: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)


class VectorStoreConfig(BaseModel):
    """Connection and retrieval settings for the Chroma server."""

    url: str = Field(default="http://localhost:8000", description="Chroma server URL")
    collection_name: str = "openapi_endpoints"
    top_k: int = Field(default=5, ge=1, le=50)
    batch_size: int = Field(
        default=10, ge=1, description="Documents indexed concurrently per batch"
    )


class ConversationConfig(BaseModel):
    """Limits for the per-session conversation history."""

    max_length: int = Field(default=10, ge=1, description="Messages retained")
    history_window: int = Field(
        default=5, ge=0, description="Recent messages included in each prompt"
    )


class AppConfig(BaseModel):
    """Process-wide configuration, resolved once at startup.

    Built by :func:`~arielle.config.resolve_config` from defaults, the user
    config file, the project file, environment variables and CLI flags, then
    passed down to every component that needs it.
    """

    llm: LLMConfig = Field(default_factory=LLMConfig)
    vector_store: VectorStoreConfig = Field(default_factory=VectorStoreConfig)
    conversation: ConversationConfig = Field(default_factory=ConversationConfig)
    output_dir: Path = Field(default=Path("arielle-output"))
    verbose: bool = False


# --- Normalization ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised on OpenAPI path-item objects.

    Declaration order is the order in which operations on a single path item
    are visited.
    """

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    TRACE = "TRACE"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class EndpointParameter(BaseModel):
    """A single parameter of a normalized endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    description: Optional[str] = None
    required: bool = False
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")


class RequestBodyInfo(BaseModel):
    """Resolved request body of an endpoint.

    ``content_types`` keeps the document order of the ``content`` mapping and
    holds each media type once. ``schemas`` maps a media type to its schema
    for the types that declare one.
    """

    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    required: bool = False
    content_types: list[str] = Field(default_factory=list)
    schemas: dict[str, Any] = Field(default_factory=dict)


class ResponseInfo(BaseModel):
    """Resolved response for a single status code (or ``default``)."""

    model_config = ConfigDict(frozen=True)

    description: Optional[str] = None
    content_types: list[str] = Field(default_factory=list)
    schemas: dict[str, Any] = Field(default_factory=dict)


class ExternalDocs(BaseModel):
    """An OpenAPI *External Documentation Object*."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class NormalizedEndpoint(BaseModel):
    """One operation (a path + HTTP method pair), normalized.

    Parameters hold the path-item-level parameters followed by the
    operation-level ones, without deduplication.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    parameters: list[EndpointParameter] = Field(default_factory=list)
    request_body: Optional[RequestBodyInfo] = None
    responses: dict[str, ResponseInfo] = Field(default_factory=dict)
    security: list[dict[str, Any]] = Field(default_factory=list)
    deprecated: bool = False
    external_docs: Optional[ExternalDocs] = None


class EnrichedEndpoint(NormalizedEndpoint):
    """A :class:`NormalizedEndpoint` plus the purpose sentence inferred from REST conventions."""

    purpose: str


class APIInfo(BaseModel):
    """API metadata extracted from the spec's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None
    endpoint_count: int = 0


class ExtractedInfo(BaseModel):
    """The "what / why / context" view of one endpoint.

    ``context`` always carries ``tags``, ``operationId`` and ``deprecated``;
    ``parameters``, ``requestBody``, ``responses`` and ``security`` are only
    present when the endpoint has them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    method: HTTPMethod
    path: str
    what: list[str] = Field(default_factory=list)
    why: list[str] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)


class EmbeddingDocument(BaseModel):
    """Markdown text for one endpoint, ready to be embedded and indexed."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str


# --- Query ---


class ConversationMessage(BaseModel):
    """One turn of a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class SearchMatch(BaseModel):
    """A single vector-search hit."""

    id: str
    document: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    distance: Optional[float] = None

    @property
    def similarity(self) -> Optional[float]:
        """``1 - distance``, or ``None`` when the store returned no distance."""
        if self.distance is None:
            return None
        return 1.0 - self.distance


class QueryResult(BaseModel):
    """Answer to one retrieval-augmented query."""

    answer: str
    sources: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class BatchQueryResult(BaseModel):
    """Outcome of one sub-query inside a batch.

    Exactly one of ``result`` (on success) or ``error`` (on failure) is set.
    """

    query: str
    success: bool
    result: Optional[QueryResult] = None
    error: Optional[str] = None


class IntentResult(BaseModel):
    """An intent paired with its result; ``result`` is ``None`` when the intent failed."""

    intent: str
    result: Optional[QueryResult] = None


class SessionAnswer(BaseModel):
    """What a query session hands back to the CLI for one user question."""

    answer: str
    intents: list[str] = Field(default_factory=list)
    diagnostics: Optional[str] = None
