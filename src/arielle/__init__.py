"""arielle -- Ask questions about an OpenAPI 3.0 API from the command line.

This package turns an OpenAPI document into a searchable knowledge base and
answers free-text questions about it. A run loads and validates the spec,
normalizes every operation into an endpoint record, derives "what / why"
text for each endpoint, indexes that text in a vector store, and then answers
questions through a retrieval-augmented LLM loop that can split compound
questions into several intents.

Typical workflow::

    arielle start --spec openapi.yaml --chat
    arielle start --spec https://example.com/openapi.json --search "how do I refund a charge"

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr console output with Rich support.
    export: Writes the extraction artifact to disk.
"""

__version__ = "0.3.0"
