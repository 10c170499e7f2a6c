"""Exception hierarchy for arielle.

All exceptions inherit from :class:`ArielleError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`arielle.exit_codes`.
The top-level handler in :func:`arielle.app.main` catches ``ArielleError``
and exits with that code, while unexpected exceptions produce a crash log.

Not every error here is fatal. Errors scoped to one unit of work (one
operation, one document, one sub-query) are caught at that unit's boundary
and turned into a skip, a degraded default, or a failure record.

Subclass hierarchy::

    ArielleError (exit 1)
    +-- LoadError                   spec unreachable or unparseable
    +-- ValidationError             structural spec defect
    +-- ReferenceError_             unresolvable ``$ref`` in components
    +-- OperationProcessingError    one operation could not be normalized
    +-- EmbeddingDimensionMismatch  embedding length != model dimensionality
    +-- IntentDetectionFailure      intent classification/decomposition failed
    +-- QueryExecutionFailure       one retrieval-augmented query failed
    +-- ProviderError               LLM backend call failed or misconfigured
    +-- VectorStoreError            vector-store call failed
    +-- ConfigError                 invalid configuration
"""

from arielle.exit_codes import EXIT_GENERIC_FAILURE


class ArielleError(Exception):
    """Base exception for all arielle errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class LoadError(ArielleError):
    """Raised when the spec cannot be read, fetched, or parsed."""


class ValidationError(ArielleError):
    """Raised when the spec is structurally invalid (missing or mistyped required fields)."""


class ReferenceError_(ArielleError):
    """Raised when a ``$ref`` inside ``components`` cannot be resolved.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.

    Args:
        ref: The offending pointer string.
        context: Dotted location of the entry holding the pointer
            (e.g. ``components.schemas.Pet``).
        reason: Why resolution failed.
    """

    def __init__(self, ref: str, context: str, reason: str):
        self.ref = ref
        self.context = context
        super().__init__(f"Invalid reference '{ref}' in {context}: {reason}")


class OperationProcessingError(ArielleError):
    """Raised when a single operation cannot be normalized. The run continues without it."""


class EmbeddingDimensionMismatch(ArielleError):
    """Raised when an embedding's length differs from the model's declared dimensionality."""

    def __init__(self, model: str, expected: int, actual: int):
        self.model = model
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Embedding dimension mismatch for {model}: expected {expected}, got {actual}"
        )


class IntentDetectionFailure(ArielleError):
    """Raised when intent classification or decomposition cannot complete."""


class QueryExecutionFailure(ArielleError):
    """Raised when one retrieval-augmented query fails."""


class ProviderError(ArielleError):
    """Raised when an LLM backend call fails or a provider is not configured."""


class VectorStoreError(ArielleError):
    """Raised when the vector store cannot be reached or rejects a request."""


class ConfigError(ArielleError):
    """Raised for configuration problems (invalid JSON, bad values, unresolvable credentials)."""
