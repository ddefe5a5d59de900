"""Exception hierarchy for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
"""

from __future__ import annotations as _annotations

# Standard library (alphabetical)
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .types import ErrorCategory, RecoveryStrategy

__all__ = (
    'SemSearchError',
    'InputError',
    'InvalidCorpusError',
    'DuplicateDocumentIDError',
    'InvalidQueryError',
    'SimilarityError',
    'InvalidDimensionError',
    'DegenerateVectorError',
    'ProviderError',
    'ProviderTransientError',
    'ProviderFailureError',
    'BatchSizeMismatchError',
    'DimensionMismatchError',
    'StoreError',
    'StoreNotFoundError',
    'StoreCorruptError',
    'IngestionError',
    'OperationTimeoutError',
    'classify_error',
)


class SemSearchError(Exception):
    """Base exception for all semsearch errors.

    All exceptions in the system inherit from this class, enabling
    catch-all handling at application boundaries such as the CLI.

    Attributes:
        context: Additional context for debugging.
        recoverable: Whether the error can potentially be recovered.
    """

    def __init__(self, message: str, *, context: dict[str, Any] | None = None, recoverable: bool = True) -> None:
        self.context = context or {}
        self.recoverable = recoverable
        super().__init__(message)


# =============================================================================
# Input Exceptions
# =============================================================================
class InputError(SemSearchError):
    """Base exception for caller input errors."""


class InvalidCorpusError(InputError):
    """Raised when a corpus fails validation before ingestion."""

    def __init__(self, message: str, *, document_id: int | None = None, context: dict[str, Any] | None = None) -> None:
        self.document_id = document_id
        ctx = context or {}
        if document_id is not None:
            ctx['document_id'] = document_id
        super().__init__(f'Invalid corpus: {message}', context=ctx, recoverable=False)


class DuplicateDocumentIDError(InvalidCorpusError):
    """Raised when two documents in a corpus share an id."""

    def __init__(self, document_id: int) -> None:
        super().__init__(f'duplicate document id {document_id}', document_id=document_id)


class InvalidQueryError(InputError):
    """Raised when a query string or its parameters are unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(f'Invalid query: {message}', recoverable=False)


# =============================================================================
# Similarity Exceptions
# =============================================================================
class SimilarityError(SemSearchError):
    """Base exception for similarity computation errors."""


class InvalidDimensionError(SimilarityError):
    """Raised when two vectors cannot be compared because of their lengths."""

    def __init__(self, left: int, right: int) -> None:
        self.left = left
        self.right = right
        super().__init__(
            f'Cannot compare vectors of length {left} and {right}',
            context={'left': left, 'right': right},
            recoverable=False,
        )


class DegenerateVectorError(SimilarityError):
    """Raised when a vector has zero norm and similarity is undefined."""

    def __init__(self, message: str = 'Zero-norm vector', *, record_id: int | None = None) -> None:
        self.record_id = record_id
        super().__init__(message, context={'record_id': record_id})


# =============================================================================
# Provider Exceptions
# =============================================================================
class ProviderError(SemSearchError):
    """Base exception for embedding provider errors."""


class ProviderTransientError(ProviderError):
    """Raised for provider failures that may succeed on retry.

    Attributes:
        retry_after: Seconds the provider asked us to wait, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None, retry_after: float | None = None) -> None:
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(message, context={'status_code': status_code, 'retry_after': retry_after})


class ProviderFailureError(ProviderError):
    """Raised for provider failures that must not be retried (auth, quota, bad request)."""

    def __init__(self, message: str, *, status_code: int | None = None, reason: str = 'failure') -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(message, context={'status_code': status_code, 'reason': reason}, recoverable=False)


class BatchSizeMismatchError(ProviderError):
    """Raised when the provider returns a different number of vectors than inputs."""

    def __init__(self, expected: int, received: int) -> None:
        self.expected = expected
        self.received = received
        super().__init__(
            f'Provider returned {received} embeddings for {expected} inputs',
            context={'expected': expected, 'received': received},
            recoverable=False,
        )


class DimensionMismatchError(ProviderError):
    """Raised when an embedding does not have the expected dimension."""

    def __init__(self, expected: int, received: int, *, position: int | None = None) -> None:
        self.expected = expected
        self.received = received
        self.position = position
        super().__init__(
            f'Expected embedding dimension {expected}, got {received}',
            context={'expected': expected, 'received': received, 'position': position},
            recoverable=False,
        )


# =============================================================================
# Store Exceptions
# =============================================================================
class StoreError(SemSearchError):
    """Base exception for snapshot persistence errors."""


class StoreNotFoundError(StoreError):
    """Raised when no snapshot exists at the configured location."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'Vector store not found: {path}', context={'path': path}, recoverable=False)


class StoreCorruptError(StoreError):
    """Raised when a snapshot cannot be parsed or violates its invariants."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f'Vector store {path} is corrupt: {message}', context={'path': path}, recoverable=False)


# =============================================================================
# Pipeline Exceptions
# =============================================================================
class IngestionError(SemSearchError):
    """Raised when a batch fails irrecoverably and the ingestion run is aborted."""

    def __init__(self, batch_index: int, document_ids: Sequence[int], *, cause: Exception | None = None) -> None:
        self.batch_index = batch_index
        self.document_ids = list(document_ids)
        self.cause = cause
        ctx: dict[str, Any] = {'batch_index': batch_index, 'document_ids': self.document_ids}
        detail = ''
        if cause is not None:
            ctx['cause_type'] = type(cause).__name__
            detail = f': {cause}'
        super().__init__(
            f'Ingestion aborted at batch {batch_index} (documents {self.document_ids}){detail}',
            context=ctx,
            recoverable=False,
        )


class OperationTimeoutError(SemSearchError):
    """Raised when an ingestion or query exceeds its timeout."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f'{operation} timed out after {timeout_seconds:.1f}s',
            context={'operation': operation, 'timeout_seconds': timeout_seconds},
        )


def classify_error(exc: Exception) -> tuple[ErrorCategory, RecoveryStrategy]:
    """Classify errors into recovery categories and strategies."""
    if isinstance(exc, ProviderTransientError):
        return 'transient', 'retry'
    if isinstance(exc, DegenerateVectorError):
        return 'recoverable', 'skip'
    if isinstance(exc, SemSearchError):
        return ('recoverable', 'retry') if exc.recoverable else ('fatal', 'abort')
    return 'transient', 'retry'
