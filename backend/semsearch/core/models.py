"""Core domain models for semsearch.

These models represent the documents fed into ingestion, the vector records
persisted in a snapshot, and the scored results produced at query time.

All models are immutable (frozen=True) so that records are never partially
mutated once built.
"""
from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from .constants import SNAPSHOT_SCHEMA_VERSION
from .types import DocumentId, Embedding, Metadata, Score

__all__ = [
    'Document',
    'VectorRecord',
    'ScoredResult',
    'Snapshot',
]


# =============================================================================
# Corpus Models
# =============================================================================
class Document(BaseModel):
    """A single corpus entry to be embedded.

    Text is kept verbatim; blank text is rejected by corpus validation at
    ingestion time rather than here, so a whole corpus can be checked and
    reported in one pass.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    id: DocumentId = Field(..., description='Caller-assigned identifier, unique within a corpus')
    text: str = Field(..., description='Document body to embed')
    metadata: Metadata = Field(default_factory=dict, description='Free-form string metadata')


# =============================================================================
# Vector Models
# =============================================================================
class VectorRecord(BaseModel):
    """A document together with its embedding."""

    model_config = ConfigDict(frozen=True)

    id: DocumentId
    text: str
    metadata: Metadata = Field(default_factory=dict)
    embedding: Embedding = Field(..., min_length=1)

    @property
    def dimension(self) -> int:
        """Length of the embedding vector."""
        return len(self.embedding)

    @classmethod
    def from_document(cls, document: Document, embedding: Embedding) -> Self:
        """Build a record from a document and its embedding."""
        return cls(
            id=document.id,
            text=document.text,
            metadata=dict(document.metadata),
            embedding=list(embedding),
        )


class ScoredResult(VectorRecord):
    """A vector record with its similarity to a query. Never persisted."""

    score: Score


# =============================================================================
# Snapshot Models
# =============================================================================
class Snapshot(BaseModel):
    """One complete, self-consistent persisted copy of the vector store."""

    model_config = ConfigDict(frozen=True)

    schema_version: str = Field(default=SNAPSHOT_SCHEMA_VERSION, description='Snapshot format version')
    model: str = Field(..., min_length=1, description='Embedding model that produced the vectors')
    dimension: int = Field(..., ge=1, description='Embedding length shared by every record')
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    records: list[VectorRecord] = Field(..., min_length=1)

    @field_validator('schema_version')
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        """Reject snapshots written by an incompatible format version."""
        if v != SNAPSHOT_SCHEMA_VERSION:
            raise ValueError(f'unsupported schema version {v!r} (expected {SNAPSHOT_SCHEMA_VERSION!r})')
        return v

    @model_validator(mode='after')
    def validate_records(self) -> Self:
        """Ensure ids are unique and every embedding has the declared dimension."""
        duplicates = sorted(i for i, n in Counter(r.id for r in self.records).items() if n > 1)
        if duplicates:
            raise ValueError(f'duplicate record ids: {duplicates}')
        dimensions = sorted({r.dimension for r in self.records})
        if dimensions != [self.dimension]:
            raise ValueError(f'record dimensions {dimensions} do not match declared dimension {self.dimension}')
        return self

    @computed_field
    @property
    def record_count(self) -> int:
        """Number of records in the snapshot."""
        return len(self.records)
