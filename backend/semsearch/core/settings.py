"""Runtime settings for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
from pathlib import Path

# Third-party (alphabetical)
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Local imports (core first, then alphabetical)
from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CONCURRENCY,
    DEFAULT_DIMENSION,
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_SNAPSHOT_PATH,
    DEFAULT_TOP_K,
    MAX_PROVIDER_BATCH_SIZE,
    MAX_RETRIES,
    REQUEST_TIMEOUT_SECONDS,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_DELAY_SECONDS,
)

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("SemSearchSettings",)


# =============================================================================
# Section 11: Classes
# =============================================================================
class SemSearchSettings(BaseSettings):
    """Settings for the embedding client and pipelines.

    Environment variables are prefixed with SEMSEARCH_. The API key is also
    read from OPENAI_API_KEY.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEMSEARCH_",
        env_file=".env",
        extra="ignore",
        validate_default=True,
        populate_by_name=True,
    )

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("SEMSEARCH_API_KEY", "OPENAI_API_KEY"),
        description="Embedding provider API key",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the embeddings API")
    model: str = Field(default=DEFAULT_EMBEDDING_MODEL, min_length=1, description="Embedding model identifier")
    dimension: int = Field(default=DEFAULT_DIMENSION, ge=1, description="Embedding dimension requested and enforced")
    batch_size: int = Field(
        default=MAX_PROVIDER_BATCH_SIZE,
        ge=1,
        le=MAX_PROVIDER_BATCH_SIZE,
        description="Maximum inputs per embeddings request",
    )
    max_retries: int = Field(default=MAX_RETRIES, ge=0, description="Retries for transient provider errors")
    retry_base_delay: float = Field(default=RETRY_BASE_DELAY_SECONDS, ge=0.0, description="First backoff delay (seconds)")
    retry_max_delay: float = Field(default=RETRY_MAX_DELAY_SECONDS, ge=0.0, description="Backoff ceiling (seconds)")
    request_timeout: int = Field(default=REQUEST_TIMEOUT_SECONDS, ge=1, description="HTTP timeout in seconds")
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1, description="Batches in flight during ingestion")
    snapshot_path: Path = Field(default=Path(DEFAULT_SNAPSHOT_PATH), description="Location of the vector snapshot")
    top_k: int = Field(default=DEFAULT_TOP_K, ge=1, description="Default number of query results")
    operation_timeout: float | None = Field(default=None, gt=0.0, description="Abort ingest/query after this many seconds")
