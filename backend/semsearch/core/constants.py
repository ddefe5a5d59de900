"""Module-level constants for semsearch.

All constants are declared with Final type annotation for immutability
and IDE support.
"""
from __future__ import annotations

from typing import Final

# =============================================================================
# Section 1: Module Exports
# =============================================================================
__all__ = [
    # Provider
    'DEFAULT_BASE_URL',
    'DEFAULT_EMBEDDING_MODEL',
    'DEFAULT_DIMENSION',
    'MAX_PROVIDER_BATCH_SIZE',
    'REQUEST_TIMEOUT_SECONDS',
    # Retry
    'MAX_RETRIES',
    'RETRY_BASE_DELAY_SECONDS',
    'RETRY_MAX_DELAY_SECONDS',
    # Pipelines
    'DEFAULT_CONCURRENCY',
    'DEFAULT_TOP_K',
    # Persistence
    'DEFAULT_SNAPSHOT_PATH',
    'SNAPSHOT_SCHEMA_VERSION',
]

# =============================================================================
# Section 2: Provider Constants
# =============================================================================
DEFAULT_BASE_URL: Final[str] = 'https://api.openai.com/v1'
DEFAULT_EMBEDDING_MODEL: Final[str] = 'text-embedding-3-small'
# Native size of text-embedding-3-small; larger models default to 3072
DEFAULT_DIMENSION: Final[int] = 1536
MAX_PROVIDER_BATCH_SIZE: Final[int] = 2048
REQUEST_TIMEOUT_SECONDS: Final[int] = 30

# =============================================================================
# Section 3: Retry Constants
# =============================================================================
MAX_RETRIES: Final[int] = 3
RETRY_BASE_DELAY_SECONDS: Final[float] = 1.0
RETRY_MAX_DELAY_SECONDS: Final[float] = 30.0

# =============================================================================
# Section 4: Pipeline Constants
# =============================================================================
DEFAULT_CONCURRENCY: Final[int] = 1
DEFAULT_TOP_K: Final[int] = 3

# =============================================================================
# Section 5: Persistence Constants
# =============================================================================
DEFAULT_SNAPSHOT_PATH: Final[str] = 'vectors.json'
SNAPSHOT_SCHEMA_VERSION: Final[str] = '1.0.0'
