"""Core domain layer for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

from .exceptions import SemSearchError
from .models import Document, ScoredResult, Snapshot, VectorRecord
from .protocols import EmbeddingProvider
from .settings import SemSearchSettings

__all__ = (
    "Document",
    "EmbeddingProvider",
    "ScoredResult",
    "SemSearchError",
    "SemSearchSettings",
    "Snapshot",
    "VectorRecord",
)
