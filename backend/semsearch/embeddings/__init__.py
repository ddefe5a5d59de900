"""Embedding utilities for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# Local imports (core first, then alphabetical)
from .embedder import EmbeddingClient
from .similarity import cosine_similarity
from .store import SnapshotStore, VectorStore

__all__ = (
    "EmbeddingClient",
    "cosine_similarity",
    "SnapshotStore",
    "VectorStore",
)
