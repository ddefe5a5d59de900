"""semsearch package initialization.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Local imports (core first, then alphabetical)
from ._version import __version__
from .core.models import Document, ScoredResult, Snapshot, VectorRecord
from .embeddings.embedder import EmbeddingClient
from .embeddings.store import SnapshotStore
from .pipelines.ingest import IngestionPipeline
from .pipelines.query import QueryPipeline

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = (
    "__version__",
    "Document",
    "EmbeddingClient",
    "IngestionPipeline",
    "QueryPipeline",
    "ScoredResult",
    "Snapshot",
    "SnapshotStore",
    "VectorRecord",
)
