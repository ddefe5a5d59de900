"""Query pipeline: rank stored vectors against a query string.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
import asyncio
import heapq
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

# Local imports (core first, then alphabetical)
from ..core.constants import DEFAULT_TOP_K
from ..core.exceptions import (
    DegenerateVectorError,
    DimensionMismatchError,
    InvalidQueryError,
    OperationTimeoutError,
    ProviderFailureError,
    StoreCorruptError,
)
from ..core.models import ScoredResult, VectorRecord
from ..embeddings.similarity import cosine_similarity
from ..embeddings.store import VectorStore
from ..infra.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..embeddings.embedder import EmbeddingClient
    from ..embeddings.store import SnapshotStore

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("QueryPipeline", "QueryResult", "score_records", "select_top_k")

# =============================================================================
# Section 3: Constants
# =============================================================================
logger = get_logger("query")


# =============================================================================
# Section 9: Dataclasses
# =============================================================================
@dataclass(frozen=True, slots=True)
class QueryResult:
    """Ranked answer to a single query."""

    query: str
    results: list[ScoredResult]
    excluded_ids: list[int] = field(default_factory=list)

    @property
    def best(self) -> ScoredResult:
        """Highest-ranked result."""
        return self.results[0]


# =============================================================================
# Section 11: Classes
# =============================================================================
class QueryPipeline:
    """Embed a query and rank every stored record by cosine similarity.

    The snapshot is read fresh on every call and never modified, so any
    number of queries may share it.
    """

    def __init__(
        self,
        client: EmbeddingClient,
        snapshot_store: SnapshotStore,
        *,
        default_top_k: int = DEFAULT_TOP_K,
    ) -> None:
        if default_top_k < 1:
            raise ValueError("default_top_k must be >= 1")
        self.client = client
        self.snapshot_store = snapshot_store
        self.default_top_k = default_top_k

    async def run(self, query: str, top_k: int | None = None, *, timeout: float | None = None) -> QueryResult:
        """Return the top-k records for ``query``.

        Args:
            query: Free-text query.
            top_k: Number of results; clamped to the number of scorable records.
            timeout: Abort after this many seconds.

        Returns:
            Results by descending score, ties broken by ascending id.

        Raises:
            InvalidQueryError: If the query is blank or ``top_k < 1``.
            StoreNotFoundError: If no snapshot exists.
            StoreCorruptError: If the snapshot is unreadable, inconsistent or has no scorable record.
            DimensionMismatchError: If the query embedding does not match the store.
            ProviderFailureError: If the query embedding has zero norm.
            OperationTimeoutError: If ``timeout`` elapses.
        """
        if not query or not query.strip():
            raise InvalidQueryError("query text is empty")
        k = self.default_top_k if top_k is None else top_k
        if k < 1:
            raise InvalidQueryError(f"top_k must be >= 1, got {k}")

        with logger.span("query.run", query=query[:100], top_k=k):
            try:
                return await asyncio.wait_for(self._run(query, k), timeout)
            except TimeoutError as exc:
                raise OperationTimeoutError("query", timeout or 0.0) from exc

    async def _run(self, query: str, k: int) -> QueryResult:
        snapshot = self.snapshot_store.load()
        store = VectorStore.from_snapshot(snapshot)

        query_embedding = await self.client.embed_one(query)
        if len(query_embedding) != store.dimension:
            raise DimensionMismatchError(store.dimension or 0, len(query_embedding))
        if not any(query_embedding):
            raise ProviderFailureError("Provider returned a zero-norm query embedding", reason="degenerate_query")

        scored, excluded = score_records(query_embedding, store)
        if not scored:
            raise StoreCorruptError(str(self.snapshot_store.path), "no record has a usable embedding")

        results = select_top_k(scored, k)
        logger.info("query_ranked", candidates=len(scored), returned=len(results), excluded=len(excluded))
        return QueryResult(query=query, results=results, excluded_ids=excluded)


# =============================================================================
# Section 12: Functions
# =============================================================================
def score_records(
    query_embedding: Sequence[float],
    records: Iterable[VectorRecord],
) -> tuple[list[ScoredResult], list[int]]:
    """Score each record against the query.

    Records with a zero-norm embedding are left out and their ids returned
    separately.
    """
    scored: list[ScoredResult] = []
    excluded: list[int] = []
    for record in records:
        try:
            score = cosine_similarity(query_embedding, record.embedding)
        except DegenerateVectorError:
            logger.warning("degenerate_vector_excluded", record_id=record.id)
            excluded.append(record.id)
            continue
        scored.append(ScoredResult(**record.model_dump(), score=score))
    return scored, excluded


def select_top_k(scored: Iterable[ScoredResult], k: int) -> list[ScoredResult]:
    """Pick the ``k`` best results in ``O(n log k)``.

    Ordered by descending score, then ascending id.
    """
    return heapq.nsmallest(k, scored, key=lambda result: (-result.score, result.id))
