"""Ingestion pipeline: documents to a persisted vector snapshot.

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
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

# Local imports (core first, then alphabetical)
from ..core.constants import DEFAULT_CONCURRENCY
from ..core.exceptions import DuplicateDocumentIDError, IngestionError, InvalidCorpusError, OperationTimeoutError
from ..core.models import Document, VectorRecord
from ..embeddings.store import VectorStore
from ..infra.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.types import ProgressCallback
    from ..embeddings.embedder import EmbeddingClient
    from ..embeddings.store import SnapshotStore

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("IngestionPipeline", "IngestionReport", "partition", "validate_corpus")

# =============================================================================
# Section 3: Constants
# =============================================================================
logger = get_logger("ingest")


# =============================================================================
# Section 9: Dataclasses
# =============================================================================
@dataclass(frozen=True, slots=True)
class IngestionReport:
    """Outcome of a successful ingestion run."""

    snapshot_path: Path
    record_count: int
    batch_count: int
    dimension: int
    model: str


# =============================================================================
# Section 11: Classes
# =============================================================================
class IngestionPipeline:
    """Embed a corpus and persist it as one snapshot.

    Batches are sent sequentially, or with bounded concurrency when
    ``concurrency > 1``. Either way the snapshot lists records in corpus
    order and is written only after every batch has succeeded.
    """

    def __init__(
        self,
        client: EmbeddingClient,
        snapshot_store: SnapshotStore,
        *,
        batch_size: int | None = None,
        concurrency: int = DEFAULT_CONCURRENCY,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        batch_size = client.batch_size if batch_size is None else batch_size
        if not 1 <= batch_size <= client.batch_size:
            raise ValueError(f"batch_size must be between 1 and {client.batch_size}")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.snapshot_store = snapshot_store
        self.batch_size = batch_size
        self.concurrency = concurrency
        self.on_progress = on_progress

    async def run(self, documents: Sequence[Document], *, timeout: float | None = None) -> IngestionReport:
        """Embed ``documents`` and write a new snapshot.

        Args:
            documents: Corpus in the order records should be persisted.
            timeout: Abort the run after this many seconds.

        Returns:
            Summary of the written snapshot.

        Raises:
            InvalidCorpusError: If the corpus is empty or a text is blank.
            DuplicateDocumentIDError: If two documents share an id.
            IngestionError: If a batch fails after retries; nothing is written.
            OperationTimeoutError: If ``timeout`` elapses; nothing is written.
        """
        validate_corpus(documents)
        batches = partition(documents, self.batch_size)

        with logger.span("ingest.run", documents=len(documents), batches=len(batches)):
            try:
                records = await asyncio.wait_for(self._embed_all(batches, len(documents)), timeout)
            except TimeoutError as exc:
                raise OperationTimeoutError("ingestion", timeout or 0.0) from exc

            store = VectorStore(dimension=self.client.dimension)
            store.extend(records)
            path = self.snapshot_store.save(store.to_snapshot(self.client.model))

        return IngestionReport(
            snapshot_path=path,
            record_count=len(store),
            batch_count=len(batches),
            dimension=self.client.dimension,
            model=self.client.model,
        )

    async def _embed_all(self, batches: list[list[Document]], total: int) -> list[VectorRecord]:
        slots: list[list[VectorRecord] | None] = [None] * len(batches)
        semaphore = asyncio.Semaphore(self.concurrency)
        embedded = 0

        async def embed_batch(index: int, batch: list[Document]) -> None:
            nonlocal embedded
            async with semaphore:
                try:
                    vectors = await self.client.embed_batch([doc.text for doc in batch])
                except Exception as exc:
                    raise IngestionError(index, [doc.id for doc in batch], cause=exc) from exc
            slots[index] = [VectorRecord.from_document(doc, vector) for doc, vector in zip(batch, vectors, strict=True)]
            logger.info("batch_embedded", batch_index=index, size=len(batch))
            for doc in batch:
                embedded += 1
                logger.debug("document_embedded", document_id=doc.id, embedded=embedded, total=total)
                if self.on_progress is not None:
                    self.on_progress(doc.id, embedded, total)

        if self.concurrency == 1:
            for index, batch in enumerate(batches):
                await embed_batch(index, batch)
        else:
            tasks = [asyncio.create_task(embed_batch(index, batch)) for index, batch in enumerate(batches)]
            try:
                await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        return [record for slot in slots if slot is not None for record in slot]


# =============================================================================
# Section 12: Functions
# =============================================================================
def validate_corpus(documents: Sequence[Document]) -> None:
    """Check a whole corpus before any embedding work.

    Raises:
        InvalidCorpusError: If the corpus is empty or any text is blank.
        DuplicateDocumentIDError: If two documents share an id.
    """
    if not documents:
        raise InvalidCorpusError("corpus is empty")
    seen: set[int] = set()
    for document in documents:
        if document.id in seen:
            raise DuplicateDocumentIDError(document.id)
        seen.add(document.id)
        if not document.text.strip():
            raise InvalidCorpusError("document text is empty", document_id=document.id)


def partition(documents: Sequence[Document], batch_size: int) -> list[list[Document]]:
    """Split documents into consecutive batches of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    return [list(documents[start : start + batch_size]) for start in range(0, len(documents), batch_size)]
