"""Vector record storage and snapshot persistence.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# Standard library (alphabetical)
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

# Third-party (alphabetical)
import logfire
from pydantic import ValidationError

# Local imports (core first, then alphabetical)
from ..core.exceptions import DimensionMismatchError, DuplicateDocumentIDError, StoreCorruptError, StoreNotFoundError
from ..core.models import Snapshot, VectorRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

__all__ = ("SnapshotStore", "VectorStore")


class VectorStore:
    """Append-only, ordered collection of vector records.

    The first record fixes the dimension; every later record must match it.
    """

    def __init__(self, dimension: int | None = None) -> None:
        self._records: list[VectorRecord] = []
        self._ids: set[int] = set()
        self._dimension = dimension

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[VectorRecord]:
        return iter(self._records)

    @property
    def dimension(self) -> int | None:
        """Shared embedding length, or None while empty and unconfigured."""
        return self._dimension

    @property
    def records(self) -> tuple[VectorRecord, ...]:
        """Records in insertion order."""
        return tuple(self._records)

    def append(self, record: VectorRecord) -> None:
        """Append a whole record."""
        if record.id in self._ids:
            raise DuplicateDocumentIDError(record.id)
        if self._dimension is None:
            self._dimension = record.dimension
        elif record.dimension != self._dimension:
            raise DimensionMismatchError(self._dimension, record.dimension)
        self._records.append(record)
        self._ids.add(record.id)

    def extend(self, records: Iterable[VectorRecord]) -> None:
        """Append several records in order."""
        for record in records:
            self.append(record)

    def to_snapshot(self, model: str) -> Snapshot:
        """Freeze the current records into a snapshot."""
        if self._dimension is None:
            raise ValueError("cannot snapshot an empty vector store")
        return Snapshot(model=model, dimension=self._dimension, records=list(self._records))

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> VectorStore:
        """Rebuild an in-memory store from a loaded snapshot."""
        store = cls(dimension=snapshot.dimension)
        store.extend(snapshot.records)
        return store


class SnapshotStore:
    """File-backed snapshot persistence.

    Snapshots are written to a temporary file in the target directory and
    renamed into place, so readers see either the previous snapshot or the
    complete new one.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        """Whether a snapshot is present on disk."""
        return self.path.is_file()

    def save(self, snapshot: Snapshot) -> Path:
        """Atomically replace the snapshot on disk."""
        with logfire.span("snapshot.save", path=str(self.path), records=len(snapshot.records)):
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = snapshot.model_dump_json(indent=2)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            logfire.info("snapshot_saved", path=str(self.path), records=len(snapshot.records))
            return self.path

    def load(self) -> Snapshot:
        """Read and validate the snapshot on disk."""
        with logfire.span("snapshot.load", path=str(self.path)):
            try:
                raw = self.path.read_text(encoding="utf-8")
            except FileNotFoundError as exc:
                raise StoreNotFoundError(str(self.path)) from exc
            except IsADirectoryError as exc:
                raise StoreCorruptError(str(self.path), "path is a directory") from exc
            try:
                return Snapshot.model_validate_json(raw)
            except ValidationError as exc:
                raise StoreCorruptError(str(self.path), _summarize(exc)) from exc


def _summarize(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "snapshot"
    suffix = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {first.get('msg', 'invalid')}{suffix}"
