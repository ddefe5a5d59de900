"""Shared test fixtures and helpers for semsearch tests.

(c) Mike Casale 2025.
Licensed under the MIT License.
"""

from __future__ import annotations as _annotations

import hashlib
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import logfire
import pytest

from semsearch.corpus import SAMPLE_DOCUMENTS
from semsearch.embeddings.embedder import EmbeddingClient
from semsearch.embeddings.store import SnapshotStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from semsearch.core.models import Document

__all__ = ("StubProvider", "TestEnv")

# Ensure provider keys are present during test collection.
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

logfire.configure(send_to_logfire=False, console=False)


class TestEnv:
    """Helper for managing environment variables in tests."""

    __test__ = False  # Prevent pytest from collecting this class

    def __init__(self) -> None:
        self.envars: dict[str, str | None] = {}

    def set(self, name: str, value: str) -> None:
        """Set an environment variable, saving the original value."""
        self.envars.setdefault(name, os.getenv(name))
        os.environ[name] = value

    def remove(self, name: str) -> None:
        """Remove an environment variable, saving the original value."""
        self.envars.setdefault(name, os.getenv(name))
        os.environ.pop(name, None)

    def reset(self) -> None:
        """Reset all modified environment variables to original values."""
        for name, value in self.envars.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value


class StubProvider:
    """Deterministic in-process embedding provider.

    Vectors are derived from a hash of the text, so the same text always
    embeds to the same vector. Queued ``failures`` are raised, one per call,
    before any call succeeds.
    """

    def __init__(
        self,
        dimension: int = 8,
        *,
        overrides: dict[str, list[float]] | None = None,
        failures: Sequence[Exception] = (),
    ) -> None:
        self.dimension = dimension
        self.overrides = dict(overrides or {})
        self.failures = list(failures)
        self.calls: list[list[str]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def vector_for(self, text: str) -> list[float]:
        if text in self.overrides:
            return list(self.overrides[text])
        digest = hashlib.shake_256(text.encode("utf-8")).digest(self.dimension)
        return [(byte - 127.5) / 127.5 for byte in digest]

    async def embed(self, texts: Sequence[str], *, model: str, dimensions: int) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.failures:
            raise self.failures.pop(0)
        return [self.vector_for(text) for text in texts]


@pytest.fixture
def env() -> Iterator[TestEnv]:
    """Fixture for managing environment variables in tests."""
    test_env = TestEnv()
    yield test_env
    test_env.reset()


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def stub_provider() -> StubProvider:
    """Provide a deterministic 8-dimensional provider."""
    return StubProvider()


@pytest.fixture
def sleeps() -> list[float]:
    """Collect backoff delays instead of sleeping."""
    return []


@pytest.fixture
def make_client(sleeps: list[float]) -> Callable[..., EmbeddingClient]:
    """Build embedding clients that record backoff delays instead of sleeping."""

    async def fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    def factory(provider: Any, **kwargs: Any) -> EmbeddingClient:
        kwargs.setdefault("dimension", getattr(provider, "dimension", 8))
        kwargs.setdefault("model", "test-embedding")
        return EmbeddingClient(provider, sleep=fake_sleep, **kwargs)

    return factory


@pytest.fixture
def sample_documents() -> list[Document]:
    """The built-in four-document corpus."""
    return list(SAMPLE_DOCUMENTS)


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """Provide a temporary snapshot location."""
    return tmp_path / "vectors.json"


@pytest.fixture
def snapshot_store(snapshot_path: Path) -> SnapshotStore:
    """Provide a snapshot store rooted in a temporary directory."""
    return SnapshotStore(snapshot_path)


@pytest.fixture
def make_provider() -> Callable[..., StubProvider]:
    """Build stub providers with custom overrides or queued failures."""
    return StubProvider
