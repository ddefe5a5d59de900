"""Embedding client that wraps a provider with batching, retries and checks.

(c) Mike Casale 2025.
Licensed under the MIT License.
"""

from __future__ import annotations as _annotations

# Standard library (alphabetical)
import asyncio
from typing import TYPE_CHECKING, Any

# Third-party (alphabetical)
import logfire

# Local imports (core first, then alphabetical)
from ..core.constants import (
    DEFAULT_DIMENSION,
    DEFAULT_EMBEDDING_MODEL,
    MAX_PROVIDER_BATCH_SIZE,
    MAX_RETRIES,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_DELAY_SECONDS,
)
from ..core.exceptions import (
    BatchSizeMismatchError,
    DimensionMismatchError,
    ProviderFailureError,
    ProviderTransientError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from ..core.protocols import EmbeddingProvider
    from ..core.settings import SemSearchSettings

__all__ = ("EmbeddingClient",)


class EmbeddingClient:
    """Translate text into fixed-dimension vectors through a provider.

    The client is constructed once with its configuration and passed to the
    pipelines that need it. It owns the request size limit, the retry policy
    for transient provider errors and the verification of every response.

    Example:
        >>> client = EmbeddingClient(provider, dimension=1536)
        >>> vectors = await client.embed_batch(['refunds', 'shipping'])
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        *,
        model: str = DEFAULT_EMBEDDING_MODEL,
        dimension: int = DEFAULT_DIMENSION,
        batch_size: int = MAX_PROVIDER_BATCH_SIZE,
        max_retries: int = MAX_RETRIES,
        retry_base_delay: float = RETRY_BASE_DELAY_SECONDS,
        retry_max_delay: float = RETRY_MAX_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if dimension < 1:
            raise ValueError('dimension must be >= 1')
        if not 1 <= batch_size <= MAX_PROVIDER_BATCH_SIZE:
            raise ValueError(f'batch_size must be between 1 and {MAX_PROVIDER_BATCH_SIZE}')
        if max_retries < 0:
            raise ValueError('max_retries must be >= 0')
        self.provider = provider
        self.model = model
        self.dimension = dimension
        self.batch_size = batch_size
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self._sleep = sleep

    @classmethod
    def from_settings(cls, provider: EmbeddingProvider, settings: SemSearchSettings) -> EmbeddingClient:
        """Build a client from runtime settings."""
        return cls(
            provider,
            model=settings.model,
            dimension=settings.dimension,
            batch_size=settings.batch_size,
            max_retries=settings.max_retries,
            retry_base_delay=settings.retry_base_delay,
            retry_max_delay=settings.retry_max_delay,
        )

    async def embed_one(self, text: str) -> list[float]:
        """Embed a single text."""
        (vector,) = await self.embed_batch([text])
        return vector

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts in one provider request.

        Args:
            texts: Inputs, at most ``batch_size`` of them.

        Returns:
            One vector per input; ``result[i]`` belongs to ``texts[i]``.

        Raises:
            BatchSizeMismatchError: If the provider returns the wrong number of vectors.
            DimensionMismatchError: If any vector has the wrong length.
            ProviderFailureError: On non-retryable errors or when retries run out.
        """
        if not texts:
            return []
        if len(texts) > self.batch_size:
            raise ValueError(f'batch of {len(texts)} exceeds batch_size {self.batch_size}')

        with logfire.span('embedder.embed_batch', model=self.model, size=len(texts)):
            vectors = await self._call_with_retry(list(texts))
            if len(vectors) != len(texts):
                raise BatchSizeMismatchError(len(texts), len(vectors))
            for position, vector in enumerate(vectors):
                if len(vector) != self.dimension:
                    raise DimensionMismatchError(self.dimension, len(vector), position=position)
            return [[float(value) for value in vector] for vector in vectors]

    async def _call_with_retry(self, texts: list[str]) -> list[list[float]]:
        attempt = 0
        while True:
            try:
                return await self.provider.embed(texts, model=self.model, dimensions=self.dimension)
            except ProviderTransientError as exc:
                if attempt >= self.max_retries:
                    raise ProviderFailureError(
                        f'Provider still failing after {attempt + 1} attempt(s): {exc}',
                        status_code=exc.status_code,
                        reason='retries_exhausted',
                    ) from exc
                delay = self._backoff_delay(attempt, exc.retry_after)
                logfire.warning(
                    'provider_retry',
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    delay=delay,
                    error=str(exc),
                )
                await self._sleep(delay)
                attempt += 1

    def _backoff_delay(self, attempt: int, retry_after: float | None) -> float:
        delay = min(self.retry_base_delay * (2**attempt), self.retry_max_delay)
        if retry_after is not None:
            delay = max(delay, min(retry_after, self.retry_max_delay))
        return delay
