"""Protocol definitions for embedding providers.

(c) Mike Casale 2025.
Licensed under the MIT License.
"""

from __future__ import annotations as _annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ("EmbeddingProvider",)


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding providers.

    A provider maps texts to vectors through a remote model. It knows the
    wire format and classifies failures; batching policy, retries and
    dimension checks belong to ``EmbeddingClient``.

    Example Implementation:
        >>> class StaticProvider:
        ...     async def embed(self, texts, *, model, dimensions):
        ...         return [[1.0] * dimensions for _ in texts]
    """

    @abstractmethod
    async def embed(self, texts: Sequence[str], *, model: str, dimensions: int) -> list[list[float]]:
        """Embed texts in a single request.

        Args:
            texts: Input texts, in order.
            model: Model identifier.
            dimensions: Requested output dimension.

        Returns:
            One vector per input, in input order.

        Raises:
            ProviderTransientError: For network, timeout, rate-limit and server errors.
            ProviderFailureError: For auth, quota and malformed-request errors.
        """
        ...
