"""OpenAI-compatible embeddings provider.

(c) Mike Casale 2025.
Licensed under the MIT License.
"""

from __future__ import annotations as _annotations

# Standard library (alphabetical)
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

# Third-party (alphabetical)
import httpx
import logfire

# Local imports (core first, then alphabetical)
from semsearch.core.constants import DEFAULT_BASE_URL, REQUEST_TIMEOUT_SECONDS
from semsearch.core.exceptions import ProviderFailureError, ProviderTransientError
from semsearch.core.protocols import EmbeddingProvider

if TYPE_CHECKING:
    from collections.abc import Sequence

    from semsearch.core.settings import SemSearchSettings

__all__ = ('OpenAIEmbeddingProvider',)

_AUTH_STATUSES = frozenset({401, 403})
_MALFORMED_STATUSES = frozenset({400, 404, 413, 422})


@dataclass
class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider for the OpenAI ``/embeddings`` API.

    Works with any server that speaks the same wire format. Failures are
    classified into transient errors, which the embedding client retries,
    and permanent failures, which it propagates immediately.

    Example:
        >>> async with OpenAIEmbeddingProvider(api_key='sk-...') as provider:
        ...     vectors = await provider.embed(['hello'], model='text-embedding-3-small', dimensions=1536)
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = REQUEST_TIMEOUT_SECONDS
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    _client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip('/'),
            timeout=self.timeout,
            headers={'Authorization': f'Bearer {self.api_key}'},
            transport=self.transport,
        )

    @classmethod
    def from_settings(cls, settings: SemSearchSettings) -> OpenAIEmbeddingProvider:
        """Build a provider from runtime settings."""
        if settings.api_key is None:
            raise ProviderFailureError(
                'No API key configured (set OPENAI_API_KEY or SEMSEARCH_API_KEY)', reason='authentication'
            )
        return cls(
            api_key=settings.api_key.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )

    async def __aenter__(self) -> OpenAIEmbeddingProvider:
        return self

    async def __aexit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def embed(self, texts: Sequence[str], *, model: str, dimensions: int) -> list[list[float]]:
        """Embed texts with a single ``POST /embeddings`` request."""
        payload = {'model': model, 'input': list(texts), 'dimensions': dimensions, 'encoding_format': 'float'}
        with logfire.span('openai.embed', model=model, size=len(texts)):
            try:
                response = await self._client.post('/embeddings', json=payload)
            except httpx.TimeoutException as exc:
                raise ProviderTransientError(f'Embedding request timed out: {exc}') from exc
            except httpx.TransportError as exc:
                raise ProviderTransientError(f'Embedding request failed: {exc}') from exc

            self._raise_for_status(response)
            return self._parse_embeddings(response)

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return

        code, message = _error_details(response)
        detail = f'[{status}] {message}'
        if status in _AUTH_STATUSES:
            raise ProviderFailureError(detail, status_code=status, reason='authentication')
        if status == 429:
            if code == 'insufficient_quota':
                raise ProviderFailureError(detail, status_code=status, reason='quota')
            raise ProviderTransientError(detail, status_code=status, retry_after=_retry_after(response))
        if status in _MALFORMED_STATUSES:
            raise ProviderFailureError(detail, status_code=status, reason='malformed_request')
        if status >= 500 or status == 408:
            raise ProviderTransientError(detail, status_code=status, retry_after=_retry_after(response))
        raise ProviderFailureError(detail, status_code=status)

    def _parse_embeddings(self, response: httpx.Response) -> list[list[float]]:
        try:
            items = response.json()['data']
            # Items carry their input position; order by it rather than trusting list order
            ordered = sorted(items, key=lambda item: item['index'])
            return [list(item['embedding']) for item in ordered]
        except (ValueError, KeyError, TypeError) as exc:
            raise ProviderFailureError(
                f'Unexpected embeddings response format: {exc}', status_code=response.status_code, reason='malformed_response'
            ) from exc


def _error_details(response: httpx.Response) -> tuple[str | None, str]:
    try:
        body = response.json()
    except ValueError:
        return None, response.text[:200] or response.reason_phrase
    error = body.get('error') if isinstance(body, dict) else body
    if not error:
        return None, response.reason_phrase
    if not isinstance(error, dict):
        return None, str(error)[:200]
    return error.get('code'), str(error.get('message') or response.reason_phrase)


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get('Retry-After')
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None
