"""Embedding provider adapters.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations

from .openai import OpenAIEmbeddingProvider

__all__ = ['OpenAIEmbeddingProvider']
