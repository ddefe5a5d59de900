"""Ingestion and query pipelines.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

from .ingest import IngestionPipeline, IngestionReport
from .query import QueryPipeline, QueryResult

__all__ = ("IngestionPipeline", "IngestionReport", "QueryPipeline", "QueryResult")
