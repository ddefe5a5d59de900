"""Command-line interface for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
import argparse
import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING

# Third-party (alphabetical)
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Local imports (core first, then alphabetical)
from . import __version__
from .adapters.openai import OpenAIEmbeddingProvider
from .core.constants import MAX_PROVIDER_BATCH_SIZE
from .core.exceptions import InvalidQueryError, SemSearchError, classify_error
from .core.settings import SemSearchSettings
from .corpus import SAMPLE_DOCUMENTS, load_corpus
from .embeddings.embedder import EmbeddingClient
from .embeddings.store import SnapshotStore
from .infra.logging import configure_logging
from .pipelines.ingest import IngestionPipeline
from .pipelines.query import QueryPipeline, QueryResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .core.protocols import EmbeddingProvider

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("build_parser", "create_provider", "main")

console = Console()
error_console = Console(stderr=True)


# =============================================================================
# Section 12: Functions
# =============================================================================
def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def _batch_size(value: str) -> int:
    number = _positive_int(value)
    if number > MAX_PROVIDER_BATCH_SIZE:
        raise argparse.ArgumentTypeError(f"must be at most {MAX_PROVIDER_BATCH_SIZE}, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="semsearch",
        description="Minimal semantic search: embed a corpus, then query it by meaning.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  semsearch ingest
  semsearch query "How long do I have to request a refund?"
  semsearch query When is support available? -k 2
""",
    )
    parser.add_argument("--version", action="version", version=f"semsearch {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Echo structured logs to the terminal")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Embed a corpus and write a snapshot")
    ingest.add_argument("--corpus", type=Path, help="JSON document list (default: built-in sample corpus)")
    ingest.add_argument("--output", "-o", type=Path, help="Snapshot path (default: SEMSEARCH_SNAPSHOT_PATH)")
    ingest.add_argument("--batch-size", type=_batch_size, help="Documents per embeddings request")
    ingest.add_argument("--concurrency", type=_positive_int, help="Batches in flight at once")

    query = subparsers.add_parser("query", help="Rank stored documents against a query")
    query.add_argument("text", nargs="*", help="Query text; words are joined with spaces")
    query.add_argument("-k", "--top-k", type=_positive_int, help="Number of results to list")
    query.add_argument("--snapshot", type=Path, help="Snapshot path (default: SEMSEARCH_SNAPSHOT_PATH)")

    return parser


def create_provider(settings: SemSearchSettings) -> EmbeddingProvider:
    """Create the embedding provider used by the CLI."""
    return OpenAIEmbeddingProvider.from_settings(settings)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(console=args.verbose)
    try:
        settings = SemSearchSettings()
    except ValidationError as exc:
        error_console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(exc))}", soft_wrap=True)
        return 1

    try:
        if args.command == "ingest":
            asyncio.run(_ingest(args, settings))
        else:
            asyncio.run(_query(args, settings))
    except SemSearchError as exc:
        error_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", soft_wrap=True)
        _category, strategy = classify_error(exc)
        if strategy == "retry":
            error_console.print("[yellow]This error may be temporary; retrying the command may succeed.[/yellow]")
        return 1
    return 0


async def _ingest(args: argparse.Namespace, settings: SemSearchSettings) -> None:
    documents = load_corpus(args.corpus) if args.corpus else list(SAMPLE_DOCUMENTS)
    if args.batch_size:
        settings = settings.model_copy(update={"batch_size": args.batch_size})
    snapshot_store = SnapshotStore(args.output or settings.snapshot_path)

    provider = create_provider(settings)
    try:
        client = EmbeddingClient.from_settings(provider, settings)
        pipeline = IngestionPipeline(
            client,
            snapshot_store,
            concurrency=args.concurrency or settings.concurrency,
            on_progress=lambda document_id, _count, _total: console.print(f"Embedded doc {document_id}"),
        )
        report = await pipeline.run(documents, timeout=settings.operation_timeout)
    finally:
        await _close(provider)

    console.print(
        f"Saved {report.record_count} vectors ({report.dimension} dims, {report.batch_count} batch(es)) "
        f"to {escape(str(report.snapshot_path))}"
    )


async def _query(args: argparse.Namespace, settings: SemSearchSettings) -> None:
    text = " ".join(args.text)
    if not text.strip():
        raise InvalidQueryError("query text is empty")
    snapshot_store = SnapshotStore(args.snapshot or settings.snapshot_path)

    provider = create_provider(settings)
    try:
        client = EmbeddingClient.from_settings(provider, settings)
        pipeline = QueryPipeline(client, snapshot_store, default_top_k=settings.top_k)
        result = await pipeline.run(text, args.top_k, timeout=settings.operation_timeout)
    finally:
        await _close(provider)

    _print_result(result)


def _print_result(result: QueryResult) -> None:
    best = result.best
    console.print("\n[bold]Query:[/bold]")
    console.print(escape(result.query))

    console.print("\n[bold]Best match:[/bold]")
    console.print(f"Score: {best.score:.4f}")
    console.print(f"Text:  {escape(best.text)}")
    console.print(f"Metadata: {escape(json.dumps(best.metadata))}")

    table = Table(title=f"Top {len(result.results)} results")
    table.add_column("Score", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Text")
    for item in result.results:
        table.add_row(f"{item.score:.4f}", str(item.id), escape(item.text))
    console.print()
    console.print(table)

    if result.excluded_ids:
        console.print(f"[yellow]Skipped {len(result.excluded_ids)} record(s) with zero-norm embeddings: {result.excluded_ids}[/yellow]")


async def _close(provider: EmbeddingProvider) -> None:
    aclose = getattr(provider, "aclose", None)
    if aclose is not None:
        await aclose()
