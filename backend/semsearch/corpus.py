"""Document corpora for ingestion.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
from pathlib import Path
from typing import Final

# Third-party (alphabetical)
from pydantic import TypeAdapter, ValidationError

# Local imports (core first, then alphabetical)
from .core.exceptions import InvalidCorpusError
from .core.models import Document

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("SAMPLE_DOCUMENTS", "load_corpus")

# =============================================================================
# Section 3: Constants
# =============================================================================
SAMPLE_DOCUMENTS: Final[tuple[Document, ...]] = (
    Document(
        id=1,
        text="We offer a 30-day refund policy on all purchases.",
        metadata={"type": "policy", "topic": "refunds"},
    ),
    Document(
        id=2,
        text="Our support team is available 24/7 via email and live chat.",
        metadata={"type": "info", "topic": "support"},
    ),
    Document(
        id=3,
        text="Shipping usually takes 3-5 business days within the country.",
        metadata={"type": "info", "topic": "shipping"},
    ),
    Document(
        id=4,
        text="You can update your account details from the profile settings page.",
        metadata={"type": "howto", "topic": "account"},
    ),
)

_CORPUS_ADAPTER: Final[TypeAdapter[list[Document]]] = TypeAdapter(list[Document])


# =============================================================================
# Section 12: Functions
# =============================================================================
def load_corpus(path: Path | str) -> list[Document]:
    """Load a JSON array of documents.

    Args:
        path: File holding ``[{"id": 1, "text": "...", "metadata": {...}}, ...]``.

    Returns:
        Documents in file order.

    Raises:
        InvalidCorpusError: If the file is missing or not a valid document list.
    """
    corpus_path = Path(path).expanduser()
    try:
        raw = corpus_path.read_bytes()
    except OSError as exc:
        raise InvalidCorpusError(f"cannot read {corpus_path}: {exc.strerror or exc}") from exc
    try:
        return _CORPUS_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise InvalidCorpusError(f"{corpus_path} is not a valid document list ({exc.error_count()} error(s))") from exc
