"""Type aliases for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
from collections.abc import Callable
from typing import Literal

# Third-party (alphabetical)
from typing_extensions import TypeAliasType

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = (
    "DocumentId",
    "Embedding",
    "Metadata",
    "Score",
    "ErrorCategory",
    "RecoveryStrategy",
    "ProgressCallback",
)

# =============================================================================
# Section 3: Type Aliases
# =============================================================================
DocumentId = TypeAliasType("DocumentId", int)
Score = TypeAliasType("Score", float)

Embedding = TypeAliasType("Embedding", list[float])
Metadata = TypeAliasType("Metadata", dict[str, str])

ErrorCategory = TypeAliasType(
    "ErrorCategory",
    Literal["transient", "recoverable", "fatal"],
)
RecoveryStrategy = TypeAliasType(
    "RecoveryStrategy",
    Literal["retry", "skip", "abort"],
)

ProgressCallback = TypeAliasType(
    "ProgressCallback",
    Callable[[int, int, int], None],
)
"""Called as ``(document_id, embedded_count, total)`` after each document is embedded."""
