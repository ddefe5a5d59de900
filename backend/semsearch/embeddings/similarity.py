"""Cosine similarity between embedding vectors.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

# =============================================================================
# Section 1: Imports
# =============================================================================
# Standard library (alphabetical)
from collections.abc import Sequence

# Third-party (alphabetical)
import numpy as np

# Local imports (core first, then alphabetical)
from ..core.exceptions import DegenerateVectorError, InvalidDimensionError

# =============================================================================
# Section 2: Module Exports
# =============================================================================
__all__ = ("cosine_similarity",)


# =============================================================================
# Section 12: Functions
# =============================================================================
def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Return ``dot(left, right) / (|left| * |right|)``.

    Args:
        left: First vector.
        right: Second vector, same length as ``left``.

    Returns:
        Similarity in ``[-1, 1]``.

    Raises:
        InvalidDimensionError: If the vectors are empty or differ in length.
        DegenerateVectorError: If either vector has zero norm.
    """
    if len(left) != len(right) or len(left) == 0:
        raise InvalidDimensionError(len(left), len(right))

    left_vec = np.asarray(left, dtype=np.float64)
    right_vec = np.asarray(right, dtype=np.float64)

    left_scale = float(np.max(np.abs(left_vec)))
    right_scale = float(np.max(np.abs(right_vec)))
    if left_scale == 0.0 or right_scale == 0.0:
        raise DegenerateVectorError("Similarity is undefined for a zero-norm vector")

    # Rescale to unit max-abs so the dot products neither overflow nor underflow
    left_vec = left_vec / left_scale
    right_vec = right_vec / right_scale
    left_norm = float(np.sqrt(np.dot(left_vec, left_vec)))
    right_norm = float(np.sqrt(np.dot(right_vec, right_vec)))

    score = float(np.dot(left_vec, right_vec)) / (left_norm * right_norm)
    if not np.isfinite(score):
        raise DegenerateVectorError("Similarity is not finite")
    return max(-1.0, min(1.0, score))
