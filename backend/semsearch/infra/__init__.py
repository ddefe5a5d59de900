"""Infrastructure helpers for semsearch.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

from .logging import configure_logging, get_logger

__all__ = ("configure_logging", "get_logger")
