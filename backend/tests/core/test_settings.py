"""Tests for runtime settings.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from semsearch.core.settings import SemSearchSettings

__all__ = ()


class TestSemSearchSettings:
    """Tests for the SemSearchSettings class."""

    def test_defaults(self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings should match the original tool's defaults."""
        monkeypatch.chdir(tmp_path)
        env.remove("SEMSEARCH_API_KEY")
        env.remove("SEMSEARCH_DIMENSION")

        settings = SemSearchSettings()

        assert settings.model == "text-embedding-3-small"
        assert settings.dimension == 1536
        assert settings.batch_size == 2048
        assert settings.top_k == 3
        assert settings.snapshot_path == Path("vectors.json")

    def test_api_key_from_openai_env(self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """OPENAI_API_KEY is honoured."""
        monkeypatch.chdir(tmp_path)
        env.remove("SEMSEARCH_API_KEY")
        env.set("OPENAI_API_KEY", "sk-from-env")

        settings = SemSearchSettings()

        assert settings.api_key is not None
        assert settings.api_key.get_secret_value() == "sk-from-env"

    def test_prefixed_env_overrides(self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """SEMSEARCH_ variables override defaults."""
        monkeypatch.chdir(tmp_path)
        env.set("SEMSEARCH_DIMENSION", "256")
        env.set("SEMSEARCH_MAX_RETRIES", "0")

        settings = SemSearchSettings()

        assert settings.dimension == 256
        assert settings.max_retries == 0

    def test_batch_size_capped(self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Batch size cannot exceed the provider maximum."""
        monkeypatch.chdir(tmp_path)
        env.set("SEMSEARCH_BATCH_SIZE", "4096")

        with pytest.raises(ValidationError):
            SemSearchSettings()
