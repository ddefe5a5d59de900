"""Tests for the command-line interface.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path

import pytest

import semsearch.cli as cli_module
from semsearch.core.exceptions import ProviderFailureError

__all__ = ()


@pytest.fixture
def cli_env(env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, make_provider):
    """Run the CLI against a stub provider with fast, small settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)
    env.set("SEMSEARCH_DIMENSION", "8")
    env.set("SEMSEARCH_RETRY_BASE_DELAY", "0")
    env.set("SEMSEARCH_SNAPSHOT_PATH", str(tmp_path / "vectors.json"))
    providers = []

    def create_provider(_settings):
        provider = make_provider(dimension=8)
        providers.append(provider)
        return provider

    monkeypatch.setattr(cli_module, "create_provider", create_provider)
    return providers


class TestCLI:
    """Tests for the ingest and query commands."""

    def test_ingest_sample_corpus(self, cli_env, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Ingest embeds the built-in corpus and saves a snapshot."""
        exit_code = cli_module.main(["ingest"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Embedded doc 1" in out
        assert "Embedded doc 4" in out
        assert "Saved 4 vectors" in out
        data = json.loads((tmp_path / "vectors.json").read_text(encoding="utf-8"))
        assert [record["id"] for record in data["records"]] == [1, 2, 3, 4]

    def test_ingest_custom_corpus(self, cli_env, tmp_path: Path) -> None:
        corpus = tmp_path / "corpus.json"
        corpus.write_text(json.dumps([{"id": 1, "text": "alpha"}, {"id": 2, "text": "beta"}]), encoding="utf-8")
        output = tmp_path / "out" / "store.json"

        exit_code = cli_module.main(["ingest", "--corpus", str(corpus), "--output", str(output), "--batch-size", "1"])

        assert exit_code == 0
        assert len(json.loads(output.read_text(encoding="utf-8"))["records"]) == 2
        assert [len(call) for call in cli_env[0].calls] == [1, 1]

    def test_query_prints_best_match(self, cli_env, capsys: pytest.CaptureFixture[str]) -> None:
        """Query joins its words and prints the best match and ranked list."""
        assert cli_module.main(["ingest"]) == 0
        capsys.readouterr()

        exit_code = cli_module.main(["query", "We", "offer", "a", "30-day", "refund", "policy", "on", "all", "purchases."])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Best match:" in out
        assert "Score: 1.0000" in out
        assert "We offer a 30-day refund policy on all purchases." in out
        assert '"topic": "refunds"' in out
        assert "Top 3 results" in out

    def test_query_top_k(self, cli_env, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli_module.main(["ingest"]) == 0
        capsys.readouterr()

        assert cli_module.main(["query", "shipping", "-k", "2"]) == 0

        assert "Top 2 results" in capsys.readouterr().out

    def test_empty_query_fails(self, cli_env, capsys: pytest.CaptureFixture[str]) -> None:
        """An empty query exits non-zero without calling the provider."""
        exit_code = cli_module.main(["query"])

        assert exit_code == 1
        assert "query text is empty" in capsys.readouterr().err
        assert all(provider.call_count == 0 for provider in cli_env)

    def test_missing_snapshot_fails(self, cli_env, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = cli_module.main(["query", "refunds"])

        assert exit_code == 1
        assert "not found" in capsys.readouterr().err

    def test_corrupt_snapshot_fails(self, cli_env, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "vectors.json").write_text("[]", encoding="utf-8")

        assert cli_module.main(["query", "refunds"]) == 1
        assert "corrupt" in capsys.readouterr().err

    def test_provider_failure_fails(
        self, cli_env, monkeypatch: pytest.MonkeyPatch, make_provider, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """An irrecoverable provider error aborts ingestion with exit code 1."""
        failing = make_provider(dimension=8, failures=[ProviderFailureError("invalid api key", status_code=401)])
        monkeypatch.setattr(cli_module, "create_provider", lambda _settings: failing)

        exit_code = cli_module.main(["ingest"])

        assert exit_code == 1
        assert "invalid api key" in capsys.readouterr().err

    def test_missing_api_key_fails(
        self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without credentials the real provider cannot be created."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)
        env.remove("OPENAI_API_KEY")
        env.remove("SEMSEARCH_API_KEY")

        assert cli_module.main(["ingest"]) == 1
        assert "API key" in capsys.readouterr().err

    def test_empty_query_checked_before_api_key(
        self, env, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A blank query is reported as such even when no credentials are configured."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(cli_module, "configure_logging", lambda **_kwargs: None)
        env.remove("OPENAI_API_KEY")
        env.remove("SEMSEARCH_API_KEY")

        assert cli_module.main(["query", " "]) == 1
        err = capsys.readouterr().err
        assert "query text is empty" in err
        assert "API key" not in err

    def test_timeout_suggests_retry(
        self, cli_env, env, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A timed-out query is reported as temporary."""

        class SlowProvider:
            async def embed(self, texts: Sequence[str], *, model: str, dimensions: int) -> list[list[float]]:
                await asyncio.sleep(5)
                return [[1.0] * dimensions for _ in texts]

        assert cli_module.main(["ingest"]) == 0
        capsys.readouterr()
        env.set("SEMSEARCH_OPERATION_TIMEOUT", "0.05")
        monkeypatch.setattr(cli_module, "create_provider", lambda _settings: SlowProvider())

        assert cli_module.main(["query", "refunds"]) == 1
        err = capsys.readouterr().err
        assert "timed out" in err
        assert "may be temporary" in err

    def test_permanent_error_has_no_retry_hint(self, cli_env, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli_module.main(["query", "refunds"]) == 1
        assert "may be temporary" not in capsys.readouterr().err

    def test_invalid_batch_size_is_usage_error(self, cli_env) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli_module.main(["ingest", "--batch-size", "0"])

        assert exc_info.value.code == 2
