"""Tests for corpus loading.

(c) Mike Casale 2025.
Licensed under the MIT License.
See LICENSE file for details.
"""

from __future__ import annotations as _annotations

import json
from pathlib import Path

import pytest

from semsearch.core.exceptions import InvalidCorpusError
from semsearch.corpus import SAMPLE_DOCUMENTS, load_corpus
from semsearch.pipelines.ingest import validate_corpus

__all__ = ()


class TestSampleDocuments:
    """Tests for the built-in corpus."""

    def test_sample_is_valid(self) -> None:
        validate_corpus(SAMPLE_DOCUMENTS)

    def test_topics(self) -> None:
        assert [doc.metadata["topic"] for doc in SAMPLE_DOCUMENTS] == ["refunds", "support", "shipping", "account"]


class TestLoadCorpus:
    """Tests for load_corpus."""

    def test_loads_in_order(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.json"
        path.write_text(
            json.dumps(
                [
                    {"id": 10, "text": "first", "metadata": {"k": "v"}},
                    {"id": 2, "text": "second"},
                ]
            ),
            encoding="utf-8",
        )

        documents = load_corpus(path)

        assert [doc.id for doc in documents] == [10, 2]
        assert documents[0].metadata == {"k": "v"}
        assert documents[1].metadata == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidCorpusError, match="cannot read"):
            load_corpus(tmp_path / "nope.json")

    @pytest.mark.parametrize(
        "content",
        [
            "not json",
            json.dumps({"id": 1, "text": "not a list"}),
            json.dumps([{"id": "abc", "text": "bad id"}]),
            json.dumps([{"id": 1, "text": "x", "metadata": {"n": 1}}]),
        ],
    )
    def test_malformed(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "corpus.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(InvalidCorpusError, match="not a valid document list"):
            load_corpus(path)
