"""Tests for IndexStore."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from pdfrank.errors import CorruptIndexError
from pdfrank.index.corpus import CorpusIndex
from pdfrank.index.search import search
from pdfrank.index.statistics import build_document
from pdfrank.index.storage import FORMAT_VERSION, IndexStore, is_stale


@pytest.fixture
def corpus() -> CorpusIndex:
    index = CorpusIndex(created_at=1_700_000_000.0)
    index.add_document(build_document("/docs/a.pdf", "cat dog dog", sha256="aaa"))
    index.add_document(build_document("/docs/b.pdf", "dog bird", sha256="bbb"))
    return index


@pytest.fixture
def store(tmp_path: Path) -> IndexStore:
    return IndexStore(tmp_path / "data" / "index.json")


class TestSave:
    """Test IndexStore.save."""

    def test_creates_parent_and_file(self, store: IndexStore, corpus: CorpusIndex) -> None:
        assert not store.exists()

        store.save(corpus)

        assert store.exists()
        assert store.path.parent.is_dir()

    def test_file_contents(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)

        record = json.loads(store.path.read_text(encoding="utf-8"))

        assert record["format_version"] == FORMAT_VERSION
        assert record["document_count"] == 2
        assert record["document_frequency"] == {"cat": 1, "dog": 2, "bird": 1}
        assert [doc["id"] for doc in record["documents"]] == ["/docs/a.pdf", "/docs/b.pdf"]
        assert record["documents"][0]["sha256"] == "aaa"

    def test_overwrites_previous(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)
        corpus.remove_document("/docs/a.pdf")
        store.save(corpus)

        assert store.load().document_count == 1

    def test_no_temp_files_left(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)

        assert [p.name for p in store.path.parent.iterdir()] == ["index.json"]

    def test_failed_write_keeps_old_file(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)
        original = store.path.read_text(encoding="utf-8")

        with patch("pdfrank.index.storage.json.dump", side_effect=RuntimeError("disk full")):
            with pytest.raises(RuntimeError):
                store.save(CorpusIndex())

        assert store.path.read_text(encoding="utf-8") == original
        assert [p.name for p in store.path.parent.iterdir()] == ["index.json"]


class TestLoad:
    """Test IndexStore.load."""

    def test_round_trip(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)

        loaded = store.load()

        assert loaded.documents == corpus.documents
        assert dict(loaded.document_frequency) == dict(corpus.document_frequency)
        assert loaded.created_at == corpus.created_at
        assert search(loaded, "dog") == search(corpus, "dog")

    def test_missing_file(self, store: IndexStore) -> None:
        with pytest.raises(FileNotFoundError):
            store.load()

    def test_invalid_json(self, store: IndexStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CorruptIndexError, match="not valid JSON"):
            store.load()

    @pytest.mark.parametrize("content", [b"\xff\xfe", b'{"documents": [\xff\xfe]}'])
    def test_invalid_utf8(self, store: IndexStore, content: bytes) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(content)

        with pytest.raises(CorruptIndexError, match="not valid JSON"):
            store.load()

    def test_truncated_file(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)
        content = store.path.read_text(encoding="utf-8")
        store.path.write_text(content[: len(content) // 2], encoding="utf-8")

        with pytest.raises(CorruptIndexError):
            store.load()

    def test_not_an_object(self, store: IndexStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(CorruptIndexError):
            store.load()

    def test_unsupported_version(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)
        record = json.loads(store.path.read_text(encoding="utf-8"))
        record["format_version"] = 99
        store.path.write_text(json.dumps(record), encoding="utf-8")

        with pytest.raises(CorruptIndexError, match="version"):
            store.load()

    def test_hand_edited_counts(self, store: IndexStore, corpus: CorpusIndex) -> None:
        store.save(corpus)
        record = json.loads(store.path.read_text(encoding="utf-8"))
        record["documents"][1]["term_frequencies"]["dog"] = 5
        store.path.write_text(json.dumps(record), encoding="utf-8")

        with pytest.raises(CorruptIndexError):
            store.load()

    def test_minimal_record(self, store: IndexStore) -> None:
        """Only documents are required; derived fields are recomputed."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(
            json.dumps({"documents": [{"id": "x", "term_frequencies": {"a": 2, "b": 1}}]}),
            encoding="utf-8",
        )

        loaded = store.load()

        assert loaded.get_document("x").total_terms == 3
        assert dict(loaded.document_frequency) == {"a": 1, "b": 1}


class TestIsStale:
    """Test is_stale helper."""

    def test_fresh(self, corpus: CorpusIndex) -> None:
        now = corpus.created_at + timedelta(days=6).total_seconds()
        assert not is_stale(corpus, timedelta(days=7), now=now)

    def test_older_than_max_age(self, corpus: CorpusIndex) -> None:
        now = corpus.created_at + timedelta(days=8).total_seconds()
        assert is_stale(corpus, timedelta(days=7), now=now)

    def test_new_index_not_stale(self) -> None:
        assert not is_stale(CorpusIndex(), timedelta(days=7))
