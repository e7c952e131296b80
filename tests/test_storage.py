"""Tests for CollectionStore."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from webfinder.errors import CollectionNameError, CorruptRecordError, EmbeddingDimensionError
from webfinder.index.storage import CollectionStore
from webfinder.models import DocEntry


@pytest.fixture
def store(tmp_path: Path) -> CollectionStore:
    return CollectionStore(tmp_path / "vector-db")


def _entries(count: int, dimension: int = 3, source: str = "https://a.example/") -> list[DocEntry]:
    return [
        DocEntry.create(source, f"chunk {i} é\n line", [float(i)] * dimension)
        for i in range(count)
    ]


class TestAppendAndLoad:
    """Test append and load_all."""

    def test_round_trip_in_append_order(self, store: CollectionStore) -> None:
        first = _entries(3)
        second = _entries(2, source="/tmp/notes.md")

        assert store.append("docs", first) == 3
        assert store.append("docs", second) == 2

        assert store.load_all("docs") == first + second

    def test_one_json_record_per_line(self, store: CollectionStore) -> None:
        store.append("docs", _entries(2))

        lines = store.collection_path("docs").read_text(encoding="utf-8").splitlines()

        assert len(lines) == 2
        for line in lines:
            assert set(json.loads(line)) == {"id", "source", "text", "embedding"}

    def test_missing_collection_is_empty(self, store: CollectionStore) -> None:
        assert store.load_all("never-written") == []
        assert not store.exists("never-written")

    def test_append_nothing(self, store: CollectionStore) -> None:
        assert store.append("docs", []) == 0
        assert not store.exists("docs")

    def test_collections_are_independent(self, store: CollectionStore) -> None:
        store.append("one", _entries(1))
        store.append("two", _entries(2, dimension=5))

        assert len(store.load_all("one")) == 1
        assert len(store.load_all("two")) == 2
        assert store.list_collections() == ["one", "two"]

    def test_blank_lines_are_skipped(self, store: CollectionStore) -> None:
        entries = _entries(2)
        store.append("docs", entries)
        path = store.collection_path("docs")
        path.write_text(path.read_text(encoding="utf-8").replace("\n", "\n\n\n"), encoding="utf-8")

        assert store.load_all("docs") == entries


class TestCorruptRecords:
    """Test the malformed-line policy."""

    def test_malformed_line_raises(self, store: CollectionStore) -> None:
        store.append("docs", _entries(1))
        with store.collection_path("docs").open("a", encoding="utf-8") as handle:
            handle.write("{not json\n")

        with pytest.raises(CorruptRecordError) as excinfo:
            store.load_all("docs")

        assert excinfo.value.line_number == 2

    def test_invalid_utf8_raises(self, store: CollectionStore) -> None:
        store.append("docs", _entries(1))
        with store.collection_path("docs").open("ab") as handle:
            handle.write(b'{"id": "\xff"}\n')

        with pytest.raises(CorruptRecordError) as excinfo:
            store.load_all("docs")

        assert excinfo.value.line_number == 2

    def test_invalid_utf8_first_line_blocks_append(self, store: CollectionStore) -> None:
        path = store.collection_path("docs")
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe\n")

        with pytest.raises(CorruptRecordError):
            store.append("docs", _entries(1))

    def test_missing_field_raises(self, store: CollectionStore) -> None:
        path = store.collection_path("docs")
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"id": "x", "source": "s", "text": "t"}) + "\n", encoding="utf-8")

        with pytest.raises(CorruptRecordError):
            store.load_all("docs")


class TestDimensionCheck:
    """Test the embedding dimension check on write."""

    def test_mixed_batch_rejected(self, store: CollectionStore) -> None:
        with pytest.raises(EmbeddingDimensionError):
            store.append("docs", _entries(1, dimension=3) + _entries(1, dimension=4))
        assert not store.exists("docs")

    def test_mismatch_with_stored_rejected(self, store: CollectionStore) -> None:
        store.append("docs", _entries(1, dimension=3))

        with pytest.raises(EmbeddingDimensionError):
            store.append("docs", _entries(1, dimension=4))

        assert len(store.load_all("docs")) == 1

    def test_empty_embedding_rejected(self, store: CollectionStore) -> None:
        with pytest.raises(EmbeddingDimensionError):
            store.append("docs", [DocEntry.create("s", "t", [])])


class TestLayout:
    """Test on-disk layout helpers."""

    def test_paths(self, store: CollectionStore) -> None:
        assert store.collection_path("docs") == store.root / "docs.jsonl"
        side_dir = store.collection_dir("docs")
        assert side_dir == store.root / "docs"
        assert side_dir.is_dir()

    def test_side_dirs_are_not_collections(self, store: CollectionStore) -> None:
        store.collection_dir("only-side-files")
        assert store.list_collections() == []

    def test_list_without_root(self, tmp_path: Path) -> None:
        assert CollectionStore(tmp_path / "absent").list_collections() == []

    def test_unsafe_names_rejected(self, store: CollectionStore) -> None:
        with pytest.raises(CollectionNameError):
            store.load_all("../escape")
        with pytest.raises(CollectionNameError):
            store.append("a/b", _entries(1))
