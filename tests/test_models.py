"""Tests for core data models."""

from __future__ import annotations

import pytest

from webfinder.models import DocEntry, FetchedPage


class TestDocEntry:
    """Test DocEntry dataclass."""

    def test_create_generates_unique_ids(self) -> None:
        first = DocEntry.create("https://a.example/", "text", [0.1, 0.2])
        second = DocEntry.create("https://a.example/", "text", [0.1, 0.2])

        assert first.id and second.id
        assert first.id != second.id

    def test_create_converts_embedding_to_floats(self) -> None:
        entry = DocEntry.create("src", "text", (1, 2, 3))

        assert entry.embedding == [1.0, 2.0, 3.0]
        assert all(isinstance(value, float) for value in entry.embedding)
        assert entry.dimension == 3

    def test_record_round_trip(self) -> None:
        entry = DocEntry(id="abc", source="https://a.example/", text="hello", embedding=[0.5, -1.25])

        assert DocEntry.from_record(entry.to_record()) == entry

    def test_record_keys(self) -> None:
        entry = DocEntry(id="abc", source="s", text="t", embedding=[1.0])
        assert set(entry.to_record()) == {"id", "source", "text", "embedding"}

    def test_from_record_missing_field(self) -> None:
        with pytest.raises(KeyError):
            DocEntry.from_record({"id": "x", "source": "s", "embedding": [1.0]})

    def test_from_record_bad_embedding(self) -> None:
        with pytest.raises(TypeError):
            DocEntry.from_record({"id": "x", "source": "s", "text": "t", "embedding": "nope"})


class TestFetchedPage:
    """Test FetchedPage dataclass."""

    def test_defaults_to_raw_content(self) -> None:
        page = FetchedPage(url="https://a.example/", content="<p>x</p>")
        assert page.is_clean is False

    def test_clean_page(self) -> None:
        page = FetchedPage(url="https://a.example/", content="x", is_clean=True)
        assert page.is_clean is True
