"""
Tests for context retrieval from the memory store.
"""
import pytest

from citebase.errors import LangbaseError
from citebase.retrieval import ContextRetriever, normalize_top_k
from tests.fakes import FakeMemoryStore, memory_item


class TestNormalizeTopK:
    @pytest.mark.parametrize("value,expected", [
        (3, 3),
        (7.0, 7),
        (None, 4),
        (0, 4),
        (-2, 4),
        (2.5, 4),
        ("5", 4),
        (True, 4),
    ])
    def test_values(self, value, expected):
        assert normalize_top_k(value) == expected


class TestContextRetriever:
    def test_maps_items_to_chunks(self):
        store = FakeMemoryStore(payload=[
            memory_item("one", filename="a.pdf"),
            memory_item("two", url="https://example.com/doc"),
            memory_item("three"),
        ])
        chunks = ContextRetriever(store).retrieve("q", namespace="user-1", top_k=3)

        assert [c.text for c in chunks] == ["one", "two", "three"]
        assert [c.source_id for c in chunks] == ["a.pdf", "https://example.com/doc", None]
        assert store.calls == [("user-1", "q", 3)]

    def test_invalid_top_k_uses_default(self):
        store = FakeMemoryStore()
        ContextRetriever(store, default_top_k=6).retrieve("q", namespace="u", top_k="lots")
        assert store.calls[0][2] == 6

    def test_empty_result(self):
        assert ContextRetriever(FakeMemoryStore(payload=[])).retrieve("q", "u") == []

    def test_non_list_payload_is_empty(self):
        store = FakeMemoryStore(payload={"error": "weird"})
        assert ContextRetriever(store).retrieve("q", "u") == []

    def test_missing_text_becomes_empty_string(self):
        store = FakeMemoryStore(payload=[
            {"text": None, "meta": {"originalFilename": "a.pdf"}},
            {"meta": {"originalFilename": "b.pdf"}},
        ])
        chunks = ContextRetriever(store).retrieve("q", "u")

        assert [c.text for c in chunks] == ["", ""]
        assert [c.source_id for c in chunks] == ["a.pdf", "b.pdf"]

    def test_store_errors_propagate(self):
        store = FakeMemoryStore(error=LangbaseError("Memory not found", status_code=404))
        with pytest.raises(LangbaseError):
            ContextRetriever(store).retrieve("q", "u")
