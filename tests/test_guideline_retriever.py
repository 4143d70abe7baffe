"""Tests for best-effort guideline retrieval."""
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from app.core.helpers.retriever import GuidelineRetriever


@pytest.fixture
def store():
    store = MagicMock()
    store.find_nearest.return_value = [
        SimpleNamespace(id=7, document_id=1, title="Naming", content="Use camelCase.", sequence=2),
    ]
    return store


@pytest.fixture
def embedder():
    embedder = MagicMock()
    embedder.embed_query.return_value = [0.1, 0.2, 0.3]
    return embedder


class TestGuidelineRetriever:
    """Embedding the query and searching the store."""

    def test_returns_chunks_as_dicts(self, store, embedder):
        chunks = GuidelineRetriever(store, embedder).retrieve("public void run() {}", 5)

        assert chunks == [
            {"id": 7, "document_id": 1, "title": "Naming", "content": "Use camelCase.", "sequence": 2}
        ]
        embedder.embed_query.assert_called_once_with("public void run() {}")
        store.find_nearest.assert_called_once_with([0.1, 0.2, 0.3], 5)

    @pytest.mark.parametrize("query,limit", [("", 5), ("   ", 5), ("code", 0), ("code", -3)])
    def test_nothing_to_search(self, store, embedder, query, limit):
        assert GuidelineRetriever(store, embedder).retrieve(query, limit) == []
        embedder.embed_query.assert_not_called()
        store.find_nearest.assert_not_called()

    def test_long_query_is_truncated(self, store, embedder):
        GuidelineRetriever(store, embedder).retrieve("x" * 30000, 5)

        assert len(embedder.embed_query.call_args.args[0]) == GuidelineRetriever.MAX_QUERY_CHARS

    def test_embedding_failure_yields_no_guidelines(self, store, embedder):
        embedder.embed_query.side_effect = RuntimeError("quota exceeded")

        assert GuidelineRetriever(store, embedder).retrieve("code", 5) == []

    def test_search_failure_yields_no_guidelines(self, store, embedder):
        store.find_nearest.side_effect = RuntimeError("operator does not exist: vector <=> vector")

        assert GuidelineRetriever(store, embedder).retrieve("code", 5) == []
