"""Tests for guideline chunk persistence."""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from app.core.helpers.saver import GuidelineStore
from app.models import GuidelineChunk, GuidelineDocument


@pytest.fixture
def document(db_session):
    doc = GuidelineDocument(
        url="https://acme.atlassian.net/wiki/spaces/ENG/pages/123/Java",
        title="Java Guidelines",
        page_id="123",
    )
    db_session.add(doc)
    db_session.commit()
    db_session.refresh(doc)
    return doc


@pytest.fixture
def store(db_session):
    return GuidelineStore(db_session)


class TestReplaceDocumentChunks:
    """Chunk replacement keeps sequences contiguous from 1."""

    def test_chunks_are_numbered_from_one(self, store, document):
        rows = store.replace_document_chunks(
            document.id, ["First.", "Second.", "Third."], titles=["First.", None, "Third."]
        )

        assert [r.sequence for r in rows] == [1, 2, 3]
        assert [r.content for r in rows] == ["First.", "Second.", "Third."]
        assert rows[1].title is None
        assert all(r.embedding is None for r in rows)

    def test_replace_drops_previous_chunks(self, store, document):
        store.replace_document_chunks(document.id, ["old 1", "old 2", "old 3"])

        store.replace_document_chunks(document.id, ["new 1", "new 2"])

        stored = store.list_for_document(document.id)
        assert [(c.sequence, c.content) for c in stored] == [(1, "new 1"), (2, "new 2")]

    def test_replace_leaves_other_documents_alone(self, store, document, db_session):
        other = GuidelineDocument(url="https://acme.atlassian.net/wiki/pages/456", title="Other")
        db_session.add(other)
        db_session.commit()
        store.replace_document_chunks(other.id, ["kept"])

        store.replace_document_chunks(document.id, ["replaced"])

        assert [c.content for c in store.list_for_document(other.id)] == ["kept"]
        assert len(store.list_all()) == 2

    def test_titles_length_must_match(self, store, document):
        with pytest.raises(ValueError):
            store.replace_document_chunks(document.id, ["a", "b"], titles=["only one"])

    def test_failure_rolls_back(self, document):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("database is locked")

        with pytest.raises(RuntimeError):
            GuidelineStore(db).replace_document_chunks(document.id, ["a"])

        db.rollback.assert_called_once()


class TestChunkEmbeddings:
    """Embedding backfill bookkeeping."""

    def test_set_embedding_and_missing_list(self, store, document, embedding_vector):
        # Arrange
        rows = store.replace_document_chunks(document.id, ["one", "two"])

        # Act
        store.set_embedding(rows[0].id, embedding_vector)

        # Assert
        missing = store.list_missing_embeddings()
        assert [c.content for c in missing] == ["two"]

    def test_set_embedding_for_unknown_chunk(self, store, embedding_vector):
        with pytest.raises(ValueError):
            store.set_embedding(999, embedding_vector)


class TestDeleteAndSearch:
    """Deletion counts and search limits."""

    def test_delete_returns_count(self, store, document, db_session):
        store.replace_document_chunks(document.id, ["a", "b", "c"])

        assert store.delete_document_chunks(document.id) == 3
        assert db_session.query(GuidelineChunk).count() == 0

    def test_delete_without_chunks(self, store, document):
        assert store.delete_document_chunks(document.id) == 0

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit_returns_nothing(self, limit):
        db = MagicMock()

        assert GuidelineStore(db).find_nearest([0.1, 0.2], limit) == []
        db.query.assert_not_called()


class TestNearestQuery:
    """Shape of the pgvector similarity search."""

    @pytest.fixture
    def compiled(self, store):
        query = store.nearest_query([0.1, 0.2, 0.3], 5)
        return query.statement.compile(dialect=postgresql.dialect())

    def test_only_embedded_chunks_of_active_documents(self, compiled):
        sql = str(compiled)

        assert "JOIN guideline_documents ON guideline_documents.id = guideline_chunks.document_id" in sql
        assert "guideline_chunks.embedding IS NOT NULL" in sql
        assert "guideline_documents.active IS true" in sql

    def test_nearest_first_by_cosine_distance(self, compiled):
        sql = str(compiled)

        assert "ORDER BY guideline_chunks.embedding <=> " in sql
        assert "DESC" not in sql
        assert "LIMIT" in sql
        assert 5 in compiled.params.values()

    def test_failed_search_rolls_back_and_reraises(self):
        # Arrange
        db = MagicMock()
        db.query.return_value.join.return_value.filter.return_value.filter.return_value \
            .order_by.return_value.limit.return_value.all.side_effect = RuntimeError(
                "operator does not exist: vector <=> vector"
            )

        # Act
        with pytest.raises(RuntimeError):
            GuidelineStore(db).find_nearest([0.1, 0.2], 3)

        # Assert
        db.rollback.assert_called_once()
