"""
Guideline chunk storage backed by PostgreSQL + pgvector.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Query, Session

from app.models.guideline_chunk import GuidelineChunk
from app.models.guideline_document import GuidelineDocument

logger = logging.getLogger(__name__)


class GuidelineStore:
    """Persist guideline chunks and answer nearest-neighbour queries."""

    def __init__(self, db: Session):
        """
        Initialize guideline store.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def replace_document_chunks(
        self,
        document_id: int,
        chunks: Sequence[str],
        titles: Optional[Sequence[Optional[str]]] = None,
    ) -> List[GuidelineChunk]:
        """
        Replace every chunk of a document in a single transaction.

        Readers see either the old chunk set or the new one, never a mix.

        Args:
            document_id: Owning guideline document
            chunks: Chunk texts in source order
            titles: Optional title per chunk

        Returns:
            The new chunk rows, sequence numbers 1..N

        Raises:
            ValueError: If titles and chunks lengths don't match
        """
        if titles is not None and len(titles) != len(chunks):
            raise ValueError(
                f"Chunks ({len(chunks)}) and titles ({len(titles)}) length mismatch"
            )

        try:
            removed = (
                self.db.query(GuidelineChunk)
                .filter(GuidelineChunk.document_id == document_id)
                .delete(synchronize_session="fetch")
            )
            # Old rows must be gone before the unique (document_id, sequence) rows land
            self.db.flush()

            rows = []
            for idx, content in enumerate(chunks):
                row = GuidelineChunk(
                    document_id=document_id,
                    content=content,
                    title=titles[idx] if titles is not None else None,
                    sequence=idx + 1,
                )
                self.db.add(row)
                rows.append(row)

            self.db.commit()
            for row in rows:
                self.db.refresh(row)

            logger.info(
                f"Replaced {removed} chunks of document {document_id} with {len(rows)} new chunks"
            )
            return rows

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to replace chunks of document {document_id}: {e}")
            raise

    def delete_document_chunks(self, document_id: int) -> int:
        """Delete all chunks of a document and return how many were removed."""
        try:
            removed = (
                self.db.query(GuidelineChunk)
                .filter(GuidelineChunk.document_id == document_id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete chunks of document {document_id}: {e}")
            raise

        logger.info(f"Deleted {removed} chunks of document {document_id}")
        return removed

    def find_nearest(self, query_vector: List[float], limit: int) -> List[GuidelineChunk]:
        """
        Return the chunks closest to a query vector.

        Uses pgvector's cosine distance operator; chunks without an embedding
        and chunks of inactive documents are not searchable. A failed search
        rolls the session back before re-raising.

        Args:
            query_vector: Query embedding
            limit: Maximum number of chunks

        Returns:
            Chunks ordered by ascending distance
        """
        if limit <= 0:
            return []

        try:
            chunks = self.nearest_query(query_vector, limit).all()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Nearest-neighbour search failed: {e}")
            raise

        logger.debug(f"Nearest-neighbour search returned {len(chunks)} chunks")
        return chunks

    def nearest_query(self, query_vector: List[float], limit: int) -> Query:
        """Build the similarity search without running it."""
        return (
            self.db.query(GuidelineChunk)
            .join(GuidelineDocument, GuidelineDocument.id == GuidelineChunk.document_id)
            .filter(GuidelineChunk.embedding.isnot(None))
            .filter(GuidelineDocument.active.is_(True))
            .order_by(GuidelineChunk.embedding.cosine_distance(query_vector))
            .limit(limit)
        )

    def list_all(self) -> List[GuidelineChunk]:
        return (
            self.db.query(GuidelineChunk)
            .order_by(GuidelineChunk.document_id, GuidelineChunk.sequence)
            .all()
        )

    def list_for_document(self, document_id: int) -> List[GuidelineChunk]:
        return (
            self.db.query(GuidelineChunk)
            .filter(GuidelineChunk.document_id == document_id)
            .order_by(GuidelineChunk.sequence)
            .all()
        )

    def list_missing_embeddings(self) -> List[GuidelineChunk]:
        """Chunks whose embedding has not been generated yet."""
        return (
            self.db.query(GuidelineChunk)
            .filter(GuidelineChunk.embedding.is_(None))
            .order_by(GuidelineChunk.document_id, GuidelineChunk.sequence)
            .all()
        )

    def set_embedding(self, chunk_id: int, embedding: List[float]) -> None:
        """
        Attach an embedding to a stored chunk.

        Raises:
            ValueError: If the chunk does not exist
        """
        chunk = self.db.query(GuidelineChunk).filter(GuidelineChunk.id == chunk_id).first()
        if chunk is None:
            raise ValueError(f"Guideline chunk {chunk_id} not found")

        try:
            chunk.embedding = embedding
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store embedding for chunk {chunk_id}: {e}")
            raise
