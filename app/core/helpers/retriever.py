"""
Guideline retrieval using pgvector similarity search.
"""
import logging
from typing import Any, Dict, List

from app.core.helpers.embedder import EmbeddingPort
from app.core.helpers.saver import GuidelineStore

logger = logging.getLogger(__name__)


class GuidelineRetriever:
    """
    Retrieves the guideline chunks most similar to a piece of code.

    Retrieval is best-effort: any embedding or search failure yields an
    empty list so a review can still be produced without grounding.
    """

    # text-embedding-3-* accept ~8k tokens; code averages 3-4 chars per token
    MAX_QUERY_CHARS = 24000

    def __init__(self, store: GuidelineStore, embedder: EmbeddingPort):
        self.store = store
        self.embedder = embedder

    def retrieve(self, query: str, limit: int) -> List[Dict[str, Any]]:
        """
        Retrieve up to `limit` guideline chunks for a query text.

        Args:
            query: Code or text to search with
            limit: Maximum number of chunks

        Returns:
            Chunks as dicts, nearest first
        """
        if not query or not query.strip() or limit <= 0:
            return []

        if len(query) > self.MAX_QUERY_CHARS:
            logger.info(
                f"Truncating retrieval query from {len(query)} to {self.MAX_QUERY_CHARS} characters"
            )
            query = query[:self.MAX_QUERY_CHARS]

        try:
            query_embedding = self.embedder.embed_query(query)
            rows = self.store.find_nearest(query_embedding, limit)
        except Exception as e:
            logger.error(f"Guideline retrieval failed, continuing without guidelines: {e}")
            return []

        chunks = [
            {
                "id": row.id,
                "document_id": row.document_id,
                "title": row.title,
                "content": row.content,
                "sequence": row.sequence,
            }
            for row in rows
        ]
        logger.info(f"Retrieved {len(chunks)} guideline chunks")
        return chunks
