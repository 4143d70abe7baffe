"""
Guideline ingestion pipeline: fetch, extract, chunk, store and embed.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.agents.guidelines.description_generator import DescriptionGenerator
from app.core.config import settings
from app.core.exceptions import ConfluenceError, InvalidGuidelineError, ResourceNotFoundError
from app.core.helpers.chunker import TextChunker, extract_title
from app.core.helpers.embedder import EmbeddingPort, EmbeddingService
from app.core.helpers.extracter import GuidelineTextExtractor
from app.core.helpers.saver import GuidelineStore
from app.models.guideline_chunk import GuidelineChunk
from app.models.guideline_document import GuidelineDocument
from app.services.confluence_service import ConfluenceService, extract_page_id

logger = logging.getLogger(__name__)


class GuidelineProcessor:
    """
    Main guideline processing pipeline.
    Orchestrates fetching, extraction, chunking, storage and embedding.
    """

    def __init__(
        self,
        db: Session,
        confluence: Optional[ConfluenceService] = None,
        embedder: Optional[EmbeddingPort] = None,
        describer: Optional[DescriptionGenerator] = None,
        chunker: Optional[TextChunker] = None,
        min_chunk_length: int = settings.GUIDELINE_MIN_CHUNK_LENGTH,
    ):
        """
        Initialize guideline processor with database session.

        Args:
            db: SQLAlchemy database session
            confluence: Page source (defaults to a configured ConfluenceService)
            embedder: Embedding backend (defaults to EmbeddingService, built on first use)
            describer: Description generator for new documents
            chunker: Text chunker (defaults to GUIDELINE_CHUNK_SIZE)
            min_chunk_length: Chunks this short or shorter after trimming are dropped
        """
        self.db = db
        self.confluence = confluence or ConfluenceService()
        self._embedder = embedder
        self.describer = describer or DescriptionGenerator()
        self.chunker = chunker or TextChunker(settings.GUIDELINE_CHUNK_SIZE)
        self.extractor = GuidelineTextExtractor()
        self.store = GuidelineStore(db)
        self.min_chunk_length = min_chunk_length

    @property
    def embedder(self) -> EmbeddingPort:
        """
        Embedding backend, created on first use.

        Listing, toggling and deleting documents work without an OpenAI key.

        Raises:
            ValueError: If OPENAI_API_KEY is not configured
        """
        if self._embedder is None:
            self._embedder = EmbeddingService()
        return self._embedder

    def list_documents(self) -> List[GuidelineDocument]:
        return self.db.query(GuidelineDocument).order_by(GuidelineDocument.id).all()

    def get_document(self, document_id: int) -> GuidelineDocument:
        """
        Raises:
            ResourceNotFoundError: If no document has this id
        """
        document = self.db.query(GuidelineDocument).filter(GuidelineDocument.id == document_id).first()
        if document is None:
            raise ResourceNotFoundError(f"Guideline document {document_id} not found")
        return document

    def list_chunks(self, document_id: int) -> List[GuidelineChunk]:
        self.get_document(document_id)
        return self.store.list_for_document(document_id)

    def register_document(
        self,
        url: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        active: bool = True,
    ) -> GuidelineDocument:
        """
        Register a documentation page and, when active, ingest it.

        Missing title and description are filled from the page.

        Args:
            url: Confluence page URL
            title: Optional display title
            description: Optional description
            active: Whether chunks take part in retrieval

        Returns:
            The stored document

        Raises:
            InvalidGuidelineError: If the URL is malformed or already registered
            ConfluenceError: If the page cannot be fetched or has no text
        """
        url = (url or "").strip()
        page_id = extract_page_id(url)
        if page_id is None:
            raise InvalidGuidelineError(f"Could not extract page ID from URL: {url}")

        if self.db.query(GuidelineDocument).filter(GuidelineDocument.url == url).first():
            raise InvalidGuidelineError(f"Guideline document already registered: {url}")

        page = self.confluence.fetch_page(url)
        text = self.extractor.extract_text(page["html"])

        document = GuidelineDocument(
            url=url,
            title=(title or "").strip() or page["title"],
            description=(description or "").strip() or self.describer.generate(text),
            page_id=page["page_id"],
            active=active,
        )
        try:
            self.db.add(document)
            self.db.commit()
            self.db.refresh(document)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to store guideline document '{url}': {e}")
            raise

        logger.info(f"Registered guideline document {document.id} for {url}")

        if active:
            self._ingest(document, text)
        return document

    def refresh_document(self, document_id: int) -> GuidelineDocument:
        """
        Re-fetch a page and atomically replace its chunks.

        Raises:
            ResourceNotFoundError: Unknown document
            ConfluenceError: Page cannot be fetched or has no text
        """
        document = self.get_document(document_id)
        logger.info(f"Refreshing guideline document {document_id} from {document.url}")

        page = self.confluence.fetch_page(document.url)
        text = self.extractor.extract_text(page["html"])
        self._ingest(document, text)
        return document

    def toggle_active(self, document_id: int) -> GuidelineDocument:
        document = self.get_document(document_id)
        document.active = not document.active
        self.db.commit()
        self.db.refresh(document)
        logger.info(f"Guideline document {document_id} active={document.active}")
        return document

    def delete_document(self, document_id: int) -> None:
        """Delete a document together with all of its chunks."""
        document = self.get_document(document_id)
        self.store.delete_document_chunks(document_id)
        self.db.delete(document)
        self.db.commit()
        logger.info(f"Deleted guideline document {document_id}")

    def generate_missing_embeddings(self) -> Dict[str, int]:
        """
        Embed every chunk that has no embedding yet.

        Returns:
            Counts of processed and failed chunks
        """
        missing = self.store.list_missing_embeddings()
        logger.info(f"Generating embeddings for {len(missing)} chunks")

        failed = 0
        for chunk in missing:
            if not self._embed_chunk(chunk):
                failed += 1

        return {"processed": len(missing) - failed, "failed": failed}

    def _ingest(self, document: GuidelineDocument, text: str) -> int:
        """Chunk, store and embed a document's text; returns the stored chunk count."""
        if not text.strip():
            raise ConfluenceError(f"No text content extracted from {document.url}")

        chunks = [
            chunk.strip()
            for chunk in self.chunker.chunk_text(text)
            if len(chunk.strip()) > self.min_chunk_length
        ]
        if not chunks:
            logger.warning(f"No content blocks created for URL: {document.url}")

        titles = [extract_title(chunk) for chunk in chunks]
        rows = self.store.replace_document_chunks(document.id, chunks, titles)

        embedded = sum(1 for row in rows if self._embed_chunk(row))
        logger.info(f"Stored {len(rows)} chunks for document {document.id}, {embedded} embedded")

        document.last_fetched = datetime.now(timezone.utc)
        self.db.commit()
        return len(rows)

    def _embed_chunk(self, chunk: GuidelineChunk) -> bool:
        """Embed one chunk; a failure leaves its embedding absent."""
        try:
            self.store.set_embedding(chunk.id, self.embedder.embed_query(chunk.content))
            return True
        except Exception as e:
            logger.warning(f"Failed to embed guideline chunk {chunk.id}: {e}")
            return False
