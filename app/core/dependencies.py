"""
Dependency injection for FastAPI endpoints.
"""
import logging
from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.agents.review.completion import ChatCompletionAdapter
from app.core.agents.review.generator import ReviewGenerator
from app.core.agents.review.orchestrator import ReviewOrchestrator
from app.core.config import settings
from app.core.guideline_processor import GuidelineProcessor
from app.core.helpers.embedder import EmbeddingService
from app.core.helpers.retriever import GuidelineRetriever
from app.core.helpers.saver import GuidelineStore
from app.db.base import SessionLocal
from app.services.git.factory import ProviderFactory

logger = logging.getLogger(__name__)


def get_db() -> Generator:
    """
    Dependency for database session.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache()
def get_provider_factory() -> ProviderFactory:
    """Providers hold pooled HTTP clients, so one factory serves every request."""
    return ProviderFactory()


def get_guideline_retriever(db: Session = Depends(get_db)) -> Optional[GuidelineRetriever]:
    """
    Build the retriever, or None when embeddings are not configured.

    Reviews still run without guidelines in that case.
    """
    try:
        embedder = EmbeddingService()
    except ValueError as e:
        logger.warning(f"Guideline retrieval disabled: {e}")
        return None
    return GuidelineRetriever(GuidelineStore(db), embedder)


def get_review_orchestrator(
    retriever: Optional[GuidelineRetriever] = Depends(get_guideline_retriever),
    provider_factory: ProviderFactory = Depends(get_provider_factory),
) -> ReviewOrchestrator:
    """
    Build a review orchestrator for one request.

    Args:
        retriever: Guideline retriever bound to the request's session
        provider_factory: Shared code host providers

    Returns:
        Orchestrator configured from settings
    """
    generator = ReviewGenerator(
        ChatCompletionAdapter(),
        max_attempts=settings.REVIEW_MAX_ATTEMPTS,
        backoff_seconds=settings.REVIEW_BACKOFF_SECONDS,
    )
    return ReviewOrchestrator(
        provider_factory=provider_factory,
        generator=generator,
        retriever=retriever,
        max_files_to_review=settings.MAX_FILES_TO_REVIEW,
        content_blocks_limit=settings.CONTENT_BLOCKS_LIMIT,
        file_chunk_size=settings.FILE_CHUNK_SIZE,
    )


def get_guideline_processor(db: Session = Depends(get_db)) -> GuidelineProcessor:
    return GuidelineProcessor(db)
