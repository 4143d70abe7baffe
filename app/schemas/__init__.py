"""Schemas module - Import all schemas."""
from app.schemas.review import ReviewRequest, ReviewResult, GuidelineExcerpt
from app.schemas.guideline import (
    GuidelineDocument,
    GuidelineDocumentCreate,
    GuidelineChunk,
    EmbeddingBackfillResult,
)
from app.schemas.common import Message, ErrorResponse

__all__ = [
    "ReviewRequest",
    "ReviewResult",
    "GuidelineExcerpt",
    "GuidelineDocument",
    "GuidelineDocumentCreate",
    "GuidelineChunk",
    "EmbeddingBackfillResult",
    "Message",
    "ErrorResponse",
]
