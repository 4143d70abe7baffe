"""
Pydantic schemas for guideline documents and chunks.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class GuidelineDocumentBase(BaseModel):
    """Base guideline document schema."""

    url: str
    title: Optional[str] = None
    description: Optional[str] = None


class GuidelineDocumentCreate(GuidelineDocumentBase):
    """Schema for registering a guideline document."""

    active: bool = True


class GuidelineDocument(GuidelineDocumentBase):
    """Schema for guideline document response."""

    id: int
    page_id: Optional[str] = None
    active: bool
    last_fetched: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Pydantic config."""

        from_attributes = True


class GuidelineChunk(BaseModel):
    """Schema for a stored guideline chunk."""

    id: int
    document_id: int
    title: Optional[str] = None
    content: str
    sequence: int
    has_embedding: bool


class EmbeddingBackfillResult(BaseModel):
    """Outcome of embedding generation for chunks that had none."""

    processed: int
    failed: int
