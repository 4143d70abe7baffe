"""Models module - Import all models here for Alembic."""
from app.db.base import Base
from app.models.guideline_document import GuidelineDocument
from app.models.guideline_chunk import GuidelineChunk

__all__ = ["Base", "GuidelineDocument", "GuidelineChunk"]
