"""
Guideline chunk model: an embedded fragment of a guideline document.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, UniqueConstraint
from pgvector.sqlalchemy import Vector
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.config import settings
from app.db.base import Base


class GuidelineChunk(Base):
    __tablename__ = "guideline_chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "sequence", name="uq_guideline_chunks_document_sequence"),
    )

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(
        Integer,
        ForeignKey("guideline_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content = Column(Text, nullable=False)
    title = Column(Text, nullable=True)
    sequence = Column(Integer, nullable=False)  # 1-based, contiguous per document
    embedding = Column(Vector(settings.EMBEDDING_DIMENSION), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    document = relationship("GuidelineDocument", back_populates="chunks")
