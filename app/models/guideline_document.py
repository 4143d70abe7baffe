"""
Guideline document model: one ingested documentation page.
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class GuidelineDocument(Base):
    """Documentation page whose chunks ground code reviews."""

    __tablename__ = "guideline_documents"

    id = Column(Integer, primary_key=True, index=True)
    url = Column(String, unique=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    page_id = Column(String, nullable=True)  # Confluence page id
    active = Column(Boolean, default=True, nullable=False)
    last_fetched = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    chunks = relationship(
        "GuidelineChunk",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GuidelineChunk.sequence",
    )
