"""
Pydantic schemas for code review requests.
"""
from pydantic import BaseModel, Field

from app.core.agents.review.schemas import GuidelineExcerpt, ReviewResult


class ReviewRequest(BaseModel):
    """Schema for a code review request."""

    repository_url: str = Field(..., description="Repository, tree or file URL on GitHub or GitLab")


__all__ = ["ReviewRequest", "ReviewResult", "GuidelineExcerpt"]
