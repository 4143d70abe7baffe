"""
Data types shared by the code review agent.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, Field

from app.services.git.base import RepositoryInfo, ReviewableFile


class GuidelineExcerpt(BaseModel):
    """Guideline chunk used to ground a review."""
    title: str
    excerpt: str


class ReviewResult(BaseModel):
    """Assembled review returned to the caller."""
    review: str
    guidelines: List[GuidelineExcerpt] = Field(default_factory=list)
    timestamp: datetime
    repository_url: str


class ReviewState(TypedDict, total=False):
    """State for the code review graph."""
    repository_url: str

    # Classification
    provider: Any  # RepositoryProvider resolved for the URL
    repository: Optional[RepositoryInfo]
    mode: Optional[str]  # "single_file" or "project"

    # Fetched code
    files: List[ReviewableFile]

    # Grounding
    guideline_chunks: List[Dict[str, Any]]
    formatted_guidelines: str

    # Generation
    layout: Optional[str]  # "single", "chunked" or "project"
    sections: List[str]  # one review text per file or chunk, in order

    # Output
    review: Optional[str]
    status: str
