"""
Code review agent modules.
"""
from .completion import ChatCompletionAdapter, CompletionPort
from .generator import ReviewGenerator
from .orchestrator import ReviewOrchestrator
from .schemas import GuidelineExcerpt, RepositoryInfo, ReviewableFile, ReviewResult

__all__ = [
    "ChatCompletionAdapter",
    "CompletionPort",
    "ReviewGenerator",
    "ReviewOrchestrator",
    "GuidelineExcerpt",
    "RepositoryInfo",
    "ReviewableFile",
    "ReviewResult",
]
