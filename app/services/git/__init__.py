"""
Code host providers.
"""
from .base import DirectoryEntry, RepositoryInfo, RepositoryProvider, ReviewableFile
from .github import GitHubProvider
from .gitlab import GitLabProvider
from .factory import ProviderFactory

__all__ = [
    "RepositoryProvider",
    "DirectoryEntry",
    "RepositoryInfo",
    "ReviewableFile",
    "GitHubProvider",
    "GitLabProvider",
    "ProviderFactory",
]
