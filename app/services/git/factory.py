"""
Provider selection by URL.
"""
import logging
from typing import List, Optional

from app.core.exceptions import UnsupportedProviderError
from app.services.git.base import RepositoryProvider
from app.services.git.github import GitHubProvider
from app.services.git.gitlab import GitLabProvider

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Picks the first provider whose can_handle accepts a URL."""

    def __init__(self, providers: Optional[List[RepositoryProvider]] = None):
        self.providers = providers if providers is not None else [GitHubProvider(), GitLabProvider()]

    def get_provider(self, url: str) -> RepositoryProvider:
        """
        Resolve the provider for a URL.

        Raises:
            UnsupportedProviderError: If no provider recognises the URL
        """
        for provider in self.providers:
            if provider.can_handle(url):
                logger.debug(f"Using {provider.get_provider_name()} provider for {url}")
                return provider
        raise UnsupportedProviderError(f"No Git provider found for URL: {url}")
