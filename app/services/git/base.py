"""
Base class for code host providers.
"""
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ProviderError, RateLimitExceededError

logger = logging.getLogger(__name__)

IGNORED_DIRECTORIES = frozenset({
    "node_modules", ".git", ".github", ".idea", ".vscode", "target", "build",
    "dist", "out", "coverage", ".metadata", "__pycache__", "bin", "obj",
})

SUPPORTED_EXTENSIONS = (
    ".java", ".js", ".ts", ".py", ".rb", ".c", ".cpp", ".cs", ".go", ".php",
    ".html", ".css", ".scss", ".json", ".xml", ".yaml", ".yml",
)


@dataclass
class ReviewableFile:
    """A file fetched from a code host for one review request."""
    name: str
    path: str
    content: str
    url: Optional[str] = None


@dataclass
class RepositoryInfo:
    """Parsed repository reference; path is set only for single-file URLs."""
    owner: str
    repo: str
    branch: str = "main"
    path: Optional[str] = None


def should_ignore_directory(name: str) -> bool:
    """Skip dependency, build output, IDE and hidden directories."""
    if not name:
        return True
    return name.startswith(".") or name.lower() in IGNORED_DIRECTORIES


def is_supported_file(name: str) -> bool:
    return bool(name) and name.lower().endswith(SUPPORTED_EXTENSIONS)


@dataclass
class DirectoryEntry:
    """One item of a directory listing, normalised across hosts."""
    name: str
    path: str
    type: str  # "file" or "dir"
    url: Optional[str] = None  # listing URL for directories
    download_url: Optional[str] = None  # raw content URL for files
    html_url: Optional[str] = None


class RepositoryProvider(ABC):
    """
    Adapter for one code hosting backend.

    Subclasses supply URL parsing and directory listing; the depth-first
    walk with its ignore list, extension filter and file cap lives here.
    """

    name = "Unknown"

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ):
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout, follow_redirects=True)
        return self._client

    def get_provider_name(self) -> str:
        return self.name

    @abstractmethod
    def can_handle(self, url: str) -> bool:
        """Pure pattern match on the URL, no network access."""

    @abstractmethod
    def extract_repository_info(self, url: str) -> RepositoryInfo:
        """
        Parse owner, repository, branch and optional file path from a web URL.

        Raises:
            ProviderError: If the URL is not for this host or lacks owner/repo
        """

    @abstractmethod
    def fetch_file_content(self, url: str) -> str:
        """
        Fetch the raw content behind a "view file" URL.

        Raises:
            ProviderError: On transport failure or empty content
        """

    @abstractmethod
    def _list_root(self, owner: str, repo: str, branch: str) -> List[DirectoryEntry]:
        ...

    @abstractmethod
    def _list_directory(self, owner: str, repo: str, branch: str, entry: DirectoryEntry) -> List[DirectoryEntry]:
        ...

    def _headers(self) -> Dict[str, str]:
        return {}

    def fetch_repository_files(
        self,
        owner: str,
        repo: str,
        branch: str,
        max_files: int,
    ) -> List[ReviewableFile]:
        """
        Collect up to max_files reviewable files, depth-first in listing order.

        Per-file and nested-directory failures are logged and skipped. A
        failure listing the repository root is not recoverable.

        Args:
            owner: Repository owner or namespace
            repo: Repository name
            branch: Branch or ref to read
            max_files: Hard cap on returned files

        Returns:
            Files in walk order

        Raises:
            ProviderError: If the repository root cannot be listed
        """
        if max_files <= 0:
            return []

        logger.info(f"Fetching repository contents for {owner}/{repo} on branch {branch}")
        files = list(itertools.islice(self.iter_repository_files(owner, repo, branch), max_files))

        if len(files) >= max_files:
            logger.info(f"Reached maximum number of files to review ({max_files})")
        logger.info(f"Total files collected for review: {len(files)}")
        return files

    def iter_repository_files(self, owner: str, repo: str, branch: str) -> Iterator[ReviewableFile]:
        """
        Lazily walk the repository.

        Directories are listed only when the consumer pulls past the files
        already found, so stopping early never lists another directory.
        """
        stack = [iter(self._list_root(owner, repo, branch))]

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            if entry.type == "dir":
                if should_ignore_directory(entry.name):
                    logger.debug(f"Skipping ignored directory {entry.path}")
                    continue
                try:
                    children = self._list_directory(owner, repo, branch, entry)
                except ProviderError as e:
                    logger.error(f"Skipping directory {entry.path}: {e}")
                    continue
                stack.append(iter(children))

            elif entry.type == "file" and is_supported_file(entry.name):
                try:
                    content = self._download(entry)
                except ProviderError as e:
                    logger.warning(f"Could not fetch content for file {entry.path}: {e}")
                    continue
                if not content.strip():
                    logger.debug(f"Skipping empty file {entry.path}")
                    continue
                yield ReviewableFile(
                    name=entry.name,
                    path=entry.path,
                    content=content,
                    url=entry.html_url,
                )

    def _download(self, entry: DirectoryEntry) -> str:
        if not entry.download_url:
            raise ProviderError(f"No download URL for {entry.path}", provider=self.name)
        return self._get(entry.download_url).text

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        GET a URL with provider headers, wrapping every failure in ProviderError.

        Raises:
            RateLimitExceededError: If the host reports an exhausted rate limit
            ProviderError: On any other transport or status failure
        """
        try:
            response = self.client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            raise ProviderError(f"Request to {self.name} failed: {e}", provider=self.name) from e

        if response.status_code in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            raise RateLimitExceededError(
                f"{self.name} API rate limit exceeded",
                provider=self.name,
                details={"reset": response.headers.get("X-RateLimit-Reset")},
            )

        if response.is_error:
            raise ProviderError(
                f"{self.name} returned {response.status_code} for {url}",
                provider=self.name,
                details={"status_code": response.status_code},
            )
        return response

    def _get_json_list(self, url: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        response = self._get(url, params=params)
        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"Could not parse {self.name} listing: {e}", provider=self.name) from e
        if not isinstance(payload, list):
            raise ProviderError(f"Unexpected {self.name} listing format for {url}", provider=self.name)
        return payload
