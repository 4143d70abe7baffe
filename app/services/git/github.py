"""
GitHub provider using the REST contents API.
"""
import logging
from typing import Dict, List, Optional
from urllib.parse import urlsplit

import httpx

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.services.git.base import DirectoryEntry, RepositoryInfo, RepositoryProvider

logger = logging.getLogger(__name__)

GITHUB_HOSTS = ("github.com", "www.github.com")
RAW_CONTENT_URL = "https://raw.githubusercontent.com"


class GitHubProvider(RepositoryProvider):
    """Reads files and directory trees from github.com repositories."""

    name = "GitHub"

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ):
        super().__init__(client=client, timeout=timeout)
        self.token = token if token is not None else settings.GITHUB_TOKEN
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")

    def can_handle(self, url: str) -> bool:
        if not url:
            return False
        return urlsplit(url.strip()).netloc.lower() in GITHUB_HOSTS

    def extract_repository_info(self, url: str) -> RepositoryInfo:
        """
        Parse github.com/owner/repo[/tree/branch][/blob/branch/path...].

        Branch defaults to main when the URL names none.
        """
        if not self.can_handle(url):
            raise ProviderError(f"URL is not a GitHub URL: {url}", provider=self.name)

        parts = [p for p in urlsplit(url.strip()).path.split("/") if p]
        if len(parts) < 2:
            raise ProviderError(
                "Invalid GitHub URL format. Could not extract repository information.",
                provider=self.name,
            )

        owner = parts[0]
        repo = parts[1][:-4] if parts[1].endswith(".git") else parts[1]
        info = RepositoryInfo(owner=owner, repo=repo)

        if len(parts) > 3 and parts[2] in ("tree", "blob"):
            info.branch = parts[3]
            if parts[2] == "blob":
                if len(parts) < 5:
                    raise ProviderError(
                        "Invalid GitHub URL format. File URL has no path.", provider=self.name
                    )
                info.path = "/".join(parts[4:])

        return info

    def fetch_file_content(self, url: str) -> str:
        logger.info(f"Fetching code from GitHub URL: {url}")
        content = self._get(self.to_raw_url(url)).text
        if not content or not content.strip():
            raise ProviderError("Could not fetch code content from GitHub", provider=self.name)
        return content

    def to_raw_url(self, url: str) -> str:
        """Rewrite a /blob/ page URL into its raw.githubusercontent.com equivalent."""
        info = self.extract_repository_info(url)
        if info.path is None:
            raise ProviderError(
                "Invalid GitHub URL format. Please provide a URL to a specific file.",
                provider=self.name,
            )
        return f"{RAW_CONTENT_URL}/{info.owner}/{info.repo}/{info.branch}/{info.path}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _list_root(self, owner: str, repo: str, branch: str) -> List[DirectoryEntry]:
        root_url = f"{self.api_url}/repos/{owner}/{repo}/contents"
        params = {"ref": branch} if branch else None
        logger.info(f"Fetching root contents from URL: {root_url}")
        return self._parse_listing(self._get_json_list(root_url, params=params))

    def _list_directory(self, owner: str, repo: str, branch: str, entry: DirectoryEntry) -> List[DirectoryEntry]:
        if not entry.url:
            raise ProviderError(f"No listing URL for {entry.path}", provider=self.name)
        # GitHub's own listing URL already carries ?ref=<branch>
        return self._parse_listing(self._get_json_list(entry.url))

    @staticmethod
    def _parse_listing(items: List[dict]) -> List[DirectoryEntry]:
        entries = []
        for item in items:
            entries.append(DirectoryEntry(
                name=item.get("name", ""),
                path=item.get("path", ""),
                type=item.get("type", ""),
                url=item.get("url"),
                download_url=item.get("download_url"),
                html_url=item.get("html_url"),
            ))
        return entries
