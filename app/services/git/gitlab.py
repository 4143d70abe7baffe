"""
GitLab provider using the v4 repository API.
"""
import logging
from typing import Dict, List, Optional
from urllib.parse import quote, urlencode, urlsplit

import httpx

from app.core.config import settings
from app.core.exceptions import ProviderError
from app.services.git.base import DirectoryEntry, RepositoryInfo, RepositoryProvider

logger = logging.getLogger(__name__)

GITLAB_HOSTS = ("gitlab.com", "www.gitlab.com")
PAGE_SIZE = 100


class GitLabProvider(RepositoryProvider):
    """
    Reads files and trees from gitlab.com projects.

    Project paths may be nested in groups, so everything before the last
    path segment is treated as the owner namespace.
    """

    name = "GitLab"

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
    ):
        super().__init__(client=client, timeout=timeout)
        self.token = token if token is not None else settings.GITLAB_TOKEN
        self.api_url = (api_url or settings.GITLAB_API_URL).rstrip("/")

    def can_handle(self, url: str) -> bool:
        if not url:
            return False
        return urlsplit(url.strip()).netloc.lower() in GITLAB_HOSTS

    def extract_repository_info(self, url: str) -> RepositoryInfo:
        """Parse gitlab.com/group/project[/-/tree/branch][/-/blob/branch/path...]."""
        if not self.can_handle(url):
            raise ProviderError(f"URL is not a GitLab URL: {url}", provider=self.name)

        parts = [p for p in urlsplit(url.strip()).path.split("/") if p]
        if "-" in parts:
            marker = parts.index("-")
            project_parts, route = parts[:marker], parts[marker + 1:]
        else:
            project_parts, route = parts, []

        if len(project_parts) < 2:
            raise ProviderError(
                "Invalid GitLab URL format. Could not extract repository information.",
                provider=self.name,
            )

        repo = project_parts[-1]
        repo = repo[:-4] if repo.endswith(".git") else repo
        info = RepositoryInfo(owner="/".join(project_parts[:-1]), repo=repo)

        if len(route) > 1 and route[0] in ("tree", "blob"):
            info.branch = route[1]
            if route[0] == "blob":
                if len(route) < 3:
                    raise ProviderError(
                        "Invalid GitLab URL format. File URL has no path.", provider=self.name
                    )
                info.path = "/".join(route[2:])

        return info

    def fetch_file_content(self, url: str) -> str:
        logger.info(f"Fetching code from GitLab URL: {url}")
        content = self._get(self.to_raw_url(url)).text
        if not content or not content.strip():
            raise ProviderError("Could not fetch code content from GitLab", provider=self.name)
        return content

    def to_raw_url(self, url: str) -> str:
        """Rewrite a /-/blob/ page URL into its /-/raw/ equivalent."""
        info = self.extract_repository_info(url)
        if info.path is None:
            raise ProviderError(
                "Invalid GitLab URL format. Please provide a URL to a specific file.",
                provider=self.name,
            )
        return f"https://gitlab.com/{info.owner}/{info.repo}/-/raw/{info.branch}/{info.path}"

    def _headers(self) -> Dict[str, str]:
        return {"PRIVATE-TOKEN": self.token} if self.token else {}

    def _project_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/projects/{quote(f'{owner}/{repo}', safe='')}"

    def _tree_url(self, owner: str, repo: str, branch: str, path: Optional[str] = None) -> str:
        params = {"ref": branch, "per_page": PAGE_SIZE}
        if path:
            params["path"] = path
        return f"{self._project_url(owner, repo)}/repository/tree?{urlencode(params)}"

    def _list_root(self, owner: str, repo: str, branch: str) -> List[DirectoryEntry]:
        root_url = self._tree_url(owner, repo, branch)
        logger.info(f"Fetching root contents from URL: {root_url}")
        return self._parse_listing(self._get_json_list(root_url), owner, repo, branch)

    def _list_directory(self, owner: str, repo: str, branch: str, entry: DirectoryEntry) -> List[DirectoryEntry]:
        if not entry.url:
            raise ProviderError(f"No listing URL for {entry.path}", provider=self.name)
        return self._parse_listing(self._get_json_list(entry.url), owner, repo, branch)

    def _parse_listing(self, items: List[dict], owner: str, repo: str, branch: str) -> List[DirectoryEntry]:
        entries = []
        for item in items:
            path = item.get("path", "")
            kind = {"tree": "dir", "blob": "file"}.get(item.get("type", ""), "")
            entry = DirectoryEntry(
                name=item.get("name", ""),
                path=path,
                type=kind,
                html_url=f"https://gitlab.com/{owner}/{repo}/-/blob/{branch}/{path}",
            )
            if kind == "dir":
                entry.url = self._tree_url(owner, repo, branch, path)
            else:
                entry.download_url = (
                    f"{self._project_url(owner, repo)}/repository/files/"
                    f"{quote(path, safe='')}/raw?{urlencode({'ref': branch})}"
                )
            entries.append(entry)
        return entries

