"""
Confluence REST client for fetching guideline pages.
"""
import logging
import re
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ConfluenceError

logger = logging.getLogger(__name__)

PAGES_PATH_PATTERN = re.compile(r"/pages/(\d+)(?:/|$|\?|#)")
PAGE_ID_PARAM_PATTERN = re.compile(r"[?&]pageId=(\d+)")


def extract_page_id(url: str) -> Optional[str]:
    """Return the numeric page id of a Confluence page URL, or None."""
    if not url:
        return None
    match = PAGES_PATH_PATTERN.search(url) or PAGE_ID_PARAM_PATTERN.search(url)
    return match.group(1) if match else None


class ConfluenceService:
    """Fetch page titles and storage-format bodies from Confluence Cloud."""

    CONTENT_PATH = "/wiki/rest/api/content/{page_id}"

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        api_token: Optional[str] = None,
        timeout: float = settings.HTTP_TIMEOUT_SECONDS,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.CONFLUENCE_BASE_URL).rstrip("/")
        self.username = username if username is not None else settings.CONFLUENCE_USERNAME
        self.api_token = api_token if api_token is not None else settings.CONFLUENCE_API_TOKEN
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy initialization of the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                auth=(self.username, self.api_token),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    def fetch_page(self, url: str) -> Dict[str, Any]:
        """
        Fetch a page by its browser URL.

        Args:
            url: Confluence page URL containing /pages/<id> or pageId=<id>

        Returns:
            Dict with page_id, title and html

        Raises:
            ConfluenceError: If the id cannot be found or the page cannot be fetched
        """
        page_id = extract_page_id(url)
        if page_id is None:
            raise ConfluenceError(f"Could not extract page ID from URL: {url}")

        if not self.base_url and self._client is None:
            raise ConfluenceError("CONFLUENCE_BASE_URL not configured")

        logger.info(f"Fetching Confluence page {page_id}")
        try:
            response = self.client.get(
                self.CONTENT_PATH.format(page_id=page_id),
                params={"expand": "body.storage"},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ConfluenceError(
                f"Confluence returned {e.response.status_code} for page {page_id}",
                details={"page_id": page_id},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ConfluenceError(
                f"Error fetching content from Confluence: {e}",
                details={"page_id": page_id},
            ) from e

        html = ((payload.get("body") or {}).get("storage") or {}).get("value") or ""
        if not html.strip():
            raise ConfluenceError(f"Empty HTML content received from Confluence for page ID: {page_id}")

        return {
            "page_id": page_id,
            "title": payload.get("title") or "Untitled Page",
            "html": html,
        }
