"""Tests for the Confluence page client."""
import httpx
import pytest

from app.core.exceptions import ConfluenceError
from app.services.confluence_service import ConfluenceService, extract_page_id

BASE_URL = "https://acme.atlassian.net"
PAGE_URL = f"{BASE_URL}/wiki/spaces/ENG/pages/123456/Java+Guidelines"


def page_payload(html: str = "<p>Use camelCase.</p>", title: str = "Java Guidelines") -> dict:
    return {"id": "123456", "title": title, "body": {"storage": {"value": html, "representation": "storage"}}}


@pytest.fixture
def make_service(mock_http_client):
    def _make(handler):
        client = mock_http_client(handler, base_url=BASE_URL)
        return ConfluenceService(base_url=BASE_URL, username="bot", api_token="token", client=client)
    return _make


class TestExtractPageId:
    """Page ids from browser URLs."""

    @pytest.mark.parametrize("url,expected", [
        (PAGE_URL, "123456"),
        (f"{BASE_URL}/wiki/spaces/ENG/pages/42", "42"),
        (f"{BASE_URL}/wiki/pages/viewpage.action?pageId=789", "789"),
        (f"{BASE_URL}/wiki/spaces/ENG/overview", None),
        ("", None),
    ])
    def test_extract_page_id(self, url, expected):
        assert extract_page_id(url) == expected


class TestConfluenceService:
    """Fetching storage-format pages."""

    def test_fetch_page(self, make_service):
        # Arrange
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=page_payload())

        service = make_service(handler)

        # Act
        page = service.fetch_page(PAGE_URL)

        # Assert
        assert page == {"page_id": "123456", "title": "Java Guidelines", "html": "<p>Use camelCase.</p>"}
        assert seen[0].url.path == "/wiki/rest/api/content/123456"
        assert seen[0].url.params["expand"] == "body.storage"

    def test_missing_title_gets_default(self, make_service):
        service = make_service(lambda request: httpx.Response(200, json=page_payload(title="")))

        assert service.fetch_page(PAGE_URL)["title"] == "Untitled Page"

    def test_url_without_page_id(self, make_service):
        service = make_service(lambda request: httpx.Response(200, json=page_payload()))

        with pytest.raises(ConfluenceError):
            service.fetch_page(f"{BASE_URL}/wiki/spaces/ENG/overview")

    def test_http_error_status(self, make_service):
        service = make_service(lambda request: httpx.Response(401, json={"message": "Unauthorized"}))

        with pytest.raises(ConfluenceError) as exc_info:
            service.fetch_page(PAGE_URL)

        assert "401" in str(exc_info.value)
        assert exc_info.value.details["page_id"] == "123456"

    def test_transport_error(self, make_service):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(ConfluenceError):
            make_service(handler).fetch_page(PAGE_URL)

    def test_invalid_json(self, make_service):
        service = make_service(lambda request: httpx.Response(200, text="<html>login</html>"))

        with pytest.raises(ConfluenceError):
            service.fetch_page(PAGE_URL)

    def test_empty_body(self, make_service):
        service = make_service(lambda request: httpx.Response(200, json=page_payload(html="  ")))

        with pytest.raises(ConfluenceError):
            service.fetch_page(PAGE_URL)

    def test_unconfigured_base_url(self):
        service = ConfluenceService(base_url="", username="", api_token="")

        with pytest.raises(ConfluenceError):
            service.fetch_page(PAGE_URL)
