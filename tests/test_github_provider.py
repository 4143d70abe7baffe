"""Tests for the GitHub provider: URL parsing and the repository walk."""
from urllib.parse import unquote

import httpx
import pytest

from app.core.exceptions import ProviderError, RateLimitExceededError
from app.services.git.github import GitHubProvider

API = "https://api.github.com"
RAW = "https://raw.githubusercontent.com/acme/shop/main"
ROOT = f"{API}/repos/acme/shop/contents?ref=main"


def file_item(path: str) -> dict:
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "type": "file",
        "url": f"{API}/repos/acme/shop/contents/{path}?ref=main",
        "download_url": f"{RAW}/{path}",
        "html_url": f"https://github.com/acme/shop/blob/main/{path}",
    }


def dir_item(path: str) -> dict:
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "type": "dir",
        "url": f"{API}/repos/acme/shop/contents/{path}?ref=main",
        "download_url": None,
        "html_url": f"https://github.com/acme/shop/tree/main/{path}",
    }


def listing_url(path: str) -> str:
    return f"{API}/repos/acme/shop/contents/{path}?ref=main"


class FakeGitHub:
    """Answers requests from a URL table and records what was asked for."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests = []
        self.headers = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = unquote(str(request.url))
        self.requests.append(url)
        self.headers.append(request.headers)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, httpx.Response):
            return route
        if isinstance(route, str):
            return httpx.Response(200, text=route)
        return httpx.Response(200, json=route)


@pytest.fixture
def make_provider(mock_http_client):
    def _make(routes: dict, token: str = ""):
        fake = FakeGitHub(routes)
        provider = GitHubProvider(token=token, api_url=API, client=mock_http_client(fake))
        return provider, fake
    return _make


class TestGitHubUrlParsing:
    """Parsing github.com web URLs."""

    @pytest.fixture
    def provider(self):
        return GitHubProvider(token="", api_url=API)

    def test_repository_url(self, provider):
        info = provider.extract_repository_info("https://github.com/acme/shop")

        assert (info.owner, info.repo, info.branch, info.path) == ("acme", "shop", "main", None)

    def test_git_suffix_is_stripped(self, provider):
        assert provider.extract_repository_info("https://github.com/acme/shop.git").repo == "shop"

    def test_tree_url_sets_branch(self, provider):
        info = provider.extract_repository_info("https://github.com/acme/shop/tree/develop")

        assert info.branch == "develop"
        assert info.path is None

    def test_blob_url_sets_branch_and_path(self, provider):
        info = provider.extract_repository_info(
            "https://github.com/acme/shop/blob/release/src/app/Main.java"
        )

        assert info.branch == "release"
        assert info.path == "src/app/Main.java"

    @pytest.mark.parametrize("url", [
        "https://github.com/acme",
        "https://gitlab.com/acme/shop",
    ])
    def test_invalid_urls(self, provider, url):
        with pytest.raises(ProviderError):
            provider.extract_repository_info(url)

    @pytest.mark.parametrize("url,expected", [
        ("https://github.com/acme/shop", True),
        ("https://www.github.com/acme/shop", True),
        ("https://gitlab.com/acme/shop", False),
        ("https://example.com/github.com/acme", False),
        ("", False),
    ])
    def test_can_handle(self, provider, url, expected):
        assert provider.can_handle(url) is expected

    def test_raw_url_keeps_branch_from_blob_url(self, provider):
        raw = provider.to_raw_url("https://github.com/acme/shop/blob/develop/src/Main.java")

        assert raw == "https://raw.githubusercontent.com/acme/shop/develop/src/Main.java"

    def test_raw_url_requires_file_url(self, provider):
        with pytest.raises(ProviderError):
            provider.to_raw_url("https://github.com/acme/shop")


class TestGitHubFetchFile:
    """Single-file fetch through raw.githubusercontent.com."""

    def test_fetches_raw_content(self, make_provider):
        provider, fake = make_provider({f"{RAW}/src/Main.java": "class Main {}\n"})

        content = provider.fetch_file_content("https://github.com/acme/shop/blob/main/src/Main.java")

        assert content == "class Main {}\n"
        assert fake.requests == [f"{RAW}/src/Main.java"]

    def test_blank_content_is_an_error(self, make_provider):
        provider, _ = make_provider({f"{RAW}/src/Empty.java": "   \n"})

        with pytest.raises(ProviderError):
            provider.fetch_file_content("https://github.com/acme/shop/blob/main/src/Empty.java")

    def test_missing_file_is_an_error(self, make_provider):
        provider, _ = make_provider({})

        with pytest.raises(ProviderError):
            provider.fetch_file_content("https://github.com/acme/shop/blob/main/src/Gone.java")


class TestGitHubRepositoryWalk:
    """Depth-first enumeration with ignore list, extension filter and cap."""

    def test_ignored_directories_and_unsupported_files_are_skipped(self, make_provider):
        # Arrange
        routes = {
            ROOT: [
                dir_item("node_modules"),
                dir_item(".git"),
                dir_item("src"),
                file_item("README.md"),
            ],
            listing_url("src"): [file_item("src/Main.java")],
            f"{RAW}/src/Main.java": "class Main {}",
        }
        provider, fake = make_provider(routes)

        # Act
        files = provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        # Assert
        assert [f.path for f in files] == ["src/Main.java"]
        assert files[0].name == "Main.java"
        assert files[0].content == "class Main {}"
        assert files[0].url == "https://github.com/acme/shop/blob/main/src/Main.java"
        assert listing_url("node_modules") not in fake.requests
        assert listing_url(".git") not in fake.requests
        assert f"{RAW}/README.md" not in fake.requests

    def test_walk_is_depth_first_in_listing_order(self, make_provider):
        routes = {
            ROOT: [dir_item("lib"), file_item("app.py")],
            listing_url("lib"): [file_item("lib/util.py")],
            f"{RAW}/lib/util.py": "def util(): pass",
            f"{RAW}/app.py": "print('app')",
        }
        provider, _ = make_provider(routes)

        files = provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        assert [f.path for f in files] == ["lib/util.py", "app.py"]

    def test_cap_stops_walk_before_listing_more_directories(self, make_provider):
        # Arrange
        routes = {ROOT: [dir_item("a"), dir_item("b")]}
        for folder in ("a", "b"):
            paths = [f"{folder}/F{i}.java" for i in range(10)]
            routes[listing_url(folder)] = [file_item(p) for p in paths]
            routes.update({f"{RAW}/{p}": f"class F {{}} // {p}" for p in paths})
        provider, fake = make_provider(routes)

        # Act
        files = provider.fetch_repository_files("acme", "shop", "main", max_files=5)

        # Assert
        assert [f.path for f in files] == [f"a/F{i}.java" for i in range(5)]
        assert listing_url("b") not in fake.requests
        assert len([url for url in fake.requests if url.startswith(RAW)]) == 5

    def test_zero_cap_makes_no_requests(self, make_provider):
        provider, fake = make_provider({ROOT: [file_item("app.py")]})

        assert provider.fetch_repository_files("acme", "shop", "main", max_files=0) == []
        assert fake.requests == []

    def test_failed_and_empty_files_are_skipped(self, make_provider):
        routes = {
            ROOT: [file_item("A.java"), file_item("Blank.java"), file_item("B.java")],
            f"{RAW}/A.java": httpx.Response(500),
            f"{RAW}/Blank.java": "  \n\n",
            f"{RAW}/B.java": "class B {}",
        }
        provider, _ = make_provider(routes)

        files = provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        assert [f.path for f in files] == ["B.java"]

    def test_failed_nested_directory_is_skipped(self, make_provider):
        routes = {
            ROOT: [dir_item("broken"), file_item("App.py")],
            listing_url("broken"): httpx.Response(500),
            f"{RAW}/App.py": "print('ok')",
        }
        provider, _ = make_provider(routes)

        files = provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        assert [f.path for f in files] == ["App.py"]

    def test_root_listing_failure_is_raised(self, make_provider):
        provider, _ = make_provider({})

        with pytest.raises(ProviderError):
            provider.fetch_repository_files("acme", "shop", "main", max_files=10)

    def test_non_list_root_is_an_error(self, make_provider):
        provider, _ = make_provider({ROOT: {"message": "This is a file"}})

        with pytest.raises(ProviderError):
            provider.fetch_repository_files("acme", "shop", "main", max_files=10)

    def test_rate_limit_is_reported(self, make_provider):
        routes = {ROOT: httpx.Response(403, headers={"X-RateLimit-Remaining": "0"})}
        provider, _ = make_provider(routes)

        with pytest.raises(RateLimitExceededError):
            provider.fetch_repository_files("acme", "shop", "main", max_files=10)

    def test_token_and_accept_headers_are_sent(self, make_provider):
        provider, fake = make_provider({ROOT: []}, token="secret")

        provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        assert fake.headers[0]["Authorization"] == "token secret"
        assert fake.headers[0]["Accept"] == "application/vnd.github.v3+json"

    def test_transport_error_becomes_provider_error(self, mock_http_client):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = GitHubProvider(token="", api_url=API, client=mock_http_client(refuse))

        with pytest.raises(ProviderError) as exc_info:
            provider.fetch_repository_files("acme", "shop", "main", max_files=10)

        assert exc_info.value.details["provider"] == "GitHub"
