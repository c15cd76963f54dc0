"""
Pytest configuration and shared fixtures.
"""

import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from pintitles.config import Settings
from pintitles.logger import get_logger, reset_logger

API = "https://api.pinboard.in/v1"
LISTING_URL = f"{API}/posts/all"
ADD_URL = f"{API}/posts/add"


def make_response(
    status: int = 200,
    body: Any = b"",
    content_type: Optional[str] = "text/html; charset=utf-8",
    url: str = "https://example.com/",
) -> requests.Response:
    """A real requests.Response with its body already loaded."""
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp._content_consumed = True
    resp.encoding = "utf-8"
    resp.url = url
    if content_type:
        resp.headers["Content-Type"] = content_type
    return resp


def json_response(data: Any, status: int = 200) -> requests.Response:
    return make_response(status, json.dumps(data), "application/json")


def make_post(n: int, href: Optional[str] = None, description: Optional[str] = None, **extra) -> Dict[str, Any]:
    href = href or f"https://example.com/articles/{n}"
    post = {
        "href": href,
        "description": description if description is not None else f"Article {n}",
        "extended": f"notes {n}",
        "meta": "abc",
        "hash": f"hash{n}",
        "time": f"2020-01-{(n % 28) + 1:02d}T10:00:00Z",
        "shared": "no",
        "toread": "yes",
        "tags": "python reading",
    }
    post.update(extra)
    return post


class FakeSession:
    """Stands in for requests.Session.

    pages: one entry per listing request, in order. Each entry is a list of
        post dicts, a Response, or an exception to raise.
    sites: page URL -> Response or exception.
    add: Response or exception returned for every /posts/add call.
    """

    def __init__(self, pages=None, sites=None, add=None):
        self.pages: List[Any] = list(pages or [])
        self.sites: Dict[str, Any] = dict(sites or {})
        self.add = add if add is not None else json_response({"result_code": "done"})
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": headers, "timeout": timeout})
        if url == LISTING_URL:
            index = int(params["start"]) // int(params["results"])
            item = self.pages[index] if index < len(self.pages) else []
        elif url == ADD_URL:
            item = self.add
        else:
            item = self.sites.get(url, make_response(404, "<title>Not Found</title>", url=url))
        if isinstance(item, Exception):
            raise item
        if isinstance(item, list):
            return json_response(item)
        return item

    def close(self):
        self.closed = True

    def _calls_to(self, url):
        return [c for c in self.calls if c["url"] == url]

    @property
    def listing_calls(self):
        return self._calls_to(LISTING_URL)

    @property
    def add_calls(self):
        return self._calls_to(ADD_URL)

    @property
    def site_calls(self):
        return [c for c in self.calls if c["url"] not in (LISTING_URL, ADD_URL)]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Global logger without console or file output."""
    reset_logger()
    logger = get_logger(name="pintitles-test", enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def settings() -> Settings:
    return Settings(token="user:ABC123")


@pytest.fixture
def html_page() -> str:
    return """
    <html>
    <head><title>
        Example   Domain
    </title></head>
    <body><svg><title>icon</title></svg><h1>Example</h1></body>
    </html>
    """
