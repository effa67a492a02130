"""Pytest configuration and fixtures."""
import httpx
import pytest

from fetch_markdownify.config import Settings
from fetch_markdownify.fetcher import Fetcher


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment's .env."""
    return Settings(_env_file=None)


@pytest.fixture
def make_fetcher(settings):
    """Build a Fetcher whose transport answers every request with the given response."""

    def _make(body: str = "", content_type: str = "text/html", status_code: int = 200, handler=None):
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status_code, text=body, headers={"content-type": content_type})

        return Fetcher(settings=settings, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def large_html():
    """HTML page that converts to roughly 28k tokens of Markdown."""
    paragraph = (
        "<p>This is a test paragraph with some content that will be repeated "
        "many times to create a large document. </p>"
    )
    return (
        "<!DOCTYPE html><html><head><title>Large Document</title></head><body>"
        "<h1>Large Document Test</h1>"
        + paragraph * 500
        + "<h2>Second Section</h2>"
        + paragraph * 500
        + "</body></html>"
    )
