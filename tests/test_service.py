"""Tests for fetching and request handling."""
import json
import logging
import os

import httpx
import pytest

from fetch_markdownify.exceptions import (
    ChunkIndexOutOfRangeError,
    InvalidParametersError,
    UpstreamFetchError,
)
from fetch_markdownify.service import FetchMarkdownService, FetchRequest


class TestFetchRequest:

    def test_defaults(self):
        request = FetchRequest.parse(url="https://example.com")
        assert request.url == "https://example.com"
        assert request.limit is None
        assert request.chunk_size is None
        assert request.chunk_index == 0
        assert request.metadata_only is False
        assert request.save_to_file is False

    @pytest.mark.parametrize("arguments", [
        {"url": "not-a-valid-url"},
        {"url": "ftp://example.com/file"},
        {"url": "https://example.com", "chunk_size": 0},
        {"url": "https://example.com", "chunk_index": -1},
        {"url": "https://example.com", "limit": 0},
    ])
    def test_invalid_arguments(self, arguments):
        with pytest.raises(InvalidParametersError):
            FetchRequest.parse(**arguments)


class TestFetcher:

    async def test_returns_body_and_content_type(self, make_fetcher):
        fetched = await make_fetcher("<p>hi</p>", "text/html").fetch("https://example.com/")
        assert fetched.text == "<p>hi</p>"
        assert fetched.status_code == 200
        assert fetched.content_type == "text/html"

    async def test_http_error_embeds_status(self, make_fetcher):
        with pytest.raises(UpstreamFetchError) as exc_info:
            await make_fetcher("Not Found", status_code=404).fetch("https://example.com/404")

        assert exc_info.value.status_code == 404
        assert "HTTP error" in str(exc_info.value)
        assert "404" in str(exc_info.value)

    async def test_transport_error(self, make_fetcher):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await make_fetcher(handler=handler).fetch("https://example.com/")
        assert exc_info.value.status_code is None

    async def test_sends_user_agent(self, make_fetcher, settings):
        seen = {}

        def handler(request):
            seen["ua"] = request.headers["user-agent"]
            return httpx.Response(200, text="ok", headers={"content-type": "text/plain"})

        await make_fetcher(handler=handler).fetch("https://example.com/")
        assert seen["ua"] == settings.user_agent


class TestFetchMarkdownService:

    async def test_plain_text(self, make_fetcher, settings):
        service = FetchMarkdownService(make_fetcher("Plain text content\nWith multiple lines", "text/plain"), settings)
        text = await service.run(FetchRequest.parse(url="https://example.com/text.txt"))
        assert text == "Plain text content\nWith multiple lines"

    async def test_logs_fetched_url_and_status(self, make_fetcher, settings, caplog):
        caplog.set_level(logging.INFO, logger="fetch_markdownify")
        service = FetchMarkdownService(make_fetcher("hello", "text/plain"), settings)
        await service.run(FetchRequest.parse(url="https://example.com/text.txt"))

        assert "Converted https://example.com/text.txt (status 200, text/plain)" in caplog.text

    async def test_limit_applies_before_chunking(self, make_fetcher, settings):
        service = FetchMarkdownService(make_fetcher("abcdefghij" * 100, "text/plain"), settings)

        text = await service.run(FetchRequest.parse(url="https://example.com", limit=4))
        assert text == "abcd"

        metadata = json.loads(await service.run(
            FetchRequest.parse(url="https://example.com", limit=40, chunk_size=5, metadata_only=True)
        ))
        assert metadata["chunks"][-1]["end_char"] == 40
        assert metadata["total_chunks"] == 2

    async def test_metadata_only(self, make_fetcher, settings, large_html):
        service = FetchMarkdownService(make_fetcher(large_html), settings)
        metadata = json.loads(await service.run(
            FetchRequest.parse(url="https://example.com/large.html", chunk_size=5000, metadata_only=True)
        ))

        assert metadata["total_chunks"] > 1
        assert isinstance(metadata["total_tokens"], int)
        assert metadata["chunk_size"] == 5000
        assert len(metadata["chunks"]) == metadata["total_chunks"]

    async def test_default_chunk_size(self, make_fetcher, settings):
        service = FetchMarkdownService(make_fetcher("<p>Large content here.</p>" * 200), settings)
        metadata = json.loads(await service.run(FetchRequest.parse(url="https://example.com", metadata_only=True)))

        assert metadata["chunk_size"] == settings.default_chunk_size == 20000
        assert metadata["total_chunks"] == 1

    async def test_chunk_out_of_range(self, make_fetcher, settings, large_html):
        service = FetchMarkdownService(make_fetcher(large_html), settings)
        with pytest.raises(ChunkIndexOutOfRangeError):
            await service.run(FetchRequest.parse(url="https://example.com", chunk_size=5000, chunk_index=999))

    async def test_save_to_file(self, make_fetcher, settings):
        service = FetchMarkdownService(make_fetcher("<h1>Saved</h1><p>Body text.</p>"), settings)
        result = json.loads(await service.run(FetchRequest.parse(url="https://example.com/page", save_to_file=True)))

        path = result["file"]["path"]
        try:
            assert result["message"] == "Content saved to file"
            assert result["file"]["url"] == "https://example.com/page"
            assert result["file"]["total_tokens"] > 0
            with open(path, encoding="utf-8") as f:
                saved = f.read()
            assert saved.startswith("# Saved")
            assert "Body text." in saved
        finally:
            os.remove(path)
