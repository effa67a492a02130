"""Fetch a URL with httpx."""
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from .config import Settings, get_settings
from .exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)


class FetchedContent(BaseModel):
    url: str
    status_code: int
    content_type: str = ""
    text: str


class Fetcher:
    """
    Async HTTP client wrapper.

    `transport` is handed to httpx.AsyncClient as-is, so tests can pass an
    httpx.MockTransport.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=self.settings.follow_redirects,
            timeout=self.settings.request_timeout,
            headers={"User-Agent": self.settings.user_agent},
            transport=self._transport,
        )

    async def fetch(self, url: str) -> FetchedContent:
        logger.info("Fetching %s", url)
        try:
            async with self._client() as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise UpstreamFetchError(f"Request failed: {e}") from e

        if not resp.is_success:
            logger.warning("GET %s returned %d", url, resp.status_code)
            raise UpstreamFetchError(f"HTTP error! status: {resp.status_code}", status_code=resp.status_code)

        content_type = resp.headers.get("content-type", "")
        logger.debug("GET %s -> %d (%s, %d chars)", url, resp.status_code, content_type, len(resp.text))
        return FetchedContent(
            url=str(resp.url),
            status_code=resp.status_code,
            content_type=content_type,
            text=resp.text,
        )
