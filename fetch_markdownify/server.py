"""
FastMCP server: fetch a page via httpx, convert HTML to Markdown, serve it in chunks

Usage:
  pip install -e .
  fetch-markdownify            (or: python -m fetch_markdownify)

Call:
  name: fetch-url, arguments: {"url": "https://example.com", "chunk_size": 5000, "metadata_only": true}
  name: fetch-url, arguments: {"url": "https://example.com", "chunk_size": 5000, "chunk_index": 1}
"""
import logging
from typing import Annotated, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from .config import Settings, get_settings
from .exceptions import FetchMarkdownError
from .fetcher import Fetcher
from .logging_config import setup_logging
from .service import FetchMarkdownService, FetchRequest

logger = logging.getLogger(__name__)

TOOL_NAME = "fetch-url"
TOOL_DESCRIPTION = "Fetches content from a URL and converts it to markdown"


def create_server(fetcher: Optional[Fetcher] = None, settings: Optional[Settings] = None) -> FastMCP:
    """Build a server; pass a Fetcher with a mock transport to keep tests offline."""
    settings = settings or get_settings()
    service = FetchMarkdownService(fetcher=fetcher, settings=settings)

    app = FastMCP(name=settings.server_name, version=settings.server_version)

    @app.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def fetch_url(
            url: Annotated[str, Field(description="The URL to fetch and convert to markdown")],
            limit: Annotated[Optional[int], Field(description="Maximum number of characters to return (>= 1)")] = None,
            chunk_size: Annotated[Optional[int], Field(description=f"Maximum tokens per chunk (>= 1, default {settings.default_chunk_size})")] = None,
            chunk_index: Annotated[int, Field(description="Index of the chunk to return (0-based, >= 0)")] = 0,
            metadata_only: Annotated[bool, Field(description="Only return chunk metadata (counts, tokens, offsets) as JSON")] = False,
            save_to_file: Annotated[bool, Field(description="Save the markdown to a temporary file and return file metadata")] = False,
    ) -> str:
        try:
            request = FetchRequest.parse(
                url=url,
                limit=limit,
                chunk_size=chunk_size,
                chunk_index=chunk_index,
                metadata_only=metadata_only,
                save_to_file=save_to_file,
            )
            return await service.run(request)
        except (FetchMarkdownError, OSError) as e:
            logger.error("fetch-url failed for %s: %s", url, e)
            raise ToolError(f"Error fetching URL: {e}") from e

    return app


mcp = create_server()


def main():
    setup_logging(get_settings().log_level)
    logger.info("MCP server '%s' running on stdio", mcp.name)
    mcp.run()


if __name__ == "__main__":
    main()
