"""Handles one fetch-url call: fetch, convert, then save, describe or page."""
import json
import logging
from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from .config import Settings, get_settings
from .exceptions import InvalidParametersError
from .fetcher import Fetcher
from .file_manager import get_file_metadata, save_markdown_to_temp_file
from .markdown import markdown_for_response
from .pagination import apply_limit, describe, fetch_chunk

logger = logging.getLogger(__name__)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class FetchRequest(BaseModel):
    url: str = Field(..., description="The URL to fetch and convert to markdown")
    limit: Optional[int] = Field(None, ge=1, description="Truncate the markdown to this many characters")
    chunk_size: Optional[int] = Field(None, ge=1, description="Maximum tokens per chunk")
    chunk_index: int = Field(0, ge=0, description="Which chunk to return (0-based)")
    metadata_only: bool = Field(False, description="Return chunk metadata instead of content")
    save_to_file: bool = Field(False, description="Save the markdown to a temp file and return its metadata")

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        # Validate, but keep the caller's spelling (AnyHttpUrl adds a trailing slash)
        _HTTP_URL.validate_python(v)
        return v

    @classmethod
    def parse(cls, **arguments) -> "FetchRequest":
        try:
            return cls(**arguments)
        except ValidationError as e:
            raise InvalidParametersError(str(e)) from e


class FetchMarkdownService:
    def __init__(self, fetcher: Optional[Fetcher] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or Fetcher(self.settings)

    async def fetch_markdown(self, url: str) -> str:
        fetched = await self.fetcher.fetch(url)
        markdown = markdown_for_response(fetched.text, fetched.content_type)
        logger.info(
            "Converted %s (status %d, %s): %d chars of markdown",
            fetched.url, fetched.status_code, fetched.content_type or "no content type", len(markdown),
        )
        return markdown

    async def run(self, request: FetchRequest) -> str:
        markdown = apply_limit(await self.fetch_markdown(request.url), request.limit)
        chunk_size = request.chunk_size or self.settings.default_chunk_size

        if request.save_to_file:
            saved = save_markdown_to_temp_file(markdown, request.url, prefix=self.settings.temp_file_prefix)
            metadata = get_file_metadata(saved.filepath, markdown, request.url)
            return json.dumps(
                {"message": "Content saved to file", "file": metadata.model_dump()},
                indent=2,
            )

        if request.metadata_only:
            metadata = describe(markdown, chunk_size)
            logger.info("%s: %d chunk(s), ~%d tokens", request.url, metadata.total_chunks, metadata.total_tokens)
            return json.dumps(metadata.model_dump(), indent=2)

        chunk = fetch_chunk(markdown, chunk_size, request.chunk_index)
        return chunk.text
