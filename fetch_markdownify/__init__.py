"""fetch-markdownify: fetch a URL, convert it to Markdown, serve it in chunks over MCP."""

from .tokenizer import estimate_tokens, split_into_chunks
from .pagination import describe, fetch_chunk

__version__ = "1.0.0"

__all__ = ["estimate_tokens", "split_into_chunks", "describe", "fetch_chunk", "__version__"]
