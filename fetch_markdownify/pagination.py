"""Chunk metadata and single-chunk retrieval over a Markdown document."""
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .exceptions import ChunkIndexOutOfRangeError
from .tokenizer import estimate_tokens, split_into_chunks

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 20000


class Chunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    text: str
    token_estimate: int


class ChunkInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    tokens: int
    start_char: int
    end_char: int


class PaginationMetadata(BaseModel):
    """What describe() returns: sizes and offsets, no chunk text."""

    model_config = ConfigDict(frozen=True)

    total_chunks: int
    total_tokens: int
    chunk_size: int
    chunks: List[ChunkInfo]


def apply_limit(document: str, limit: Optional[int]) -> str:
    """Keep only the first `limit` characters (no-op when limit is None)."""
    if limit is None:
        return document
    return document[:limit]


def build_chunks(document: str, max_tokens: int = DEFAULT_CHUNK_SIZE) -> List[Chunk]:
    return [
        Chunk(index=i, text=text, token_estimate=estimate_tokens(text))
        for i, text in enumerate(split_into_chunks(document, max_tokens))
    ]


def describe(document: str, max_tokens: int = DEFAULT_CHUNK_SIZE) -> PaginationMetadata:
    chunks = build_chunks(document, max_tokens)

    infos = []
    offset = 0
    for chunk in chunks:
        end = offset + len(chunk.text)
        infos.append(ChunkInfo(index=chunk.index, tokens=chunk.token_estimate, start_char=offset, end_char=end))
        offset = end

    return PaginationMetadata(
        total_chunks=len(chunks),
        total_tokens=estimate_tokens(document),
        chunk_size=max_tokens,
        chunks=infos,
    )


def chunk_annotation(index: int, total_chunks: int, chunk_tokens: int, total_tokens: int) -> str:
    return f"\n\n<!-- Chunk {index + 1}/{total_chunks} | Tokens: ~{chunk_tokens} | Total tokens: ~{total_tokens} -->"


def fetch_chunk(document: str, max_tokens: int = DEFAULT_CHUNK_SIZE, index: int = 0) -> Chunk:
    """
    Return chunk `index` of the document.

    With more than one chunk the text carries a trailing HTML comment with
    its position and token counts; a single chunk is returned as-is.

    Raises:
        ChunkIndexOutOfRangeError: index is negative or >= the chunk count
    """
    chunks = build_chunks(document, max_tokens)
    total = len(chunks)

    if not 0 <= index < total:
        raise ChunkIndexOutOfRangeError(index, total)

    chunk = chunks[index]
    if total == 1:
        return chunk

    logger.debug("Serving chunk %d/%d (~%d tokens)", index + 1, total, chunk.token_estimate)
    annotated = chunk.text + chunk_annotation(index, total, chunk.token_estimate, estimate_tokens(document))
    return chunk.model_copy(update={"text": annotated})
