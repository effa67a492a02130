"""
Token estimation and token-budgeted splitting of Markdown text.

The estimate is a fixed ~4 characters per token. It does not match any real
tokenizer; it is cheap and deterministic, which is all pagination needs.
"""
import logging
import math
from typing import List, NamedTuple, Optional

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
CODE_FENCE = "```"
# A fenced block may stretch a chunk up to this multiple of the char budget
FENCE_GROWTH_LIMIT = 1.5


def estimate_tokens(text: Optional[str]) -> int:
    """Approximate token count: len(text) / 4, rounded half up."""
    if not text:
        return 0
    return math.floor(len(text) / CHARS_PER_TOKEN + 0.5)


# ----------------------------
# Split rules
# ----------------------------
class SplitRule(NamedTuple):
    """Cut after the last `marker` in the window, if it lies past `min_fraction` of the budget."""

    name: str
    marker: str
    min_fraction: float

    def find_cut(self, window: str, max_chars: int) -> Optional[int]:
        """Return the cut offset relative to the window start, or None."""
        idx = window.rfind(self.marker)
        if idx > max_chars * self.min_fraction:
            return idx + len(self.marker)
        return None


# Evaluated in order; the first rule that finds a cut wins.
SPLIT_RULES = (
    SplitRule("paragraph", "\n\n", 0.5),
    SplitRule("line", "\n", 0.7),
    SplitRule("sentence", ". ", 0.7),
)


def find_split_point(window: str, max_chars: int) -> int:
    """Best cut offset inside `window`; falls back to the full window length."""
    for rule in SPLIT_RULES:
        cut = rule.find_cut(window, max_chars)
        if cut is not None:
            return cut
    return len(window)


def _close_open_fence(content: str, start: int, end: int, max_chars: int) -> int:
    # Odd fence count means the cut lands inside a code block
    if content.count(CODE_FENCE, start, end) % 2 == 0:
        return end
    closing = content.find(CODE_FENCE, end)
    if closing != -1 and closing + len(CODE_FENCE) - start <= max_chars * FENCE_GROWTH_LIMIT:
        return closing + len(CODE_FENCE)
    logger.debug("Code block at offset %d too large to keep whole, splitting it", start)
    return end


def verify_chunks(content: str, chunks: List[str]) -> None:
    """Raise ValueError unless the chunks join back into `content`."""
    joined = "".join(chunks)
    if joined != content:
        raise ValueError(
            f"Chunks do not reconstruct the content ({len(joined)} chars joined, {len(content)} expected)"
        )


def split_into_chunks(content: str, max_tokens: int) -> List[str]:
    """
    Split `content` into pieces of roughly `max_tokens` tokens each.

    Cuts prefer paragraph breaks, then line breaks, then sentence ends, and
    avoid landing inside a fenced code block when the block can be kept
    whole within 1.5x the budget. Joining the result always gives back
    `content`. Empty content yields a single empty chunk.
    """
    if max_tokens < 1:
        raise ValueError(f"max_tokens must be a positive integer, got {max_tokens}")

    if not content:
        return [""]

    if estimate_tokens(content) <= max_tokens:
        return [content]

    max_chars = max_tokens * CHARS_PER_TOKEN
    length = len(content)
    chunks = []
    position = 0

    while position < length:
        chunk_end = min(position + max_chars, length)

        if chunk_end < length:
            chunk_end = position + find_split_point(content[position:chunk_end], max_chars)
            chunk_end = _close_open_fence(content, position, chunk_end, max_chars)

        chunks.append(content[position:chunk_end])
        position = chunk_end

    verify_chunks(content, chunks)
    logger.debug("Split %d chars into %d chunks (max %d tokens)", length, len(chunks), max_tokens)
    return chunks
