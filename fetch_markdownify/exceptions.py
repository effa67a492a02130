"""Exception classes raised while serving a fetch-url call."""
from typing import Optional


class FetchMarkdownError(Exception):
    """Base exception for fetch-markdownify errors."""
    pass


class InvalidParametersError(FetchMarkdownError):
    """Raised when the tool arguments fail validation."""
    pass


class UpstreamFetchError(FetchMarkdownError):
    """Raised on a transport failure or a non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChunkIndexOutOfRangeError(FetchMarkdownError):
    """Raised when the requested chunk does not exist."""

    def __init__(self, index: int, total_chunks: int):
        super().__init__(
            f"Chunk index {index} out of range. "
            f"Document has {total_chunks} chunk(s) (valid indices: 0-{total_chunks - 1})"
        )
        self.index = index
        self.total_chunks = total_chunks


class StorageError(FetchMarkdownError):
    """Raised when saving or inspecting a result file fails."""
    pass
