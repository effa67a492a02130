"""Save converted Markdown to a temp file and describe the result."""
import logging
import math
import os
import tempfile
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from .config import get_settings
from .exceptions import StorageError
from .tokenizer import estimate_tokens

logger = logging.getLogger(__name__)

SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


class SaveFileResult(BaseModel):
    filepath: str


class FileMetadata(BaseModel):
    path: str
    size_bytes: int
    size_readable: str
    created_at: str
    url: str
    total_tokens: int


def save_markdown_to_temp_file(content: str, url: str, prefix: Optional[str] = None) -> SaveFileResult:
    """Write `content` to a new, uniquely named .md file in the system temp dir."""
    prefix = prefix or get_settings().temp_file_prefix
    fd, filepath = tempfile.mkstemp(prefix=prefix, suffix=".md")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise StorageError(f"Could not write {filepath}: {e}") from e

    logger.info("Saved %d chars from %s to %s", len(content), url, filepath)
    return SaveFileResult(filepath=filepath)


def get_file_metadata(filepath: str, content: str, url: str) -> FileMetadata:
    """Size, creation time and token estimate for a saved file. Missing paths raise FileNotFoundError."""
    st = os.stat(filepath)
    if not os.path.isfile(filepath):
        raise StorageError(f"Path {filepath} is not a file")

    # st_birthtime only exists on some platforms
    birth = getattr(st, "st_birthtime", None)
    created = datetime.fromtimestamp(birth, tz=timezone.utc) if birth else datetime.now(timezone.utc)

    return FileMetadata(
        path=filepath,
        size_bytes=st.st_size,
        size_readable=format_bytes(st.st_size),
        created_at=created.isoformat(),
        url=url,
        total_tokens=estimate_tokens(content),
    )


def format_bytes(num_bytes: int) -> str:
    """Human readable size, e.g. 1536 -> "1.5 KB"."""
    if num_bytes == 0:
        return "0 Bytes"
    i = 0
    while num_bytes >= 1024 ** (i + 1) and i < len(SIZE_UNITS) - 1:
        i += 1
    # One decimal, rounded half up
    value = math.floor(num_bytes / 1024 ** i * 10 + 0.5) / 10
    return f"{value:g} {SIZE_UNITS[i]}"
