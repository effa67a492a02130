"""Runtime settings, read from the environment (prefix FETCH_MARKDOWNIFY_) or a .env file."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FETCH_MARKDOWNIFY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    server_name: str = "fetch-markdownify"
    server_version: str = "1.0.0"

    # Token budget per chunk when the caller does not pass chunk_size
    default_chunk_size: int = 20000

    # HTTP
    request_timeout: float = 15.0
    follow_redirects: bool = True
    user_agent: str = "fetch-markdownify/1.0 (+https://modelcontextprotocol.io)"

    temp_file_prefix: str = "fetch_markdownify_"

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
