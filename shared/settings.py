"""Process configuration loaded from the environment.

Values are read once from environment variables (a ``.env`` file in the working
directory is loaded first through ``python-dotenv``):

- ``DISCOVERY_API_URL``: base URL of the discovery API
- ``DISCOVERY_API_TOKEN``: optional bearer token sent with every request
- ``DISCOVERY_PER_PAGE``: page size requested from the discover endpoint
- ``DISCOVERY_TIMEOUT``: HTTP timeout in seconds
- ``SEARCH_DEBOUNCE_MS``: quiet period before a typed term is searched
- ``FETCH_RETRIES``: extra attempts per page request before it is reported failed
- ``SEARCH_SESSION_TTL``: seconds an idle API search session is kept
- ``SEARCH_MAX_SESSIONS``: number of API search sessions kept at once
"""

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    """Typed view over the environment.

    :ivar api_base_url: Base URL for the discovery API, without trailing slash.
    :ivar api_token: Optional bearer token.
    :ivar per_page: Number of projects requested per page.
    :ivar request_timeout: Timeout for each HTTP request in seconds.
    :ivar search_debounce_ms: Debounce window for typed search terms.
    :ivar fetch_retries: Retries per page request (0 disables retrying).
    :ivar session_ttl: Idle time in seconds after which an API session is dropped.
    :ivar max_sessions: Most API sessions kept; the least recently used goes first.
    """

    api_base_url: str = "https://api.kickstarter.com"
    api_token: Optional[str] = None
    per_page: int = Field(default=15, ge=1, le=100)
    request_timeout: float = Field(default=20.0, gt=0)
    search_debounce_ms: int = Field(default=300, ge=0)
    fetch_retries: int = Field(default=2, ge=0, le=10)
    session_ttl: float = Field(default=1800.0, gt=0)
    max_sessions: int = Field(default=1000, ge=1)

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def search_debounce(self) -> float:
        """Debounce window in seconds."""
        return self.search_debounce_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, loading ``.env`` first."""
        load_dotenv()
        values = {
            "api_base_url": os.getenv("DISCOVERY_API_URL"),
            "api_token": os.getenv("DISCOVERY_API_TOKEN"),
            "per_page": os.getenv("DISCOVERY_PER_PAGE"),
            "request_timeout": os.getenv("DISCOVERY_TIMEOUT"),
            "search_debounce_ms": os.getenv("SEARCH_DEBOUNCE_MS"),
            "fetch_retries": os.getenv("FETCH_RETRIES"),
            "session_ttl": os.getenv("SEARCH_SESSION_TTL"),
            "max_sessions": os.getenv("SEARCH_MAX_SESSIONS"),
        }
        return cls.model_validate({k: v for k, v in values.items() if v})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""
    return Settings.from_env()
