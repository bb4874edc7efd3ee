from typing import Any

import pytest
from pydantic import ValidationError

from shared.settings import Settings


def test_settings_from_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("DISCOVERY_API_URL", "http://localhost:9000/")
    monkeypatch.setenv("DISCOVERY_PER_PAGE", "30")
    monkeypatch.setenv("SEARCH_DEBOUNCE_MS", "150")
    monkeypatch.delenv("DISCOVERY_API_TOKEN", raising=False)
    monkeypatch.delenv("FETCH_RETRIES", raising=False)
    monkeypatch.delenv("SEARCH_SESSION_TTL", raising=False)
    monkeypatch.delenv("SEARCH_MAX_SESSIONS", raising=False)

    settings = Settings.from_env()
    assert settings.api_base_url == "http://localhost:9000"
    assert settings.per_page == 30
    assert settings.search_debounce == pytest.approx(0.15)
    assert settings.api_token is None
    assert settings.fetch_retries == 2
    assert settings.session_ttl == 1800.0
    assert settings.max_sessions == 1000


def test_settings_defaults() -> None:
    settings = Settings()
    assert settings.search_debounce_ms == 300
    assert settings.api_base_url == "https://api.kickstarter.com"


def test_settings_reject_invalid_page_size() -> None:
    with pytest.raises(ValidationError):
        Settings(per_page=0)
