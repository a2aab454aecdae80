"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from backend.config import Settings


@pytest.mark.parametrize(
    ("provider", "api_key", "expected"),
    [
        ("openai", "", False),
        ("openai", "sk-test", True),
        ("ollama", "", True),
        ("none", "sk-test", False),
    ],
)
def test_analysis_capability(
    monkeypatch: pytest.MonkeyPatch, provider: str, api_key: str, expected: bool
) -> None:
    monkeypatch.setenv("LLM_PROVIDER", provider)
    monkeypatch.setenv("OPENAI_API_KEY", api_key)

    assert Settings().analysis_enabled is expected


def test_site_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOOKSOURCE_BASE_URL", "https://books.example/")
    monkeypatch.setenv("BOOKSOURCE_LISTING_PATH", "/list/index.html")
    monkeypatch.setenv("BOOKSOURCE_JSON_BASE_URL", "https://cdn.example/json/")

    s = Settings()

    assert s.base_url == "https://books.example"
    assert s.listing_url == "https://books.example/list/index.html"
    assert s.json_base_url == "https://cdn.example/json"


def test_thresholds_are_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIN_CONTENT_LENGTH", "800")
    monkeypatch.setenv("CONTEXT_TEXT_LIMIT", "2500")

    s = Settings()

    assert s.min_content_length == 800
    assert s.context_text_limit == 2500
