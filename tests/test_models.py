"""Tests for the scrape result envelope and source filtering."""

from __future__ import annotations

import pytest

from backend.scraper.models import BookSource, ScrapeResult, filter_sources


def _source(source_id: str, title: str) -> BookSource:
    return BookSource(
        id=source_id,
        title=title,
        original_url=f"https://example.com/content/id/{source_id}.html",
        json_url=f"https://example.com/json/id/{source_id}.json",
    )


_SOURCES = [_source("101", "Fantasy Collection"), _source("2024", "Mystery Shelf")]


class TestScrapeResult:
    def test_ok(self) -> None:
        result = ScrapeResult.ok(_SOURCES)
        assert result.success is True
        assert result.data == _SOURCES
        assert result.error is None

    def test_fail(self) -> None:
        result = ScrapeResult.fail("relays blocked")
        assert result.success is False
        assert result.data == []
        assert result.error == "relays blocked"

    def test_success_with_error_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScrapeResult(success=True, data=_SOURCES, error="oops")

    def test_failure_with_data_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScrapeResult(success=False, data=_SOURCES, error="oops")

    def test_failure_without_error_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScrapeResult(success=False)

    def test_to_dict(self) -> None:
        payload = ScrapeResult.ok(_SOURCES[:1]).to_dict()
        assert payload["success"] is True
        assert payload["data"][0]["id"] == "101"
        assert payload["data"][0]["update_date"] is None


class TestFilterSources:
    def test_title_match_is_case_insensitive(self) -> None:
        assert [s.id for s in filter_sources(_SOURCES, "mystery")] == ["2024"]

    def test_matches_id(self) -> None:
        assert [s.id for s in filter_sources(_SOURCES, "10")] == ["101"]

    @pytest.mark.parametrize("term", [None, ""])
    def test_empty_term_keeps_everything(self, term: str | None) -> None:
        assert filter_sources(_SOURCES, term) == _SOURCES
