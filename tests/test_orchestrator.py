"""Tests for the fetch orchestrator (URL building, relay race, aggregation).

Race behaviour is tested with in-process fake relays whose delays are
controlled with ``asyncio.sleep``; one end-to-end test drives the real relay
classes through ``respx``.
"""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest
import respx

from backend.config import settings
from backend.scraper.errors import AllProxiesFailedError, InvalidContentError, RelayHttpError
from backend.scraper.fetcher import RelayFetcher
from backend.scraper.orchestrator import (
    build_page_url,
    fetch_page,
    plan_attempts,
    race_first_success,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _listing(*ids: str) -> str:
    links = "".join(f'<li><a href="/content/id/{i}.html">Book {i}</a></li>' for i in ids)
    return f"<html><body><ul>{links}</ul>{'<!-- pad -->' * 60}</body></html>"


class FakeFetcher(RelayFetcher):
    """Relay double that answers after *delay* seconds."""

    def __init__(
        self,
        name: str,
        delay: float,
        html: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self._delay = delay
        self._html = html
        self._error = error
        self.urls: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._html or ""


# ---------------------------------------------------------------------------
# URL building / attempt planning
# ---------------------------------------------------------------------------

class TestBuildPageUrl:
    def test_first_page_is_bare_listing_url(self) -> None:
        assert build_page_url(1) == settings.listing_url

    def test_later_pages_add_query(self) -> None:
        assert build_page_url(3) == f"{settings.listing_url}?page=3"

    @pytest.mark.parametrize("page", [0, -1])
    def test_non_positive_page_raises(self, page: int) -> None:
        with pytest.raises(ValueError):
            build_page_url(page)


class TestPlanAttempts:
    def test_page_one_adds_root_fallback(self) -> None:
        a, b = FakeFetcher("A", 0), FakeFetcher("B", 0)
        attempts = plan_attempts(1, [a, b])

        assert attempts == [
            (a, settings.listing_url),
            (b, settings.listing_url),
            (a, settings.base_url + "/"),
        ]

    def test_later_pages_have_no_fallback(self) -> None:
        a, b = FakeFetcher("A", 0), FakeFetcher("B", 0)
        attempts = plan_attempts(2, [a, b])

        assert [url for _, url in attempts] == [build_page_url(2)] * 2


# ---------------------------------------------------------------------------
# race_first_success
# ---------------------------------------------------------------------------

class TestRaceFirstSuccess:
    async def test_returns_first_success_not_first_completion(self) -> None:
        async def fail_fast() -> str:
            raise RuntimeError("fast failure")

        async def succeed_later() -> str:
            await asyncio.sleep(0.02)
            return "ok"

        result = await race_first_success([("a", fail_fast()), ("b", succeed_later())])
        assert result == "ok"

    async def test_does_not_wait_for_losers(self) -> None:
        async def slow() -> str:
            await asyncio.sleep(5)
            return "slow"

        async def quick() -> str:
            return "quick"

        started = time.monotonic()
        result = await race_first_success([("slow", slow()), ("quick", quick())])

        assert result == "quick"
        assert time.monotonic() - started < 1

    async def test_all_failures_are_collected_in_attempt_order(self) -> None:
        async def fail(message: str, delay: float) -> str:
            await asyncio.sleep(delay)
            raise RuntimeError(message)

        with pytest.raises(AllProxiesFailedError) as excinfo:
            await race_first_success(
                [("a", fail("first", 0.03)), ("b", fail("second", 0.0)), ("c", fail("third", 0.01))]
            )

        assert excinfo.value.failures == ["first", "second", "third"]

    async def test_no_attempts(self) -> None:
        with pytest.raises(AllProxiesFailedError):
            await race_first_success([])


# ---------------------------------------------------------------------------
# fetch_page
# ---------------------------------------------------------------------------

class TestFetchPage:
    async def test_fastest_success_wins_over_earlier_failures(self) -> None:
        fetchers = [
            FakeFetcher("A", 0.05, error=RelayHttpError("A", 500)),
            FakeFetcher("B", 0.01, html=_listing("111", "112")),
            FakeFetcher("C", 0.03, error=InvalidContentError("C")),
        ]
        result = await fetch_page(2, fetchers)

        assert result.success is True
        assert [s.id for s in result.data] == ["111", "112"]

    async def test_success_after_other_relays_failed_first(self) -> None:
        fetchers = [
            FakeFetcher("A", 0.0, error=RelayHttpError("A", 403)),
            FakeFetcher("B", 0.05, html=_listing("111")),
            FakeFetcher("C", 0.01, error=InvalidContentError("C")),
        ]
        result = await fetch_page(2, fetchers)

        assert result.success is True
        assert [s.id for s in result.data] == ["111"]

    async def test_slower_success_is_ignored(self) -> None:
        fetchers = [
            FakeFetcher("A", 0.05, html=_listing("222")),
            FakeFetcher("B", 0.01, html=_listing("111")),
        ]
        result = await fetch_page(2, fetchers)

        assert [s.id for s in result.data] == ["111"]

    async def test_all_fail_aggregates_every_message(self) -> None:
        fetchers = [
            FakeFetcher("A", 0.02, error=RelayHttpError("A", 500)),
            FakeFetcher("B", 0.0, error=InvalidContentError("B")),
            FakeFetcher("C", 0.01, error=RuntimeError("C exploded")),
        ]
        result = await fetch_page(2, fetchers)

        assert result.success is False
        assert result.data == []
        assert "page 2" in result.error
        assert "A error: 500" in result.error
        assert "B returned invalid content" in result.error
        assert "C exploded" in result.error

    async def test_winner_without_records_is_a_failure(self) -> None:
        html = "<html><body>" + "<p>maintenance</p>" * 50 + "</body></html>"
        result = await fetch_page(2, [FakeFetcher("A", 0.0, html=html)])

        assert result.success is False
        assert "no matching source links" in result.error

    async def test_page_one_tries_site_root(self) -> None:
        primary = FakeFetcher("A", 0.0, error=RelayHttpError("A", 502))
        result = await fetch_page(1, [primary])

        assert primary.urls == [settings.listing_url, settings.base_url + "/"]
        assert result.success is False

    async def test_real_relays_through_respx(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get(host="corsproxy.io").mock(return_value=httpx.Response(503))
            respx_mock.get(host="api.allorigins.win").mock(
                return_value=httpx.Response(200, json={"contents": _listing("301", "302")})
            )
            respx_mock.get(host="api.codetabs.com").mock(
                side_effect=httpx.ConnectError("connection refused")
            )
            result = await fetch_page(2)

        assert result.success is True
        assert [s.id for s in result.data] == ["301", "302"]
        assert result.data[0].json_url == f"{settings.json_base_url}/301.json"

    async def test_real_relays_all_failing(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.get(host="corsproxy.io").mock(return_value=httpx.Response(403))
            respx_mock.get(host="api.allorigins.win").mock(return_value=httpx.Response(500))
            respx_mock.get(host="api.codetabs.com").mock(
                return_value=httpx.Response(200, text="<html>captcha</html>")
            )
            result = await fetch_page(1)

        assert result.success is False
        assert "CorsProxy error: 403" in result.error
        assert "AllOrigins error: 500" in result.error
        assert "CodeTabs returned invalid content" in result.error
