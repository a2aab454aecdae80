"""Fetch orchestration: race every relay and parse the first good page.

``fetch_page`` builds the listing URL for a page, launches one task per
relay attempt, and takes the first attempt that returns validated HTML.
Failures from the other attempts are collected only so they can be
reported if *every* attempt fails.  There is no retry loop; a failed
result is returned and the caller decides whether to fetch again.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Sequence

from backend.config import settings
from backend.scraper.errors import AllProxiesFailedError
from backend.scraper.extractor import parse_html
from backend.scraper.fetcher import RelayFetcher, default_fetchers
from backend.scraper.models import ScrapeResult

logger = logging.getLogger(__name__)


def build_page_url(page: int) -> str:
    """Return the listing URL for *page* (1-based)."""
    if page < 1:
        raise ValueError(f"page must be a positive integer, got {page!r}")
    if page == 1:
        return settings.listing_url
    return f"{settings.listing_url}?page={page}"


def plan_attempts(
    page: int, fetchers: Sequence[RelayFetcher]
) -> list[tuple[RelayFetcher, str]]:
    """Pair every relay with the URL it should fetch for *page*.

    Page 1 gets one extra attempt: the first relay against the site root,
    which also lists the newest sources.
    """
    url = build_page_url(page)
    attempts = [(fetcher, url) for fetcher in fetchers]
    if page == 1 and fetchers:
        attempts.append((fetchers[0], settings.base_url + "/"))
    return attempts


async def race_first_success(attempts: Sequence[tuple[str, Awaitable[str]]]) -> str:
    """Await *attempts* concurrently and return the first successful result.

    Args:
        attempts: ``(label, awaitable)`` pairs.  The label only identifies
            the attempt in log output.

    Raises:
        AllProxiesFailedError: If every attempt raised.  Its ``failures``
            list follows the order of *attempts*.
    """
    order: dict[asyncio.Future, int] = {}
    labels: list[str] = []
    for index, (label, awaitable) in enumerate(attempts):
        order[asyncio.ensure_future(awaitable)] = index
        labels.append(label)

    failures: dict[int, str] = {}
    pending = set(order)
    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            for task in sorted(done, key=order.__getitem__):
                index = order[task]
                exc = task.exception()
                if exc is None:
                    logger.info("Attempt %s won the race", labels[index])
                    return task.result()
                logger.warning("Attempt %s failed: %s", labels[index], exc)
                failures[index] = str(exc)
    finally:
        # Losers are irrelevant once a winner exists.
        for task in pending:
            task.cancel()

    raise AllProxiesFailedError([failures[i] for i in sorted(failures)])


async def fetch_page(
    page: int = 1, fetchers: Sequence[RelayFetcher] | None = None
) -> ScrapeResult:
    """Fetch listing page *page* through the relays and parse it.

    Always returns a :class:`ScrapeResult`; relay and parse failures are
    reported through ``error`` rather than raised.

    Raises:
        ValueError: If *page* is not a positive integer.
    """
    fetchers = list(fetchers) if fetchers is not None else default_fetchers()
    attempts = plan_attempts(page, fetchers)
    logger.info("Fetching page %d via %d relay attempt(s)", page, len(attempts))

    try:
        html = await race_first_success(
            [(f"{fetcher.name} <{url}>", fetcher.fetch(url)) for fetcher, url in attempts]
        )
    except AllProxiesFailedError as exc:
        logger.error("All fetch attempts failed for page %d: %s", page, exc)
        return ScrapeResult.fail(
            f"Auto-fetch failed for page {page}. All proxies were blocked or returned "
            f"invalid data. Try again, or save the page and parse it manually. "
            f"(Details: {exc})"
        )

    result = parse_html(html)
    if result.success:
        logger.info("Parsed %d source(s) from page %d", len(result.data), page)
    else:
        logger.warning("Page %d fetched but not usable: %s", page, result.error)
    return result
