"""Relay fetchers: retrieve the listing page HTML through public CORS relays.

Every relay shares the same contract, ``await fetch(url) -> html``, and the
same content validator.  Relays regularly answer ``200 OK`` with an error
page, a CAPTCHA wall or an empty shell, so a payload only counts as a
success when it is long enough *and* contains at least one source link.
"""

from __future__ import annotations

import logging
import re
import time
from abc import ABC, abstractmethod
from urllib.parse import quote

import httpx

from backend.config import settings
from backend.scraper.errors import InvalidContentError, RelayError, RelayHttpError

logger = logging.getLogger(__name__)

#: Link pattern every genuine listing page contains at least once.
SOURCE_LINK_PATTERN = re.compile(r"content/id/([0-9]+)\.html")

_DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/json;q=0.9,*/*;q=0.8",
}


def is_valid_content(html: str | None) -> bool:
    """Return ``True`` if *html* looks like a real listing page."""
    if not html or len(html) < settings.min_content_length:
        return False
    return SOURCE_LINK_PATTERN.search(html) is not None


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class RelayFetcher(ABC):
    """Abstract base class for a single relay strategy."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable relay name, used in failure messages."""

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Return validated HTML for *url*.

        Raises:
            RelayHttpError: The relay answered with a non-2xx status.
            InvalidContentError: The payload failed :func:`is_valid_content`.
            RelayError: The request itself failed (DNS, connect, read ...).
        """

    async def _get(self, relay_url: str) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                headers=_DEFAULT_HEADERS,
                timeout=settings.request_timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(relay_url)
        except httpx.HTTPError as exc:
            raise RelayError(self.name, f"request failed: {exc!r}") from exc

        if not response.is_success:
            raise RelayHttpError(self.name, response.status_code)
        return response

    def _validated(self, html: str | None) -> str:
        if not is_valid_content(html):
            raise InvalidContentError(self.name)
        return html  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Direct relays — the target URL is appended verbatim to the endpoint
# ---------------------------------------------------------------------------

class CorsProxyFetcher(RelayFetcher):
    """corsproxy.io — returns the target page body as-is."""

    def __init__(self, endpoint: str | None = None) -> None:
        self._endpoint = endpoint or settings.corsproxy_url

    @property
    def name(self) -> str:
        return "CorsProxy"

    async def fetch(self, url: str) -> str:
        response = await self._get(f"{self._endpoint}{url}")
        return self._validated(response.text)


class CodeTabsFetcher(RelayFetcher):
    """codetabs.com — same contract as :class:`CorsProxyFetcher`, separate failure domain."""

    def __init__(self, endpoint: str | None = None) -> None:
        self._endpoint = endpoint or settings.codetabs_url

    @property
    def name(self) -> str:
        return "CodeTabs"

    async def fetch(self, url: str) -> str:
        response = await self._get(f"{self._endpoint}{url}")
        return self._validated(response.text)


# ---------------------------------------------------------------------------
# Wrapped-JSON relay
# ---------------------------------------------------------------------------

class AllOriginsFetcher(RelayFetcher):
    """allorigins.win — wraps the page in ``{"contents": "<html>..."}``.

    A millisecond timestamp is appended to every request so the relay's own
    cache never serves a stale (or stale error) page.
    """

    def __init__(self, endpoint: str | None = None) -> None:
        self._endpoint = endpoint or settings.allorigins_url

    @property
    def name(self) -> str:
        return "AllOrigins"

    async def fetch(self, url: str) -> str:
        timestamp = int(time.time() * 1000)
        response = await self._get(
            f"{self._endpoint}{quote(url, safe='')}&timestamp={timestamp}"
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise InvalidContentError(self.name) from exc

        contents = payload.get("contents") if isinstance(payload, dict) else None
        if not isinstance(contents, str):
            raise InvalidContentError(self.name)
        return self._validated(contents)


# ---------------------------------------------------------------------------
# Default set
# ---------------------------------------------------------------------------

def default_fetchers() -> list[RelayFetcher]:
    """CorsProxy → AllOrigins → CodeTabs.

    Order only matters for the page-1 root fallback (which reuses the first
    relay) and for the order of failure details; all relays race.
    """
    return [CorsProxyFetcher(), AllOriginsFetcher(), CodeTabsFetcher()]
