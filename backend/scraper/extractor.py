"""Record extraction: turns listing-page HTML into :class:`BookSource` records."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    NavigableString,
    RubyParenthesisString,
    RubyTextString,
    Script,
    Stylesheet,
    Tag,
    TemplateString,
)

from backend.config import settings
from backend.scraper.errors import DocumentParseError, EmptyResultError, ScraperError
from backend.scraper.fetcher import SOURCE_LINK_PATTERN
from backend.scraper.models import BookSource, ScrapeResult

_WHITESPACE = re.compile(r"\s+")

# Checked in this order; the first pattern that matches wins.
_DATE_PATTERNS = (
    # 2024-11-24
    re.compile(r"([0-9]{4}-[0-9]{2}-[0-9]{2})"),
    # 11/24 13:02
    re.compile(r"([0-9]{1,2}/[0-9]{1,2}\s+[0-9]{1,2}:[0-9]{1,2})"),
    # 5天前, 18小时前, 30分钟前, 10秒前
    re.compile(r"([0-9]+\s*(?:天|小时|分钟|秒)前)"),
)

# Every string a DOM ``textContent`` would include; comments excluded.
_TEXT_CONTENT_TYPES = (
    NavigableString,
    CData,
    Script,
    Stylesheet,
    TemplateString,
    RubyTextString,
    RubyParenthesisString,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return _WHITESPACE.sub(" ", text)


def find_update_date(text: str) -> Optional[str]:
    """Return the first date-like fragment in *text*, or ``None``."""
    for pattern in _DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


class AncestorContext:
    """Yields the text of the anchor's ancestors, nearest first.

    The parent is always scanned.  Higher ancestors are only scanned while
    their collapsed text stays under *text_limit*; past that point the walk
    stops, since every further ancestor is at least as long.  Inline
    ``<script>`` and ``<style>`` bodies count towards that length.
    """

    def __init__(self, depth: int | None = None, text_limit: int | None = None) -> None:
        self.depth = settings.context_depth if depth is None else depth
        self.text_limit = settings.context_text_limit if text_limit is None else text_limit

    def texts(self, anchor: Tag) -> Iterator[str]:
        for level, ancestor in enumerate(anchor.parents, start=1):
            if level > self.depth:
                return
            text = _collapse(ancestor.get_text(types=_TEXT_CONTENT_TYPES))
            if level > 1 and len(text) >= self.text_limit:
                return
            yield text


def _resolve_original_url(href: str) -> str:
    try:
        return urljoin(settings.base_url + "/", href)
    except ValueError:
        if href.startswith("http"):
            return href
        return f"{settings.base_url}/{href.removeprefix('/')}"


def _build_source(anchor: Tag, source_id: str, href: str, context: AncestorContext) -> BookSource:
    title = _collapse(anchor.get_text()).strip() or f"Source {source_id}"

    update_date: Optional[str] = None
    for text in context.texts(anchor):
        update_date = find_update_date(text)
        if update_date:
            break

    return BookSource(
        id=source_id,
        title=title,
        original_url=_resolve_original_url(href),
        json_url=f"{settings.json_base_url}/{source_id}.json",
        update_date=update_date,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_sources(html: str, context: AncestorContext | None = None) -> List[BookSource]:
    """Extract every distinct source link from *html* in document order.

    The first anchor seen for a given id wins; later duplicates are skipped.

    Raises:
        DocumentParseError: If *html* cannot be parsed.
        EmptyResultError: If no anchor matches the source link pattern.
    """
    try:
        # lxml closes <li>, <p>, <td> and <tr> implicitly, as browsers do.
        soup = BeautifulSoup(html, "lxml")
    except Exception as exc:  # noqa: BLE001
        raise DocumentParseError(str(exc)) from exc

    context = context or AncestorContext()
    sources: dict[str, BookSource] = {}

    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if not href:
            continue
        match = SOURCE_LINK_PATTERN.search(href)
        if not match:
            continue
        source_id = match.group(1)
        if source_id in sources:
            continue
        sources[source_id] = _build_source(anchor, source_id, href, context)

    if not sources:
        raise EmptyResultError()
    return list(sources.values())


def parse_html(html: str, context: AncestorContext | None = None) -> ScrapeResult:
    """Parse *html* into a :class:`ScrapeResult`.  Never raises for bad input."""
    try:
        return ScrapeResult.ok(extract_sources(html, context))
    except ScraperError as exc:
        return ScrapeResult.fail(str(exc))
