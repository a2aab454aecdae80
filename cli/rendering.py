"""Utilities for rendering scraped sources in the CLI."""

from __future__ import annotations

from typing import List

from backend.scraper.models import AnalysisResult, BookSource

_PAGE_WINDOW = 5


def page_numbers(current: int, window: int = _PAGE_WINDOW) -> List[int]:
    """Return the page numbers shown in the selector around *current*.

    The window starts two pages before *current* (never below 1) and is
    always *window* pages wide; the last page is unknown, so no upper clamp.
    """
    start = max(1, current - window // 2)
    return list(range(start, start + window))


def render_pagination(current: int) -> str:
    """Render the page selector, e.g. ``‹ Prev  1 [2] 3 4 5  Next ›``."""
    cells = [f"[{n}]" if n == current else str(n) for n in page_numbers(current)]
    prev = "‹ Prev" if current > 1 else "      "
    return f"{prev}  {' '.join(cells)}  Next ›"


def render_source(source: BookSource) -> str:
    """Render one source as a small text card."""
    lines = [f"📄 {source.title}  (ID: {source.id})"]
    if source.update_date:
        lines.append(f"   Updated : {source.update_date}")
    lines.append(f"   Original: {source.original_url}")
    lines.append(f"   JSON    : {source.json_url}")
    return "\n".join(lines)


def render_sources(sources: List[BookSource], total: int, page: int | None = None) -> str:
    """Render the result list with a header line."""
    where = f" on page {page}" if page is not None else ""
    header = f"Found {len(sources)} source(s){where}"
    if len(sources) != total:
        header += f" (filtered from {total})"
    if not sources:
        return f"{header}\nNo sources found matching your filter."
    return "\n\n".join([header, *(render_source(s) for s in sources)])


def render_analysis(analysis: AnalysisResult) -> str:
    """Render the LLM summary and its tags."""
    tags = "  ".join(f"#{tag}" for tag in analysis.tags)
    return f"🧠 {analysis.summary}\n   {tags}" if tags else f"🧠 {analysis.summary}"
