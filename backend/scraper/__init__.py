"""Scraper package — relay fetch, race orchestration & record extraction."""

from backend.scraper.extractor import extract_sources, parse_html
from backend.scraper.fetcher import default_fetchers, is_valid_content
from backend.scraper.models import AnalysisResult, BookSource, ScrapeResult, filter_sources
from backend.scraper.orchestrator import build_page_url, fetch_page

__all__ = [
    "fetch_page",
    "build_page_url",
    "parse_html",
    "extract_sources",
    "default_fetchers",
    "is_valid_content",
    "filter_sources",
    "BookSource",
    "ScrapeResult",
    "AnalysisResult",
]
