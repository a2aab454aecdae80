"""Source listing endpoints.

Routes
------
GET  /sources?page=1&q=<filter>            → scrape one listing page
GET  /sources/json-urls?page=1&q=<filter>  → newline-separated JSON links
POST /sources/parse   Body: {"html": "..."} → parse a manually saved page
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from backend.scraper.extractor import parse_html
from backend.scraper.models import ScrapeResult, filter_sources
from backend.scraper.orchestrator import fetch_page

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class BookSourceOut(BaseModel):
    id: str
    title: str
    original_url: str
    json_url: str
    update_date: Optional[str] = None


class SourcesResponse(BaseModel):
    page: Optional[int] = None
    success: bool
    data: list[BookSourceOut] = Field(default_factory=list)
    error: Optional[str] = None
    total: int = 0


class ParseRequest(BaseModel):
    html: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sources_response(
    result: ScrapeResult, q: str | None, page: int | None = None
) -> dict[str, Any]:
    filtered = filter_sources(result.data, q)
    return {
        "page": page,
        "success": result.success,
        "data": [source.to_dict() for source in filtered],
        "error": result.error,
        "total": len(result.data),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=SourcesResponse)
async def list_sources(
    page: int = Query(1, ge=1),
    q: Optional[str] = None,
) -> dict[str, Any]:
    """Scrape listing page *page* and return its sources.

    Scrape failures are reported in the body (``success: false``) rather
    than as an HTTP error so the client can show ``error`` and offer a retry.
    ``total`` is the unfiltered count.
    """
    result = await fetch_page(page)
    return _sources_response(result, q, page)


@router.get("/json-urls", response_class=PlainTextResponse)
async def export_json_urls(
    page: int = Query(1, ge=1),
    q: Optional[str] = None,
) -> str:
    """Return the JSON links of page *page*, one per line (empty on failure)."""
    result = await fetch_page(page)
    return "\n".join(source.json_url for source in filter_sources(result.data, q))


@router.post("/parse", response_model=SourcesResponse)
def parse_sources(body: ParseRequest, q: Optional[str] = None) -> dict[str, Any]:
    """Parse HTML saved by hand when every relay is blocked."""
    return _sources_response(parse_html(body.html), q)
