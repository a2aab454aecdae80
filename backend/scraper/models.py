"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class BookSource:
    """One book source entry scraped from a listing page."""

    id: str
    title: str
    original_url: str
    json_url: str
    update_date: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ScrapeResult:
    """Success/failure envelope for a single page scrape.

    Use :meth:`ok` and :meth:`fail` rather than the constructor; they keep
    ``data`` and ``error`` mutually exclusive.
    """

    success: bool
    data: List[BookSource] = field(default_factory=list)
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("a successful ScrapeResult cannot carry an error")
        if not self.success and (self.data or not self.error):
            raise ValueError("a failed ScrapeResult needs an error and no data")

    @classmethod
    def ok(cls, data: List[BookSource]) -> ScrapeResult:
        return cls(success=True, data=list(data))

    @classmethod
    def fail(cls, error: str) -> ScrapeResult:
        return cls(success=False, data=[], error=error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": [source.to_dict() for source in self.data],
            "error": self.error,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Summary and tags produced by the optional title analysis."""

    summary: str
    tags: List[str] = field(default_factory=list)


def filter_sources(sources: List[BookSource], term: str | None) -> List[BookSource]:
    """Return the sources whose title or id matches *term*.

    Title matching is case-insensitive; an empty term keeps everything.
    """
    if not term:
        return list(sources)
    needle = term.lower()
    return [s for s in sources if needle in s.title.lower() or needle in s.id]
