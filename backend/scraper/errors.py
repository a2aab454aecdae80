"""Failure taxonomy for the scrape pipeline.

None of these escape :func:`~backend.scraper.orchestrator.fetch_page` or
:func:`~backend.scraper.extractor.parse_html`; both convert them into a
failed :class:`~backend.scraper.models.ScrapeResult`.
"""

from __future__ import annotations


class ScraperError(Exception):
    """Base class for every scrape pipeline failure."""


class RelayError(ScraperError):
    """A relay could not deliver the page (transport failure and subclasses)."""

    def __init__(self, relay: str, message: str) -> None:
        self.relay = relay
        super().__init__(f"{relay} {message}")


class RelayHttpError(RelayError):
    """The relay answered with a non-2xx status."""

    def __init__(self, relay: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(relay, f"error: {status_code}")


class InvalidContentError(RelayError):
    """The relay payload failed the length/link-pattern validator."""

    def __init__(self, relay: str) -> None:
        super().__init__(relay, "returned invalid content")


class AllProxiesFailedError(ScraperError):
    """Every concurrent relay attempt failed."""

    def __init__(self, failures: list[str]) -> None:
        self.failures = list(failures)
        super().__init__("; ".join(self.failures) or "no relay attempts were made")


class EmptyResultError(ScraperError):
    """The document parsed but contained no source links."""

    def __init__(self) -> None:
        super().__init__(
            "Parsed HTML successfully but found no matching source links on this page."
        )


class DocumentParseError(ScraperError):
    """The HTML could not be turned into a document tree."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse HTML content: {reason}")
