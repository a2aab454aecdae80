"""Source commands: scrape a listing page or parse a saved one."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer

from backend.scraper.extractor import parse_html
from backend.scraper.models import ScrapeResult, filter_sources
from backend.scraper.orchestrator import fetch_page
from cli.rendering import render_pagination, render_sources

sources_app = typer.Typer(help="Scrape and inspect book source listings.")


def _print_result(
    result: ScrapeResult, term: str | None, urls_only: bool, page: int | None = None
) -> None:
    if not result.success:
        typer.echo(f"❌ {result.error}")
        raise typer.Exit(code=1)

    filtered = filter_sources(result.data, term)
    if urls_only:
        for source in filtered:
            typer.echo(source.json_url)
        return

    typer.echo(render_sources(filtered, total=len(result.data), page=page))
    if page is not None:
        typer.echo("")
        typer.echo(render_pagination(page))


@sources_app.command("list")
def sources_list(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Listing page to fetch."),
    term: str = typer.Option(None, "--filter", "-f", help="Filter by title or ID."),
    urls_only: bool = typer.Option(
        False, "--urls-only", help="Print only the JSON links, one per line."
    ),
) -> None:
    """Fetch a listing page through the relays and list its sources."""
    if not urls_only:
        typer.echo(f"🌐 Fetching page {page} …")
    result = asyncio.run(fetch_page(page))
    _print_result(result, term, urls_only, page=page)


@sources_app.command("parse")
def sources_parse(
    path: str = typer.Argument(..., help="Saved HTML file, or '-' to read stdin."),
    term: str = typer.Option(None, "--filter", "-f", help="Filter by title or ID."),
    urls_only: bool = typer.Option(
        False, "--urls-only", help="Print only the JSON links, one per line."
    ),
) -> None:
    """Parse a listing page saved by hand (for when every relay is blocked)."""
    if path == "-":
        html = sys.stdin.read()
    else:
        file = Path(path)
        if not file.exists():
            typer.echo(f"❌ File not found: {path}")
            raise typer.Exit(code=1)
        html = file.read_text(encoding="utf-8", errors="replace")

    _print_result(parse_html(html), term, urls_only)
