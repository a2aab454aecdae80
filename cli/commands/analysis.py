"""Analysis command: summarise the titles of a listing page with an LLM."""

from __future__ import annotations

import asyncio

import typer

from backend.analysis.summarizer import analyze_titles
from backend.config import settings
from backend.scraper.orchestrator import fetch_page
from cli.rendering import render_analysis


def analyze(
    page: int = typer.Option(1, "--page", "-p", min=1, help="Listing page to analyse."),
) -> None:
    """Fetch a listing page and summarise what kind of sources it offers."""
    if not settings.analysis_enabled:
        typer.echo("⚠️  Analysis is disabled. Set OPENAI_API_KEY or LLM_PROVIDER=ollama.")
        raise typer.Exit(code=1)

    typer.echo(f"🌐 Fetching page {page} …")
    result = asyncio.run(fetch_page(page))
    if not result.success:
        typer.echo(f"❌ {result.error}")
        raise typer.Exit(code=1)

    typer.echo(f"🤔 Analysing {len(result.data)} title(s) …")
    analysis = analyze_titles([source.title for source in result.data])
    if analysis is None:
        typer.echo("❌ AI analysis failed. Check the logs or your API key configuration.")
        raise typer.Exit(code=1)

    typer.echo(render_analysis(analysis))
