"""Book source extractor CLI.

Usage:
    booksources --help
    python cli/main.py sources list --page 2 --filter 小说

Commands:
    sources list    → scrape one listing page through the relays
    sources parse   → parse a listing page saved by hand
    analyze         → summarise a page's titles with an LLM
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging

import typer

from backend.config import settings
from cli.commands.analysis import analyze
from cli.commands.sources import sources_app

app = typer.Typer(
    name="booksources",
    help="Scrape book source listings and export their JSON links.",
    no_args_is_help=True,
)
app.add_typer(sources_app, name="sources")
app.command("analyze")(analyze)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
