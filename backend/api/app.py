"""FastAPI application factory.

Routers
-------
All endpoint groups are mounted under their respective path prefix:

    /sources   — scrape a listing page, parse pasted HTML, export JSON links
    /analysis  — optional LLM summary of source titles
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.routers import analysis as analysis_router
from backend.api.routers import sources as sources_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Book Source Extractor API",
        description=(
            "Scrapes book source listings through public relays, returns the "
            "extracted records with their JSON links, and optionally summarises "
            "the titles with an LLM."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sources_router.router, prefix="/sources", tags=["sources"])
    app.include_router(analysis_router.router, prefix="/analysis", tags=["analysis"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
