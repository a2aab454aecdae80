"""HTTP layer for the book source extractor.

Serve with::

    uvicorn backend.api:app --reload
"""

from backend.api.app import app, create_app

__all__ = ["app", "create_app"]
