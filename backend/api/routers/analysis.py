"""Title analysis endpoints.

Routes
------
GET  /analysis/status                        → {"enabled": bool}
POST /analysis    Body: {"titles": [...]}    → {"summary": "...", "tags": [...]}
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from backend.analysis.summarizer import analyze_titles
from backend.config import settings

router = APIRouter()


class AnalysisRequest(BaseModel):
    titles: list[str] = Field(..., min_length=1)


class AnalysisResponse(BaseModel):
    summary: str
    tags: list[str]


@router.get("/status")
def analysis_status() -> dict[str, Any]:
    """Report whether an LLM is configured for title analysis."""
    return {"enabled": settings.analysis_enabled}


@router.post("", response_model=AnalysisResponse)
def analyze(body: AnalysisRequest) -> dict[str, Any]:
    """Summarise the given titles with the configured LLM."""
    if not settings.analysis_enabled:
        raise HTTPException(
            status_code=503,
            detail="Title analysis is disabled. Set OPENAI_API_KEY or LLM_PROVIDER=ollama.",
        )

    result = analyze_titles(body.titles)
    if result is None:
        raise HTTPException(status_code=502, detail="Title analysis failed.")
    return {"summary": result.summary, "tags": result.tags}
