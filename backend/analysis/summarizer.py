"""Best-effort summary of a page of source titles.

``analyze_titles`` asks the configured chat model for a one-line summary of
the kinds of content on offer plus a few tags.  It is an optional
enhancement: when no model is configured (see ``settings.analysis_enabled``)
or anything goes wrong, it returns ``None`` and callers carry on without it.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Sequence

from backend.config import settings
from backend.scraper.models import AnalysisResult

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# LLM helper (mirrors the provider switch in backend.config)
# ---------------------------------------------------------------------------

def _get_llm() -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model,
            api_key=settings.openai_api_key,
            temperature=0,
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=0,
        format="json",
    )


def build_analysis_prompt(titles: Sequence[str]) -> str:
    """Return the prompt for *titles*, capped at ``analysis_title_limit``."""
    limit = settings.analysis_title_limit
    listed = ", ".join(titles[:limit])
    if len(titles) > limit:
        listed += " ...and more"
    return (
        "Analyze the following list of book source titles.\n"
        "Provide a brief summary of the types of content available "
        '(e.g. "Mostly fantasy novels", "Mixed genres").\n'
        f"Also provide a list of up to {settings.analysis_max_tags} relevant "
        "tags/categories.\n"
        'Reply with JSON only, shaped as {"summary": "...", "tags": ["..."]}.\n\n'
        f"Titles:\n{listed}"
    )


def _parse_analysis(raw: str) -> AnalysisResult:
    """Decode the model reply into an :class:`AnalysisResult`.

    Raises:
        ValueError: If the reply is not a JSON object with a string
            ``summary`` and a list ``tags``.
    """
    data = json.loads(_CODE_FENCE.sub("", raw.strip()))
    if not isinstance(data, dict):
        raise ValueError("analysis reply is not a JSON object")

    summary = data.get("summary")
    tags = data.get("tags")
    if not isinstance(summary, str) or not isinstance(tags, list):
        raise ValueError("analysis reply is missing 'summary' or 'tags'")

    cleaned = [str(tag).strip() for tag in tags if str(tag).strip()]
    return AnalysisResult(summary=summary.strip(), tags=cleaned[: settings.analysis_max_tags])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_titles(titles: Sequence[str]) -> Optional[AnalysisResult]:
    """Summarise *titles*, or return ``None`` if analysis is unavailable or fails."""
    if not settings.analysis_enabled:
        logger.warning("Title analysis is disabled (no LLM credential configured).")
        return None
    if not titles:
        return None

    try:
        llm = _get_llm()
        response = llm.invoke(build_analysis_prompt(list(titles)))
        raw = response.content if hasattr(response, "content") else str(response)
        if not raw:
            raise ValueError("empty reply from the model")
        return _parse_analysis(raw)
    except Exception as exc:  # noqa: BLE001
        logger.error("Title analysis failed: %s", exc)
        return None
