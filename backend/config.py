"""Centralised settings for the book source extractor.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Target site
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get(
            "BOOKSOURCE_BASE_URL", "https://www.yckceo.sbs"
        ).rstrip("/")
    )
    listing_path: str = field(
        default_factory=lambda: os.environ.get(
            "BOOKSOURCE_LISTING_PATH", "/yuedu/shuyuan/index.html"
        )
    )
    json_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "BOOKSOURCE_JSON_BASE_URL", "https://www.yckceo.sbs/yuedu/shuyuan/json/id"
        ).rstrip("/")
    )

    @property
    def listing_url(self) -> str:
        """Absolute URL of the first listing page."""
        return f"{self.base_url}/{self.listing_path.lstrip('/')}"

    # ------------------------------------------------------------------
    # Relays
    # ------------------------------------------------------------------
    corsproxy_url: str = field(
        default_factory=lambda: os.environ.get("RELAY_CORSPROXY_URL", "https://corsproxy.io/?")
    )
    allorigins_url: str = field(
        default_factory=lambda: os.environ.get(
            "RELAY_ALLORIGINS_URL", "https://api.allorigins.win/get?url="
        )
    )
    codetabs_url: str = field(
        default_factory=lambda: os.environ.get(
            "RELAY_CODETABS_URL", "https://api.codetabs.com/v1/proxy?quest="
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Extraction heuristics (tuned against the target site's markup)
    # ------------------------------------------------------------------
    min_content_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_CONTENT_LENGTH", "500"))
    )
    context_text_limit: int = field(
        default_factory=lambda: int(os.environ.get("CONTEXT_TEXT_LIMIT", "1000"))
    )
    context_depth: int = field(
        default_factory=lambda: int(os.environ.get("CONTEXT_DEPTH", "2"))
    )

    # ------------------------------------------------------------------
    # Title analysis (optional)
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai").lower()
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    analysis_title_limit: int = field(
        default_factory=lambda: int(os.environ.get("ANALYSIS_TITLE_LIMIT", "50"))
    )
    analysis_max_tags: int = field(
        default_factory=lambda: int(os.environ.get("ANALYSIS_MAX_TAGS", "5"))
    )

    # Resolved once in __post_init__; the analysis capability does not
    # change for the lifetime of the process.
    analysis_enabled: bool = field(init=False)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def __post_init__(self) -> None:
        if self.llm_provider == "openai":
            self.analysis_enabled = bool(self.openai_api_key)
        else:
            self.analysis_enabled = self.llm_provider == "ollama"


# Module-level singleton — import this everywhere:
#   from backend.config import settings
settings = Settings()
