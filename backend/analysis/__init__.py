"""Optional LLM analysis of scraped source titles."""

from backend.analysis.summarizer import analyze_titles, build_analysis_prompt

__all__ = ["analyze_titles", "build_analysis_prompt"]
