"""Configuration objects and constants for the index checker."""

from __future__ import annotations

from dataclasses import dataclass

from .parser import DEFAULT_SEARCH_URL

DEFAULT_LLM_PROVIDER = "openai/gpt-4o-mini"


@dataclass
class CheckerConfig:
    """Settings that control how a search results page is fetched and judged."""

    search_url: str = DEFAULT_SEARCH_URL
    page_timeout_ms: int = 30_000
    wait_until: str = "domcontentloaded"
    headless: bool = True
    llm_provider: str = DEFAULT_LLM_PROVIDER
