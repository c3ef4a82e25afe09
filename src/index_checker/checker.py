"""Crawl4ai-backed status checker that reads a site: query results page."""

import json
import logging
import os
import re
import sys
from typing import Optional

# Fix Windows charmap encoding issues before importing crawl4ai
if sys.platform == "win32":
    os.environ.setdefault("PYTHONUTF8", "1")

from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig

from .config import CheckerConfig
from .extraction import IndexVerdict, build_extraction_strategy
from .models import IndexStatus
from .parser import build_query_url, get_host

logger = logging.getLogger(__name__)

# Phrases a results page shows when a site: query matched nothing.
NO_RESULTS_MARKERS = re.compile(
    r"did not match any documents|"
    r"no results found for|"
    r"it looks like there aren't any great matches|"
    r"your search did not match|"
    r"there are no results for",
    re.IGNORECASE,
)

# Hosts that belong to the search engine itself, never counted as results.
_SEARCH_ENGINE_HOSTS = re.compile(
    r"(^|\.)(google\.[a-z.]+|googleusercontent\.com|gstatic\.com|bing\.com|"
    r"duckduckgo\.com|youtube\.com)$",
    re.IGNORECASE,
)


def judge_results_page(url: str, page_text: str, links: list[dict]) -> IndexStatus:
    """Heuristic verdict for a results page.

    A "no results" marker wins. Otherwise the URL counts as indexed when any
    result link points at the same host (``www.`` ignored).
    """
    if NO_RESULTS_MARKERS.search(page_text):
        return IndexStatus.NOT_INDEXED

    target = get_host(url)
    if not target:
        return IndexStatus.NOT_INDEXED

    for link in links:
        href = link.get("href", "")
        if not href:
            continue
        host = get_host(href)
        if not host or _SEARCH_ENGINE_HOSTS.search(host):
            continue
        if host == target or host.endswith(f".{target}"):
            return IndexStatus.INDEXED

    return IndexStatus.NOT_INDEXED


class SearchIndexChecker:
    """Checks whether a URL is indexed by rendering its site: query.

    Usable directly as the ``checker`` of a LinkListManager. Every failure
    resolves to ``NOT_INDEXED``; the call never raises for crawl problems.
    """

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        api_token: Optional[str] = None,
    ) -> None:
        self.config = config or CheckerConfig()
        self._crawler: Optional[AsyncWebCrawler] = None
        self._extraction_strategy = None
        if api_token:
            self._extraction_strategy = build_extraction_strategy(
                api_token, provider=self.config.llm_provider
            )

    async def _ensure_crawler(self) -> AsyncWebCrawler:
        """Lazy-init the crawl4ai crawler."""
        if self._crawler is None:
            browser_config = BrowserConfig(
                headless=self.config.headless,
                text_mode=True,
                verbose=False,
            )
            crawler = AsyncWebCrawler(config=browser_config)
            await crawler.start()
            self._crawler = crawler
        return self._crawler

    async def __call__(self, url: str) -> IndexStatus:
        query_url = build_query_url(url, self.config.search_url)
        run_config = CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            extraction_strategy=self._extraction_strategy,
            wait_until=self.config.wait_until,
            page_timeout=self.config.page_timeout_ms,
        )

        try:
            crawler = await self._ensure_crawler()
            result = await crawler.arun(url=query_url, config=run_config)
        except Exception as e:
            logger.warning(f"Index check failed for {url}: {e}")
            return IndexStatus.NOT_INDEXED

        if not result.success:
            logger.warning(f"Index check unsuccessful for {url}: {result.error_message}")
            return IndexStatus.NOT_INDEXED

        if result.extracted_content:
            verdict = self._parse_verdict(result.extracted_content)
            if verdict is not None:
                logger.debug(f"LLM verdict for {url}: {verdict.model_dump()}")
                return IndexStatus.INDEXED if verdict.indexed else IndexStatus.NOT_INDEXED
            logger.debug(f"Falling back to page heuristic for {url}")

        links = result.links or {}
        all_links = list(links.get("external", [])) + list(links.get("internal", []))
        return judge_results_page(url, str(result.markdown or ""), all_links)

    def _parse_verdict(self, raw: str) -> Optional[IndexVerdict]:
        """Parse the LLM extraction output, or None if it is unusable."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("LLM returned invalid JSON")
            return None

        # crawl4ai may return a list of chunk results or a single dict
        if isinstance(data, list):
            entries = [item for item in data if isinstance(item, dict)]
            if not entries:
                return None
            verdicts: list[IndexVerdict] = []
            for entry in entries:
                try:
                    verdicts.append(IndexVerdict.model_validate(entry))
                except ValueError:
                    continue
            if not verdicts:
                return None
            # Any chunk that saw a result is enough
            for verdict in verdicts:
                if verdict.indexed:
                    return verdict
            return verdicts[0]

        if isinstance(data, dict):
            try:
                return IndexVerdict.model_validate(data)
            except ValueError:
                return None

        return None

    async def close(self) -> None:
        """Clean up crawler/browser resources."""
        if self._crawler:
            try:
                await self._crawler.close()
            except Exception as e:
                logger.debug(f"Error closing crawler: {e}")
            self._crawler = None

    async def __aenter__(self) -> "SearchIndexChecker":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
