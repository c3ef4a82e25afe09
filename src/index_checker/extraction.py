"""LLM extraction strategy that reads an index verdict off a results page."""

from __future__ import annotations

from typing import Optional

from crawl4ai import LLMConfig
from crawl4ai.extraction_strategy import LLMExtractionStrategy
from pydantic import BaseModel, Field

from .config import DEFAULT_LLM_PROVIDER


class IndexVerdict(BaseModel):
    """Container returned by the LLM for a search results page."""

    indexed: bool = Field(
        description=(
            "True only if the results page lists at least one organic result "
            "from the site named in the site: query."
        )
    )
    result_count: Optional[int] = Field(
        default=None,
        description="Number of results the page reports, if it states one.",
    )


VERDICT_INSTRUCTION = """\
You are given the content of a search engine results page for a query of the \
form "site:<url>". Decide whether the search engine has that URL (or pages \
under it) in its index.

Answer indexed=true ONLY when the page shows at least one organic result \
whose link points to the queried site.

Answer indexed=false when:
- the page says the search did not match any documents, or shows no results;
- the only results are ads, suggestions, or pages from other sites;
- the page is a consent screen, captcha, or error page and no results are visible.

If the page states a result count, report it in result_count, otherwise null.
Do NOT guess. Return valid JSON matching the provided schema.\
"""


def build_extraction_strategy(
    api_token: str,
    provider: str = DEFAULT_LLM_PROVIDER,
) -> LLMExtractionStrategy:
    """Build the LLM extraction strategy for index verdicts."""
    return LLMExtractionStrategy(
        llm_config=LLMConfig(
            provider=provider,
            api_token=api_token,
            temperature=0.0,
        ),
        schema=IndexVerdict.model_json_schema(),
        extraction_type="schema",
        instruction=VERDICT_INSTRUCTION,
        apply_chunking=False,
        input_format="markdown",
    )
