"""index-checker: track whether pasted URLs are indexed by a search engine."""

from .manager import LinkListManager, StatusChecker
from .models import IndexStatus, LinkRecord, LinkStats
from .parser import build_query_url, parse_urls

__all__ = [
    "IndexStatus",
    "LinkListManager",
    "LinkRecord",
    "LinkStats",
    "StatusChecker",
    "build_query_url",
    "parse_urls",
]
