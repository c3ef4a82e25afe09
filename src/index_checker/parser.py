"""Parsing pasted text into normalized URLs and their search queries."""

from urllib.parse import quote, urlparse

DEFAULT_SEARCH_URL = "https://www.google.com/search"

# Prefixes a pasted line must start with to be treated as a URL.
# Case-sensitive on purpose: "HTTP://..." or "WWW." lines are dropped.
URL_PREFIXES = ("http", "www")

# Characters encodeURIComponent leaves alone besides letters and digits.
_QUERY_SAFE = "-_.!~*'()"


def normalize_url(candidate: str) -> str:
    """Qualify a candidate URL with ``https://`` unless it already starts with ``http``.

    No further validation is done; malformed URLs are kept as-is.
    """
    if candidate.startswith("http"):
        return candidate
    return f"https://{candidate}"


def parse_urls(raw_text: str) -> list[str]:
    """Extract normalized URLs from pasted text, one candidate per line.

    - Strips each line and drops empty ones.
    - Keeps only lines starting with ``http`` or ``www``; everything else
      is silently ignored.
    - Normalizes the survivors with :func:`normalize_url`.

    Order is preserved and duplicates are kept.
    """
    urls: list[str] = []
    for line in raw_text.split("\n"):
        line = line.strip()
        if not line:
            continue
        if not line.startswith(URL_PREFIXES):
            continue
        urls.append(normalize_url(line))
    return urls


def build_query_url(url: str, search_url: str = DEFAULT_SEARCH_URL) -> str:
    """Build the ``site:<url>`` search query for a normalized URL."""
    return f"{search_url}?q=site:{quote(url, safe=_QUERY_SAFE)}"


def get_host(url: str) -> str:
    """Return the lowercased host of a URL without a leading ``www.``."""
    host = urlparse(url).netloc.lower()
    host = host.split("@")[-1].split(":")[0]
    if host.startswith("www."):
        host = host[4:]
    return host
