"""
URL helpers: normalization, scheme blacklist and query filtering.
"""
from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import parse_qs, urldefrag, urljoin, urlparse, urlunparse

# Links starting with any of these prefixes are never checked
BLOCKED_PREFIXES: tuple[str, ...] = (
    "javascript:",
    "mailto:",
    "telnet:",
    "file:",
    "news:",
    "tel:",
    "ftp:",
    "#",
)


def has_blocked_scheme(url: str) -> bool:
    """Check if a raw or absolute URL starts with a blacklisted prefix."""
    return url.strip().lower().startswith(BLOCKED_PREFIXES)


def normalize_url(url: str, base: Optional[str] = None) -> Optional[str]:
    """
    Normalize URL for deduplication and comparison.

    - Joins relative URLs against base
    - Drops fragments (#...)
    - Normalizes scheme/host case
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)

    Returns None for empty input, non-http(s) schemes and unparseable URLs.
    """
    if not url or not url.strip():
        return None

    try:
        joined, _ = urldefrag(urljoin(base, url.strip()) if base else url.strip())
        parsed = urlparse(joined)
        port = parsed.port
    except ValueError:
        return None

    if parsed.scheme.lower() not in ("http", "https"):
        return None

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return None

    scheme = parsed.scheme.lower()
    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        netloc = hostname
    elif port:
        netloc = f"{hostname}:{port}"
    else:
        netloc = hostname

    # userinfo is kept as written
    userinfo, sep, _ = parsed.netloc.rpartition("@")
    if sep:
        netloc = f"{userinfo}@{netloc}"

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",
    ))


def host_of(url: str) -> str:
    """Return the host (with non-default port) of a normalized URL."""
    return urlparse(url).netloc.rpartition("@")[2].lower()


def has_ignored_query(url: str, ignore_query: Iterable[str]) -> bool:
    """Check if any of the given query parameters is present with a value."""
    names = tuple(ignore_query)
    if not names:
        return False
    query = urlparse(url).query
    if not query:
        return False
    params = parse_qs(query, keep_blank_values=True)
    return any(params.get(name, [""])[0] for name in names)
