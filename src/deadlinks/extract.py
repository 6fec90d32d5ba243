"""
Link extraction from fetched HTML pages.
"""
from __future__ import annotations

import logging
from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, SoupStrainer

from deadlinks.models import FetchOutcome
from deadlinks.urls import has_blocked_scheme, host_of, normalize_url

LOGGER = logging.getLogger(__name__)

# SoupStrainers to parse only the tags we collect links from
ANCHOR_STRAINER = SoupStrainer("a", href=True)
LINK_AND_IMAGE_STRAINER = SoupStrainer(["a", "img"])


def is_html(content_type: str) -> bool:
    return (content_type or "").strip().lower().startswith("text/html")


def is_expandable(outcome: FetchOutcome, base_host: str) -> bool:
    """
    Check if a response is an internal HTML page that may be mined for links.

    Internal means the requested URL is on the base host, wherever redirects
    ended up serving the page from.
    """
    request_url = normalize_url(outcome.url)
    if not request_url or host_of(request_url) != base_host:
        return False
    return is_html(outcome.content_type)


def extract_links(
    body: Union[bytes, str],
    content_type: str,
    base_url: str,
    include_images: bool = False,
) -> List[str]:
    """
    Extract absolute link URLs from an HTML document.

    Args:
        body: Raw page content.
        content_type: Value of the Content-Type response header.
        base_url: URL relative links are resolved against.
        include_images: Also collect <img src> values.

    Returns:
        Absolute URLs in document order, each at most once.
    """
    if not is_html(content_type) or not body:
        return []

    strainer = LINK_AND_IMAGE_STRAINER if include_images else ANCHOR_STRAINER
    soup = BeautifulSoup(body, "lxml", parse_only=strainer)

    raw: List[str] = []
    for tag in soup.find_all("a", href=True):
        raw.append(tag["href"])
    if include_images:
        for tag in soup.find_all("img", src=True):
            raw.append(tag["src"])

    links: List[str] = []
    for value in raw:
        value = value.strip() if isinstance(value, str) else ""
        if not value or has_blocked_scheme(value):
            continue
        try:
            links.append(urljoin(base_url, value))
        except ValueError as e:
            LOGGER.debug("Skipping malformed link %r on %s: %s", value, base_url, e)

    return list(dict.fromkeys(links))
