"""
HTTP fetching on top of a requests session.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

import requests
from requests.utils import requote_uri

from deadlinks.errors import TransportError
from deadlinks.models import FetchOutcome

LOGGER = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "deadlinks/1.0"
DEFAULT_TIMEOUT_MS = 5000

_ESCAPED = re.compile(r"%[0-9a-f]{2}", re.IGNORECASE)

# Most specific exception classes first
_ERROR_CODES: tuple[tuple[type[requests.RequestException], str], ...] = (
    (requests.exceptions.ConnectTimeout, "ETIMEDOUT"),
    (requests.exceptions.ReadTimeout, "ETIMEDOUT"),
    (requests.exceptions.Timeout, "ETIMEDOUT"),
    (requests.exceptions.SSLError, "ESSL"),
    (requests.exceptions.ProxyError, "EPROXY"),
    (requests.exceptions.TooManyRedirects, "ETOOMANYREDIRECTS"),
    (requests.exceptions.InvalidURL, "EINVALIDURL"),
    (requests.exceptions.MissingSchema, "EINVALIDURL"),
    (requests.exceptions.InvalidSchema, "EINVALIDURL"),
    (requests.exceptions.ConnectionError, "ECONNECTION"),
)


def error_code(exc: requests.RequestException) -> str:
    """Short upper-case code describing a transport failure."""
    for exc_type, code in _ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return "EREQUEST"


def encode_url(url: str) -> str:
    """Quote unsafe characters unless the URL already carries escapes."""
    if _ESCAPED.search(url):
        return url
    return requote_uri(url)


class Fetcher:
    """Performs one GET per call with a fixed User-Agent and timeout."""

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout_ms = timeout_ms
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, url: str) -> FetchOutcome:
        """
        Fetch url following redirects.

        Raises:
            TransportError: the request failed below the HTTP layer.
        """
        try:
            resp = self.session.get(
                encode_url(url),
                timeout=self.timeout_ms / 1000.0,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            code = error_code(e)
            LOGGER.debug("Request to %s failed (%s): %s", url, code, e)
            raise TransportError(code, str(e)) from e

        return FetchOutcome(
            url=url,
            final_url=resp.url or url,
            status_code=resp.status_code,
            status_message=resp.reason or "",
            content_type=resp.headers.get("content-type") or "",
            body=resp.content,
            elapsed_ms=resp.elapsed.total_seconds() * 1000.0,
        )

    def close(self) -> None:
        self.session.close()
