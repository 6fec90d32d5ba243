"""
Exception types raised while configuring and running a crawl.
"""
from __future__ import annotations

from typing import Optional


class DeadLinksError(Exception):
    """Base exception for the package."""


class ConfigError(DeadLinksError):
    """Invalid or missing configuration (fatal, raised before crawling)."""


class CrawlError(DeadLinksError):
    """A link could not be checked successfully."""

    status_code: Optional[int] = None

    @property
    def status_message(self) -> str:
        return str(self)


class HttpStatusError(CrawlError):
    """The server answered with a status other than 200 or 204."""

    def __init__(self, status_code: int, status_message: str = ""):
        super().__init__(status_message or str(status_code))
        self.status_code = status_code
        self._status_message = status_message

    @property
    def status_message(self) -> str:
        return self._status_message


class TransportError(CrawlError):
    """DNS, connection, TLS or timeout failure. Carries no HTTP status."""

    def __init__(self, code: Optional[str] = None, message: str = ""):
        super().__init__(message or code or "request failed")
        self.code = code
        self.message = message

    @property
    def status_message(self) -> str:
        return (self.code or self.message or "request failed").upper()
