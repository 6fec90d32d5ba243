"""
Data structures shared by the crawl components.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from deadlinks.errors import HttpStatusError, TransportError


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """A discovered link together with the page it was first found on."""
    request_url: str
    reference_url: str = ""


@dataclass(frozen=True, slots=True)
class BrokenLink:
    """A link that failed to resolve. Identity is the request URL."""
    request_url: str
    reference_url: str
    status_code: Optional[int]
    status_message: str


@dataclass(slots=True)
class FetchOutcome:
    """Transport-level successful response returned by the fetcher."""
    url: str
    status_code: int
    status_message: str = ""
    content_type: str = ""
    body: bytes = b""
    elapsed_ms: float = 0.0
    final_url: Optional[str] = None

    @property
    def response_url(self) -> str:
        """URL the response was served from, after redirects."""
        return self.final_url or self.url


class Verdict(Enum):
    OK = "ok"
    BROKEN = "broken"
    EXPANDABLE = "expandable"


@dataclass(frozen=True, slots=True)
class Classification:
    """Decision taken for one fetch outcome."""
    verdict: Verdict
    error: Optional[Union[HttpStatusError, TransportError]] = None

    @property
    def is_broken(self) -> bool:
        return self.verdict is Verdict.BROKEN

    @property
    def status_code(self) -> Optional[int]:
        return self.error.status_code if self.error else None

    @property
    def status_message(self) -> str:
        return self.error.status_message if self.error else ""


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    links_checked: int = 0
    pages_expanded: int = 0
    broken_links: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record an error by status code category."""
        if status_code is None:
            self.error_counts["connection_error"] += 1
        else:
            self.error_counts[str(status_code)] += 1


@dataclass(slots=True)
class CrawlResult:
    """Final numbers reported once the frontier is exhausted."""
    total_links: int
    broken_links: Tuple[BrokenLink, ...]
    elapsed_ms: float
    stats: CrawlStats = field(default_factory=CrawlStats)
