"""
URL frontier: pending links in FIFO order plus the visited set.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, FrozenSet, Iterable, Optional, Set

from deadlinks.errors import ConfigError
from deadlinks.models import CrawlTarget
from deadlinks.urls import has_blocked_scheme, has_ignored_query, host_of, normalize_url

LOGGER = logging.getLogger(__name__)


class Frontier:
    """
    Breadth-first queue of discovered links.

    A URL is accepted at most once per run. The referrer kept for a URL is the
    one given by the first accepted offer. The base URL is always the first
    target and bypasses the filters.
    """

    def __init__(
        self,
        base_url: str,
        *,
        ignore_external: bool = False,
        ignore_query: Iterable[str] = (),
    ):
        normalized = normalize_url(base_url)
        if not normalized:
            raise ConfigError(f"Invalid base URL: {base_url!r}")

        self.base_url = normalized
        self.base_host = host_of(normalized)
        self.ignore_external = ignore_external
        self.ignore_query = tuple(q for q in ignore_query if q)

        self._queue: Deque[CrawlTarget] = deque()
        # Every URL ever accepted: pending, in flight or visited
        self._referrers: Dict[str, str] = {}
        self._visited: Set[str] = set()

        self._accept(CrawlTarget(request_url=normalized, reference_url=""))

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def total_links(self) -> int:
        """Number of distinct links pending or visited."""
        return len(self._referrers)

    def is_visited(self, url: str) -> bool:
        return (normalize_url(url) or url) in self._visited

    def referrer_of(self, url: str) -> Optional[str]:
        return self._referrers.get(normalize_url(url) or url)

    def offer(self, target: CrawlTarget) -> bool:
        """Append target to the queue unless a filter rejects it or it was seen before."""
        if has_blocked_scheme(target.request_url):
            return False

        url = normalize_url(target.request_url)
        if url is None:
            return False

        if self.ignore_external and host_of(url) != self.base_host:
            LOGGER.debug("Skipping external link %s", url)
            return False

        if has_ignored_query(url, self.ignore_query):
            LOGGER.debug("Skipping link with ignored query parameter %s", url)
            return False

        if url in self._referrers:
            return False

        self._accept(CrawlTarget(request_url=url, reference_url=target.reference_url))
        return True

    def next(self) -> Optional[CrawlTarget]:
        """Remove and return the oldest pending target, or None when exhausted."""
        if not self._queue:
            return None
        return self._queue.popleft()

    def mark_visited(self, url: str) -> None:
        url = normalize_url(url) or url
        self._visited.add(url)
        self._referrers.setdefault(url, "")

    def _accept(self, target: CrawlTarget) -> None:
        self._referrers[target.request_url] = target.reference_url
        self._queue.append(target)
