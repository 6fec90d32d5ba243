"""
Registry of confirmed broken links.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Protocol, Tuple

from deadlinks.models import BrokenLink
from deadlinks.notify import Notifier, NullNotifier

LOGGER = logging.getLogger(__name__)

# Statuses some third-party sites return to automated clients for valid links
# (302 from Twitter, 403 from DefiLlama, 999 from LinkedIn)
DEFAULT_SUPPRESSED_STATUSES: frozenset[int] = frozenset((302, 403, 999))


class BrokenLinkReporter(Protocol):
    def broken_link(self, link: BrokenLink) -> None: ...


class BrokenLinkRegistry:
    """Keeps each broken URL once and reports/notifies on first sight."""

    def __init__(
        self,
        reporter: Optional[BrokenLinkReporter] = None,
        notifier: Optional[Notifier] = None,
        suppressed_statuses: Iterable[int] = DEFAULT_SUPPRESSED_STATUSES,
    ):
        self.reporter = reporter
        self.notifier = notifier or NullNotifier()
        self.suppressed_statuses = frozenset(suppressed_statuses)
        self._links: Dict[str, BrokenLink] = {}

    def __contains__(self, request_url: object) -> bool:
        return request_url in self._links

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[BrokenLink]:
        return iter(self._links.values())

    @property
    def links(self) -> Tuple[BrokenLink, ...]:
        return tuple(self._links.values())

    def record(
        self,
        request_url: str,
        reference_url: str,
        status_code: Optional[int],
        status_message: str,
    ) -> bool:
        """
        Register a broken link.

        Returns False without side effects when request_url is already known.
        Otherwise stores the link, reports it, then notifies unless the status
        is suppressed.
        """
        if request_url in self._links:
            return False

        link = BrokenLink(
            request_url=request_url,
            reference_url=reference_url,
            status_code=status_code,
            status_message=status_message,
        )
        self._links[request_url] = link

        if self.reporter is not None:
            self.reporter.broken_link(link)

        if status_code in self.suppressed_statuses:
            LOGGER.debug("Not notifying about %s (status %s suppressed)", request_url, status_code)
        else:
            self.notifier.notify(link)
        return True
