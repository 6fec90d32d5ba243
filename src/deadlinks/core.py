"""
Core crawling logic: the crawl session and the breadth-first driver loop.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Union

from deadlinks.classify import classify
from deadlinks.config import CrawlConfig
from deadlinks.errors import TransportError
from deadlinks.extract import extract_links
from deadlinks.fetch import Fetcher
from deadlinks.frontier import Frontier
from deadlinks.models import (
    Classification,
    CrawlResult,
    CrawlStats,
    CrawlTarget,
    FetchOutcome,
    Verdict,
)
from deadlinks.notify import Notifier, NullNotifier, WebhookNotifier
from deadlinks.output import ConsoleReporter, Reporter
from deadlinks.registry import BrokenLinkRegistry

LOGGER = logging.getLogger(__name__)


@dataclass
class CrawlSession:
    """All mutable state of one crawl run."""
    frontier: Frontier
    registry: BrokenLinkRegistry
    stats: CrawlStats = field(default_factory=CrawlStats)
    started_at: float = field(default_factory=time.monotonic)

    @property
    def base_url(self) -> str:
        return self.frontier.base_url

    @property
    def base_host(self) -> str:
        return self.frontier.base_host

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000.0

    @classmethod
    def from_config(
        cls,
        config: CrawlConfig,
        reporter: Optional[Reporter] = None,
        notifier: Optional[Notifier] = None,
    ) -> "CrawlSession":
        config.validate()
        frontier = Frontier(
            config.base_url,
            ignore_external=config.ignore_external,
            ignore_query=config.ignore_query,
        )
        registry = BrokenLinkRegistry(
            reporter=reporter,
            notifier=notifier,
            suppressed_statuses=config.suppressed_statuses,
        )
        return cls(frontier=frontier, registry=registry)


class Crawler:
    """
    Sequential breadth-first crawl over a session's frontier.

    Each cycle fetches one target, classifies the outcome, offers the links of
    expandable pages to the frontier, marks the target visited and records it
    when broken. Exactly one fetch is in flight at any time.
    """

    def __init__(
        self,
        session: CrawlSession,
        fetcher: Fetcher,
        reporter: Optional[Reporter] = None,
        include_images: bool = False,
    ):
        self.session = session
        self.fetcher = fetcher
        self.reporter = reporter
        self.include_images = include_images

    def run(self) -> CrawlResult:
        """Crawl until the frontier is exhausted and return the summary."""
        LOGGER.info("Starting crawl from %s", self.session.base_url)
        while self.step():
            pass

        result = CrawlResult(
            total_links=self.session.frontier.total_links,
            broken_links=self.session.registry.links,
            elapsed_ms=self.session.elapsed_ms,
            stats=self.session.stats,
        )
        LOGGER.info(
            "Crawl finished: %d links, %d broken", result.total_links, len(result.broken_links)
        )
        if self.reporter is not None:
            self.reporter.summary(result)
        return result

    def step(self) -> bool:
        """Run one fetch cycle. Returns False once the frontier is empty."""
        target = self.session.frontier.next()
        if target is None:
            return False

        outcome = self._fetch(target)
        classification = classify(outcome, self.session.base_host)

        if classification.verdict is Verdict.EXPANDABLE:
            self._expand(target, outcome)

        self._record(target, classification)
        return True

    def _fetch(self, target: CrawlTarget) -> Union[FetchOutcome, TransportError]:
        try:
            outcome = self.fetcher.fetch(target.request_url)
        except TransportError as e:
            if self.reporter is not None:
                self.reporter.page_fetched(target.request_url, None, 0.0)
            return e

        if self.reporter is not None:
            self.reporter.page_fetched(target.request_url, outcome.status_code, outcome.elapsed_ms)
        return outcome

    def _expand(self, target: CrawlTarget, outcome: FetchOutcome) -> None:
        links = extract_links(
            outcome.body,
            outcome.content_type,
            outcome.response_url,
            include_images=self.include_images,
        )
        accepted = 0
        for link in links:
            if self.session.frontier.offer(CrawlTarget(request_url=link, reference_url=target.request_url)):
                accepted += 1
        self.session.stats.pages_expanded += 1
        LOGGER.debug("%s: %d links found, %d new", target.request_url, len(links), accepted)

    def _record(self, target: CrawlTarget, classification: Classification) -> None:
        session = self.session
        session.frontier.mark_visited(target.request_url)
        session.stats.links_checked += 1

        if classification.is_broken:
            session.stats.record_error(classification.status_code)
            if session.registry.record(
                target.request_url,
                target.reference_url,
                classification.status_code,
                classification.status_message,
            ):
                session.stats.broken_links += 1


def crawl(
    config: CrawlConfig,
    fetcher: Optional[Fetcher] = None,
    reporter: Optional[Reporter] = None,
    notifier: Optional[Notifier] = None,
) -> CrawlResult:
    """
    Check every link reachable from config.base_url.

    Args:
        config: Crawl settings; validated before anything is fetched.
        fetcher: HTTP collaborator (default: a Fetcher built from config).
        reporter: Console collaborator (default: ConsoleReporter on stderr).
        notifier: Webhook collaborator (default: WebhookNotifier when a
                  webhook URL is configured, NullNotifier otherwise).

    Returns:
        The crawl result with the total link count and the broken links.

    Raises:
        ConfigError: the configuration is invalid.
    """
    config.validate()

    if reporter is None:
        reporter = ConsoleReporter(silent=config.silent)
    owns_notifier = notifier is None
    if notifier is None:
        notifier = WebhookNotifier(config.webhook_url, config.timeout_ms) if config.webhook_url else NullNotifier()
    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = Fetcher(timeout_ms=config.timeout_ms, user_agent=config.user_agent)

    session = CrawlSession.from_config(config, reporter=reporter, notifier=notifier)
    try:
        return Crawler(session, fetcher, reporter, include_images=config.include_images).run()
    finally:
        if owns_fetcher:
            fetcher.close()
        if owns_notifier:
            notifier.close()
