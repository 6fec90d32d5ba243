"""
Broken link notifications delivered to a chat webhook.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Protocol

import requests

from deadlinks.fetch import DEFAULT_TIMEOUT_MS
from deadlinks.models import BrokenLink

LOGGER = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, link: BrokenLink) -> None: ...

    def close(self) -> None: ...


class NullNotifier:
    """Used when no webhook is configured."""

    def notify(self, link: BrokenLink) -> None:
        LOGGER.debug("No webhook configured, not notifying about %s", link.request_url)

    def close(self) -> None:
        pass


def format_message(link: BrokenLink) -> str:
    """Human-readable chat message for a broken link."""
    status = link.status_code if link.status_code is not None else link.status_message
    return (
        f"\U0001F494 Found broken [URL]({link.request_url}) with status code {status}. "
        f"URL appears on page: {link.reference_url}"
    )


class WebhookNotifier:
    """
    Posts broken links to a webhook without blocking the caller.

    Deliveries run on a single background worker. Failures are logged and
    never propagate to the crawl.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        session: Optional[requests.Session] = None,
    ):
        self.webhook_url = webhook_url
        self.timeout_ms = timeout_ms
        self.session = session or requests.Session()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="webhook")

    def notify(self, link: BrokenLink) -> None:
        LOGGER.info("Posting broken link %s to webhook", link.request_url)
        self._executor.submit(self._deliver, link)

    def _deliver(self, link: BrokenLink) -> bool:
        try:
            resp = self.session.post(
                self.webhook_url,
                json={"content": format_message(link)},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_ms / 1000.0,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            LOGGER.warning("Webhook delivery failed for %s: %s", link.request_url, e)
            return False
        return True

    def close(self, wait: bool = True) -> None:
        """Stop accepting notifications, optionally draining pending deliveries."""
        if wait:
            self._executor.shutdown(wait=True)
            self.session.close()
        else:
            # The worker closes the session once queued deliveries are done
            self._executor.submit(self.session.close)
            self._executor.shutdown(wait=False)
