"""
Console output: progress stream, broken link blocks and the final summary.
"""
from __future__ import annotations

import shutil
import sys
from typing import Optional, Protocol, TextIO

from deadlinks.models import BrokenLink, CrawlResult

COLOR_GRAY = "\033[90m"
COLOR_GREEN = "\033[32m"
FORMAT_END = "\033[0m"


class Reporter(Protocol):
    def page_fetched(self, url: str, status_code: Optional[int], elapsed_ms: float) -> None: ...

    def broken_link(self, link: BrokenLink) -> None: ...

    def summary(self, result: CrawlResult) -> None: ...


def format_duration(ms: float) -> str:
    """Compact human-readable duration (850ms, 1.2s, 3m 4s, 1h 2m)."""
    if ms < 1000:
        return f"{int(round(ms))}ms"
    seconds = ms / 1000.0
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def _truncate(text: str, width: int) -> str:
    return text[:width] if width > 0 else text


class ConsoleReporter:
    """Writes crawl progress and results to stderr."""

    def __init__(self, stream: Optional[TextIO] = None, silent: bool = False, width: Optional[int] = None):
        self.stream = stream or sys.stderr
        self.silent = silent
        if width is None:
            width = shutil.get_terminal_size((100, 24)).columns
        self.max_length = max(width - 20, 20)

    def page_fetched(self, url: str, status_code: Optional[int], elapsed_ms: float) -> None:
        """Print single fetch result line."""
        if self.silent:
            return
        status_str = str(status_code) if status_code else "ERR"
        self.stream.write(
            f"  → {status_str} {_truncate(url, self.max_length)} "
            f"{COLOR_GRAY}({int(round(elapsed_ms))} ms){FORMAT_END}\n"
        )
        self.stream.flush()

    def broken_link(self, link: BrokenLink) -> None:
        status = f" ({link.status_code})" if link.status_code is not None else ""
        self.stream.write(
            f"⚠️   {_truncate(link.request_url, self.max_length)}\n"
            f"{COLOR_GRAY}{'APPEARS ON':>14}: {_truncate(link.reference_url, self.max_length)}\n"
            f"{'STATUS MSG':>14}: {link.status_message}{status}{FORMAT_END}\n"
        )
        self.stream.flush()

    def summary(self, result: CrawlResult) -> None:
        """Print crawl summary."""
        self.stream.write(
            f"\n{COLOR_GREEN}✅ {result.total_links} links checked in "
            f"{format_duration(result.elapsed_ms)}{FORMAT_END}\n"
        )
        error_counts = result.stats.error_counts
        if error_counts:
            self.stream.write(f"{len(result.broken_links)} broken links:\n")
            for error_type, count in sorted(error_counts.items()):
                label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
                self.stream.write(f"  {label}: {count}\n")
        else:
            self.stream.write("No broken links found.\n")
        self.stream.flush()
