"""
Website broken link checker: breadth-first crawl of internal pages reporting
every link that answers with an error status or fails to connect.
"""
from deadlinks.config import CrawlConfig
from deadlinks.core import CrawlSession, Crawler, crawl
from deadlinks.errors import ConfigError, CrawlError, HttpStatusError, TransportError
from deadlinks.models import BrokenLink, CrawlResult, CrawlStats, CrawlTarget

__version__ = "1.0.0"
__all__ = [
    "crawl",
    "Crawler",
    "CrawlSession",
    "CrawlConfig",
    "CrawlResult",
    "CrawlStats",
    "CrawlTarget",
    "BrokenLink",
    "ConfigError",
    "CrawlError",
    "HttpStatusError",
    "TransportError",
]
