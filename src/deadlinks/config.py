"""
Crawl configuration and environment loading.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from deadlinks.errors import ConfigError
from deadlinks.fetch import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT
from deadlinks.registry import DEFAULT_SUPPRESSED_STATUSES

TRUE_VALUES = frozenset(("1", "true", "yes", "on"))


@dataclass(frozen=True)
class CrawlConfig:
    base_url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    silent: bool = False
    ignore_query: tuple[str, ...] = ()
    ignore_external: bool = False
    include_images: bool = False
    webhook_url: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    suppressed_statuses: tuple[int, ...] = field(
        default_factory=lambda: tuple(sorted(DEFAULT_SUPPRESSED_STATUSES))
    )

    def validate(self) -> "CrawlConfig":
        """Raise ConfigError unless the configuration can start a crawl."""
        if not self.base_url or not self.base_url.strip():
            raise ConfigError("A base URL is required (argument or BASE_URL)")
        try:
            parsed = urlparse(self.base_url.strip())
            parsed.port  # raises on a malformed port
        except ValueError as e:
            raise ConfigError(f"Invalid base URL {self.base_url!r}: {e}") from e
        if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
            raise ConfigError(f"Invalid base URL {self.base_url!r}: expected an http(s) URL with a host")
        if self.timeout_ms <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout_ms}")
        return self

    def merged(self, **overrides: Any) -> "CrawlConfig":
        """Copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUE_VALUES


def _env_list(value: Optional[str]) -> tuple[str, ...]:
    return tuple(part.strip() for part in (value or "").split(",") if part.strip())


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> CrawlConfig:
    """
    Build a configuration from environment variables.

    BASE_URL, TIMEOUT (ms), SILENT, IGNORE_QUERY (comma separated),
    IGNORE_EXTERNAL, INCLUDE_IMAGES, WEBHOOK_URL (or DISCORD_WEBHOOK).
    The result is not validated.
    """
    env = os.environ if environ is None else environ

    timeout_raw = env.get("TIMEOUT")
    try:
        timeout_ms = int(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_MS
    except ValueError as e:
        raise ConfigError(f"TIMEOUT must be an integer number of milliseconds, got {timeout_raw!r}") from e

    return CrawlConfig(
        base_url=(env.get("BASE_URL") or "").strip(),
        timeout_ms=timeout_ms,
        silent=_env_bool(env.get("SILENT")),
        ignore_query=_env_list(env.get("IGNORE_QUERY")),
        ignore_external=_env_bool(env.get("IGNORE_EXTERNAL")),
        include_images=_env_bool(env.get("INCLUDE_IMAGES")),
        webhook_url=env.get("WEBHOOK_URL") or env.get("DISCORD_WEBHOOK") or None,
        user_agent=env.get("USER_AGENT") or DEFAULT_USER_AGENT,
    )
