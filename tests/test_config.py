"""
Tests for configuration loading and validation.
"""

import pytest

from deadlinks.config import CrawlConfig, config_from_env
from deadlinks.errors import ConfigError


class TestCrawlConfig:
    """Test cases for CrawlConfig."""

    def test_defaults(self):
        config = CrawlConfig(base_url="https://example.com")
        assert config.timeout_ms == 5000
        assert config.silent is False
        assert config.ignore_query == ()
        assert config.ignore_external is False
        assert config.include_images is False
        assert config.webhook_url is None
        assert config.suppressed_statuses == (302, 403, 999)

    @pytest.mark.parametrize(
        "base_url",
        ["", "   ", "example.com", "ftp://example.com", "https://", "https://example.com:port/"],
    )
    def test_invalid_base_url(self, base_url):
        with pytest.raises(ConfigError):
            CrawlConfig(base_url=base_url).validate()

    def test_invalid_timeout(self):
        with pytest.raises(ConfigError):
            CrawlConfig(base_url="https://example.com", timeout_ms=0).validate()

    def test_merged_ignores_none(self):
        config = CrawlConfig(base_url="https://example.com", timeout_ms=1000)
        merged = config.merged(timeout_ms=None, silent=True)
        assert merged.timeout_ms == 1000
        assert merged.silent is True


def test_config_from_env():
    config = config_from_env({
        "BASE_URL": "https://example.com",
        "TIMEOUT": "2500",
        "SILENT": "true",
        "IGNORE_QUERY": "utm_source, utm_medium,",
        "IGNORE_EXTERNAL": "1",
        "INCLUDE_IMAGES": "no",
        "DISCORD_WEBHOOK": "https://hooks.example.com/x",
    })

    assert config.base_url == "https://example.com"
    assert config.timeout_ms == 2500
    assert config.silent is True
    assert config.ignore_query == ("utm_source", "utm_medium")
    assert config.ignore_external is True
    assert config.include_images is False
    assert config.webhook_url == "https://hooks.example.com/x"


def test_config_from_env_prefers_webhook_url():
    config = config_from_env({"WEBHOOK_URL": "https://a.example/", "DISCORD_WEBHOOK": "https://b.example/"})
    assert config.webhook_url == "https://a.example/"


def test_config_from_env_bad_timeout():
    with pytest.raises(ConfigError):
        config_from_env({"BASE_URL": "https://example.com", "TIMEOUT": "fast"})
