"""
Tests for URL helpers.
"""

from deadlinks.urls import has_blocked_scheme, has_ignored_query, host_of, normalize_url


class TestNormalizeUrl:
    """Test cases for normalize_url."""

    def test_relative_joined_against_base(self):
        assert normalize_url("/a", "https://example.com/x/y") == "https://example.com/a"
        assert normalize_url("b", "https://example.com/x/y") == "https://example.com/x/b"

    def test_fragment_dropped(self):
        assert normalize_url("https://example.com/page#top") == "https://example.com/page"

    def test_host_and_scheme_lowercased_default_port_dropped(self):
        assert normalize_url("HTTPS://Example.COM:443/Path") == "https://example.com/Path"
        assert normalize_url("http://example.com:80") == "http://example.com/"
        assert normalize_url("http://example.com:8080/x") == "http://example.com:8080/x"

    def test_query_kept(self):
        assert normalize_url("https://example.com/?b=2&a=1") == "https://example.com/?b=2&a=1"

    def test_rejects_non_http(self):
        assert normalize_url("mailto:me@example.com") is None
        assert normalize_url("ftp://example.com/file") is None
        assert normalize_url("") is None
        assert normalize_url("https://example.com:notaport/") is None
        assert normalize_url("http://[oops/") is None
        assert normalize_url("/page", "http://[oops/") is None

    def test_userinfo_kept(self):
        assert normalize_url("https://user:pw@Example.com:443/x") == "https://user:pw@example.com/x"


def test_has_blocked_scheme():
    for url in (
        "javascript:void(0)",
        "mailto:me@example.com",
        "telnet:host",
        "file:///etc/passwd",
        "news:comp.lang.python",
        "tel:+4712345678",
        "ftp://example.com",
        "#section",
        "  MAILTO:ME@EXAMPLE.COM",
    ):
        assert has_blocked_scheme(url), url

    assert not has_blocked_scheme("https://example.com/#section")
    assert not has_blocked_scheme("/relative")


def test_host_of_includes_port():
    assert host_of("https://example.com/a") == "example.com"
    assert host_of("http://example.com:8080/a") == "example.com:8080"
    assert host_of("https://user:pw@example.com/a") == "example.com"


def test_has_ignored_query():
    assert has_ignored_query("https://example.com/x?utm_source=foo", ["utm_source"])
    assert not has_ignored_query("https://example.com/x?utm_source=", ["utm_source"])
    assert not has_ignored_query("https://example.com/x?page=2", ["utm_source"])
    assert not has_ignored_query("https://example.com/x?utm_source=foo", [])
