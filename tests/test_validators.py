"""
Tests for target parsing and validation.
"""

import pytest

from linkrisk.models import TargetKind
from linkrisk.utils.exceptions import (
    InvalidEmailError,
    InvalidIPAddressError,
    InvalidTargetError,
    InvalidURLError,
    ValidationError,
)
from linkrisk.utils.validators import (
    contains_ipv4_literal,
    is_ip_literal,
    parse_email_target,
    parse_ip_target,
    parse_url_target,
    to_ascii_host,
)


class TestUrlParsing:
    """Test URL target parsing."""

    def test_https_url(self):
        target = parse_url_target("https://Example.COM/login?next=/home")
        assert target.kind == TargetKind.URL
        assert target.url == "https://Example.COM/login?next=/home"
        assert target.domain == "example.com"
        assert target.ip is None

    def test_http_url_with_port(self):
        target = parse_url_target("http://example.com:8080/path")
        assert target.domain == "example.com"

    def test_surrounding_whitespace_is_stripped(self):
        target = parse_url_target("  https://example.com  ")
        assert target.url == "https://example.com"

    def test_ip_literal_host(self):
        target = parse_url_target("http://192.168.1.1/admin")
        assert target.domain == "192.168.1.1"
        assert target.ip == "192.168.1.1"

    def test_internationalized_host_is_punycoded(self):
        target = parse_url_target("https://bücher.example/path")
        assert target.url == "https://bücher.example/path"
        assert target.domain == "xn--bcher-kva.example"
        assert target.domain_target().value == "xn--bcher-kva.example"

    def test_domain_target_from_url(self):
        target = parse_url_target("https://shop.example.org/cart")
        domain = target.domain_target()
        assert domain.kind == TargetKind.DOMAIN
        assert domain.value == "shop.example.org"
        assert domain.domain == "shop.example.org"

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "not a url",
        "example.com/path",
        "/relative/path",
        "ftp://example.com/file",
        "javascript:alert(1)",
        "https://",
        "https://exa mple.com",
        "https://example.com:notaport/",
        "https://bad_host!.com/",
    ])
    def test_invalid_urls(self, url):
        with pytest.raises(InvalidURLError):
            parse_url_target(url)

    def test_non_string_rejected(self):
        with pytest.raises(InvalidURLError):
            parse_url_target(None)

    def test_error_hierarchy(self):
        with pytest.raises(InvalidTargetError) as exc_info:
            parse_url_target("ftp://example.com")
        assert isinstance(exc_info.value, ValidationError)
        assert "scheme" in exc_info.value.message


class TestIpParsing:
    """Test IP target parsing."""

    def test_ipv4(self):
        target = parse_ip_target("8.8.8.8")
        assert target.kind == TargetKind.IP
        assert target.ip == "8.8.8.8"
        assert target.value == "8.8.8.8"

    def test_ipv6_is_normalized(self):
        target = parse_ip_target("2001:0db8:0000:0000:0000:0000:0000:0001")
        assert target.ip == "2001:db8::1"

    @pytest.mark.parametrize("ip", ["", "256.1.1.1", "1.2.3", "example.com", "1.2.3.4.5"])
    def test_invalid_ips(self, ip):
        with pytest.raises(InvalidIPAddressError):
            parse_ip_target(ip)


class TestEmailParsing:
    """Test email target parsing."""

    def test_email_is_lowercased(self):
        target = parse_email_target("Alice.Smith@Example.com")
        assert target.kind == TargetKind.EMAIL
        assert target.email == "alice.smith@example.com"
        assert target.domain == "example.com"

    @pytest.mark.parametrize("email", ["", "alice", "alice@", "@example.com", "alice@example", "a b@example.com"])
    def test_invalid_emails(self, email):
        with pytest.raises(InvalidEmailError):
            parse_email_target(email)


class TestHelpers:
    """Test small validation helpers."""

    def test_is_ip_literal(self):
        assert is_ip_literal("10.0.0.1")
        assert is_ip_literal("[::1]")
        assert not is_ip_literal("example.com")
        assert not is_ip_literal(None)

    def test_contains_ipv4_literal(self):
        assert contains_ipv4_literal("http://192.168.0.1/login")
        assert not contains_ipv4_literal("https://example.com/v1.2.3")

    def test_to_ascii_host(self):
        assert to_ascii_host("example.com") == "example.com"
        assert to_ascii_host("bücher.example") == "xn--bcher-kva.example"
        with pytest.raises(InvalidURLError):
            to_ascii_host("ü" * 70 + ".example")
