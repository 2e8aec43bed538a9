"""
LinkRisk Input Validators

Turn raw user input into validated Target descriptors.
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import urlsplit

import idna

from linkrisk.models.report import Target, TargetKind
from .exceptions import InvalidEmailError, InvalidIPAddressError, InvalidURLError


# ============================================================================
# Regular Expression Patterns
# ============================================================================

# Email pattern (RFC 5322 simplified)
EMAIL_REGEX = re.compile(
    r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$',
    re.IGNORECASE
)

# Hostname label pattern
HOST_REGEX = re.compile(
    r'^(?:[a-zA-Z0-9_](?:[a-zA-Z0-9_-]{0,61}[a-zA-Z0-9])?\.)*[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$',
    re.IGNORECASE
)

# Numeric IPv4 anywhere in a string
IPV4_LITERAL_REGEX = re.compile(r'\b\d{1,3}(?:\.\d{1,3}){3}\b')

ALLOWED_SCHEMES = ("http", "https")


# ============================================================================
# Helpers
# ============================================================================

def is_ip_literal(value: Optional[str]) -> bool:
    """Check if value is an IPv4 or IPv6 address."""
    if not value:
        return False
    try:
        ipaddress.ip_address(value.strip("[]"))
        return True
    except ValueError:
        return False


def contains_ipv4_literal(text: str) -> bool:
    """Check if text contains a dotted-quad IPv4 literal."""
    return bool(IPV4_LITERAL_REGEX.search(text or ""))


def to_ascii_host(host: str) -> str:
    """
    Convert an internationalized hostname to its punycode form.

    Raises:
        InvalidURLError: host cannot be IDNA-encoded
    """
    if host.isascii():
        return host
    try:
        return idna.encode(host, uts46=True).decode("ascii")
    except idna.IDNAError:
        raise InvalidURLError(f"Invalid host in URL: {host}")


# ============================================================================
# Target Parsing
# ============================================================================

def parse_url_target(url: str) -> Target:
    """
    Validate an absolute http(s) URL and derive its host.

    Raises:
        InvalidURLError: URL is empty, relative, has another scheme or no host
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError("URL is required")

    url = url.strip()
    if any(c.isspace() for c in url):
        raise InvalidURLError(f"URL contains whitespace: {url!r}")

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a bad port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL: {e}")

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"Unsupported URL scheme: {parts.scheme or '(none)'}")

    host = (parts.hostname or "").rstrip(".").lower()
    if not host:
        raise InvalidURLError("URL has no host")

    ip = host if is_ip_literal(host) else None
    if ip is None:
        host = to_ascii_host(host)
        if not HOST_REGEX.match(host):
            raise InvalidURLError(f"Invalid host in URL: {host}")

    return Target(
        kind=TargetKind.URL,
        value=url,
        url=url,
        domain=host,
        ip=ip,
    )


def parse_ip_target(ip: str) -> Target:
    """
    Validate an IPv4 or IPv6 address.

    Raises:
        InvalidIPAddressError: not a valid address
    """
    if not isinstance(ip, str) or not ip.strip():
        raise InvalidIPAddressError("IP address is required")

    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        raise InvalidIPAddressError(f"Invalid IP address: {ip}")

    normalized = str(address)
    return Target(kind=TargetKind.IP, value=normalized, ip=normalized)


def parse_email_target(email: str) -> Target:
    """
    Validate an email address and derive its domain.

    Raises:
        InvalidEmailError: not a valid address
    """
    if not isinstance(email, str) or not email.strip():
        raise InvalidEmailError("Email address is required")

    email = email.strip().lower()
    if not EMAIL_REGEX.match(email):
        raise InvalidEmailError(f"Invalid email address: {email}")

    domain = email.rsplit("@", 1)[1]
    return Target(kind=TargetKind.EMAIL, value=email, email=email, domain=domain)
