"""
LinkRisk Utilities
"""

from .exceptions import (
    LinkRiskError,
    ValidationError,
    InvalidTargetError,
    InvalidURLError,
    InvalidIPAddressError,
    InvalidEmailError,
    ProviderError,
    ProviderTransportError,
    ProviderAuthenticationError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ProviderHTTPError,
    ProviderNotFoundError,
    MalformedResponseError,
    ConfigurationError,
)
from .validators import (
    parse_url_target,
    parse_ip_target,
    parse_email_target,
    is_ip_literal,
)

__all__ = [
    'LinkRiskError',
    'ValidationError',
    'InvalidTargetError',
    'InvalidURLError',
    'InvalidIPAddressError',
    'InvalidEmailError',
    'ProviderError',
    'ProviderTransportError',
    'ProviderAuthenticationError',
    'ProviderRateLimitError',
    'ProviderTimeoutError',
    'ProviderHTTPError',
    'ProviderNotFoundError',
    'MalformedResponseError',
    'ConfigurationError',
    'parse_url_target',
    'parse_ip_target',
    'parse_email_target',
    'is_ip_literal',
]
