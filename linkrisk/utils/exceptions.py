"""
LinkRisk Custom Exceptions

Centralized exception classes for error handling.

Only InvalidTargetError ever leaves the engine. Provider errors are raised
inside live lookups and turned into failure verdicts by the adapter.
"""

from typing import Optional

from linkrisk.models.verdict import ErrorReason


class LinkRiskError(Exception):
    """Base exception for all LinkRisk errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationError(LinkRiskError):
    """Input validation failed."""
    pass


class InvalidTargetError(ValidationError):
    """Target is malformed or unsupported. Raised before any provider runs."""
    pass


class InvalidURLError(InvalidTargetError):
    """URL format is invalid."""
    pass


class InvalidIPAddressError(InvalidTargetError):
    """IP address format is invalid."""
    pass


class InvalidEmailError(InvalidTargetError):
    """Email address format is invalid."""
    pass


# ============================================================================
# Provider Exceptions
# ============================================================================

class ProviderError(LinkRiskError):
    """Error talking to a threat intelligence provider."""

    reason: ErrorReason = ErrorReason.PROVIDER_ERROR

    def __init__(self, message: str = "Provider error", reason: Optional[ErrorReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class ProviderTransportError(ProviderError):
    """Failed to connect to provider."""
    reason = ErrorReason.CONNECTION_ERROR


class ProviderAuthenticationError(ProviderError):
    """Provider rejected the API key."""
    reason = ErrorReason.AUTHENTICATION_FAILED


class ProviderRateLimitError(ProviderError):
    """Provider rate limit or quota exceeded."""
    reason = ErrorReason.RATE_LIMITED


class ProviderTimeoutError(ProviderError):
    """Provider request timed out."""
    reason = ErrorReason.TIMEOUT


class ProviderHTTPError(ProviderError):
    """Provider answered with an unexpected HTTP status."""
    reason = ErrorReason.HTTP_ERROR

    def __init__(self, message: str = "Unexpected HTTP status", status: int = 0):
        super().__init__(message)
        self.status = status


class ProviderNotFoundError(ProviderError):
    """Provider has no record for the target."""
    reason = ErrorReason.NOT_FOUND


class MalformedResponseError(ProviderError):
    """Provider response is missing expected fields."""
    reason = ErrorReason.MALFORMED_RESPONSE


# ============================================================================
# Configuration Exceptions
# ============================================================================

class ConfigurationError(LinkRiskError):
    """Application configuration error."""
    pass
