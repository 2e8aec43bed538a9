"""
LinkRisk Provider Verdict Models

The common risk vector every provider adapter normalizes into.
"""

import math
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator


class RiskFlag(str, Enum):
    """Categorical signal attached to a verdict."""
    MALICIOUS = "malicious"
    PHISHING = "phishing"
    SUSPICIOUS = "suspicious"
    COMPROMISED_CREDENTIALS = "compromised-credentials"
    ADULT = "adult"
    UNRATED = "unrated"


# Most severe first. Used for factor wording and for combining flags.
FLAG_SEVERITY: List[RiskFlag] = [
    RiskFlag.MALICIOUS,
    RiskFlag.PHISHING,
    RiskFlag.COMPROMISED_CREDENTIALS,
    RiskFlag.SUSPICIOUS,
    RiskFlag.ADULT,
    RiskFlag.UNRATED,
]


class ErrorReason(str, Enum):
    """Why a provider did not produce a verdict."""
    TIMEOUT = "timeout"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CONNECTION_ERROR = "connection_error"
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    HTTP_ERROR = "http_error"
    NOT_FOUND = "not_found"
    MALFORMED_RESPONSE = "malformed_response"
    UNSUPPORTED_TARGET = "unsupported_target"
    PROVIDER_ERROR = "provider_error"


class ProviderVerdict(BaseModel):
    """One provider's normalized answer for one target."""

    provider_id: str
    provider_name: str
    succeeded: bool
    risk_contribution: Optional[int] = Field(default=None, ge=0, le=100)
    flags: List[RiskFlag] = Field(default_factory=list)
    confidence: int = Field(default=0, ge=0, le=100, description="Reporting only, never used for weighting")
    detail: Dict[str, Any] = Field(default_factory=dict)
    is_synthetic: bool = False
    error_reason: Optional[ErrorReason] = None
    error_detail: Optional[str] = None

    @field_validator("flags")
    @classmethod
    def _sort_flags(cls, v: List[RiskFlag]) -> List[RiskFlag]:
        return sorted(set(v), key=FLAG_SEVERITY.index)

    @classmethod
    def success(
        cls,
        provider_id: str,
        provider_name: str,
        risk_contribution: float,
        flags: Iterable[RiskFlag] = (),
        confidence: int = 70,
        detail: Optional[Dict[str, Any]] = None,
        is_synthetic: bool = False,
    ) -> "ProviderVerdict":
        contribution = int(max(0, min(100, math.floor(risk_contribution + 0.5))))
        return cls(
            provider_id=provider_id,
            provider_name=provider_name,
            succeeded=True,
            risk_contribution=contribution,
            flags=list(flags),
            confidence=confidence,
            detail=detail or {},
            is_synthetic=is_synthetic,
        )

    @classmethod
    def failure(
        cls,
        provider_id: str,
        provider_name: str,
        reason: ErrorReason,
        error_detail: Optional[str] = None,
    ) -> "ProviderVerdict":
        return cls(
            provider_id=provider_id,
            provider_name=provider_name,
            succeeded=False,
            error_reason=reason,
            error_detail=error_detail,
        )

    def has_flag(self, *flags: RiskFlag) -> bool:
        return any(f in self.flags for f in flags)


class ProviderStatus(BaseModel):
    """Configuration status of one provider."""
    name: str
    configured: bool
    capabilities: List[str] = Field(default_factory=list)
    target_kinds: List[str] = Field(default_factory=list)
