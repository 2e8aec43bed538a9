"""
LinkRisk Report Models

Target descriptors and the aggregate report returned by the engine.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .verdict import ErrorReason, ProviderVerdict


class TargetKind(str, Enum):
    """Kind of thing being assessed."""
    URL = "url"
    DOMAIN = "domain"
    IP = "ip"
    EMAIL = "email"


class Target(BaseModel):
    """
    Validated assessment target.

    Built by the validators only; adapters receive it already normalized.
    """
    model_config = ConfigDict(frozen=True)

    kind: TargetKind
    value: str
    url: Optional[str] = None
    domain: Optional[str] = None
    ip: Optional[str] = None
    email: Optional[str] = None

    def domain_target(self) -> Optional["Target"]:
        """Domain-only target for secondary lookups."""
        if not self.domain:
            return None
        return Target(kind=TargetKind.DOMAIN, value=self.domain, domain=self.domain)

    @property
    def label(self) -> str:
        """Human wording for the target kind."""
        return {
            TargetKind.URL: "URL",
            TargetKind.DOMAIN: "domain",
            TargetKind.IP: "IP address",
            TargetKind.EMAIL: "email address",
        }[self.kind]


class RiskLevel(str, Enum):
    """Discrete classification of the consensus score."""
    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"
    UNKNOWN = "unknown"


# Ordering for comparisons. UNKNOWN sits outside the scale.
RISK_LEVEL_ORDER: List[RiskLevel] = [
    RiskLevel.VERY_LOW,
    RiskLevel.LOW,
    RiskLevel.MEDIUM,
    RiskLevel.HIGH,
    RiskLevel.VERY_HIGH,
]


class AggregateReport(BaseModel):
    """Final combined assessment for one target."""

    target: Target
    provider_results: Dict[str, ProviderVerdict] = Field(default_factory=dict)
    failed_providers: Dict[str, ErrorReason] = Field(default_factory=dict)

    overall_score: int = Field(default=50, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.UNKNOWN
    confidence: int = Field(default=0, ge=0, le=100)

    risk_factors: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    summary: str = ""

    providers_consulted: int = 0
    providers_succeeded: int = 0
    elapsed_ms: int = 0
