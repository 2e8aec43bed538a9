"""
LinkRisk Dynamic Scoring Configuration

ALL scoring thresholds, weights and normalization constants are centralized
here. No hardcoded policy numbers anywhere else in the codebase.

Usage:
    from linkrisk.config.scoring import get_scoring_config
    config = get_scoring_config()

    if score >= config.thresholds.very_high:
        level = "very-high"
"""

import os
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field, fields

from linkrisk.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


# =============================================================================
# RISK LEVEL THRESHOLDS
# =============================================================================

@dataclass
class RiskThresholds:
    """Thresholds for risk level classification."""

    very_high: int = 80     # >= this = VERY-HIGH
    high: int = 60          # >= this = HIGH
    medium: int = 40        # >= this = MEDIUM
    low: int = 20           # >= this = LOW
    # Below low = VERY-LOW


# =============================================================================
# PROVIDER WEIGHTS
# =============================================================================

@dataclass
class ProviderWeights:
    """Trust weights for providers in consensus scoring. Defaults sum to 1.0."""

    virustotal: float = 0.20
    google_safebrowsing: float = 0.20
    regional: float = 0.15
    phishtank: float = 0.12
    ipqualityscore: float = 0.12
    scamadviser: float = 0.10
    apwg: float = 0.05
    criminalip: float = 0.04
    hudsonrock: float = 0.02

    # Providers not listed above
    default_weight: float = 0.01

    def get_weight(self, provider_id: str) -> float:
        """Get weight for a provider."""
        key = provider_id.lower().replace("-", "_")
        if key != "default_weight" and key in {f.name for f in fields(self)}:
            return getattr(self, key)
        return self.default_weight

    def validate(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ConfigurationError(f"Weight for {f.name} must be non-negative")


# =============================================================================
# CONSENSUS POLICY
# =============================================================================

@dataclass
class ConsensusPolicy:
    """Scoring rules applied on top of the weighted average."""

    # Confidence = min(confidence_cap, successes * confidence_per_provider)
    confidence_per_provider: int = 12
    confidence_cap: int = 95

    # Returned when no provider succeeded
    no_data_score: int = 50

    # Confirmed-detection floor: a high-trust provider reporting
    # malicious/phishing at or above the trigger lifts the score to the floor.
    # 0 disables it.
    detection_floor: int = 40
    detection_floor_trigger: int = 85
    high_trust_weight: float = 0.12

    # Verdicts at or above this contribution are reported as risk factors
    notable_contribution: int = 70


# =============================================================================
# PER-PROVIDER NORMALIZATION
# =============================================================================

@dataclass
class VerdictPolicy:
    """Constants used by the adapters to map raw answers onto 0-100."""

    # APWG
    apwg_listed: int = 85
    apwg_clean: int = 15

    # PhishTank
    phishtank_verified: int = 95
    phishtank_unverified: int = 80
    phishtank_clean: int = 5

    # Google Safe Browsing, per threat type
    gsb_malware: int = 95
    gsb_social_engineering: int = 90
    gsb_potentially_harmful: int = 80
    gsb_unwanted_software: int = 70
    gsb_unspecified: int = 70
    gsb_clean: int = 10

    # IPQualityScore / Criminal IP
    reputation_suspicious: int = 50

    # ScamAdviser
    scamadviser_unrated: int = 50

    # VirusTotal security score deductions
    vt_url_malicious_weight: float = 80.0
    vt_url_suspicious_weight: float = 40.0
    vt_url_reputation_weight: float = 2.0
    vt_domain_malicious_weight: float = 60.0
    vt_domain_suspicious_weight: float = 30.0
    vt_domain_reputation_weight: float = 1.5
    vt_malicious_engines: int = 3      # >= this = MALICIOUS
    vt_suspicious_engines: int = 1     # >= this = SUSPICIOUS

    # Regional aggregate
    regional_per_flag: int = 25

    # Hudson Rock
    hudson_base: int = 30
    hudson_per_stealer: int = 10
    hudson_cap: int = 90
    hudson_clean: int = 10
    hudson_email_base: int = 40
    hudson_email_per_breach: int = 15
    hudson_email_cap: int = 95
    hudson_email_clean: int = 5

    def gsb_threat_score(self, threat_type: str) -> int:
        return {
            "MALWARE": self.gsb_malware,
            "SOCIAL_ENGINEERING": self.gsb_social_engineering,
            "POTENTIALLY_HARMFUL_APPLICATION": self.gsb_potentially_harmful,
            "UNWANTED_SOFTWARE": self.gsb_unwanted_software,
        }.get(threat_type, self.gsb_unspecified)


# =============================================================================
# MASTER CONFIGURATION
# =============================================================================

@dataclass
class ScoringConfig:
    """Master scoring configuration."""

    thresholds: RiskThresholds = field(default_factory=RiskThresholds)
    weights: ProviderWeights = field(default_factory=ProviderWeights)
    consensus: ConsensusPolicy = field(default_factory=ConsensusPolicy)
    verdicts: VerdictPolicy = field(default_factory=VerdictPolicy)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "thresholds": self.thresholds.__dict__,
            "weights": self.weights.__dict__,
            "consensus": self.consensus.__dict__,
            "verdicts": self.verdicts.__dict__,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScoringConfig":
        """Create config from dictionary. Unknown keys are ignored."""
        config = cls()

        for section in ("thresholds", "weights", "consensus", "verdicts"):
            target = getattr(config, section)
            for k, v in data.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)

        config.weights.validate()
        return config

    @classmethod
    def from_env(cls) -> "ScoringConfig":
        """Create config from environment variables."""
        config = cls()

        # Risk thresholds: RISK_THRESHOLD_VERY_HIGH, RISK_THRESHOLD_HIGH, ...
        for f in fields(config.thresholds):
            value = os.getenv(f"RISK_THRESHOLD_{f.name.upper()}")
            if value:
                setattr(config.thresholds, f.name, int(value))

        # Provider weights: WEIGHT_VIRUSTOTAL, WEIGHT_REGIONAL, ...
        for f in fields(config.weights):
            value = os.getenv(f"WEIGHT_{f.name.upper()}")
            if value:
                setattr(config.weights, f.name, float(value))

        if os.getenv("DETECTION_FLOOR"):
            config.consensus.detection_floor = int(os.getenv("DETECTION_FLOOR"))

        config.weights.validate()
        return config


# =============================================================================
# SINGLETON ACCESS
# =============================================================================

_scoring_config: Optional[ScoringConfig] = None


def get_scoring_config() -> ScoringConfig:
    """Get the global scoring configuration."""
    global _scoring_config
    if _scoring_config is None:
        _scoring_config = ScoringConfig.from_env()
        logger.info("Scoring configuration loaded")
    return _scoring_config


def reset_scoring_config():
    """Reset scoring config to defaults."""
    global _scoring_config
    _scoring_config = None
    logger.info("Scoring configuration reset to defaults")
