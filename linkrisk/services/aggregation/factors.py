"""
LinkRisk Risk Factor & Recommendation Generator

Derives human-facing output purely from provider verdicts:
- risk factors: one short line per notable successful verdict
- recommendations: fixed escalating advice plus flag-specific extras
- summary: one line, tiered by the number of risk factors
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from linkrisk.config.scoring import ScoringConfig, get_scoring_config
from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import (
    CREDENTIALS_RECOMMENDATION,
    EMAIL_CREDENTIALS_RECOMMENDATION,
    INCONCLUSIVE_RECOMMENDATIONS,
    MALWARE_RECOMMENDATION,
    PHISHING_RECOMMENDATION,
    REDUCED_CONFIDENCE_RECOMMENDATION,
    RISKY_RECOMMENDATIONS,
    SAFE_RECOMMENDATIONS,
)

logger = logging.getLogger(__name__)

FLAG_FINDINGS: Dict[RiskFlag, str] = {
    RiskFlag.MALICIOUS: "malware detected",
    RiskFlag.PHISHING: "phishing detected",
    RiskFlag.COMPROMISED_CREDENTIALS: "found in stolen-credential records",
    RiskFlag.SUSPICIOUS: "suspicious activity detected",
    RiskFlag.ADULT: "adult content",
}

SEVERE_FLAGS = (RiskFlag.MALICIOUS, RiskFlag.PHISHING, RiskFlag.COMPROMISED_CREDENTIALS)

REGIONAL_PROVIDER_ID = "regional"


@dataclass
class Assessment:
    """Human-facing part of a report."""
    risk_factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    summary: str = ""


class RiskFactorGenerator:
    """Turns verdicts into risk factors, recommendations and a summary."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or get_scoring_config()

    def _ordered(self, results: Mapping[str, ProviderVerdict]) -> List[ProviderVerdict]:
        weights = self.config.weights
        succeeded = [v for v in results.values() if v.succeeded]
        return sorted(succeeded, key=lambda v: (-weights.get_weight(v.provider_id), v.provider_id))

    def finding(self, verdict: ProviderVerdict) -> Optional[str]:
        """Short finding for a verdict, or None when it is not notable."""
        if not verdict.succeeded:
            return None

        contribution = verdict.risk_contribution or 0

        if verdict.provider_id == REGIONAL_PROVIDER_ID:
            flagged = int(verdict.detail.get("flagged", 0))
            if flagged:
                return f"{flagged} regional security service(s) detected threats"
            return None

        severe = [FLAG_FINDINGS[f] for f in verdict.flags if f in SEVERE_FLAGS]
        if severe:
            return ", ".join(severe)

        if contribution >= self.config.consensus.notable_contribution:
            if verdict.has_flag(RiskFlag.SUSPICIOUS):
                return f"{FLAG_FINDINGS[RiskFlag.SUSPICIOUS]} (risk {contribution}/100)"
            if verdict.has_flag(RiskFlag.ADULT):
                return f"{FLAG_FINDINGS[RiskFlag.ADULT]} (risk {contribution}/100)"
            return f"high risk score ({contribution}/100)"

        return None

    def risk_factors(self, results: Mapping[str, ProviderVerdict]) -> List[str]:
        factors = []
        for verdict in self._ordered(results):
            finding = self.finding(verdict)
            if finding:
                factors.append(f"{verdict.provider_name}: {finding}")
        return factors

    def generate(self, results: Mapping[str, ProviderVerdict], target: Target) -> Assessment:
        """
        Build factors, recommendations and summary for one target.

        Args:
            results: Verdicts keyed by provider id, including failures
            target: The assessed target, for wording
        """
        label = target.label
        consulted = len(results)
        ordered = self._ordered(results)
        succeeded = len(ordered)

        if succeeded == 0:
            return Assessment(
                risk_factors=[],
                recommendations=[r.format(label=label) for r in INCONCLUSIVE_RECOMMENDATIONS],
                summary=(
                    f"Assessment inconclusive: none of the {consulted} security services "
                    f"could check this {label}"
                ),
            )

        factors = self.risk_factors(results)

        if not factors:
            recommendations = [
                r.format(label=label, Label=label[0].upper() + label[1:]) for r in SAFE_RECOMMENDATIONS
            ]
        else:
            recommendations = [r.format(label=label) for r in RISKY_RECOMMENDATIONS]
            notable = [v for v in ordered if self.finding(v)]
            if any(v.has_flag(RiskFlag.MALICIOUS) for v in notable):
                recommendations.append(MALWARE_RECOMMENDATION.format(label=label))
            if any(v.has_flag(RiskFlag.PHISHING) for v in notable):
                recommendations.append(PHISHING_RECOMMENDATION)
            if any(v.has_flag(RiskFlag.COMPROMISED_CREDENTIALS) for v in notable):
                recommendations.append(
                    CREDENTIALS_RECOMMENDATION if target.kind != TargetKind.EMAIL
                    else EMAIL_CREDENTIALS_RECOMMENDATION
                )

        if succeeded * 2 < consulted:
            recommendations.append(
                REDUCED_CONFIDENCE_RECOMMENDATION.format(succeeded=succeeded, consulted=consulted)
            )

        return Assessment(
            risk_factors=factors,
            recommendations=recommendations,
            summary=self.summary(factors, succeeded, label),
        )

    @staticmethod
    def summary(factors: List[str], succeeded: int, label: str) -> str:
        count = len(factors)
        if count == 0:
            return f"{label[0].upper() + label[1:]} checked by {succeeded} security services - no threats detected"
        if count >= 3:
            tier = "HIGH RISK"
        elif count >= 2:
            tier = "MEDIUM RISK"
        else:
            tier = "LOW RISK"
        return f"{tier}: {count} threat indicator(s) found by {succeeded} security services"
