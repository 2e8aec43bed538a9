"""
LinkRisk Weighted Consensus Scorer

Combines provider verdicts into one 0-100 score:

    score = sum(contribution * weight) / sum(weight)

over the providers that succeeded. Failed providers appear in neither sum.
The result is rounded half-up, clamped, and classified into a risk level.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from linkrisk.config.scoring import ScoringConfig, get_scoring_config
from linkrisk.models import ProviderVerdict, RiskFlag, RiskLevel

logger = logging.getLogger(__name__)


@dataclass
class ConsensusScore:
    """Output of the scorer."""
    score: int = 50
    risk_level: RiskLevel = RiskLevel.UNKNOWN
    confidence: int = 0
    providers_used: List[str] = field(default_factory=list)
    floor_applied_by: Optional[str] = None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class WeightedConsensusScorer:
    """Weighted average of successful provider contributions."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or get_scoring_config()
        self.config.weights.validate()

    def weight_for(self, provider_id: str) -> float:
        return self.config.weights.get_weight(provider_id)

    def classify(self, score: int) -> RiskLevel:
        """Map a 0-100 score onto a risk level."""
        t = self.config.thresholds
        if score >= t.very_high:
            return RiskLevel.VERY_HIGH
        if score >= t.high:
            return RiskLevel.HIGH
        if score >= t.medium:
            return RiskLevel.MEDIUM
        if score >= t.low:
            return RiskLevel.LOW
        return RiskLevel.VERY_LOW

    def score(self, results: Mapping[str, ProviderVerdict]) -> ConsensusScore:
        """
        Score a set of verdicts keyed by provider id.

        Zero successful verdicts gives the neutral no-data score with level
        UNKNOWN and zero confidence.
        """
        consensus = self.config.consensus
        succeeded = {
            pid: v for pid, v in sorted(results.items())
            if v.succeeded and v.risk_contribution is not None
        }

        if not succeeded:
            return ConsensusScore(
                score=consensus.no_data_score,
                risk_level=RiskLevel.UNKNOWN,
                confidence=0,
            )

        weighted_sum = 0.0
        weight_sum = 0.0
        for pid, verdict in succeeded.items():
            weight = self.weight_for(pid)
            weighted_sum += verdict.risk_contribution * weight
            weight_sum += weight

        if weight_sum > 0:
            raw = weighted_sum / weight_sum
        else:
            raw = sum(v.risk_contribution for v in succeeded.values()) / len(succeeded)

        score = max(0, min(100, round_half_up(raw)))

        floor_by = None
        floor_value = 0
        if consensus.detection_floor > 0:
            for pid, verdict in succeeded.items():
                if (
                    verdict.has_flag(RiskFlag.MALICIOUS, RiskFlag.PHISHING)
                    and verdict.risk_contribution >= consensus.detection_floor_trigger
                    and self.weight_for(pid) >= consensus.high_trust_weight
                ):
                    # Never lift above the confirming provider's own contribution
                    candidate = min(consensus.detection_floor, verdict.risk_contribution)
                    if candidate > floor_value:
                        floor_value = candidate
                        floor_by = pid

        if floor_value > score:
            logger.info(f"Detection floor applied by {floor_by}: {score} -> {floor_value}")
            score = floor_value
        else:
            floor_by = None

        return ConsensusScore(
            score=score,
            risk_level=self.classify(score),
            confidence=min(consensus.confidence_cap, len(succeeded) * consensus.confidence_per_provider),
            providers_used=list(succeeded.keys()),
            floor_applied_by=floor_by,
        )
