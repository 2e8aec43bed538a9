"""
LinkRisk ScamAdviser Integration

Website trust scores from ScamAdviser via RapidAPI. Trust is inverted into
a risk contribution.
"""

import logging
from typing import Any, Dict, List, Optional

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import SCAM_KEYWORDS, SCAMADVISER_API_URL, SCAMADVISER_RAPIDAPI_HOST
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import jitter, keyword_hits

logger = logging.getLogger(__name__)


def trust_risk_level(trust_score: Optional[float]) -> str:
    """ScamAdviser's own wording for a trust score."""
    if trust_score is None:
        return "unknown"
    if trust_score >= 80:
        return "low"
    if trust_score >= 60:
        return "medium"
    if trust_score >= 40:
        return "high"
    return "very_high"


class ScamAdviserProvider(BaseProvider):
    """ScamAdviser domain trust lookups."""

    provider_id = "scamadviser"
    name = "ScamAdviser"
    capabilities = ["Trust Score", "Fraud Detection", "Website Analysis"]
    target_kinds = frozenset({TargetKind.URL})
    default_base_url = SCAMADVISER_API_URL
    min_key_length = 0

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        data = await client.request_json(
            "GET",
            f"{self.base_url}/trust/single",
            params={"domain": target.domain},
            headers={
                "X-RapidAPI-Key": self.api_key,
                "X-RapidAPI-Host": SCAMADVISER_RAPIDAPI_HOST,
            },
        )
        return self.normalize(data)

    def normalize(self, data: Dict[str, Any]) -> ProviderVerdict:
        if not isinstance(data, dict):
            raise MalformedResponseError("ScamAdviser response is not an object")

        trust_score = data.get("trust_score", data.get("trustScore", data.get("score")))
        if trust_score is not None:
            trust_score = float(trust_score)

        risk_level = trust_risk_level(trust_score)
        warnings: List[str] = list(data.get("warnings") or [])

        if trust_score is None:
            return self.verdict(
                self.policy.scamadviser_unrated,
                flags=[RiskFlag.UNRATED],
                detail={"trust_score": None, "risk_level": risk_level, "warnings": warnings},
                confidence=20,
            )

        flags: List[RiskFlag] = []
        if risk_level in ("high", "very_high"):
            flags.append(RiskFlag.SUSPICIOUS)
        for key in ("phishing_risk", "malware_risk", "fake_shop_risk"):
            if (data.get(key) or 0) > 50:
                flags.append(RiskFlag.SUSPICIOUS)
                warnings.append(key.replace("_", " "))

        return self.verdict(
            100 - trust_score,
            flags=flags,
            detail={
                "trust_score": trust_score,
                "risk_level": risk_level,
                "country": data.get("country"),
                "warnings": warnings,
            },
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        if keyword_hits(target, SCAM_KEYWORDS):
            trust = 5 + jitter(target, self.provider_id, 25)
        else:
            trust = 70 + jitter(target, self.provider_id, 30)
        return self.normalize({"trust_score": trust})
