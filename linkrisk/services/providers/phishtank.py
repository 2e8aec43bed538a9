"""
LinkRisk PhishTank Integration

Provides phishing URL lookups via PhishTank API.
"""

import logging
from typing import Any, Dict

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import PHISHING_LIST_KEYWORDS, PHISHTANK_API_URL
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import has_ip_literal, jitter, keyword_hits

logger = logging.getLogger(__name__)


class PhishTankProvider(BaseProvider):
    """
    PhishTank API integration.

    Community phishing URL database providing:
    - Listed / not listed
    - Verified phishing status
    - Phish detail page (when listed)
    """

    provider_id = "phishtank"
    name = "PhishTank"
    capabilities = ["URL Check", "Phishing Database", "Verified Reports"]
    target_kinds = frozenset({TargetKind.URL})
    default_base_url = PHISHTANK_API_URL

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        payload = await client.request_json(
            "POST",
            self.base_url + "/",
            data={"url": target.url, "format": "json", "app_key": self.api_key},
        )
        return self.normalize(payload)

    def normalize(self, payload: Dict[str, Any]) -> ProviderVerdict:
        """Map a checkurl response onto the common risk vector."""
        if not isinstance(payload, dict) or not isinstance(payload.get("results"), dict):
            raise MalformedResponseError("PhishTank response has no results")

        results = payload["results"]
        in_database = bool(results.get("in_database", False))

        if not in_database:
            return self.verdict(
                self.policy.phishtank_clean,
                detail={"in_database": False, "verified": False},
            )

        verified = bool(results.get("verified", False))
        score = self.policy.phishtank_verified if verified else self.policy.phishtank_unverified
        return self.verdict(
            score,
            flags=[RiskFlag.PHISHING],
            detail={
                "in_database": True,
                "verified": verified,
                "phish_id": results.get("phish_id"),
                "phish_detail_page": results.get("phish_detail_page"),
            },
            confidence=90 if verified else 70,
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        listed = bool(keyword_hits(target, PHISHING_LIST_KEYWORDS)) or has_ip_literal(target)
        payload = {
            "results": {
                "in_database": listed,
                "verified": listed and jitter(target, self.provider_id, 2) == 1,
                "phish_id": 100000 + jitter(target, self.provider_id, 900000) if listed else None,
            }
        }
        return self.normalize(payload)
