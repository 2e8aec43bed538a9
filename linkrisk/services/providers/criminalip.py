"""
LinkRisk Criminal IP Integration

Domain and IP reputation from Criminal IP. URLs are checked by their host.
"""

import logging
from typing import Any, Dict, List

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import CRIMINAL_IP_API_URL, REPUTATION_DOMAIN_KEYWORDS, SUSPICIOUS_IP_KEYWORDS
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import is_private_ip, jitter, keyword_hits

logger = logging.getLogger(__name__)


class CriminalIPProvider(BaseProvider):
    """
    Criminal IP reputation lookups.

    The provider's 0-100 score is used directly.
    """

    provider_id = "criminalip"
    name = "Criminal IP"
    capabilities = ["IP Reputation", "Domain Analysis", "Threat Intelligence"]
    target_kinds = frozenset({TargetKind.URL, TargetKind.DOMAIN, TargetKind.IP})
    default_base_url = CRIMINAL_IP_API_URL
    placeholder_key = "your-criminal-ip-api-key-here"

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        headers = {"x-api-key": self.api_key}
        if target.kind == TargetKind.IP:
            data = await client.request_json(
                "GET", f"{self.base_url}/v1/ip/reputation", params={"ip": target.ip}, headers=headers,
            )
        else:
            data = await client.request_json(
                "GET", f"{self.base_url}/v1/domain/reputation", params={"domain": target.domain}, headers=headers,
            )
        return self.normalize(data)

    def normalize(self, data: Dict[str, Any]) -> ProviderVerdict:
        if not isinstance(data, dict):
            raise MalformedResponseError("Criminal IP response is not an object")

        score = int(data.get("score") or 0)
        flags: List[RiskFlag] = []
        if data.get("is_malicious"):
            flags.append(RiskFlag.MALICIOUS)
        if data.get("is_phishing"):
            flags.append(RiskFlag.PHISHING)
        if score >= self.policy.reputation_suspicious:
            flags.append(RiskFlag.SUSPICIOUS)

        return self.verdict(
            score,
            flags=flags,
            detail={
                "risk_score": score,
                "is_malicious": bool(data.get("is_malicious")),
                "is_phishing": bool(data.get("is_phishing")),
                "country": data.get("country"),
                "threat_types": data.get("threat_types", []),
            },
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        if target.kind == TargetKind.IP:
            risky = bool(keyword_hits(target, SUSPICIOUS_IP_KEYWORDS)) or is_private_ip(target)
            score = 60 + jitter(target, self.provider_id, 30) if risky else jitter(target, self.provider_id, 30)
            return self.normalize({"score": score})

        risky = bool(keyword_hits(target, REPUTATION_DOMAIN_KEYWORDS))
        score = 70 + jitter(target, self.provider_id, 30) if risky else jitter(target, self.provider_id, 30)
        return self.normalize({"score": score, "is_malicious": risky})
