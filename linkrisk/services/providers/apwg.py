"""
LinkRisk APWG Integration

Phishing URL lookups against the APWG eCrime eXchange (eCX) phish feed.
"""

import logging
from typing import Any, Dict

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import APWG_API_URL, PHISHING_LIST_KEYWORDS
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import has_ip_literal, jitter, keyword_hits

logger = logging.getLogger(__name__)


class APWGProvider(BaseProvider):
    """
    APWG eCrime eXchange phish feed.

    A URL is either listed as a reported phish or it is not. Listed entries
    carry the targeted brand and a confidence level from the submitter.
    """

    provider_id = "apwg"
    name = "APWG"
    capabilities = ["URL Check", "Phishing Reports", "Brand Targeting"]
    target_kinds = frozenset({TargetKind.URL})
    default_base_url = APWG_API_URL

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        payload = await client.request_json(
            "GET",
            f"{self.base_url}/phish",
            params={"url": target.url},
            headers={"Authorization": self.api_key},
        )
        return self.normalize(payload)

    def normalize(self, payload: Dict[str, Any]) -> ProviderVerdict:
        """Listed -> phishing, otherwise clean."""
        if not isinstance(payload, dict) or not isinstance(payload.get("_embedded", {}), dict):
            raise MalformedResponseError("APWG response is not an object")

        entries = payload.get("_embedded", {}).get("phish", [])
        if not isinstance(entries, list):
            raise MalformedResponseError("APWG phish list is not a list")

        if not entries:
            return self.verdict(self.policy.apwg_clean, detail={"listed": False})

        first = entries[0]
        return self.verdict(
            self.policy.apwg_listed,
            flags=[RiskFlag.PHISHING],
            detail={
                "listed": True,
                "reports": len(entries),
                "brand": first.get("brand"),
                "confidence_level": first.get("confidence_level"),
            },
            confidence=80,
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        listed = bool(keyword_hits(target, PHISHING_LIST_KEYWORDS)) or has_ip_literal(target)
        entries = []
        if listed:
            entries = [{"brand": None, "confidence_level": 50 + jitter(target, self.provider_id, 50)}]
        return self.normalize({"_embedded": {"phish": entries}})
