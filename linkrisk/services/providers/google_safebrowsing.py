"""
Google Safe Browsing API Integration

Checks URLs against Google's constantly updated lists of unsafe web resources:
- Malware
- Social Engineering (Phishing)
- Unwanted Software
- Potentially Harmful Applications

API Docs: https://developers.google.com/safe-browsing/v4/lookup-api
"""

import logging
from typing import Any, Dict, List

from linkrisk import __version__
from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import (
    GOOGLE_SAFEBROWSING_API_URL,
    GSB_CLIENT_ID,
    GSB_PLATFORM_TYPES,
    GSB_THREAT_TYPES,
    SAFEBROWSING_KEYWORDS,
)
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import keyword_hits

logger = logging.getLogger(__name__)

THREAT_FLAGS: Dict[str, RiskFlag] = {
    "MALWARE": RiskFlag.MALICIOUS,
    "SOCIAL_ENGINEERING": RiskFlag.PHISHING,
    "POTENTIALLY_HARMFUL_APPLICATION": RiskFlag.SUSPICIOUS,
    "UNWANTED_SOFTWARE": RiskFlag.SUSPICIOUS,
}


class GoogleSafeBrowsingProvider(BaseProvider):
    """
    Client for Google Safe Browsing Lookup API v4.

    Several matched threat types combine by maximum severity.
    """

    provider_id = "google_safebrowsing"
    name = "Google Safe Browsing"
    capabilities = ["URL Check", "Malware Detection", "Phishing Detection", "Unwanted Software"]
    target_kinds = frozenset({TargetKind.URL})
    default_base_url = GOOGLE_SAFEBROWSING_API_URL
    min_key_length = 20
    placeholder_key = "your-google-safebrowsing-api-key-here"

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        payload = {
            "client": {
                "clientId": GSB_CLIENT_ID,
                "clientVersion": __version__,
            },
            "threatInfo": {
                "threatTypes": GSB_THREAT_TYPES,
                "platformTypes": GSB_PLATFORM_TYPES,
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": target.url}],
            },
        }
        data = await client.request_json(
            "POST",
            self.base_url,
            params={"key": self.api_key},
            json=payload,
        )
        return self.normalize(data)

    def normalize(self, data: Dict[str, Any]) -> ProviderVerdict:
        """Highest-severity matched threat type wins."""
        if not isinstance(data, dict):
            raise MalformedResponseError("Safe Browsing response is not an object")

        matches = data.get("matches", [])
        if not isinstance(matches, list):
            raise MalformedResponseError("Safe Browsing matches is not a list")

        threat_types: List[str] = sorted({m["threatType"] for m in matches})

        if not threat_types:
            return self.verdict(
                self.policy.gsb_clean,
                detail={"is_unsafe": False, "threat_types": []},
                confidence=80,
            )

        score = max(self.policy.gsb_threat_score(t) for t in threat_types)
        flags = [THREAT_FLAGS.get(t, RiskFlag.SUSPICIOUS) for t in threat_types]
        return self.verdict(
            score,
            flags=flags,
            detail={"is_unsafe": True, "threat_types": threat_types},
            confidence=90,
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        hits = keyword_hits(target, SAFEBROWSING_KEYWORDS)
        if not hits:
            return self.normalize({})

        threat_type = "MALWARE" if "malware" in hits else "SOCIAL_ENGINEERING"
        return self.normalize({"matches": [{"threatType": threat_type, "threat": {"url": target.value}}]})
