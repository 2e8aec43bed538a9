"""
IPQualityScore Malicious URL, IP and Email Scanner

Real-time scanning of:
- URLs for phishing, malware, suspicious content and parked domains
- IP addresses for proxy/VPN/TOR usage and recent abuse
- Email addresses for disposable providers and fraud indicators

API Docs: https://www.ipqualityscore.com/documentation/malicious-url-scanner-api/overview
"""

import logging
from typing import Any, Dict, List
from urllib.parse import quote

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import (
    DISPOSABLE_EMAIL_KEYWORDS,
    IPQUALITYSCORE_API_URL,
    REPUTATION_URL_KEYWORDS,
    SUSPICIOUS_IP_KEYWORDS,
)
from linkrisk.utils.exceptions import (
    MalformedResponseError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderRateLimitError,
)
from .base import BaseProvider, LiveStrategy
from .heuristics import is_private_ip, jitter, keyword_hits

logger = logging.getLogger(__name__)


class IPQualityScoreProvider(BaseProvider):
    """
    IPQualityScore scanner for URLs, IPs and email addresses.

    The provider's own 0-100 risk/fraud score is used directly.
    """

    provider_id = "ipqualityscore"
    name = "IPQualityScore"
    capabilities = ["URL Check", "IP Reputation", "Email Validation", "Fraud Scoring"]
    target_kinds = frozenset({TargetKind.URL, TargetKind.IP, TargetKind.EMAIL})
    default_base_url = IPQUALITYSCORE_API_URL

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        if target.kind == TargetKind.URL:
            endpoint, value = "url", target.url
        elif target.kind == TargetKind.IP:
            endpoint, value = "ip", target.ip
        else:
            endpoint, value = "email", target.email

        data = await client.request_json(
            "GET",
            f"{self.base_url}/{endpoint}/{self.api_key}/{quote(value, safe='')}",
            params={"strictness": 1} if endpoint == "url" else None,
        )
        self._raise_for_api_error(data)

        if target.kind == TargetKind.URL:
            return self.normalize_url(data)
        if target.kind == TargetKind.IP:
            return self.normalize_ip(data)
        return self.normalize_email(data)

    @staticmethod
    def _raise_for_api_error(data: Dict[str, Any]) -> None:
        """IPQS reports errors in the body with HTTP 200."""
        if not isinstance(data, dict):
            raise MalformedResponseError("IPQualityScore response is not an object")
        if data.get("success", True):
            return

        message = str(data.get("message", "Unknown error"))
        lowered = message.lower()
        if "quota" in lowered or "credits" in lowered or "exceeded" in lowered:
            raise ProviderRateLimitError(f"IPQualityScore: {message}")
        if "key" in lowered:
            raise ProviderAuthenticationError(f"IPQualityScore: {message}")
        raise ProviderError(f"IPQualityScore: {message}")

    def normalize_url(self, data: Dict[str, Any]) -> ProviderVerdict:
        risk_score = int(data["risk_score"])
        flags: List[RiskFlag] = []
        if data.get("malware"):
            flags.append(RiskFlag.MALICIOUS)
        if data.get("phishing"):
            flags.append(RiskFlag.PHISHING)
        if data.get("suspicious"):
            flags.append(RiskFlag.SUSPICIOUS)
        if data.get("adult"):
            flags.append(RiskFlag.ADULT)

        return self.verdict(
            risk_score,
            flags=flags,
            detail={
                "risk_score": risk_score,
                "phishing": bool(data.get("phishing")),
                "malware": bool(data.get("malware")),
                "suspicious": bool(data.get("suspicious")),
                "adult": bool(data.get("adult")),
                "unsafe": bool(data.get("unsafe")),
                "domain": data.get("domain"),
                "category": data.get("category"),
            },
        )

    def normalize_ip(self, data: Dict[str, Any]) -> ProviderVerdict:
        fraud_score = int(data["fraud_score"])
        indicators = [k for k in ("proxy", "vpn", "tor", "recent_abuse", "bot_status") if data.get(k)]
        flags = [RiskFlag.SUSPICIOUS] if indicators or fraud_score >= self.policy.reputation_suspicious else []

        return self.verdict(
            fraud_score,
            flags=flags,
            detail={
                "fraud_score": fraud_score,
                "indicators": indicators,
                "country_code": data.get("country_code"),
                "isp": data.get("ISP"),
            },
        )

    def normalize_email(self, data: Dict[str, Any]) -> ProviderVerdict:
        fraud_score = int(data["fraud_score"])
        indicators = [k for k in ("disposable", "recent_abuse", "leaked", "honeypot", "spam_trap_score") if data.get(k)]
        if data.get("valid") is False:
            indicators.append("invalid")
        flags = [RiskFlag.SUSPICIOUS] if indicators or fraud_score >= self.policy.reputation_suspicious else []

        return self.verdict(
            fraud_score,
            flags=flags,
            detail={
                "fraud_score": fraud_score,
                "indicators": indicators,
                "valid": data.get("valid"),
                "disposable": bool(data.get("disposable")),
            },
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        if target.kind == TargetKind.URL:
            risky = bool(keyword_hits(target, REPUTATION_URL_KEYWORDS))
            score = 70 + jitter(target, self.provider_id, 30) if risky else jitter(target, self.provider_id, 40)
            return self.normalize_url({
                "risk_score": score,
                "phishing": risky and "phish" in target.value.lower(),
                "malware": risky and "malware" in target.value.lower(),
                "suspicious": risky,
            })

        if target.kind == TargetKind.IP:
            risky = bool(keyword_hits(target, SUSPICIOUS_IP_KEYWORDS)) or is_private_ip(target)
            score = 60 + jitter(target, self.provider_id, 30) if risky else jitter(target, self.provider_id, 30)
            return self.normalize_ip({"fraud_score": score, "proxy": risky})

        risky = bool(keyword_hits(target, DISPOSABLE_EMAIL_KEYWORDS))
        score = 75 + jitter(target, self.provider_id, 20) if risky else jitter(target, self.provider_id, 30)
        return self.normalize_email({"fraud_score": score, "disposable": risky, "valid": True})
