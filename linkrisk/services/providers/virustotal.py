"""
LinkRisk VirusTotal Integration

Multi-engine URL, domain and IP reports from VirusTotal API v3.

A security score starts at 100 and loses points for the share of engines
flagging the URL and its domain, and for negative community reputation.
The risk contribution is 100 minus that score.
"""

import asyncio
import base64
import logging
from typing import Any, Dict, List, Optional

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import MULTI_ENGINE_KEYWORDS, SUSPICIOUS_IP_KEYWORDS, VIRUSTOTAL_API_URL
from linkrisk.utils.exceptions import MalformedResponseError, ProviderError, ProviderNotFoundError
from .base import BaseProvider, LiveStrategy
from .heuristics import is_private_ip, jitter, keyword_hits

logger = logging.getLogger(__name__)

SYNTHETIC_ENGINE_COUNT = 90


def url_identifier(url: str) -> str:
    """VirusTotal URL id: unpadded URL-safe base64 of the URL."""
    return base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii").rstrip("=")


def _engine_total(attributes: Dict[str, Any]) -> int:
    results = attributes.get("last_analysis_results") or {}
    if results:
        return len(results)
    stats = attributes.get("last_analysis_stats") or {}
    return sum(v for v in stats.values() if isinstance(v, int)) or 1


class VirusTotalProvider(BaseProvider):
    """VirusTotal API v3 reports."""

    provider_id = "virustotal"
    name = "VirusTotal"
    capabilities = ["URL Analysis", "Domain Analysis", "IP Analysis", "Multi-Engine Scanning"]
    target_kinds = frozenset({TargetKind.URL, TargetKind.IP})
    default_base_url = VIRUSTOTAL_API_URL
    min_key_length = 0

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        headers = {"x-apikey": self.api_key}

        if target.kind == TargetKind.IP:
            ip_report = await client.request_json(
                "GET", f"{self.base_url}/ip_addresses/{target.ip}", headers=headers,
            )
            return self.normalize(None, self._attributes(ip_report))

        url_report, domain_report = await asyncio.gather(
            self._fetch_url_report(target.url, client, headers),
            self._fetch_optional(client, f"{self.base_url}/domains/{target.domain}", headers),
        )

        if url_report is None and domain_report is None:
            raise ProviderNotFoundError("VirusTotal has no analysis for this URL yet; scan submitted")

        return self.normalize(
            self._attributes(url_report) if url_report else None,
            self._attributes(domain_report) if domain_report else None,
        )

    async def _fetch_optional(self, client: LiveStrategy, url: str, headers: Dict[str, str]) -> Optional[Dict]:
        try:
            return await client.request_json("GET", url, headers=headers)
        except ProviderNotFoundError:
            return None

    async def _fetch_url_report(self, url: str, client: LiveStrategy, headers: Dict[str, str]) -> Optional[Dict]:
        report = await self._fetch_optional(client, f"{self.base_url}/urls/{url_identifier(url)}", headers)
        if report is not None:
            return report

        # Unknown URL: queue a scan so the next lookup has data
        try:
            await client.request_json("POST", f"{self.base_url}/urls", headers=headers, data={"url": url})
            logger.info(f"VirusTotal: submitted {url} for scanning")
        except ProviderError as e:
            logger.warning(f"VirusTotal: scan submission failed: {e.message}")
        return None

    @staticmethod
    def _attributes(report: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(report, dict):
            raise MalformedResponseError("VirusTotal report is not an object")
        return report["data"]["attributes"]

    def security_score(
        self,
        url_attributes: Optional[Dict[str, Any]],
        domain_attributes: Optional[Dict[str, Any]],
    ) -> float:
        p = self.policy
        score = 100.0

        for attributes, malicious_w, suspicious_w, reputation_w in (
            (url_attributes, p.vt_url_malicious_weight, p.vt_url_suspicious_weight, p.vt_url_reputation_weight),
            (domain_attributes, p.vt_domain_malicious_weight, p.vt_domain_suspicious_weight, p.vt_domain_reputation_weight),
        ):
            if not attributes:
                continue
            stats = attributes.get("last_analysis_stats") or {}
            total = _engine_total(attributes)
            score -= (stats.get("malicious", 0) / total) * malicious_w
            score -= (stats.get("suspicious", 0) / total) * suspicious_w
            reputation = attributes.get("reputation", 0) or 0
            if reputation < 0:
                score -= abs(reputation) * reputation_w

        return max(0.0, min(100.0, score))

    def normalize(
        self,
        url_attributes: Optional[Dict[str, Any]],
        domain_attributes: Optional[Dict[str, Any]],
    ) -> ProviderVerdict:
        """Combine URL and domain (or IP) reports into one verdict."""
        malicious = 0
        suspicious = 0
        threat_names: List[str] = []
        for attributes in (url_attributes, domain_attributes):
            if attributes:
                stats = attributes.get("last_analysis_stats") or {}
                malicious = max(malicious, int(stats.get("malicious", 0)))
                suspicious = max(suspicious, int(stats.get("suspicious", 0)))
                threat_names.extend(attributes.get("threat_names") or [])

        flags: List[RiskFlag] = []
        if malicious >= self.policy.vt_malicious_engines:
            flags.append(RiskFlag.MALICIOUS)
        elif malicious + suspicious >= self.policy.vt_suspicious_engines:
            flags.append(RiskFlag.SUSPICIOUS)

        security_score = self.security_score(url_attributes, domain_attributes)
        return self.verdict(
            100 - security_score,
            flags=flags,
            detail={
                "security_score": round(security_score),
                "malicious_engines": malicious,
                "suspicious_engines": suspicious,
                "threat_names": threat_names,
                "url_report": url_attributes is not None,
                "domain_report": domain_attributes is not None,
            },
            confidence=85,
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        if target.kind == TargetKind.IP:
            risky = bool(keyword_hits(target, SUSPICIOUS_IP_KEYWORDS)) or is_private_ip(target)
        else:
            risky = bool(keyword_hits(target, MULTI_ENGINE_KEYWORDS))

        if risky:
            malicious = 30 + jitter(target, self.provider_id, 30)
            suspicious = 5 + jitter(target, self.provider_id + ":s", 10)
        else:
            malicious = 0
            suspicious = 0

        attributes = {
            "last_analysis_stats": {
                "malicious": malicious,
                "suspicious": suspicious,
                "harmless": SYNTHETIC_ENGINE_COUNT - malicious - suspicious,
            },
            "reputation": -jitter(target, self.provider_id + ":r", 10) if risky else 0,
        }
        return self.normalize(attributes, attributes if target.kind != TargetKind.IP else None)
