"""
LinkRisk Hudson Rock Integration

Info-stealer and breach lookups from Hudson Rock Cavalier OSINT tools.
Domain searches report infected machines with credentials for the domain;
email searches report data breaches the address appears in.
"""

import logging
from typing import Any, Dict

from linkrisk.models import ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import BREACHED_EMAIL_KEYWORDS, HUDSON_ROCK_API_URL, REPUTATION_DOMAIN_KEYWORDS
from linkrisk.utils.exceptions import MalformedResponseError, ProviderNotFoundError
from .base import BaseProvider, LiveStrategy
from .heuristics import jitter, keyword_hits

logger = logging.getLogger(__name__)


def mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    return f"{local[:3]}***@{domain}"


class HudsonRockProvider(BaseProvider):
    """Hudson Rock stolen-credential searches."""

    provider_id = "hudsonrock"
    name = "Hudson Rock"
    capabilities = ["Breach Detection", "Stolen Credentials", "Info-Stealer Intelligence"]
    target_kinds = frozenset({TargetKind.DOMAIN, TargetKind.EMAIL})
    default_base_url = HUDSON_ROCK_API_URL
    placeholder_key = "your-hudson-rock-api-key-here"

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if target.kind == TargetKind.EMAIL:
            endpoint, params = "search-by-email", {"email": target.email}
        else:
            endpoint, params = "search-by-domain", {"domain": target.domain}

        try:
            data = await client.request_json(
                "GET", f"{self.base_url}/osint-tools/{endpoint}", params=params, headers=headers,
            )
        except ProviderNotFoundError:
            data = {}

        if target.kind == TargetKind.EMAIL:
            return self.normalize_email(data, target.email)
        return self.normalize_domain(data)

    def normalize_domain(self, data: Dict[str, Any]) -> ProviderVerdict:
        if not isinstance(data, dict):
            raise MalformedResponseError("Hudson Rock response is not an object")

        stealers = data.get("stealers_data") or []
        p = self.policy
        if not stealers:
            return self.verdict(p.hudson_clean, detail={"compromised": False, "stealers": 0})

        return self.verdict(
            min(p.hudson_cap, p.hudson_base + len(stealers) * p.hudson_per_stealer),
            flags=[RiskFlag.COMPROMISED_CREDENTIALS],
            detail={
                "compromised": True,
                "stealers": len(stealers),
                "total_records": data.get("total_records", 0),
                "infected_computers": data.get("infected_computers", 0),
                "last_seen": data.get("last_seen"),
            },
        )

    def normalize_email(self, data: Dict[str, Any], email: str) -> ProviderVerdict:
        if not isinstance(data, dict):
            raise MalformedResponseError("Hudson Rock response is not an object")

        breaches = data.get("data_breaches") or []
        p = self.policy
        if not breaches:
            return self.verdict(
                p.hudson_email_clean,
                detail={"email": mask_email(email), "breached": False, "breaches": 0},
            )

        return self.verdict(
            min(p.hudson_email_cap, p.hudson_email_base + len(breaches) * p.hudson_email_per_breach),
            flags=[RiskFlag.COMPROMISED_CREDENTIALS],
            detail={
                "email": mask_email(email),
                "breached": True,
                "breaches": len(breaches),
                "last_breach": data.get("last_breach_date"),
            },
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        if target.kind == TargetKind.EMAIL:
            count = 1 + jitter(target, self.provider_id, 3) if keyword_hits(target, BREACHED_EMAIL_KEYWORDS) else 0
            return self.normalize_email({"data_breaches": [f"breach-{i}" for i in range(count)]}, target.email)

        count = 1 + jitter(target, self.provider_id, 5) if keyword_hits(target, REPUTATION_DOMAIN_KEYWORDS) else 0
        return self.normalize_domain({"stealers_data": [f"stealer-{i}" for i in range(count)]})
