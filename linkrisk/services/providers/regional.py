"""
LinkRisk Regional Security Checkers

Aggregates the Vietnamese security services (NCSC Vietnam, CyRadar,
Tin Nhiem Mang, ScamVN) into a single provider. Each enabled checker
reports clean, suspicious or malicious; the aggregate contribution grows
with the number of checkers that flag the URL.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from linkrisk.models import ProviderStatus, ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import REGIONAL_CHECK_TIMEOUT, REGIONAL_CHECKERS, REGIONAL_KEYWORDS
from linkrisk.utils.exceptions import MalformedResponseError
from .base import BaseProvider, LiveStrategy
from .heuristics import keyword_hits

logger = logging.getLogger(__name__)

FLAGGING_STATUSES = ("suspicious", "malicious")


class RegionalCheckersProvider(BaseProvider):
    """
    Aggregate of regional security checkers.

    The provider is live when at least one checker has a key; only keyed
    checkers are queried. Checker failures are tolerated as long as one
    checker answers.
    """

    provider_id = "regional"
    name = "Vietnamese Security Services"
    capabilities = ["Regional Blocklists", "Scam Reports", "Phishing Reports"]
    target_kinds = frozenset({TargetKind.URL})

    def __init__(self, checkers: Optional[Dict[str, Dict[str, Optional[str]]]] = None, **kwargs):
        """
        Args:
            checkers: checker id -> {"api_key": ..., "base_url": ...}
        """
        checkers = checkers or {}
        self.checkers: Dict[str, Dict[str, Any]] = {}
        for checker_id, defaults in REGIONAL_CHECKERS.items():
            config = checkers.get(checker_id, {})
            self.checkers[checker_id] = {
                "name": defaults["name"],
                "api_key": (config.get("api_key") or "").strip() or None,
                "base_url": (config.get("base_url") or defaults["base_url"]).rstrip("/"),
            }
        kwargs.setdefault("timeout", REGIONAL_CHECK_TIMEOUT)
        super().__init__(api_key=None, **kwargs)

    @property
    def enabled_checkers(self) -> List[str]:
        return [cid for cid, c in self.checkers.items() if c["api_key"]]

    @property
    def is_configured(self) -> bool:
        return bool(self.enabled_checkers)

    def status(self) -> ProviderStatus:
        status = super().status()
        status.capabilities = status.capabilities + [
            f"{c['name']} ({'enabled' if c['api_key'] else 'disabled'})" for c in self.checkers.values()
        ]
        return status

    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        checker_ids = self.enabled_checkers
        outcomes = await asyncio.gather(
            *(self._check(cid, target, client) for cid in checker_ids),
            return_exceptions=True,
        )

        results: Dict[str, str] = {}
        errors: List[BaseException] = []
        for checker_id, outcome in zip(checker_ids, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning(f"{self.checkers[checker_id]['name']} check failed: {outcome}")
                errors.append(outcome)
            else:
                results[checker_id] = outcome

        if not results:
            raise errors[0]

        return self.normalize(results)

    async def _check(self, checker_id: str, target: Target, client: LiveStrategy) -> str:
        checker = self.checkers[checker_id]
        data = await client.request_json(
            "GET",
            f"{checker['base_url']}/api/check",
            params={"url": target.url},
            headers={"Authorization": f"Bearer {checker['api_key']}"},
        )
        if not isinstance(data, dict):
            raise MalformedResponseError(f"{checker['name']} response is not an object")
        status = str(data.get("status", "clean")).lower()
        if status not in ("clean",) + FLAGGING_STATUSES:
            raise MalformedResponseError(f"{checker['name']} returned unknown status {status!r}")
        return status

    def normalize(self, results: Dict[str, str]) -> ProviderVerdict:
        """
        Args:
            results: checker id -> "clean" | "suspicious" | "malicious"
        """
        flagged = [cid for cid, status in results.items() if status in FLAGGING_STATUSES]

        flags: List[RiskFlag] = []
        if flagged:
            flags.append(RiskFlag.SUSPICIOUS)
        if any(status == "malicious" for status in results.values()):
            flags.append(RiskFlag.MALICIOUS)

        return self.verdict(
            min(100, len(flagged) * self.policy.regional_per_flag),
            flags=flags,
            detail={
                "checked": len(results),
                "flagged": len(flagged),
                "results": {self.checkers[cid]["name"]: status for cid, status in sorted(results.items())},
            },
            confidence=60,
        )

    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        results = {
            checker_id: "suspicious" if keyword_hits(target, REGIONAL_KEYWORDS[checker_id]) else "clean"
            for checker_id in self.checkers
        }
        return self.normalize(results)
