"""
LinkRisk Security Risk Engine

Entry points for assessing a URL, IP address or email address, and for
reporting which providers are configured.

Flow:
    validate target -> fan out to providers -> weighted consensus
    -> risk factors / recommendations / summary -> AggregateReport

The engine keeps no state between requests. Providers are injected.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from linkrisk.config.scoring import ScoringConfig, get_scoring_config
from linkrisk.config.settings import Settings, get_settings
from linkrisk.models import AggregateReport, Target, TargetKind
from linkrisk.services.providers import (
    APWGProvider,
    BaseProvider,
    CriminalIPProvider,
    GoogleSafeBrowsingProvider,
    HudsonRockProvider,
    IPQualityScoreProvider,
    PhishTankProvider,
    RegionalCheckersProvider,
    ScamAdviserProvider,
    VirusTotalProvider,
)
from linkrisk.utils.constants import REGIONAL_CHECKERS
from linkrisk.utils.validators import parse_email_target, parse_ip_target, parse_url_target
from .factors import RiskFactorGenerator
from .orchestrator import Adapter, FanOutOrchestrator
from .scorer import WeightedConsensusScorer

logger = logging.getLogger(__name__)

# Providers consulted for IP and email targets
IP_PROVIDERS = ("ipqualityscore", "criminalip", "virustotal")
EMAIL_PROVIDERS = ("ipqualityscore", "hudsonrock")


class SecurityRiskEngine:
    """
    Security risk aggregation engine.

    Args:
        providers: Provider adapters, in display order
        orchestrator: Fan-out runner
        scorer: Weighted consensus scorer
        factors: Risk factor / recommendation generator
    """

    def __init__(
        self,
        providers: Iterable[Adapter],
        orchestrator: Optional[FanOutOrchestrator] = None,
        scorer: Optional[WeightedConsensusScorer] = None,
        factors: Optional[RiskFactorGenerator] = None,
    ):
        self.providers: Dict[str, Adapter] = {p.provider_id: p for p in providers}
        self.orchestrator = orchestrator or FanOutOrchestrator()
        self.scorer = scorer or WeightedConsensusScorer()
        self.factors = factors or RiskFactorGenerator(self.scorer.config)

    # -------------------------------------------------------------------------
    # Provider selection
    # -------------------------------------------------------------------------

    def _supporting(self, kind: TargetKind, exclude: Iterable[TargetKind] = ()) -> List[Adapter]:
        sample = Target(kind=kind, value="")
        excluded = [Target(kind=k, value="") for k in exclude]
        return [
            p for p in self.providers.values()
            if p.supports(sample) and not any(p.supports(t) for t in excluded)
        ]

    def _named(self, provider_ids: Iterable[str]) -> List[Adapter]:
        return [self.providers[pid] for pid in provider_ids if pid in self.providers]

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def assess_url(self, url: str) -> AggregateReport:
        """
        Assess a URL.

        Every URL-capable provider runs first; domain-only providers then run
        against the URL's host within the remaining time budget.

        Raises:
            InvalidURLError: URL is malformed (before any provider runs)
        """
        target = parse_url_target(url)
        logger.info(f"Assessing URL: {target.url}")

        return await self._assess(
            target,
            primary=self._supporting(TargetKind.URL),
            secondary=self._supporting(TargetKind.DOMAIN, exclude=[TargetKind.URL]),
            secondary_target=target.domain_target(),
        )

    async def assess_ip(self, ip: str) -> AggregateReport:
        """
        Assess an IP address with the IP reputation providers.

        Raises:
            InvalidIPAddressError: not a valid IPv4/IPv6 address
        """
        target = parse_ip_target(ip)
        logger.info(f"Assessing IP: {target.ip}")
        return await self._assess(target, primary=self._named(IP_PROVIDERS))

    async def assess_email(self, email: str) -> AggregateReport:
        """
        Assess an email address for fraud indicators and breach exposure.

        Raises:
            InvalidEmailError: not a valid email address
        """
        target = parse_email_target(email)
        logger.info(f"Assessing email address at domain: {target.domain}")
        return await self._assess(target, primary=self._named(EMAIL_PROVIDERS))

    def get_provider_status(self) -> Dict[str, Dict[str, Any]]:
        """Provider id -> {name, configured, capabilities, target_kinds}."""
        status = {}
        for provider_id, provider in self.providers.items():
            if isinstance(provider, BaseProvider):
                status[provider_id] = provider.status().model_dump()
            else:
                status[provider_id] = {
                    "name": provider.name,
                    "configured": bool(getattr(provider, "is_configured", False)),
                    "capabilities": list(getattr(provider, "capabilities", [])),
                    "target_kinds": [],
                }
        return status

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    async def _assess(
        self,
        target: Target,
        primary: List[Adapter],
        secondary: Optional[List[Adapter]] = None,
        secondary_target: Optional[Target] = None,
    ) -> AggregateReport:
        fan_out = await self.orchestrator.run(
            target,
            primary,
            secondary=secondary or [],
            secondary_target=secondary_target,
        )
        results = fan_out.results

        consensus = self.scorer.score(results)
        assessment = self.factors.generate(results, target)

        report = AggregateReport(
            target=target,
            provider_results=results,
            failed_providers=fan_out.failed,
            overall_score=consensus.score,
            risk_level=consensus.risk_level,
            confidence=consensus.confidence,
            risk_factors=assessment.risk_factors,
            recommendations=assessment.recommendations,
            summary=assessment.summary,
            providers_consulted=len(results),
            providers_succeeded=len(consensus.providers_used),
            elapsed_ms=fan_out.elapsed_ms,
        )

        logger.info(
            f"Assessment complete: score={report.overall_score}, level={report.risk_level.value}, "
            f"confidence={report.confidence}, factors={len(report.risk_factors)}"
        )
        return report


def build_providers(settings: Settings, scoring: Optional[ScoringConfig] = None) -> List[BaseProvider]:
    """Construct all nine providers from settings."""
    policy = (scoring or get_scoring_config()).verdicts
    common = {
        "timeout": settings.provider_timeout_seconds,
        "max_retries": settings.provider_max_retries,
        "policy": policy,
    }

    return [
        VirusTotalProvider(settings.virustotal_api_key, settings.virustotal_api_url, **common),
        GoogleSafeBrowsingProvider(settings.google_safebrowsing_api_key, **common),
        RegionalCheckersProvider(
            checkers={cid: settings.regional_checker_config(cid) for cid in REGIONAL_CHECKERS},
            **common,
        ),
        PhishTankProvider(settings.phishtank_api_key, **common),
        IPQualityScoreProvider(settings.ipqualityscore_api_key, **common),
        ScamAdviserProvider(settings.scamadviser_api_key, settings.scamadviser_api_url, **common),
        APWGProvider(settings.apwg_api_key, settings.apwg_api_url, **common),
        CriminalIPProvider(settings.criminal_ip_api_key, settings.criminal_ip_api_url, **common),
        HudsonRockProvider(settings.hudson_rock_api_key, settings.hudson_rock_api_url, **common),
    ]


def build_engine(
    settings: Optional[Settings] = None,
    scoring: Optional[ScoringConfig] = None,
) -> SecurityRiskEngine:
    """Wire providers, orchestrator, scorer and generator from configuration."""
    settings = settings or get_settings()
    scoring = scoring or get_scoring_config()

    providers = build_providers(settings, scoring)
    configured = [p.name for p in providers if p.is_configured]
    synthetic = [p.name for p in providers if not p.is_configured]
    logger.info(f"Providers live: {configured or 'none'}; synthetic: {synthetic or 'none'}")

    return SecurityRiskEngine(
        providers=providers,
        orchestrator=FanOutOrchestrator(
            per_provider_timeout=settings.provider_timeout_seconds,
            batch_deadline=settings.assessment_deadline_seconds,
            max_in_flight=settings.max_concurrent_providers,
        ),
        scorer=WeightedConsensusScorer(scoring),
        factors=RiskFactorGenerator(scoring),
    )
