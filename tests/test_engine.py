"""
Tests for the security risk engine entry points.
"""

import asyncio
import time

import pytest

from linkrisk.models import RISK_LEVEL_ORDER, ErrorReason, RiskFlag, RiskLevel, TargetKind
from linkrisk.services.aggregation import (
    FanOutOrchestrator,
    RiskFactorGenerator,
    SecurityRiskEngine,
    WeightedConsensusScorer,
    build_engine,
    build_providers,
)
from linkrisk.utils.exceptions import InvalidEmailError, InvalidIPAddressError, InvalidURLError

from conftest import ALL_PROVIDER_IDS, FixedClock, StubAdapter


def stub_engine(adapters, scoring, **orchestrator_kwargs):
    orchestrator_kwargs.setdefault("clock", FixedClock())
    return SecurityRiskEngine(
        providers=adapters,
        orchestrator=FanOutOrchestrator(**orchestrator_kwargs),
        scorer=WeightedConsensusScorer(scoring),
        factors=RiskFactorGenerator(scoring),
    )


def stub_fleet(overrides=None, **common):
    """One stub per provider id. Hudson Rock is domain-only, as in production."""
    overrides = overrides or {}
    adapters = []
    for i, pid in enumerate(ALL_PROVIDER_IDS):
        kwargs = {"contribution": (5, 10, 15)[i % 3]}
        if pid == "hudsonrock":
            kwargs["kinds"] = [TargetKind.DOMAIN, TargetKind.EMAIL]
        kwargs.update(common)
        kwargs.update(overrides.get(pid, {}))
        adapters.append(StubAdapter(pid, **kwargs))
    return adapters


def rank(level):
    return RISK_LEVEL_ORDER.index(level)


class TestUrlScenarios:
    """End-to-end URL assessments with stub providers."""

    def test_all_clean(self, scoring):
        engine = stub_engine(stub_fleet(), scoring)
        report = asyncio.run(engine.assess_url("https://example.com/login"))

        assert report.risk_level == RiskLevel.VERY_LOW
        assert report.risk_factors == []
        assert report.recommendations[0] == "URL appears to be safe based on current analysis"
        assert report.summary == "URL checked by 9 security services - no threats detected"
        assert report.providers_consulted == 9
        assert report.providers_succeeded == 9
        assert report.failed_providers == {}
        assert report.confidence == 95

    def test_domain_only_provider_gets_the_host(self, scoring):
        adapters = stub_fleet()
        hudson = next(a for a in adapters if a.provider_id == "hudsonrock")

        asyncio.run(stub_engine(adapters, scoring).assess_url("https://Shop.Example.com/cart"))

        assert len(hudson.calls) == 1
        assert hudson.calls[0].kind == TargetKind.DOMAIN
        assert hudson.calls[0].value == "shop.example.com"

    def test_single_high_trust_phishing_detection(self, scoring):
        adapters = stub_fleet(
            overrides={"google_safebrowsing": {"contribution": 90, "flags": [RiskFlag.PHISHING]}},
            contribution=10,
        )
        report = asyncio.run(stub_engine(adapters, scoring).assess_url("https://example.com/login"))

        assert rank(report.risk_level) >= rank(RiskLevel.MEDIUM)
        phishing = [f for f in report.risk_factors if "phishing" in f]
        assert len(phishing) == 1
        assert phishing[0].startswith("Google Safebrowsing:")
        assert report.summary.startswith("LOW RISK: 1 threat indicator(s)")
        assert "Be aware of similar phishing attempts in the future" in report.recommendations

    def test_total_failure(self, scoring):
        engine = stub_engine(stub_fleet(fail=ErrorReason.CONNECTION_ERROR), scoring)
        report = asyncio.run(engine.assess_url("https://example.com/login"))

        assert report.overall_score == 50
        assert report.risk_level == RiskLevel.UNKNOWN
        assert report.confidence == 0
        assert report.providers_succeeded == 0
        assert len(report.failed_providers) == 9
        assert not any("appears to be safe" in r for r in report.recommendations)

    def test_partial_failure_is_reported(self, scoring):
        adapters = stub_fleet(overrides={
            "virustotal": {"fail": ErrorReason.RATE_LIMITED},
            "phishtank": {"raises": RuntimeError("boom")},
        })
        report = asyncio.run(stub_engine(adapters, scoring).assess_url("https://example.com"))

        assert report.failed_providers == {
            "virustotal": ErrorReason.RATE_LIMITED,
            "phishtank": ErrorReason.PROVIDER_ERROR,
        }
        assert report.providers_succeeded == 7
        assert report.providers_consulted == 9
        assert report.confidence == 84

    def test_hanging_provider_does_not_block(self, scoring):
        adapters = stub_fleet(overrides={"regional": {"hang": True}})
        engine = stub_engine(adapters, scoring, per_provider_timeout=0.2, batch_deadline=5, clock=time.monotonic)

        start = time.monotonic()
        report = asyncio.run(engine.assess_url("https://example.com"))

        assert time.monotonic() - start < 2
        assert report.failed_providers == {"regional": ErrorReason.TIMEOUT}
        assert report.providers_succeeded == 8

    @pytest.mark.parametrize("url", ["", "example.com", "ftp://example.com", "https://exa mple.com"])
    def test_invalid_url_runs_no_provider(self, scoring, url):
        adapters = stub_fleet()
        with pytest.raises(InvalidURLError):
            asyncio.run(stub_engine(adapters, scoring).assess_url(url))
        assert all(a.calls == [] for a in adapters)

    def test_repeat_assessment_is_identical(self, scoring, offline_settings):
        engine = SecurityRiskEngine(
            providers=build_providers(offline_settings, scoring),
            orchestrator=FanOutOrchestrator(clock=FixedClock()),
            scorer=WeightedConsensusScorer(scoring),
            factors=RiskFactorGenerator(scoring),
        )
        first = asyncio.run(engine.assess_url("https://suspicious-site.example.com/login"))
        second = asyncio.run(engine.assess_url("https://suspicious-site.example.com/login"))

        assert first.model_dump() == second.model_dump()


class TestSyntheticEngine:
    """Assessments with no provider keys configured."""

    def test_every_verdict_is_synthetic(self, offline_settings, scoring):
        engine = build_engine(offline_settings, scoring)
        report = asyncio.run(engine.assess_url("https://example.com/login"))

        assert set(report.provider_results) == set(ALL_PROVIDER_IDS)
        assert all(v.is_synthetic for v in report.provider_results.values())
        assert report.providers_succeeded == 9

    def test_suspicious_text_ranks_higher(self, offline_settings, scoring):
        engine = build_engine(offline_settings, scoring)
        risky = asyncio.run(engine.assess_url("https://suspicious-site.example.com/login"))
        benign = asyncio.run(engine.assess_url("https://example.com/login"))

        assert risky.risk_level in (RiskLevel.HIGH, RiskLevel.VERY_HIGH)
        assert benign.risk_level in (RiskLevel.VERY_LOW, RiskLevel.LOW)
        assert rank(risky.risk_level) > rank(benign.risk_level)
        assert risky.summary.startswith("HIGH RISK")
        assert benign.risk_factors == []

    def test_assess_ip(self, offline_settings, scoring):
        engine = build_engine(offline_settings, scoring)
        private = asyncio.run(engine.assess_ip("192.168.1.10"))
        public = asyncio.run(engine.assess_ip("8.8.8.8"))

        assert private.target.kind == TargetKind.IP
        assert set(private.provider_results) == {"ipqualityscore", "criminalip", "virustotal"}
        assert private.overall_score > public.overall_score
        assert "IP address" in public.summary

    def test_assess_email(self, offline_settings, scoring):
        engine = build_engine(offline_settings, scoring)
        risky = asyncio.run(engine.assess_email("test@example.com"))
        benign = asyncio.run(engine.assess_email("alice@example.com"))

        assert set(risky.provider_results) == {"ipqualityscore", "hudsonrock"}
        assert risky.overall_score > benign.overall_score
        assert risky.provider_results["hudsonrock"].has_flag(RiskFlag.COMPROMISED_CREDENTIALS)
        assert benign.summary == "Email address checked by 2 security services - no threats detected"

    def test_invalid_ip_and_email(self, offline_settings, scoring):
        engine = build_engine(offline_settings, scoring)
        with pytest.raises(InvalidIPAddressError):
            asyncio.run(engine.assess_ip("999.1.1.1"))
        with pytest.raises(InvalidEmailError):
            asyncio.run(engine.assess_email("not-an-email"))


class TestProviderStatus:
    """Test provider status reporting."""

    def test_all_unconfigured(self, offline_settings, scoring):
        status = build_engine(offline_settings, scoring).get_provider_status()

        assert list(status) == ALL_PROVIDER_IDS
        assert all(s["configured"] is False for s in status.values())
        assert status["virustotal"]["name"] == "VirusTotal"
        assert "Multi-Engine Scanning" in status["virustotal"]["capabilities"]

    def test_configured_provider(self, offline_settings, scoring):
        settings = offline_settings.model_copy(update={"virustotal_api_key": "vt-test-key"})
        status = build_engine(settings, scoring).get_provider_status()

        assert status["virustotal"]["configured"] is True
        assert status["phishtank"]["configured"] is False

    def test_stub_providers(self, scoring):
        status = stub_engine(stub_fleet(), scoring).get_provider_status()
        assert status["apwg"] == {
            "name": "Apwg",
            "configured": False,
            "capabilities": ["Stub"],
            "target_kinds": [],
        }
