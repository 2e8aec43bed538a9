"""
LinkRisk Test Configuration

Pytest fixtures and stub providers.
"""

import asyncio
from typing import Iterable, Optional

import pytest

from linkrisk.config.scoring import ScoringConfig
from linkrisk.config.settings import Settings
from linkrisk.models import ErrorReason, ProviderVerdict, RiskFlag, Target, TargetKind


ALL_PROVIDER_IDS = [
    "virustotal",
    "google_safebrowsing",
    "regional",
    "phishtank",
    "ipqualityscore",
    "scamadviser",
    "apwg",
    "criminalip",
    "hudsonrock",
]


class StubAdapter:
    """Plain object honouring the provider interface, with scripted behaviour."""

    def __init__(
        self,
        provider_id: str,
        contribution: int = 10,
        flags: Iterable[RiskFlag] = (),
        name: Optional[str] = None,
        kinds: Iterable[TargetKind] = (TargetKind.URL, TargetKind.IP, TargetKind.EMAIL),
        delay: float = 0.0,
        hang: bool = False,
        fail: Optional[ErrorReason] = None,
        raises: Optional[Exception] = None,
    ):
        self.provider_id = provider_id
        self.name = name or provider_id.replace("_", " ").title()
        self.contribution = contribution
        self.flags = list(flags)
        self.kinds = set(kinds)
        self.delay = delay
        self.hang = hang
        self.fail = fail
        self.raises = raises
        self.calls = []
        self.is_configured = False
        self.capabilities = ["Stub"]

    def supports(self, target: Target) -> bool:
        return target.kind in self.kinds

    async def assess(self, target: Target) -> ProviderVerdict:
        self.calls.append(target)
        if self.hang:
            await asyncio.sleep(3600)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raises is not None:
            raise self.raises
        if self.fail is not None:
            return ProviderVerdict.failure(self.provider_id, self.name, self.fail, "stubbed failure")
        return ProviderVerdict.success(
            self.provider_id,
            self.name,
            self.contribution,
            flags=self.flags,
        )


class FixedClock:
    """Clock that never advances."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_verdict(provider_id: str, contribution: int = 10, flags: Iterable[RiskFlag] = (), **detail) -> ProviderVerdict:
    return ProviderVerdict.success(provider_id, provider_id.title(), contribution, flags=flags, detail=detail)


def make_failure(provider_id: str, reason: ErrorReason = ErrorReason.TIMEOUT) -> ProviderVerdict:
    return ProviderVerdict.failure(provider_id, provider_id.title(), reason)


@pytest.fixture
def stub_adapter():
    """Factory for stub providers."""
    return StubAdapter


@pytest.fixture
def fixed_clock():
    return FixedClock()


@pytest.fixture
def verdict():
    """Factory for successful verdicts."""
    return make_verdict


@pytest.fixture
def failure():
    """Factory for failed verdicts."""
    return make_failure


@pytest.fixture
def scoring():
    """Default scoring policy, independent of the environment."""
    return ScoringConfig()


@pytest.fixture
def offline_settings():
    """Settings with no provider keys, independent of the environment and .env."""
    return Settings(
        _env_file=None,
        apwg_api_key=None,
        phishtank_api_key=None,
        google_safebrowsing_api_key=None,
        ipqualityscore_api_key=None,
        criminal_ip_api_key=None,
        scamadviser_api_key=None,
        virustotal_api_key=None,
        hudson_rock_api_key=None,
        ncsc_api_key=None,
        cyradar_api_key=None,
        tinnhiemmang_api_key=None,
        scamvn_api_key=None,
        provider_timeout_seconds=5,
        assessment_deadline_seconds=10,
    )
