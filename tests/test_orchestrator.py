"""
Tests for the concurrent provider fan-out.
"""

import asyncio
import time

from linkrisk.models import ErrorReason, ProviderVerdict, TargetKind
from linkrisk.services.aggregation.orchestrator import FanOutOrchestrator
from linkrisk.utils.validators import parse_url_target

from conftest import StubAdapter


TARGET = parse_url_target("https://example.com/login")


class StubbornAdapter(StubAdapter):
    """Keeps running for a while after being cancelled."""

    def __init__(self, provider_id: str, linger: float = 1.5, **kwargs):
        super().__init__(provider_id, **kwargs)
        self.linger = linger

    async def assess(self, target):
        self.calls.append(target)
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            await asyncio.sleep(self.linger)
        return ProviderVerdict.success(self.provider_id, self.name, self.contribution)


async def timed_run(orchestrator, adapters, **kwargs):
    start = time.monotonic()
    result = await orchestrator.run(TARGET, adapters, **kwargs)
    return result, time.monotonic() - start


class TestFanOut:
    """Test basic fan-out behaviour."""

    def test_results_keyed_by_provider_id(self):
        adapters = [
            StubAdapter("virustotal", 10, delay=0.05),
            StubAdapter("phishtank", 20, delay=0.01),
            StubAdapter("apwg", 30),
        ]
        result = asyncio.run(FanOutOrchestrator().run(TARGET, adapters))

        assert set(result.results) == {"virustotal", "phishtank", "apwg"}
        assert result.results["virustotal"].risk_contribution == 10
        assert result.results["phishtank"].risk_contribution == 20
        assert result.results["apwg"].risk_contribution == 30
        assert sorted(result.succeeded) == ["apwg", "phishtank", "virustotal"]
        assert result.failed == {}

    def test_completion_order_does_not_matter(self):
        fast_first = [StubAdapter("a", 10, delay=0.0), StubAdapter("b", 90, delay=0.05)]
        slow_first = [StubAdapter("a", 10, delay=0.05), StubAdapter("b", 90, delay=0.0)]

        first = asyncio.run(FanOutOrchestrator().run(TARGET, fast_first))
        second = asyncio.run(FanOutOrchestrator().run(TARGET, slow_first))

        assert {k: v.risk_contribution for k, v in first.results.items()} == \
            {k: v.risk_contribution for k, v in second.results.items()}

    def test_unsupported_adapters_are_not_invoked(self):
        ip_only = StubAdapter("criminalip", kinds=[TargetKind.IP])
        url = StubAdapter("phishtank")

        result = asyncio.run(FanOutOrchestrator().run(TARGET, [ip_only, url]))

        assert list(result.results) == ["phishtank"]
        assert ip_only.calls == []

    def test_fixed_clock_gives_zero_elapsed(self, fixed_clock):
        orchestrator = FanOutOrchestrator(clock=fixed_clock)
        result = asyncio.run(orchestrator.run(TARGET, [StubAdapter("phishtank")]))
        assert result.elapsed_ms == 0

    def test_to_dict(self):
        result = asyncio.run(FanOutOrchestrator().run(TARGET, [StubAdapter("phishtank", 33)]))
        data = result.to_dict()
        assert data["results"]["phishtank"]["risk_contribution"] == 33
        assert "elapsed_ms" in data


class TestFailureIsolation:
    """A failing provider never affects the others."""

    def test_exception_becomes_provider_error(self):
        adapters = [
            StubAdapter("virustotal", 10),
            StubAdapter("phishtank", raises=RuntimeError("boom")),
        ]
        result = asyncio.run(FanOutOrchestrator().run(TARGET, adapters))

        assert result.results["virustotal"].succeeded
        broken = result.results["phishtank"]
        assert not broken.succeeded
        assert broken.error_reason == ErrorReason.PROVIDER_ERROR
        assert "boom" in broken.error_detail
        assert result.failed == {"phishtank": ErrorReason.PROVIDER_ERROR}

    def test_failed_verdict_passes_through(self):
        adapters = [StubAdapter("phishtank", fail=ErrorReason.RATE_LIMITED)]
        result = asyncio.run(FanOutOrchestrator().run(TARGET, adapters))
        assert result.results["phishtank"].error_reason == ErrorReason.RATE_LIMITED

    def test_non_verdict_return_is_provider_error(self):
        class Sloppy(StubAdapter):
            async def assess(self, target):
                return {"score": 10}

        result = asyncio.run(FanOutOrchestrator().run(TARGET, [Sloppy("sloppy")]))
        assert result.results["sloppy"].error_reason == ErrorReason.PROVIDER_ERROR

    def test_hanging_provider_times_out(self):
        adapters = [
            StubAdapter("virustotal", 10),
            StubAdapter("google_safebrowsing", 20),
            StubAdapter("phishtank", hang=True),
        ]
        orchestrator = FanOutOrchestrator(per_provider_timeout=0.2, batch_deadline=5)

        start = time.monotonic()
        result = asyncio.run(orchestrator.run(TARGET, adapters))
        elapsed = time.monotonic() - start

        assert elapsed < 2
        assert result.results["virustotal"].succeeded
        assert result.results["google_safebrowsing"].succeeded
        assert result.results["phishtank"].error_reason == ErrorReason.TIMEOUT

    def test_deadline_abandons_running_providers(self):
        adapters = [
            StubAdapter("virustotal", 10),
            StubAdapter("phishtank", hang=True),
            StubAdapter("apwg", hang=True),
        ]
        orchestrator = FanOutOrchestrator(per_provider_timeout=30, batch_deadline=0.3)

        start = time.monotonic()
        result = asyncio.run(orchestrator.run(TARGET, adapters))
        elapsed = time.monotonic() - start

        assert elapsed < 2
        assert result.results["virustotal"].succeeded
        assert result.results["phishtank"].error_reason == ErrorReason.DEADLINE_EXCEEDED
        assert result.results["apwg"].error_reason == ErrorReason.DEADLINE_EXCEEDED
        assert set(result.failed) == {"phishtank", "apwg"}

    def test_deadline_holds_when_provider_ignores_cancellation(self):
        adapters = [StubAdapter("virustotal", 10), StubbornAdapter("phishtank")]
        orchestrator = FanOutOrchestrator(per_provider_timeout=30, batch_deadline=0.3)

        result, elapsed = asyncio.run(timed_run(orchestrator, adapters))

        assert elapsed < 1.0
        assert result.results["virustotal"].succeeded
        assert result.results["phishtank"].error_reason == ErrorReason.DEADLINE_EXCEEDED

    def test_timeout_holds_when_provider_ignores_cancellation(self):
        adapters = [StubAdapter("virustotal", 10), StubbornAdapter("phishtank")]
        orchestrator = FanOutOrchestrator(per_provider_timeout=0.2, batch_deadline=5)

        result, elapsed = asyncio.run(timed_run(orchestrator, adapters))

        assert elapsed < 1.0
        assert result.results["virustotal"].succeeded
        assert result.results["phishtank"].error_reason == ErrorReason.TIMEOUT

    def test_abandoned_call_keeps_its_slot(self):
        stubborn = StubbornAdapter("phishtank", linger=0.4)
        later = StubAdapter("apwg", 20)
        orchestrator = FanOutOrchestrator(per_provider_timeout=0.1, batch_deadline=5, max_in_flight=1)

        result, elapsed = asyncio.run(timed_run(orchestrator, [stubborn, later]))

        assert result.results["phishtank"].error_reason == ErrorReason.TIMEOUT
        assert result.results["apwg"].succeeded
        assert elapsed >= 0.4


class TestConcurrency:
    """Test the in-flight bound."""

    def test_in_flight_calls_are_bounded(self):
        state = {"active": 0, "peak": 0}

        class Counting(StubAdapter):
            async def assess(self, target):
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
                await asyncio.sleep(0.02)
                state["active"] -= 1
                return ProviderVerdict.success(self.provider_id, self.name, 10)

        adapters = [Counting(f"p{i}") for i in range(6)]
        result = asyncio.run(FanOutOrchestrator(max_in_flight=2).run(TARGET, adapters))

        assert len(result.succeeded) == 6
        assert state["peak"] <= 2

    def test_providers_run_concurrently(self):
        adapters = [StubAdapter(f"p{i}", delay=0.2) for i in range(5)]

        start = time.monotonic()
        asyncio.run(FanOutOrchestrator().run(TARGET, adapters))
        elapsed = time.monotonic() - start

        assert elapsed < 0.8


class TestSecondaryLookups:
    """Test domain lookups that follow the main batch."""

    def test_secondary_runs_against_domain(self):
        url_provider = StubAdapter("phishtank")
        domain_only = StubAdapter("hudsonrock", 60, kinds=[TargetKind.DOMAIN])

        result = asyncio.run(FanOutOrchestrator().run(
            TARGET,
            [url_provider],
            secondary=[domain_only],
            secondary_target=TARGET.domain_target(),
        ))

        assert set(result.results) == {"phishtank", "hudsonrock"}
        assert domain_only.calls[0].kind == TargetKind.DOMAIN
        assert domain_only.calls[0].value == "example.com"

    def test_secondary_does_not_rerun_primary(self):
        both = StubAdapter("virustotal", kinds=[TargetKind.URL, TargetKind.DOMAIN])

        asyncio.run(FanOutOrchestrator().run(
            TARGET,
            [both],
            secondary=[both],
            secondary_target=TARGET.domain_target(),
        ))

        assert len(both.calls) == 1

    def test_secondary_shares_the_deadline(self):
        slow = StubAdapter("phishtank", delay=0.3)
        domain_only = StubAdapter("hudsonrock", kinds=[TargetKind.DOMAIN], hang=True)
        orchestrator = FanOutOrchestrator(per_provider_timeout=30, batch_deadline=0.5)

        start = time.monotonic()
        result = asyncio.run(orchestrator.run(
            TARGET,
            [slow],
            secondary=[domain_only],
            secondary_target=TARGET.domain_target(),
        ))
        elapsed = time.monotonic() - start

        assert elapsed < 2
        assert result.results["phishtank"].succeeded
        assert result.results["hudsonrock"].error_reason == ErrorReason.DEADLINE_EXCEEDED
