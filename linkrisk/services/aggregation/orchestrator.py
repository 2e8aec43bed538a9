"""
LinkRisk Fan-Out Orchestrator

Runs every applicable provider concurrently against one target.

Features:
- Per-provider timeout (slow provider -> "timeout" verdict)
- Overall deadline (still-running providers cancelled -> "deadline_exceeded")
- Bounded number of in-flight provider calls
- Secondary domain-only lookups after the main batch, inside the same deadline
- Results keyed by provider id, independent of completion order

A failing or hanging provider never blocks the others.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol

from linkrisk.models import ErrorReason, ProviderVerdict, Target
from linkrisk.utils.constants import ASSESSMENT_DEADLINE_DEFAULT, MAX_CONCURRENT_PROVIDERS, PROVIDER_TIMEOUT_DEFAULT

logger = logging.getLogger(__name__)


class Adapter(Protocol):
    """What the orchestrator needs from a provider."""
    provider_id: str
    name: str

    def supports(self, target: Target) -> bool: ...

    async def assess(self, target: Target) -> ProviderVerdict: ...


@dataclass
class FanOutResult:
    """Verdicts from one fan-out, keyed by provider id."""
    results: Dict[str, ProviderVerdict] = field(default_factory=dict)
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> List[str]:
        return [pid for pid, v in self.results.items() if v.succeeded]

    @property
    def failed(self) -> Dict[str, ErrorReason]:
        return {pid: v.error_reason for pid, v in self.results.items() if not v.succeeded}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": {k: v.model_dump(mode="json") for k, v in self.results.items()},
            "elapsed_ms": self.elapsed_ms,
        }


class FanOutOrchestrator:
    """
    Concurrent provider fan-out with timeouts and cancellation.

    Args:
        per_provider_timeout: Seconds one provider call may take
        batch_deadline: Seconds the whole fan-out (including secondary lookups) may take
        max_in_flight: Maximum concurrent provider calls
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(
        self,
        per_provider_timeout: float = PROVIDER_TIMEOUT_DEFAULT,
        batch_deadline: float = ASSESSMENT_DEADLINE_DEFAULT,
        max_in_flight: int = MAX_CONCURRENT_PROVIDERS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.per_provider_timeout = per_provider_timeout
        self.batch_deadline = batch_deadline
        self.max_in_flight = max(1, max_in_flight)
        self.clock = clock

    async def run(
        self,
        target: Target,
        adapters: Iterable[Adapter],
        secondary: Iterable[Adapter] = (),
        secondary_target: Optional[Target] = None,
    ) -> FanOutResult:
        """
        Fan out to all adapters supporting the target.

        Args:
            target: Validated primary target
            adapters: Providers for the primary target
            secondary: Providers run afterwards against secondary_target
            secondary_target: Usually the domain derived from a URL

        Returns:
            FanOutResult with one verdict per invoked provider
        """
        start = self.clock()
        deadline = start + self.batch_deadline
        semaphore = asyncio.Semaphore(self.max_in_flight)
        result = FanOutResult()

        await self._run_batch(target, list(adapters), deadline, semaphore, result.results)

        secondary = list(secondary)
        if secondary and secondary_target is not None:
            await self._run_batch(secondary_target, secondary, deadline, semaphore, result.results)

        result.elapsed_ms = max(0, int((self.clock() - start) * 1000))

        logger.info(
            f"Fan-out for {target.kind.value} complete in {result.elapsed_ms}ms - "
            f"used: {result.succeeded}, failed: {list(result.failed.keys())}"
        )
        return result

    async def _run_batch(
        self,
        target: Target,
        adapters: List[Adapter],
        deadline: float,
        semaphore: asyncio.Semaphore,
        results: Dict[str, ProviderVerdict],
    ) -> None:
        applicable = [a for a in adapters if a.provider_id not in results and a.supports(target)]
        if not applicable:
            return

        logger.info(f"Running {len(applicable)} provider checks: {[a.provider_id for a in applicable]}")

        tasks = {
            asyncio.ensure_future(self._call(adapter, target, semaphore)): adapter
            for adapter in applicable
        }

        try:
            remaining = max(0.0, deadline - self.clock())
            done, pending = await asyncio.wait(tasks.keys(), timeout=remaining)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
                    task.add_done_callback(_discard_outcome)

        for task, adapter in tasks.items():
            if task in done:
                verdict = task.result()
            else:
                logger.warning(f"{adapter.name}: abandoned at assessment deadline")
                verdict = ProviderVerdict.failure(
                    adapter.provider_id,
                    adapter.name,
                    ErrorReason.DEADLINE_EXCEEDED,
                    "Assessment deadline reached before provider answered",
                )
            results[adapter.provider_id] = verdict

    async def _call(self, adapter: Adapter, target: Target, semaphore: asyncio.Semaphore) -> ProviderVerdict:
        """
        One provider call. Never raises except on cancellation.

        The semaphore slot belongs to the provider task and is released only
        when that task really finishes, so calls that ignore cancellation
        still count against the in-flight bound.
        """
        await semaphore.acquire()
        call = asyncio.ensure_future(adapter.assess(target))
        call.add_done_callback(lambda _: semaphore.release())

        try:
            done, _ = await asyncio.wait({call}, timeout=self.per_provider_timeout)
        except asyncio.CancelledError:
            call.cancel()
            call.add_done_callback(_discard_outcome)
            raise

        if not done:
            call.cancel()
            call.add_done_callback(_discard_outcome)
            logger.warning(f"{adapter.name}: timed out after {self.per_provider_timeout}s")
            return ProviderVerdict.failure(
                adapter.provider_id,
                adapter.name,
                ErrorReason.TIMEOUT,
                f"No answer within {self.per_provider_timeout}s",
            )

        try:
            verdict = call.result()
        except Exception as e:
            logger.warning(f"{adapter.name}: failed: {e}")
            return ProviderVerdict.failure(adapter.provider_id, adapter.name, ErrorReason.PROVIDER_ERROR, str(e))

        if not isinstance(verdict, ProviderVerdict):
            return ProviderVerdict.failure(
                adapter.provider_id,
                adapter.name,
                ErrorReason.PROVIDER_ERROR,
                f"Provider returned {type(verdict).__name__} instead of a verdict",
            )
        if not verdict.succeeded:
            logger.warning(f"{adapter.name}: {verdict.error_reason.value if verdict.error_reason else 'failed'}")
        return verdict


def _discard_outcome(task: "asyncio.Future") -> None:
    """Retrieve the outcome of an abandoned task so it is not reported as unhandled."""
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Abandoned provider call ended with: {task.exception()!r}")
