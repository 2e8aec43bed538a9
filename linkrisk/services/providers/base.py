"""
LinkRisk Base Provider

Abstract base class for all threat intelligence providers.

Each provider picks exactly one assessment strategy when it is constructed:
LiveStrategy (real HTTP calls) when its API key is usable, otherwise
SyntheticStrategy (deterministic heuristics, no network). Whatever happens
during a lookup, assess() returns a ProviderVerdict and never raises.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import aiohttp

from linkrisk.config.scoring import VerdictPolicy
from linkrisk.models import ErrorReason, ProviderStatus, ProviderVerdict, RiskFlag, Target, TargetKind
from linkrisk.utils.constants import (
    AUTH_FAILURE_STATUS_CODES,
    BACKOFF_MULTIPLIER,
    INITIAL_BACKOFF,
    MAX_BACKOFF,
    PROVIDER_MAX_RETRIES,
    PROVIDER_TIMEOUT_DEFAULT,
    RATE_LIMIT_MESSAGES,
    RATE_LIMIT_STATUS_CODES,
    USER_AGENT,
)
from linkrisk.utils.exceptions import (
    MalformedResponseError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderHTTPError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from linkrisk.utils.validators import parse_email_target, parse_ip_target, parse_url_target

logger = logging.getLogger(__name__)


# =============================================================================
# STRATEGIES
# =============================================================================

class AssessmentStrategy(ABC):
    """How a provider produces its verdict."""

    is_synthetic: bool = False

    def __init__(self, provider: "BaseProvider"):
        self.provider = provider

    @abstractmethod
    async def assess(self, target: Target) -> ProviderVerdict:
        pass


class LiveStrategy(AssessmentStrategy):
    """
    Queries the real provider API.

    Features:
    - One aiohttp session per request, closed on cancellation
    - Retry with exponential backoff on rate-limited responses
    - HTTP status classification into provider exceptions
    """

    is_synthetic = False

    async def assess(self, target: Target) -> ProviderVerdict:
        return await self.provider.live_assess(target, self)

    @staticmethod
    def _detect_rate_limit(status_code: int, response_text: str) -> bool:
        """Detect if response indicates rate limiting."""
        if status_code in RATE_LIMIT_STATUS_CODES:
            return True
        response_lower = response_text.lower()
        return any(msg in response_lower for msg in RATE_LIMIT_MESSAGES)

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform an HTTP request and decode the JSON body.

        Raises:
            ProviderAuthenticationError: 401/403
            ProviderRateLimitError: still rate limited after all attempts
            ProviderNotFoundError: 404
            ProviderHTTPError: any other non-2xx status
            MalformedResponseError: body is not JSON
            ProviderTimeoutError: no answer within the provider timeout
            ProviderTransportError: connection failure
        """
        provider = self.provider
        request_headers = {"User-Agent": USER_AGENT}
        if headers:
            request_headers.update(headers)

        try:
            return await self._request_with_retry(method, url, params, request_headers, json, data)
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(f"{provider.name} did not answer within {provider.timeout}s")
        except aiohttp.ClientError as e:
            raise ProviderTransportError(f"{provider.name} connection error: {e}")

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]],
        headers: Dict[str, str],
        json: Optional[Dict[str, Any]],
        data: Optional[Dict[str, Any]],
    ) -> Any:
        provider = self.provider
        timeout = aiohttp.ClientTimeout(total=provider.timeout)
        backoff = INITIAL_BACKOFF

        for attempt in range(1, provider.max_retries + 1):
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(
                    method,
                    url,
                    params=params,
                    headers=headers,
                    json=json,
                    data=data,
                ) as response:
                    if response.status in AUTH_FAILURE_STATUS_CODES:
                        raise ProviderAuthenticationError(
                            f"{provider.name} rejected the API key (HTTP {response.status})"
                        )

                    if response.status == 404:
                        raise ProviderNotFoundError(f"{provider.name} has no record (HTTP 404)")

                    if response.status >= 400:
                        text = await response.text()
                        if self._detect_rate_limit(response.status, text):
                            if attempt < provider.max_retries:
                                logger.warning(
                                    f"{provider.name}: Rate limited on attempt {attempt}, retrying in {backoff}s..."
                                )
                                await asyncio.sleep(backoff)
                                backoff = min(backoff * BACKOFF_MULTIPLIER, MAX_BACKOFF)
                                continue
                            raise ProviderRateLimitError(
                                f"{provider.name} rate limited after {attempt} attempts"
                            )
                        raise ProviderHTTPError(
                            f"{provider.name} returned HTTP {response.status}",
                            status=response.status,
                        )

                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise MalformedResponseError(f"{provider.name} returned invalid JSON: {e}")

        raise ProviderRateLimitError(f"{provider.name} rate limited")


class SyntheticStrategy(AssessmentStrategy):
    """Deterministic placeholder verdicts for unconfigured providers."""

    is_synthetic = True

    async def assess(self, target: Target) -> ProviderVerdict:
        verdict = self.provider.synthetic_assess(target)
        return verdict.model_copy(
            update={"is_synthetic": True, "detail": {**verdict.detail, "mock": True}}
        )


# =============================================================================
# PROVIDER BASE
# =============================================================================

class BaseProvider(ABC):
    """
    Abstract base class for threat intelligence providers.

    Subclasses implement:
    - live_assess(): call the API through the LiveStrategy and normalize
    - synthetic_assess(): deterministic verdict from the target text

    All providers must inherit from this class.
    """

    # Provider identification
    provider_id: str = "base"
    name: str = "Base"
    capabilities: List[str] = []
    target_kinds: FrozenSet[TargetKind] = frozenset()
    default_base_url: str = ""

    # Key validation
    requires_api_key: bool = True
    min_key_length: int = 10
    placeholder_key: Optional[str] = None

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
        max_retries: int = PROVIDER_MAX_RETRIES,
        policy: Optional[VerdictPolicy] = None,
    ):
        """
        Initialize provider.

        Args:
            api_key: API key for the service
            base_url: Override for the service base URL
            timeout: Per-request HTTP timeout in seconds
            max_retries: Attempts for rate-limited requests
            policy: Normalization constants
        """
        self.api_key = api_key.strip() if api_key else None
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.policy = policy or VerdictPolicy()
        self.strategy: AssessmentStrategy = self._select_strategy()

        logger.debug(
            f"{self.name}: {'live' if not self.strategy.is_synthetic else 'synthetic'} mode"
        )

    def _select_strategy(self) -> AssessmentStrategy:
        if self.is_configured:
            return LiveStrategy(self)
        return SyntheticStrategy(self)

    @property
    def is_configured(self) -> bool:
        """Check if provider has a usable API key."""
        if not self.requires_api_key:
            return True
        if not self.api_key:
            return False
        placeholder = self.placeholder_key or f"your-{self.provider_id}-api-key-here"
        if self.api_key == placeholder:
            return False
        return len(self.api_key) > self.min_key_length

    @property
    def is_synthetic(self) -> bool:
        return self.strategy.is_synthetic

    def supports(self, target: Target) -> bool:
        return target.kind in self.target_kinds

    def status(self) -> ProviderStatus:
        """Configuration status for display."""
        return ProviderStatus(
            name=self.name,
            configured=self.is_configured,
            capabilities=list(self.capabilities),
            target_kinds=sorted(k.value for k in self.target_kinds),
        )

    # -------------------------------------------------------------------------
    # Verdict helpers
    # -------------------------------------------------------------------------

    def verdict(
        self,
        risk_contribution: float,
        flags: Iterable[RiskFlag] = (),
        detail: Optional[Dict[str, Any]] = None,
        confidence: int = 70,
    ) -> ProviderVerdict:
        return ProviderVerdict.success(
            provider_id=self.provider_id,
            provider_name=self.name,
            risk_contribution=risk_contribution,
            flags=flags,
            confidence=confidence,
            detail=detail,
        )

    def failure(self, reason: ErrorReason, error_detail: Optional[str] = None) -> ProviderVerdict:
        return ProviderVerdict.failure(
            provider_id=self.provider_id,
            provider_name=self.name,
            reason=reason,
            error_detail=error_detail,
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def assess(self, target: Target) -> ProviderVerdict:
        """
        Assess a validated target.

        Every failure is returned as a failure verdict with a classified
        reason. Cancellation propagates.
        """
        if not self.supports(target):
            return self.failure(
                ErrorReason.UNSUPPORTED_TARGET,
                f"{self.name} does not handle {target.kind.value} targets",
            )

        try:
            return await self.strategy.assess(target)

        except ProviderError as e:
            logger.warning(f"{self.name}: {e.reason.value} - {e.message}")
            return self.failure(e.reason, e.message)

        except asyncio.TimeoutError:
            logger.warning(f"{self.name}: Request timed out")
            return self.failure(ErrorReason.TIMEOUT, "Request timed out")

        except aiohttp.ClientError as e:
            logger.warning(f"{self.name}: Connection error: {e}")
            return self.failure(ErrorReason.CONNECTION_ERROR, f"Connection error: {e}")

        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"{self.name}: Unexpected response shape: {e!r}")
            return self.failure(ErrorReason.MALFORMED_RESPONSE, f"Unexpected response shape: {e!r}")

        except Exception as e:
            logger.warning(f"{self.name}: Error: {e}")
            return self.failure(ErrorReason.PROVIDER_ERROR, str(e))

    async def assess_url(self, url: str) -> ProviderVerdict:
        return await self.assess(parse_url_target(url))

    async def assess_domain(self, domain: str) -> ProviderVerdict:
        target = parse_url_target(f"http://{domain}").domain_target()
        return await self.assess(target)

    async def assess_ip(self, ip: str) -> ProviderVerdict:
        return await self.assess(parse_ip_target(ip))

    async def assess_email(self, email: str) -> ProviderVerdict:
        return await self.assess(parse_email_target(email))

    # -------------------------------------------------------------------------
    # Subclass hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    async def live_assess(self, target: Target, client: LiveStrategy) -> ProviderVerdict:
        """Query the provider API and normalize the response."""
        pass

    @abstractmethod
    def synthetic_assess(self, target: Target) -> ProviderVerdict:
        """Deterministic verdict derived from the target text."""
        pass
