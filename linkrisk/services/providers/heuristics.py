"""
LinkRisk Synthetic Heuristics

Helpers for the deterministic verdicts providers produce in synthetic mode.
Spread within a band comes from a SHA-256 of the target text, so the same
target always gets the same verdict.
"""

import hashlib
from typing import Iterable, List

from linkrisk.models import Target
from linkrisk.utils.constants import PRIVATE_IP_PREFIXES
from linkrisk.utils.validators import contains_ipv4_literal


def jitter(target: Target, provider_id: str, span: int) -> int:
    """Stable pseudo-random integer in [0, span)."""
    if span <= 0:
        return 0
    digest = hashlib.sha256(f"{provider_id}:{target.value.lower()}".encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big") % span


def keyword_hits(target: Target, keywords: Iterable[str]) -> List[str]:
    """Keywords that appear in the target text."""
    text = target.value.lower()
    return [k for k in keywords if k in text]


def has_ip_literal(target: Target) -> bool:
    return contains_ipv4_literal(target.value)


def is_private_ip(target: Target) -> bool:
    value = target.ip or target.value
    return any(value.startswith(prefix) for prefix in PRIVATE_IP_PREFIXES)
