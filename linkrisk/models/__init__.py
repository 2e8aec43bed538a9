"""
LinkRisk Data Models
"""

from .verdict import (
    RiskFlag,
    FLAG_SEVERITY,
    ErrorReason,
    ProviderVerdict,
    ProviderStatus,
)
from .report import (
    TargetKind,
    Target,
    RiskLevel,
    RISK_LEVEL_ORDER,
    AggregateReport,
)

__all__ = [
    'RiskFlag',
    'FLAG_SEVERITY',
    'ErrorReason',
    'ProviderVerdict',
    'ProviderStatus',
    'TargetKind',
    'Target',
    'RiskLevel',
    'RISK_LEVEL_ORDER',
    'AggregateReport',
]
