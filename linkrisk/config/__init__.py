"""
LinkRisk Configuration
"""

from .settings import Settings, get_settings
from .scoring import (
    ScoringConfig,
    RiskThresholds,
    ProviderWeights,
    ConsensusPolicy,
    VerdictPolicy,
    get_scoring_config,
    reset_scoring_config,
)

__all__ = [
    'Settings',
    'get_settings',
    'ScoringConfig',
    'RiskThresholds',
    'ProviderWeights',
    'ConsensusPolicy',
    'VerdictPolicy',
    'get_scoring_config',
    'reset_scoring_config',
]
