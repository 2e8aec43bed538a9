"""
LinkRisk Aggregation

Fan-out, consensus scoring and report generation.
"""

from .orchestrator import Adapter, FanOutOrchestrator, FanOutResult
from .scorer import ConsensusScore, WeightedConsensusScorer
from .factors import Assessment, RiskFactorGenerator
from .engine import SecurityRiskEngine, build_engine, build_providers

__all__ = [
    'Adapter',
    'FanOutOrchestrator',
    'FanOutResult',
    'ConsensusScore',
    'WeightedConsensusScorer',
    'Assessment',
    'RiskFactorGenerator',
    'SecurityRiskEngine',
    'build_engine',
    'build_providers',
]
