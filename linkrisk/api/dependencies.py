"""
LinkRisk API Dependencies

FastAPI dependency injection for settings and the risk engine.
"""

import logging
from typing import Optional

from linkrisk.config.settings import Settings, get_settings
from linkrisk.services.aggregation import SecurityRiskEngine, build_engine

logger = logging.getLogger(__name__)


# Global engine instance
_engine: Optional[SecurityRiskEngine] = None


def init_engine(settings: Optional[Settings] = None) -> SecurityRiskEngine:
    """Build the engine from settings and keep it for request handlers."""
    global _engine
    _engine = build_engine(settings or get_settings())
    return _engine


def get_engine() -> SecurityRiskEngine:
    """Get the engine, building it from the environment if not initialized."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings())
    return _engine


def reset_engine() -> None:
    global _engine
    _engine = None
