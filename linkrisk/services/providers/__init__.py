"""
LinkRisk Threat Intelligence Providers

One adapter per external source. Each adapter normalizes its own responses
into a ProviderVerdict and runs in live or synthetic mode depending on
whether it was given a usable API key.
"""

from .base import AssessmentStrategy, BaseProvider, LiveStrategy, SyntheticStrategy
from .apwg import APWGProvider
from .phishtank import PhishTankProvider
from .google_safebrowsing import GoogleSafeBrowsingProvider
from .ipqualityscore import IPQualityScoreProvider
from .criminalip import CriminalIPProvider
from .scamadviser import ScamAdviserProvider
from .virustotal import VirusTotalProvider
from .regional import RegionalCheckersProvider
from .hudsonrock import HudsonRockProvider

__all__ = [
    'AssessmentStrategy',
    'BaseProvider',
    'LiveStrategy',
    'SyntheticStrategy',
    'APWGProvider',
    'PhishTankProvider',
    'GoogleSafeBrowsingProvider',
    'IPQualityScoreProvider',
    'CriminalIPProvider',
    'ScamAdviserProvider',
    'VirusTotalProvider',
    'RegionalCheckersProvider',
    'HudsonRockProvider',
]
