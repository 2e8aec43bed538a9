"""
LinkRisk Constants - Central location for ALL constant values.
"""

from typing import Dict, List

# APPLICATION INFO
APP_NAME: str = "LinkRisk"
APP_FULL_NAME: str = "LinkRisk Security Risk Aggregation Engine"
APP_VERSION: str = "1.0.0"

# TIMEOUTS (seconds)
PROVIDER_TIMEOUT_DEFAULT: float = 30.0
ASSESSMENT_DEADLINE_DEFAULT: float = 45.0
REGIONAL_CHECK_TIMEOUT: float = 10.0

# CONCURRENCY
MAX_CONCURRENT_PROVIDERS: int = 16

# RETRY (rate-limited responses only)
PROVIDER_MAX_RETRIES: int = 2
INITIAL_BACKOFF: float = 1.0
MAX_BACKOFF: float = 8.0
BACKOFF_MULTIPLIER: float = 2.0
RATE_LIMIT_STATUS_CODES = {429, 503}
AUTH_FAILURE_STATUS_CODES = {401, 403}
RATE_LIMIT_MESSAGES: List[str] = ["rate limit", "too many requests", "quota exceeded", "limit exceeded"]

USER_AGENT: str = "LinkRisk/1.0"

# EXTERNAL API URLS
APWG_API_URL: str = "https://api.ecrimex.net"
PHISHTANK_API_URL: str = "https://checkurl.phishtank.com/checkurl/"
GOOGLE_SAFEBROWSING_API_URL: str = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
IPQUALITYSCORE_API_URL: str = "https://ipqualityscore.com/api/json"
CRIMINAL_IP_API_URL: str = "https://api.criminalip.io"
SCAMADVISER_API_URL: str = "https://scamadviser1.p.rapidapi.com/v1"
SCAMADVISER_RAPIDAPI_HOST: str = "scamadviser1.p.rapidapi.com"
VIRUSTOTAL_API_URL: str = "https://www.virustotal.com/api/v3"
HUDSON_ROCK_API_URL: str = "https://cavalier.hudsonrock.com/api/json/v2"

# REGIONAL CHECKERS: id -> (display name, default base url)
REGIONAL_CHECKERS: Dict[str, Dict[str, str]] = {
    "ncsc": {"name": "NCSC Vietnam", "base_url": "https://ncsc.gov.vn"},
    "cyradar": {"name": "CyRadar", "base_url": "https://cyradar.com"},
    "tinnhiemmang": {"name": "Tin Nhiem Mang", "base_url": "https://tinnhiemmang.vn"},
    "scamvn": {"name": "ScamVN", "base_url": "https://scamvn.com"},
}

# GOOGLE SAFE BROWSING
GSB_THREAT_TYPES: List[str] = [
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
]
GSB_PLATFORM_TYPES: List[str] = ["ANY_PLATFORM"]
GSB_CLIENT_ID: str = "linkrisk"

# SYNTHETIC HEURISTIC KEYWORDS
PHISHING_LIST_KEYWORDS: List[str] = ["phish", "fake", "scam", "suspicious"]
SAFEBROWSING_KEYWORDS: List[str] = ["malware", "phish", "scam", "suspicious"]
REPUTATION_URL_KEYWORDS: List[str] = ["suspicious", "malware", "phish"]
REPUTATION_DOMAIN_KEYWORDS: List[str] = ["suspicious", "temp", "fake"]
SUSPICIOUS_IP_KEYWORDS: List[str] = ["suspicious"]
PRIVATE_IP_PREFIXES: List[str] = ["10.", "192.168."]
SCAM_KEYWORDS: List[str] = ["scam", "fake", "suspicious", "phish", "fraud"]
MULTI_ENGINE_KEYWORDS: List[str] = ["malware", "phish", "suspicious", "scam"]
DISPOSABLE_EMAIL_KEYWORDS: List[str] = ["test", "temp"]
BREACHED_EMAIL_KEYWORDS: List[str] = ["test", "admin"]
REGIONAL_KEYWORDS: Dict[str, List[str]] = {
    "ncsc": ["phish", "malware", "suspicious"],
    "cyradar": ["malware", "suspicious", "phish"],
    "tinnhiemmang": ["scam", "fake", "suspicious"],
    "scamvn": ["scam", "fake", "lua-dao", "suspicious"],
}

# RECOMMENDATION TEXT
SAFE_RECOMMENDATIONS: List[str] = [
    "{Label} appears to be safe based on current analysis",
    "Still exercise caution and avoid entering sensitive information",
]
RISKY_RECOMMENDATIONS: List[str] = [
    "Do not visit or interact with this {label}",
    "Do not enter any personal information, passwords or payment details",
    "Use an isolated network or VPN if you must investigate further",
    "Report this {label} to the appropriate authorities",
]
MALWARE_RECOMMENDATION: str = "Scan your system if you already visited this {label}"
PHISHING_RECOMMENDATION: str = "Be aware of similar phishing attempts in the future"
CREDENTIALS_RECOMMENDATION: str = "Change passwords for accounts associated with this domain"
EMAIL_CREDENTIALS_RECOMMENDATION: str = "Change the password for this email address and enable two-factor authentication"
INCONCLUSIVE_RECOMMENDATIONS: List[str] = [
    "This {label} could not be verified by any security service",
    "Treat it as untrusted until it can be checked again",
]
REDUCED_CONFIDENCE_RECOMMENDATION: str = (
    "Only {succeeded} of {consulted} security services responded; this assessment has reduced confidence"
)
