"""
LinkRisk Application Configuration

Configuration management using pydantic-settings.
All configuration values are loaded from environment variables or a .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkrisk.utils.constants import (
    APP_NAME,
    APP_VERSION,
    APWG_API_URL,
    ASSESSMENT_DEADLINE_DEFAULT,
    CRIMINAL_IP_API_URL,
    HUDSON_ROCK_API_URL,
    MAX_CONCURRENT_PROVIDERS,
    PROVIDER_MAX_RETRIES,
    PROVIDER_TIMEOUT_DEFAULT,
    REGIONAL_CHECKERS,
    SCAMADVISER_API_URL,
    VIRUSTOTAL_API_URL,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Values can be set via:
    1. Environment variables (e.g. VIRUSTOTAL_API_KEY)
    2. .env file (local development)
    3. Default values defined here

    A provider without a usable key runs in synthetic mode.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = APP_NAME
    app_version: str = APP_VERSION
    debug: bool = False
    log_level: str = "INFO"

    # =========================================================================
    # Server
    # =========================================================================
    host: str = "0.0.0.0"
    port: int = 8000

    # =========================================================================
    # Threat Intelligence API Keys
    # =========================================================================
    apwg_api_key: Optional[str] = Field(default=None, description="APWG eCrime eXchange API key")
    phishtank_api_key: Optional[str] = Field(default=None, description="PhishTank application key")
    google_safebrowsing_api_key: Optional[str] = Field(default=None, description="Google Safe Browsing API key")
    ipqualityscore_api_key: Optional[str] = Field(default=None, description="IPQualityScore API key")
    criminal_ip_api_key: Optional[str] = Field(default=None, description="Criminal IP API key")
    scamadviser_api_key: Optional[str] = Field(default=None, description="ScamAdviser RapidAPI key")
    virustotal_api_key: Optional[str] = Field(default=None, description="VirusTotal API key")
    hudson_rock_api_key: Optional[str] = Field(default=None, description="Hudson Rock Cavalier API key")

    # Regional checkers
    ncsc_api_key: Optional[str] = None
    cyradar_api_key: Optional[str] = None
    tinnhiemmang_api_key: Optional[str] = None
    scamvn_api_key: Optional[str] = None

    # =========================================================================
    # Base URL overrides
    # =========================================================================
    apwg_api_url: str = APWG_API_URL
    criminal_ip_api_url: str = CRIMINAL_IP_API_URL
    scamadviser_api_url: str = SCAMADVISER_API_URL
    virustotal_api_url: str = VIRUSTOTAL_API_URL
    hudson_rock_api_url: str = HUDSON_ROCK_API_URL
    ncsc_api_url: str = REGIONAL_CHECKERS["ncsc"]["base_url"]
    cyradar_api_url: str = REGIONAL_CHECKERS["cyradar"]["base_url"]
    tinnhiemmang_api_url: str = REGIONAL_CHECKERS["tinnhiemmang"]["base_url"]
    scamvn_api_url: str = REGIONAL_CHECKERS["scamvn"]["base_url"]

    # =========================================================================
    # Fan-out limits
    # =========================================================================
    provider_timeout_seconds: float = Field(default=PROVIDER_TIMEOUT_DEFAULT, gt=0)
    assessment_deadline_seconds: float = Field(default=ASSESSMENT_DEADLINE_DEFAULT, gt=0)
    max_concurrent_providers: int = Field(default=MAX_CONCURRENT_PROVIDERS, ge=1)
    provider_max_retries: int = Field(default=PROVIDER_MAX_RETRIES, ge=1)

    def regional_checker_config(self, checker_id: str) -> dict:
        """Key and base URL for one regional checker."""
        return {
            "api_key": getattr(self, f"{checker_id}_api_key"),
            "base_url": getattr(self, f"{checker_id}_api_url"),
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Use get_settings.cache_clear() to reload settings.
    """
    return Settings()
