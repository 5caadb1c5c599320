# ============================================================================
# MODULE CONTEXT - CSAPI CLIENT CONFIGURATION
# ============================================================================
# STATUS: Configuration - CSAPI client settings
# PURPOSE: Environment-based configuration for the CSAPI client
# EXPORTS: CSAPIConfig, get_csapi_config
# INTERFACES: pydantic-settings BaseSettings
# DEPENDENCIES: pydantic, pydantic-settings, functools
# SOURCE: Environment variables (CSAPI_ prefix) or .env file
# PATTERNS: Settings Pattern, Singleton via cached function
# ENTRY_POINTS: from ogc_csapi.config import get_csapi_config
# ============================================================================

"""
CSAPI Client Configuration

Environment Variables (all optional):
    - CSAPI_API_ROOT: API root of the CSAPI server (default: http://localhost:8080)
    - CSAPI_REQUEST_TIMEOUT: HTTP timeout in seconds (default: 10)
    - CSAPI_COLLECTION_CACHE_TTL: Collection metadata cache TTL in seconds (default: 3600)
    - CSAPI_COLLECTION_CACHE_SIZE: Maximum cached collections (default: 100)
    - CSAPI_DEBUG_LOGGING: Enable DEBUG level logging (default: false)

Usage:
    from ogc_csapi.config import get_csapi_config

    config = get_csapi_config()
    client = CollectionMetadataClient(config.get_base_url(), timeout=config.request_timeout)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CSAPIConfig(BaseSettings):
    """
    Configuration for the CSAPI client.

    Attributes:
        api_root: CSAPI server API root (landing page URL)
        request_timeout: HTTP request timeout for metadata fetches
        collection_cache_ttl: Seconds a fetched collection description stays cached
        collection_cache_size: Maximum number of cached collection descriptions
        debug_logging: Emit DEBUG level logs (URL assembly traces)
    """

    model_config = SettingsConfigDict(
        env_prefix="CSAPI_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    api_root: str = Field(
        default="http://localhost:8080",
        description="CSAPI server API root"
    )
    request_timeout: float = Field(
        default=10.0,
        ge=1,
        le=300,
        description="HTTP request timeout in seconds"
    )
    collection_cache_ttl: int = Field(
        default=3600,
        ge=0,
        description="Collection metadata cache TTL in seconds (0 disables caching)"
    )
    collection_cache_size: int = Field(
        default=100,
        ge=1,
        description="Maximum number of cached collection descriptions"
    )
    debug_logging: bool = Field(
        default=False,
        description="Enable DEBUG level logging"
    )

    @field_validator("api_root")
    @classmethod
    def validate_api_root(cls, v: str) -> str:
        """API root must be an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_root must be an http(s) URL, got '{v}' - set CSAPI_API_ROOT")
        return v

    def get_base_url(self) -> str:
        """API root without trailing slash."""
        return self.api_root.rstrip("/")


@lru_cache(maxsize=1)
def get_csapi_config() -> CSAPIConfig:
    """
    Get singleton CSAPI configuration instance.

    Raises:
        ValidationError: If an environment variable holds an invalid value
    """
    return CSAPIConfig()
