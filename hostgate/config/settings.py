from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from hostgate.services.geo.constants import ALLOWED_GEOIP_LOCALES


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", env_file=".env", extra="ignore")

    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=8000, description="API server port")
    workers: int = Field(default=1, description="Number of worker processes")
    reload: bool = Field(default=False, description="Enable auto-reload on code changes")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


class FilesSettings(BaseSettings):
    """Protected file area configuration."""

    model_config = SettingsConfigDict(env_prefix="FILES_", env_file=".env", extra="ignore")

    directory: Path = Field(
        default=Path("files"),
        description="Directory holding the downloadable files",
    )
    url_path: str = Field(
        default="/files",
        description="URL prefix the protected files are served under",
    )


class DownloadCheckSettings(BaseSettings):
    """Download gate configuration.

    Every check is off unless enabled explicitly, so a deployment without
    any download check configuration serves files unconditionally.
    """

    model_config = SettingsConfigDict(env_prefix="DOWNLOAD_CHECK_", env_file=".env", extra="ignore")

    enable_referrer: bool = Field(
        default=False,
        description="Allow allowlisted referrers through and deny direct hits without a referrer",
    )
    enable_user_agent: bool = Field(
        default=False,
        description="Deny download tools and require a modern browser user agent",
    )
    enable_browser_feature: bool = Field(
        default=False,
        description="Deny requests whose headers score below min_feature_score",
    )
    enable_js_check: bool = Field(
        default=False,
        description="Require the JavaScript proof cookie, serving a challenge page otherwise",
    )
    allowed_ref_domains: list[str] = Field(
        default_factory=list,
        description="Referrer substrings that bypass every other check",
    )
    min_browser_version: int = Field(
        default=70,
        ge=0,
        description="Lowest browser major version accepted by the user agent check",
    )
    min_feature_score: int = Field(
        default=5,
        ge=0,
        description="Lowest header feature score accepted by the browser feature check",
    )
    js_cookie_name: str = Field(
        default="jsEnabled",
        min_length=1,
        description="Name of the cookie set by the challenge page",
    )


class GeoSettings(BaseSettings):
    """Geolocation lookup and cache configuration settings."""

    model_config = SettingsConfigDict(env_prefix="GEO_", env_file=".env", extra="ignore")

    enabled: bool = Field(default=True, description="Enable geolocation enrichment of access logs")
    provider: Literal["ipinfo", "maxmind"] = Field(
        default="ipinfo",
        description="Lookup backend: ipinfo HTTP API or a local MaxMind database",
    )
    max_entries: int = Field(default=100, ge=1, description="Maximum number of cached addresses")
    lookup_url: str = Field(
        default="https://ipinfo.io",
        description="Base URL of the ipinfo-style lookup API",
    )
    token: str | None = Field(default=None, description="Optional API token for the lookup API")
    timeout: float = Field(default=5.0, gt=0, description="Lookup timeout in seconds")
    db_path: Path = Field(
        default=Path("data/GeoLite2-City.mmdb"),
        description="Path to GeoIP2/GeoLite2 database file (maxmind provider)",
    )
    locales: list[str] = Field(
        default=["en"],
        description="List of GeoIP locales to use (maxmind provider)",
    )
    validate_db_path: bool = Field(
        default=False,
        description="Validate that the GeoIP database file exists (maxmind provider)"
    )
    validate_locales: bool = Field(
        default=True,
        description="Validate that the specified GeoIP locales are supported"
    )

    @model_validator(mode="after")
    def validate_geoip_db_exists(self) -> "GeoSettings":
        """Ensure GeoIP database file exists if validation is enabled."""
        if self.provider == "maxmind" and self.validate_db_path and not self.db_path.exists():
            raise ValueError(f"GeoIP database file not found: {self.db_path}")
        return self

    @model_validator(mode="after")
    def validate_geoip_locales(self) -> "GeoSettings":
        """Ensure GeoIP locales are valid if validation is enabled."""
        if self.validate_locales:
            invalid_locales = [loc for loc in self.locales if loc not in ALLOWED_GEOIP_LOCALES]
            if invalid_locales:
                raise ValueError(f"Invalid GeoIP locales: {invalid_locales}. Allowed locales are: {ALLOWED_GEOIP_LOCALES}")
        return self


class Settings(BaseSettings):
    """Main application settings.

    This class aggregates all configuration sections and provides
    a single point of access for application configuration.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values

    Example .env file:
        APP_NAME=HostGate
        FILES_DIRECTORY=/srv/files
        DOWNLOAD_CHECK_ENABLE_USER_AGENT=true
        DOWNLOAD_CHECK_ENABLE_JS_CHECK=true
        DOWNLOAD_CHECK_ALLOWED_REF_DOMAINS='["example.com"]'
        GEO_MAX_ENTRIES=500
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    name: str = Field(default="HostGate", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    description: str = Field(
        default="File hosting with browser-gated downloads",
        description="Application description",
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )

    # Sub-configurations
    api: APISettings = Field(default_factory=APISettings)
    files: FilesSettings = Field(default_factory=FilesSettings)
    # None means the download check section is absent: every check is disabled
    download_check: DownloadCheckSettings | None = Field(default_factory=DownloadCheckSettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function is cached to ensure we only parse configuration once.
    Use this function throughout the application to access settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
