"""
Configuration management for Laptop Tracker.

Uses Pydantic Settings for environment variable validation and type safety.
Each vendor gets its own settings class; AppConfig bundles them and is
passed explicitly into the inventory service.
"""

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class KandjiConfig(BaseSettings):
    """Kandji API configuration (macOS devices)."""

    subdomain: str = Field(
        default="your-subdomain",
        description="Kandji tenant subdomain"
    )
    api_token: str = Field(
        default="",
        description="Kandji API bearer token"
    )
    region: str = Field(
        default="eu",
        description="Kandji API region (eu, us)"
    )
    api_url: Optional[str] = Field(
        default=None,
        description="Full device list URL, overrides subdomain/region"
    )

    @property
    def devices_url(self) -> str:
        """Device list endpoint for the configured tenant."""
        if self.api_url:
            return self.api_url
        region = self.region.strip().lower()
        if region in ("", "us"):
            return f"https://{self.subdomain}.api.kandji.io/api/v1/devices"
        return f"https://{self.subdomain}.api.{region}.kandji.io/api/v1/devices"

    class Config:
        env_prefix = "KANDJI_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class IntuneConfig(BaseSettings):
    """Microsoft Intune / Graph configuration (Windows devices)."""

    integration_enabled: bool = Field(
        default=False,
        description="Enable the Intune integration"
    )
    graph_api_endpoint: str = Field(
        default="https://graph.microsoft.com/v1.0",
        description="Microsoft Graph base URL"
    )
    api_scopes: str = Field(
        default="https://graph.microsoft.com/.default",
        description="OAuth scope requested with the client credentials grant"
    )
    tenant_id: str = Field(
        default="",
        validation_alias=AliasChoices("INTUNE_TENANT_ID", "TENANT_ID"),
        description="Azure AD tenant ID"
    )
    client_id: str = Field(
        default="",
        validation_alias=AliasChoices("INTUNE_CLIENT_ID", "CLIENT_ID"),
        description="App registration client ID"
    )
    client_secret: str = Field(
        default="",
        validation_alias=AliasChoices("INTUNE_CLIENT_SECRET", "CLIENT_SECRET"),
        description="App registration client secret"
    )

    class Config:
        env_prefix = "INTUNE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        populate_by_name = True


class TeamsConfig(BaseSettings):
    """Microsoft Teams webhook notification configuration."""

    webhook_url: str = Field(
        default="",
        description="Incoming webhook URL of the Teams channel"
    )
    notifications_enabled: bool = Field(
        default=False,
        description="Send replacement notifications to Teams"
    )

    @property
    def active(self) -> bool:
        """True when notifications are enabled and a webhook is configured."""
        return bool(self.notifications_enabled and self.webhook_url)

    class Config:
        env_prefix = "TEAMS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class AppConfig(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    notified_file: str = Field(
        default="notified.json",
        description="JSON file holding serials that were already notified"
    )
    vendor_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for Kandji and Graph requests"
    )
    refresh_interval_seconds: int = Field(
        default=300,
        ge=10,
        description="How often the dashboard re-polls the vendors"
    )
    api_host: str = Field(default="0.0.0.0", description="HTTP bind address")
    api_port: int = Field(default=3001, description="HTTP port")

    # Nested configurations
    kandji: KandjiConfig = Field(default_factory=KandjiConfig)
    intune: IntuneConfig = Field(default_factory=IntuneConfig)
    teams: TeamsConfig = Field(default_factory=TeamsConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Lazily loads configuration on first access.

    Returns:
        AppConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(
            kandji=KandjiConfig(),
            intune=IntuneConfig(),
            teams=TeamsConfig(),
        )
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.

    Useful for testing or when environment changes.

    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
