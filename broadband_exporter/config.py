"""
Configuration for the Broadband Line Exporter.

Provides settings for the upstream CHAOS API, the metrics HTTP
server, the poll loop and gauge labelling.
"""
from functools import lru_cache
from typing import Dict, List

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import ConfigurationError

DEFAULT_UPSTREAM_URL = "https://chaos2.aa.net.uk/broadband/info/json"


class UpstreamSettings(BaseSettings):
    """Upstream line-status API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AAISP_CONTROL_",
        env_file=".env",
        extra="ignore",
    )

    username: SecretStr = Field(default=SecretStr(""), description="Control login")
    password: SecretStr = Field(default=SecretStr(""), description="Control password")
    url: str = Field(default=DEFAULT_UPSTREAM_URL, description="Line info endpoint")


class ServerSettings(BaseSettings):
    """Metrics HTTP server configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORTER_",
        env_file=".env",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=2112, ge=1, le=65535, description="Metrics port")
    log_level: str = Field(default="INFO", description="Logging level name")


class PollingSettings(BaseSettings):
    """Upstream polling configuration."""

    model_config = SettingsConfigDict(
        env_prefix="POLLING_",
        env_file=".env",
        extra="ignore",
    )

    interval: float = Field(default=60.0, gt=0, description="Poll interval (seconds)")


class MetricsSettings(BaseSettings):
    """Gauge labelling configuration."""

    model_config = SettingsConfigDict(
        env_prefix="METRICS_",
        env_file=".env",
        extra="ignore",
    )

    extended_labels: bool = Field(
        default=False,
        description="Add login and postcode labels to every gauge",
    )
    line_metadata: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Per-line label values keyed by line ID",
    )


class ExporterSettings(BaseSettings):
    """Main configuration for the exporter."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Broadband Line Exporter")

    # Sub-settings
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)

    def validate_credentials(self) -> List[str]:
        """
        Validate that both upstream credentials are set.

        Returns:
            List of error messages for missing credentials.
        """
        errors = []

        if not self.upstream.username.get_secret_value().strip():
            errors.append("AAISP_CONTROL_USERNAME is not set")

        if not self.upstream.password.get_secret_value().strip():
            errors.append("AAISP_CONTROL_PASSWORD is not set")

        return errors


def load_settings() -> ExporterSettings:
    """
    Load and validate settings from the environment.

    Raises:
        ConfigurationError: If a value is invalid or credentials are missing.
    """
    try:
        loaded = ExporterSettings()
    except (ValidationError, SettingsError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    errors = loaded.validate_credentials()
    if errors:
        raise ConfigurationError("; ".join(errors), setting="upstream")

    return loaded


@lru_cache()
def get_exporter_settings() -> ExporterSettings:
    """
    Get cached, validated exporter settings.

    Uses LRU cache to avoid re-reading environment variables on every access.
    """
    return load_settings()
