# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracklog.core.send_gate import DEFAULT_DISTANCE_THRESHOLD_M
from tracklog.core.session_lifecycle import (
    DEFAULT_INACTIVITY_TIMEOUT_MINUTES,
    DEFAULT_MAX_DURATION_MINUTES,
)

# Load .env file before any settings are instantiated
load_dotenv()


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings for event state."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")

    key_prefix: str = Field(default="tracklog:", description="Prefix for all tracklog keys")

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class SessionSettings(BaseSettings):
    """Session lifecycle settings."""

    model_config = SettingsConfigDict(env_prefix="SESSION_")

    inactivity_timeout_minutes: int = Field(
        default=DEFAULT_INACTIVITY_TIMEOUT_MINUTES,
        description="Session inactivity timeout in minutes",
    )
    max_duration_minutes: int = Field(
        default=DEFAULT_MAX_DURATION_MINUTES,
        description="Maximum session age in minutes",
    )


class LocationSettings(BaseSettings):
    """Location deduplication and tracking settings."""

    model_config = SettingsConfigDict(env_prefix="LOCATION_")

    distance_threshold_m: float = Field(
        default=DEFAULT_DISTANCE_THRESHOLD_M,
        description="Max distance in meters for two locations to count as the same",
    )
    resend_interval_hours: float = Field(
        default=12.0,
        description="Resend an unchanged device location after this many hours",
    )
    tracking_accuracy_m: float = Field(
        default=100.0, description="Desired accuracy for foreground tracking"
    )
    tracking_distance_filter_m: float = Field(
        default=50.0, description="Distance filter for foreground tracking"
    )


class GatewaySettings(BaseSettings):
    """Backend endpoints for event dispatch."""

    model_config = SettingsConfigDict(env_prefix="GATEWAY_")

    chat_endpoint: str = Field(default="/v1/chat", description="Endpoint for chat events")
    orchestration_endpoint: str = Field(
        default="/v1/orchestor", description="Endpoint for location events"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
