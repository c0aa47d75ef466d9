# ==============================================================================
# Tests for Application Configuration
# ==============================================================================
"""
Unit tests for the pydantic-settings configuration.

Tests cover:
- Defaults matching the session and location rules
- Environment variable overrides per section
- Valkey URL construction
"""

from tracklog.utils.config import (
    GatewaySettings,
    LocationSettings,
    SessionSettings,
    Settings,
    ValkeySettings,
)


class TestDefaults:
    """Tests for default values."""

    def test_session_defaults(self):
        settings = SessionSettings()
        assert settings.inactivity_timeout_minutes == 30
        assert settings.max_duration_minutes == 240

    def test_location_defaults(self):
        settings = LocationSettings()
        assert settings.distance_threshold_m == 200.0
        assert settings.resend_interval_hours == 12.0

    def test_gateway_defaults(self):
        settings = GatewaySettings()
        assert settings.chat_endpoint == "/v1/chat"
        assert settings.orchestration_endpoint == "/v1/orchestor"


class TestEnvironmentOverrides:
    """Tests for environment variable overrides."""

    def test_session_env(self, monkeypatch):
        monkeypatch.setenv("SESSION_INACTIVITY_TIMEOUT_MINUTES", "15")
        assert Settings().session.inactivity_timeout_minutes == 15

    def test_location_env(self, monkeypatch):
        monkeypatch.setenv("LOCATION_DISTANCE_THRESHOLD_M", "50")
        assert Settings().location.distance_threshold_m == 50.0

    def test_log_level_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().log_level == "DEBUG"


class TestValkeyUrl:
    """Tests for Valkey URL construction."""

    def test_plain(self):
        settings = ValkeySettings(host="cache", port=6380, db=2)
        assert settings.url == "redis://cache:6380/2"

    def test_password_and_ssl(self):
        settings = ValkeySettings(host="cache", password="s3cret", ssl=True)
        assert settings.url == "rediss://:s3cret@cache:6379/0"
