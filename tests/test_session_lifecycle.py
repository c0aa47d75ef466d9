# ==============================================================================
# Tests for Session Lifecycle
# ==============================================================================
"""
Unit tests for session expiry.

Tests cover:
- Sessions without activity never expire
- Inactivity timeout (strictly greater than 30 minutes)
- Maximum age (strictly greater than 240 minutes)
- Custom limits
"""

from datetime import datetime, timedelta, timezone

from tracklog.core.session_lifecycle import SessionLifecycle

T0 = datetime(2026, 1, 28, 9, 0, 0, tzinfo=timezone.utc)


class TestIsExpired:
    """Tests for SessionLifecycle.is_expired()."""

    def test_no_activity_never_expires(self):
        lifecycle = SessionLifecycle()
        assert not lifecycle.is_expired(None, None, T0 + timedelta(days=3))

    def test_active_session(self):
        lifecycle = SessionLifecycle()
        assert not lifecycle.is_expired(T0, T0 + timedelta(minutes=5), T0 + timedelta(minutes=10))

    def test_idle_exactly_at_timeout(self):
        lifecycle = SessionLifecycle()
        assert not lifecycle.is_expired(T0, T0, T0 + timedelta(minutes=30))

    def test_idle_past_timeout(self):
        lifecycle = SessionLifecycle()
        assert lifecycle.is_expired(T0, T0, T0 + timedelta(minutes=31))

    def test_age_exactly_at_max(self):
        lifecycle = SessionLifecycle()
        last = T0 + timedelta(minutes=230)
        assert not lifecycle.is_expired(T0, last, T0 + timedelta(minutes=240))

    def test_age_past_max(self):
        """Frequent activity does not keep a session open past its max age."""
        lifecycle = SessionLifecycle()
        last = T0 + timedelta(minutes=235)
        assert lifecycle.is_expired(T0, last, T0 + timedelta(minutes=241))

    def test_missing_start_only_checks_idle(self):
        lifecycle = SessionLifecycle()
        now = T0 + timedelta(minutes=10)
        assert not lifecycle.is_expired(None, T0, now)

    def test_custom_limits(self):
        lifecycle = SessionLifecycle(inactivity_timeout_minutes=5, max_duration_minutes=10)
        assert lifecycle.is_expired(T0, T0, T0 + timedelta(minutes=6))
        assert lifecycle.is_expired(T0, T0 + timedelta(minutes=8), T0 + timedelta(minutes=11))
        assert not lifecycle.is_expired(T0, T0 + timedelta(minutes=8), T0 + timedelta(minutes=9))
