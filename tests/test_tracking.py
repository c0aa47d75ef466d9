# ==============================================================================
# Tests for Adaptive Tracking
# ==============================================================================
"""
Unit tests for TrackingPolicy and TrackingService.

Tests cover:
- Plans per permission status and app state
- Mode recorded in the store on every change
- Settings-driven accuracy and distance filter
"""

import pytest

from tracklog.core.tracking import AuthorizationStatus, TrackingMode, TrackingPolicy
from tracklog.services.tracking_service import TRACKING_MODE_KEY, TrackingService
from tracklog.utils.config import LocationSettings, Settings


# ==============================================================================
# AuthorizationStatus
# ==============================================================================


class TestAuthorizationStatus:
    """Tests for permission checks."""

    @pytest.mark.parametrize(
        "status,granted",
        [
            (AuthorizationStatus.NOT_DETERMINED, False),
            (AuthorizationStatus.DENIED, False),
            (AuthorizationStatus.RESTRICTED, False),
            (AuthorizationStatus.WHEN_IN_USE, True),
            (AuthorizationStatus.ALWAYS, True),
        ],
    )
    def test_is_granted(self, status, granted):
        assert status.is_granted is granted


# ==============================================================================
# TrackingPolicy
# ==============================================================================


class TestTrackingPolicy:
    """Tests for plan selection."""

    @pytest.mark.parametrize(
        "status", [AuthorizationStatus.DENIED, AuthorizationStatus.RESTRICTED]
    )
    def test_no_permission_stops(self, status):
        plan = TrackingPolicy().plan(status, in_background=False)
        assert plan.mode == TrackingMode.STOPPED
        assert not plan.request_permission

    def test_not_determined_requests_permission(self):
        plan = TrackingPolicy().plan(AuthorizationStatus.NOT_DETERMINED, in_background=False)
        assert plan.mode == TrackingMode.STOPPED
        assert plan.request_permission

    @pytest.mark.parametrize(
        "status", [AuthorizationStatus.WHEN_IN_USE, AuthorizationStatus.ALWAYS]
    )
    def test_foreground_continuous(self, status):
        plan = TrackingPolicy(accuracy_m=100, distance_filter_m=50).plan(
            status, in_background=False
        )
        assert plan.mode == TrackingMode.FOREGROUND
        assert plan.continuous_updates
        assert not plan.significant_changes
        assert plan.desired_accuracy_m == 100
        assert plan.distance_filter_m == 50

    def test_background_with_always(self):
        plan = TrackingPolicy().plan(AuthorizationStatus.ALWAYS, in_background=True)
        assert plan.mode == TrackingMode.BACKGROUND
        assert plan.significant_changes
        assert not plan.continuous_updates

    def test_background_when_in_use_stops(self):
        plan = TrackingPolicy().plan(AuthorizationStatus.WHEN_IN_USE, in_background=True)
        assert plan.mode == TrackingMode.STOPPED

    def test_background_without_significant_changes_stops(self):
        plan = TrackingPolicy().plan(
            AuthorizationStatus.ALWAYS, in_background=True, significant_changes_available=False
        )
        assert plan.mode == TrackingMode.STOPPED


# ==============================================================================
# TrackingService
# ==============================================================================


class TestTrackingService:
    """Tests for state transitions and the recorded mode."""

    def test_nothing_recorded_initially(self, memory_store):
        assert TrackingService(memory_store).stored_mode() is None

    def test_permission_then_background(self, memory_store):
        service = TrackingService(memory_store)

        service.authorization_changed(AuthorizationStatus.ALWAYS)
        assert service.stored_mode() == TrackingMode.FOREGROUND

        service.app_did_enter_background()
        assert service.stored_mode() == TrackingMode.BACKGROUND
        assert memory_store.load(TRACKING_MODE_KEY) == "background"

        service.app_will_enter_foreground()
        assert service.stored_mode() == TrackingMode.FOREGROUND

    def test_revoked_permission_stops(self, memory_store):
        service = TrackingService(memory_store)
        service.authorization_changed(AuthorizationStatus.WHEN_IN_USE)
        plan = service.authorization_changed(AuthorizationStatus.DENIED)
        assert plan.mode == TrackingMode.STOPPED
        assert service.current_plan == plan

    def test_garbage_stored_mode(self, memory_store):
        memory_store.save(TRACKING_MODE_KEY, "warp-speed")
        assert TrackingService(memory_store).stored_mode() is None

    def test_from_settings(self, memory_store):
        settings = Settings(
            location=LocationSettings(tracking_accuracy_m=25.0, tracking_distance_filter_m=10.0)
        )
        service = TrackingService.from_settings(memory_store, settings=settings)
        plan = service.authorization_changed(AuthorizationStatus.WHEN_IN_USE)
        assert plan.desired_accuracy_m == 25.0
        assert plan.distance_filter_m == 10.0
