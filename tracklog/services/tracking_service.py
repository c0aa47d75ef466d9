# ==============================================================================
# Tracking Service
# ==============================================================================
"""
Applies the tracking policy on permission and app-state changes and records
the selected mode for external readers (widgets, status screens).
"""

import logging

from tracklog.base import KeyValueStore
from tracklog.core.tracking import AuthorizationStatus, TrackingMode, TrackingPlan, TrackingPolicy
from tracklog.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

TRACKING_MODE_KEY = "tracking:mode"


class TrackingService:
    """Tracks permission status and app state, and picks the tracking plan."""

    def __init__(self, store: KeyValueStore, policy: TrackingPolicy | None = None):
        self._store = store
        self.policy = policy or TrackingPolicy()
        self.status = AuthorizationStatus.NOT_DETERMINED
        self.in_background = False
        self.significant_changes_available = True
        self.current_plan: TrackingPlan | None = None

    @classmethod
    def from_settings(
        cls, store: KeyValueStore, settings: Settings | None = None
    ) -> "TrackingService":
        """Build a service whose policy uses the configured accuracy and filter."""
        settings = settings or get_settings()
        policy = TrackingPolicy(
            accuracy_m=settings.location.tracking_accuracy_m,
            distance_filter_m=settings.location.tracking_distance_filter_m,
        )
        return cls(store, policy=policy)

    def _apply(self) -> TrackingPlan:
        plan = self.policy.plan(
            self.status,
            self.in_background,
            significant_changes_available=self.significant_changes_available,
        )
        if self.current_plan is None or plan.mode != self.current_plan.mode:
            logger.info("Tracking mode: %s", plan.mode.value)
        self.current_plan = plan
        self._store.save(TRACKING_MODE_KEY, plan.mode.value)
        return plan

    def authorization_changed(self, status: AuthorizationStatus) -> TrackingPlan:
        """Handle a permission status change."""
        self.status = status
        return self._apply()

    def app_did_enter_background(self) -> TrackingPlan:
        self.in_background = True
        return self._apply()

    def app_will_enter_foreground(self) -> TrackingPlan:
        self.in_background = False
        return self._apply()

    def stored_mode(self) -> TrackingMode | None:
        """
        Read the last recorded tracking mode.

        Returns:
            TrackingMode, or None if nothing valid is stored
        """
        value = self._store.load(TRACKING_MODE_KEY)
        try:
            return TrackingMode(value)
        except ValueError:
            return None
