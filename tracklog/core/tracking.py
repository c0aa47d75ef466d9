# ==============================================================================
# Tracking Policy - Pure Domain Logic
# ==============================================================================
"""
Adaptive location tracking strategy.

Picks how the device should track location given the permission status and
whether the app is in the foreground:
- foreground: continuous updates with moderate accuracy and a distance filter
- background: significant-change monitoring only (needs "always" permission)
- stopped: no tracking

The OS location API itself is out of scope; callers apply the returned plan.
"""

from enum import Enum

from pydantic import BaseModel, Field


class AuthorizationStatus(str, Enum):
    """Location permission status reported by the device."""

    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    WHEN_IN_USE = "when_in_use"
    ALWAYS = "always"

    @property
    def is_granted(self) -> bool:
        """True when the app may read the device location."""
        return self in (AuthorizationStatus.WHEN_IN_USE, AuthorizationStatus.ALWAYS)


class TrackingMode(str, Enum):
    """How location updates are being collected."""

    FOREGROUND = "foreground"
    BACKGROUND = "background"
    STOPPED = "stopped"


class TrackingPlan(BaseModel):
    """
    Tracking configuration to apply.

    Attributes:
        mode: Selected tracking mode
        continuous_updates: Use continuous location updates
        significant_changes: Use significant-change monitoring
        desired_accuracy_m: Desired horizontal accuracy (continuous only)
        distance_filter_m: Minimum movement between updates (continuous only)
        request_permission: Permission has not been asked yet
    """

    mode: TrackingMode
    continuous_updates: bool = False
    significant_changes: bool = False
    desired_accuracy_m: float | None = None
    distance_filter_m: float | None = None
    request_permission: bool = Field(default=False)


class TrackingPolicy:
    """Chooses a TrackingPlan from permission status and app state."""

    def __init__(self, accuracy_m: float = 100.0, distance_filter_m: float = 50.0):
        self.accuracy_m = accuracy_m
        self.distance_filter_m = distance_filter_m

    def plan(
        self,
        status: AuthorizationStatus,
        in_background: bool,
        significant_changes_available: bool = True,
    ) -> TrackingPlan:
        """
        Select the tracking plan.

        Args:
            status: Current location permission status
            in_background: Whether the app is in the background
            significant_changes_available: Whether the device supports
                                           significant-change monitoring

        Returns:
            TrackingPlan to apply
        """
        if not status.is_granted:
            return TrackingPlan(
                mode=TrackingMode.STOPPED,
                request_permission=status == AuthorizationStatus.NOT_DETERMINED,
            )

        if not in_background:
            return TrackingPlan(
                mode=TrackingMode.FOREGROUND,
                continuous_updates=True,
                desired_accuracy_m=self.accuracy_m,
                distance_filter_m=self.distance_filter_m,
            )

        # Background tracking without "always" permission is blocked by the OS
        if status != AuthorizationStatus.ALWAYS or not significant_changes_available:
            return TrackingPlan(mode=TrackingMode.STOPPED)

        return TrackingPlan(mode=TrackingMode.BACKGROUND, significant_changes=True)
