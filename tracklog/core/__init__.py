# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (UserEvent, SessionData, DerivedLocationState, enums)
- Geo math (haversine distance, coordinate extraction)
- Location derivation from event history
- The location send gate
- Session timeout detection
- The adaptive tracking policy

All code here is framework-agnostic and easily unit-testable.
"""

from tracklog.core.geo import EARTH_RADIUS_M, GeoPoint, extract_coordinate, haversine_m
from tracklog.core.location_deriver import derive_locations, latest_device_send_time
from tracklog.core.models import (
    CHAT_REACTION_EVENT_TYPES,
    LOCATION_EVENT_TYPES,
    DerivedLocationState,
    EventType,
    LocationKind,
    SendDecision,
    SessionData,
    UserEvent,
)
from tracklog.core.send_gate import LocationSendGate
from tracklog.core.session_lifecycle import SessionLifecycle
from tracklog.core.tracking import (
    AuthorizationStatus,
    TrackingMode,
    TrackingPlan,
    TrackingPolicy,
)

__all__ = [
    # Models
    "CHAT_REACTION_EVENT_TYPES",
    "LOCATION_EVENT_TYPES",
    "DerivedLocationState",
    "EventType",
    "LocationKind",
    "SendDecision",
    "SessionData",
    "UserEvent",
    # Geo
    "EARTH_RADIUS_M",
    "GeoPoint",
    "extract_coordinate",
    "haversine_m",
    # Derivation
    "derive_locations",
    "latest_device_send_time",
    # Send gate
    "LocationSendGate",
    # Sessions
    "SessionLifecycle",
    # Tracking
    "AuthorizationStatus",
    "TrackingMode",
    "TrackingPlan",
    "TrackingPolicy",
]
