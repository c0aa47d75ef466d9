# ==============================================================================
# Services
# ==============================================================================
"""
Stateful services built on the core logic and the collaborator contracts.

- EventManager: single owner of event, session and location state
- EventDispatcher: routes events to backend endpoints
- LocationReporter: send-gated device and search location reporting
- TrackingService: applies the adaptive tracking policy
"""

from tracklog.services.dispatcher import EventDispatcher
from tracklog.services.event_manager import EventManager
from tracklog.services.location_reporter import LocationReporter, coordinate_location
from tracklog.services.tracking_service import TRACKING_MODE_KEY, TrackingService

__all__ = [
    "EventDispatcher",
    "EventManager",
    "LocationReporter",
    "TRACKING_MODE_KEY",
    "TrackingService",
    "coordinate_location",
]
