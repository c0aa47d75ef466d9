# ==============================================================================
# Location Reporter
# ==============================================================================
"""
Caller-side flow for reporting device and searched locations.

Consults the send gate before building a location event:
- skip: nothing is recorded or sent
- resend_same_location_new_time: the stored device location is re-sent
  with a fresh timestamp, without reverse geocoding
- send_new: the coordinate is reverse geocoded (when a geocoder is given)
  and sent as a new location event
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from tracklog.base import ServerSentEvent
from tracklog.core.models import EventType, LocationKind, SendDecision, UserEvent
from tracklog.services.event_manager import EventManager

logger = logging.getLogger(__name__)

# Reverse geocoder: (lat, lng) -> location map with at least a "coordinate" entry
ReverseGeocoder = Callable[[float, float], Awaitable[dict[str, Any]]]


def coordinate_location(lat: float, lng: float) -> dict[str, Any]:
    """Build a minimal location map from a coordinate."""
    return {"coordinate": {"lat": lat, "lng": lng}}


class LocationReporter:
    """Reports locations through an EventManager, skipping redundant sends."""

    def __init__(
        self,
        manager: EventManager,
        geocoder: ReverseGeocoder | None = None,
        timezone_name: str | None = None,
    ):
        """
        Initialize the reporter.

        Args:
            manager: EventManager that records and sends events
            geocoder: Optional reverse geocoder used for new locations
            timezone_name: IANA timezone stamped on built events
        """
        self.manager = manager
        self.geocoder = geocoder
        self.timezone_name = timezone_name

    async def _describe(self, lat: float, lng: float) -> dict[str, Any]:
        if self.geocoder is None:
            return coordinate_location(lat, lng)
        return await self.geocoder(lat, lng)

    async def _submit(
        self, evt_type: EventType, location: dict[str, Any]
    ) -> AsyncIterator[ServerSentEvent] | None:
        event = UserEvent.build(
            evt_type,
            location,
            session_id=self.manager.session_id,
            now=self.manager.now(),
            timezone_name=self.timezone_name,
        )
        return await self.manager.add_event(event)

    async def report_device_location(
        self, lat: float, lng: float
    ) -> AsyncIterator[ServerSentEvent] | None:
        """
        Report a device location observation.

        Args:
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees

        Returns:
            Response stream if an event was sent, else None
        """
        decision = self.manager.location_send_decision(
            coordinate_location(lat, lng), LocationKind.DEVICE
        )

        if decision == SendDecision.SKIP:
            logger.debug("Skipping device location update (within distance and time threshold)")
            return None

        if decision == SendDecision.RESEND_SAME_LOCATION_NEW_TIME:
            prior = self.manager.latest_device_location
            if prior is None:
                return None
            logger.debug("Resending device location with a new time")
            return await self._submit(EventType.LOCATION_DETECTED, prior)

        location = await self._describe(lat, lng)
        return await self._submit(EventType.LOCATION_DETECTED, location)

    async def report_searched_location(
        self, lat: float, lng: float
    ) -> AsyncIterator[ServerSentEvent] | None:
        """
        Report a location picked in search or on the map.

        Args:
            lat: Latitude in decimal degrees
            lng: Longitude in decimal degrees

        Returns:
            Response stream if an event was sent, else None
        """
        decision = self.manager.location_send_decision(
            coordinate_location(lat, lng), LocationKind.SEARCH
        )
        if decision == SendDecision.SKIP:
            logger.debug("Skipping location_searched send (same location)")
            return None

        location = await self._describe(lat, lng)
        return await self._submit(EventType.LOCATION_SEARCHED, location)
