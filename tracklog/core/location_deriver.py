# ==============================================================================
# Location Deriver - Pure Domain Logic
# ==============================================================================
"""
Derive the latest known locations from event history.

The derived state is always recomputed from the full consolidated event
list, never patched incrementally. Both functions here are pure: same input, same output.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from tracklog.core.models import DerivedLocationState, EventType, UserEvent
from tracklog.core.timestamps import parse_iso8601

logger = logging.getLogger(__name__)


def derive_locations(events: Sequence[UserEvent]) -> DerivedLocationState:
    """
    Scan events from most to least recently appended for the latest locations.

    The first location_detected event found supplies the device location and
    the first location_searched event the search location. When no search
    event exists the device location doubles as the search location.

    Args:
        events: Consolidated events in collection order

    Returns:
        DerivedLocationState with the location maps (event data) found
    """
    device_location = None
    search_location = None

    for event in reversed(events):
        if event.evt_type == EventType.LOCATION_DETECTED.value:
            if device_location is None:
                device_location = event.data
        elif event.evt_type == EventType.LOCATION_SEARCHED.value:
            if search_location is None:
                search_location = event.data

        if device_location is not None and search_location is not None:
            break

    if search_location is None and device_location is not None:
        search_location = device_location

    logger.debug(
        "Derived locations: device=%s search=%s",
        device_location is not None,
        search_location is not None,
    )
    return DerivedLocationState(
        latest_device_location=device_location,
        latest_search_location=search_location,
    )


def latest_device_send_time(events: Sequence[UserEvent]) -> datetime | None:
    """
    Get the time the device location was last sent.

    Picks the location_detected event with the greatest timestamp (string
    order, which is time order for UTC ISO8601), regardless of append order.

    Args:
        events: Consolidated events

    Returns:
        Aware UTC datetime, or None if there is no such event or its
        timestamp cannot be parsed
    """
    latest = max(
        (e.utc_timestamp for e in events if e.evt_type == EventType.LOCATION_DETECTED.value),
        default=None,
    )
    if latest is None:
        return None

    sent_at = parse_iso8601(latest)
    if sent_at is None:
        logger.warning("Unparsable location_detected timestamp: %s", latest)
    return sent_at
