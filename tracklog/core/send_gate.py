# ==============================================================================
# Location Send Gate - Pure Domain Logic
# ==============================================================================
"""
Decide whether a location observation is worth sending to the backend.

Callers consult the gate before building a location event:
- skip: nothing new, drop the observation
- resend_same_location_new_time: same place but the last send is stale;
  resend the stored prior location with a fresh timestamp
- send_new: new or unverifiable location, geocode and send it

Malformed coordinates never raise; the gate fails open to send_new.
"""

import logging
from datetime import datetime, timedelta
from typing import Any

from tracklog.core.geo import extract_coordinate, haversine_m
from tracklog.core.models import DerivedLocationState, LocationKind, SendDecision
from tracklog.core.timestamps import utc_now

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_THRESHOLD_M = 200.0
DEFAULT_RESEND_INTERVAL = timedelta(hours=12)


class LocationSendGate:
    """
    Distance/time gate for outgoing location updates.

    Device locations within the distance threshold are skipped until the
    resend interval has elapsed since the last send. Search locations are
    skipped only when they are within the threshold and have exactly the
    same coordinate as the prior search location.
    """

    def __init__(
        self,
        distance_threshold_m: float = DEFAULT_DISTANCE_THRESHOLD_M,
        resend_interval: timedelta = DEFAULT_RESEND_INTERVAL,
    ):
        """
        Initialize the gate.

        Args:
            distance_threshold_m: Max distance in meters for "same location"
            resend_interval: Age of the last device send after which an
                             unchanged device location is sent again
        """
        self.distance_threshold_m = distance_threshold_m
        self.resend_interval = resend_interval

    def decide(
        self,
        candidate: dict[str, Any],
        kind: LocationKind,
        derived: DerivedLocationState,
        last_device_send_time: datetime | None,
        now: datetime | None = None,
    ) -> SendDecision:
        """
        Classify a candidate location.

        Args:
            candidate: Location map with a "coordinate" {lat, lng} entry
            kind: Device-observed or search-originated
            derived: Current derived location state
            last_device_send_time: When a device location was last sent
            now: Current time (defaults to now, UTC)

        Returns:
            SendDecision for the candidate
        """
        prior = derived.for_kind(kind)
        if prior is None:
            return SendDecision.SEND_NEW

        new_point = extract_coordinate(candidate)
        old_point = extract_coordinate(prior)
        if new_point is None or old_point is None:
            logger.debug("Cannot compare %s locations, sending", kind.value)
            return SendDecision.SEND_NEW

        distance = haversine_m(new_point, old_point)
        within_threshold = distance <= self.distance_threshold_m

        if kind == LocationKind.DEVICE:
            if last_device_send_time is None:
                return SendDecision.SEND_NEW
            if not within_threshold:
                return SendDecision.SEND_NEW
            elapsed = (now or utc_now()) - last_device_send_time
            if elapsed < self.resend_interval:
                logger.debug("Device location %.1fm from last send, skipping", distance)
                return SendDecision.SKIP
            return SendDecision.RESEND_SAME_LOCATION_NEW_TIME

        # TODO: equality already implies the distance check; confirm the
        # intended search rule with product before collapsing it.
        if within_threshold and new_point.lat == old_point.lat and new_point.lng == old_point.lng:
            return SendDecision.SKIP
        return SendDecision.SEND_NEW
