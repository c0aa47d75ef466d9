# ==============================================================================
# Session Lifecycle - Pure Domain Logic
# ==============================================================================
"""
Session timeout detection.

A session expires after a period of inactivity or once it reaches its
maximum age. There is no background timer: the check runs when the next
event arrives, so an idle session stays open until then.
"""

import logging
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

DEFAULT_INACTIVITY_TIMEOUT_MINUTES = 30
DEFAULT_MAX_DURATION_MINUTES = 240


class SessionLifecycle:
    """
    Pure session expiry logic.

    Works on the current session's timestamps only; archiving and rollover
    are done by the event store.
    """

    def __init__(
        self,
        inactivity_timeout_minutes: int = DEFAULT_INACTIVITY_TIMEOUT_MINUTES,
        max_duration_minutes: int = DEFAULT_MAX_DURATION_MINUTES,
    ):
        """
        Initialize session lifecycle.

        Args:
            inactivity_timeout_minutes: Session expires when the gap since the
                                        last activity exceeds this
            max_duration_minutes: Session expires when its age exceeds this
        """
        self.inactivity_timeout = timedelta(minutes=inactivity_timeout_minutes)
        self.max_duration = timedelta(minutes=max_duration_minutes)

    def is_expired(
        self,
        started_at: datetime | None,
        last_activity_at: datetime | None,
        now: datetime,
    ) -> bool:
        """
        Check if the current session has expired.

        Args:
            started_at: When the session's first event was appended
            last_activity_at: When the session's last event was appended
            now: Time of the incoming event

        Returns:
            True if the session should be archived before the next append.
            A session without recorded activity never expires.
        """
        if last_activity_at is None:
            return False

        idle = now - last_activity_at
        if idle > self.inactivity_timeout:
            logger.debug("Session timeout: %d minutes since last activity", idle.total_seconds() // 60)
            return True

        if started_at is not None:
            age = now - started_at
            if age > self.max_duration:
                logger.debug("Session max duration exceeded: %d minutes", age.total_seconds() // 60)
                return True

        return False
