# ==============================================================================
# Tracklog Domain Models
# ==============================================================================
"""
Pydantic models for user events, sessions and derived location state.

These models are used for:
- Validating events submitted by callers and read back from storage
- Serializing events for the backend (wire names evt_utc, evt_type, ...)
- Type safety throughout the application

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, JsonValue, field_validator

from tracklog.core.timestamps import format_utc, utc_now


class EventType(str, Enum):
    """Known event types.

    Events carry their type as a plain string so that types unknown to this
    client still round-trip through storage.
    """

    LOCATION_DETECTED = "location_detected"
    LOCATION_SEARCHED = "location_searched"
    CHAT_SENT = "chat_sent"
    CHAT_RECEIVED = "chat_received"
    CHAT_LIKED = "chat_liked"
    CHAT_DISLIKED = "chat_disliked"
    CHAT_BOOKMARKED = "chat_bookmarked"


LOCATION_EVENT_TYPES = frozenset(
    {EventType.LOCATION_DETECTED.value, EventType.LOCATION_SEARCHED.value}
)
CHAT_REACTION_EVENT_TYPES = frozenset(
    {EventType.CHAT_LIKED.value, EventType.CHAT_DISLIKED.value, EventType.CHAT_BOOKMARKED.value}
)


class LocationKind(str, Enum):
    """Origin of a location: observed by the device or picked in search."""

    DEVICE = "device"
    SEARCH = "search"


class SendDecision(str, Enum):
    """Outcome of the location send gate."""

    SKIP = "skip"
    RESEND_SAME_LOCATION_NEW_TIME = "resend_same_location_new_time"
    SEND_NEW = "send_new"


class UserEvent(BaseModel):
    """
    A single recorded user or system action.

    Immutable once created. Field aliases are the wire names used by the
    backend and by persisted blobs.

    Attributes:
        utc_timestamp: ISO8601 UTC timestamp (sortable as a string)
        timezone: IANA timezone name of the device when the event happened
        evt_type: Event type, usually an EventType value
        data: Free-form JSON payload; for location events this is the location map
        session_id: Owning session, assigned at append time when missing
    """

    utc_timestamp: str = Field(..., alias="evt_utc", description="ISO8601 UTC timestamp")
    timezone: str | None = Field(None, alias="evt_timezone", description="IANA timezone")
    evt_type: str = Field(..., description="Event type")
    data: dict[str, JsonValue] = Field(
        default_factory=dict, alias="evt_data", description="Event payload"
    )
    session_id: str | None = Field(None, description="Session identifier")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("evt_type", mode="before")
    @classmethod
    def _event_type_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value

    @property
    def is_location_event(self) -> bool:
        """True for location_detected and location_searched events."""
        return self.evt_type in LOCATION_EVENT_TYPES

    def with_session(self, session_id: str) -> "UserEvent":
        """Return a copy of this event bound to the given session."""
        return self.model_copy(update={"session_id": session_id})

    def to_payload(self) -> dict[str, Any]:
        """Serialize event for the backend, omitting null fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def build(
        cls,
        evt_type: str,
        evt_data: dict[str, Any],
        session_id: str | None = None,
        now: datetime | None = None,
        timezone_name: str | None = None,
    ) -> "UserEvent":
        """
        Create an event stamped with the current UTC time.

        Args:
            evt_type: Event type (e.g. "location_detected", "chat_sent")
            evt_data: Event payload
            session_id: Optional session identifier
            now: Override for the event time (defaults to now)
            timezone_name: IANA timezone of the device (defaults to "UTC")

        Returns:
            New UserEvent
        """
        return cls(
            evt_utc=format_utc(now or utc_now()),
            evt_timezone=timezone_name or "UTC",
            evt_type=evt_type,
            evt_data=evt_data,
            session_id=session_id,
        )


class SessionData(BaseModel):
    """
    An archived session.

    Immutable once stored in the archive map. Timestamps serialize as
    ISO8601 strings.

    Attributes:
        session_id: Session UUID
        events: Events in append order
        started_at: When the first event of the session was appended
        last_activity_at: When the last event of the session was appended
    """

    session_id: str = Field(..., description="Session identifier")
    events: list[UserEvent] = Field(default_factory=list, description="Events in append order")
    started_at: datetime | None = Field(None, description="Session start time")
    last_activity_at: datetime | None = Field(None, description="Last activity time")

    model_config = {"frozen": True}

    @property
    def event_count(self) -> int:
        """Total number of events in session."""
        return len(self.events)


class DerivedLocationState(BaseModel):
    """Latest known device and search locations, derived from event history."""

    latest_device_location: dict[str, JsonValue] | None = None
    latest_search_location: dict[str, JsonValue] | None = None

    model_config = {"frozen": True}

    def for_kind(self, kind: LocationKind) -> dict[str, JsonValue] | None:
        """Get the derived location matching a location kind."""
        if kind == LocationKind.DEVICE:
            return self.latest_device_location
        return self.latest_search_location
