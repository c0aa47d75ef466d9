# ==============================================================================
# Event Store
# ==============================================================================
"""
Append-only event log for the current session plus a map of archived sessions.

State is persisted to a KeyValueStore as independent keys:
- events:this_session     -> JSON blob, list of events in the current session
- events:past_sessions    -> JSON blob, archived sessions keyed by session id
- events:session_id       -> current session id
- events:session_metadata -> {"session_started_at", "last_activity_at"} (ISO8601)
- location:last_device    -> JSON string of the latest device location
- location:last_search    -> JSON string of the latest search location

Each key is written and read on its own: a failed or corrupt key falls back
to its default without affecting the others.
"""

import json
import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter, ValidationError

from tracklog.base import KeyValueStore
from tracklog.core.models import DerivedLocationState, SessionData, UserEvent
from tracklog.core.timestamps import format_utc, parse_iso8601, utc_now

logger = logging.getLogger(__name__)


# Storage keys
THIS_SESSION_KEY = "events:this_session"
PAST_SESSIONS_KEY = "events:past_sessions"
SESSION_ID_KEY = "events:session_id"
SESSION_METADATA_KEY = "events:session_metadata"
LAST_DEVICE_LOCATION_KEY = "location:last_device"
LAST_SEARCH_LOCATION_KEY = "location:last_search"

ALL_KEYS = (
    THIS_SESSION_KEY,
    PAST_SESSIONS_KEY,
    SESSION_ID_KEY,
    SESSION_METADATA_KEY,
    LAST_DEVICE_LOCATION_KEY,
    LAST_SEARCH_LOCATION_KEY,
)

_EVENTS_ADAPTER = TypeAdapter(list[UserEvent])
_SESSIONS_ADAPTER = TypeAdapter(dict[str, SessionData])


def new_session_id() -> str:
    """Generate a fresh session id."""
    return str(uuid.uuid4())


class EventStore:
    """
    In-memory event log with key-value persistence.

    Attributes:
        session_id: Id of the current (mutable) session
        events: Events of the current session in append order
        past_sessions: Archived sessions keyed by session id, in archival order
        started_at: When the first event of the current session was appended
        last_activity_at: When the last event of the current session was appended

    Not safe for concurrent mutation; EventManager serializes access.
    """

    def __init__(self, store: KeyValueStore, id_factory: Callable[[], str] = new_session_id):
        """
        Initialize an empty event store.

        Args:
            store: Durable key-value store used by persist() and load()
            id_factory: Session id generator
        """
        self._store = store
        self._new_id = id_factory
        self.session_id: str = id_factory()
        self.events: list[UserEvent] = []
        self.past_sessions: dict[str, SessionData] = {}
        self.started_at: datetime | None = None
        self.last_activity_at: datetime | None = None

    # ==========================================================================
    # Event Log
    # ==========================================================================

    def append(self, event: UserEvent, now: datetime | None = None) -> UserEvent:
        """
        Append an event to the current session.

        Binds the event to the current session id, updates last activity and
        sets the session start on the first event.

        Args:
            event: Event to append
            now: Append time (defaults to now, UTC)

        Returns:
            The stored event (bound to the current session)
        """
        now = now or utc_now()
        if event.session_id != self.session_id:
            if event.session_id is not None:
                logger.debug(
                    "Rebinding %s event from session %s to %s",
                    event.evt_type,
                    event.session_id,
                    self.session_id,
                )
            event = event.with_session(self.session_id)

        self.events.append(event)
        if self.started_at is None:
            self.started_at = now
        self.last_activity_at = now
        return event

    def archive_current_session(self) -> SessionData | None:
        """
        Move the current session into the archive and start a new one.

        No-op if the current session has no events.

        Returns:
            The archived SessionData, or None if nothing was archived
        """
        if not self.events:
            return None

        archived = SessionData(
            session_id=self.session_id,
            events=list(self.events),
            started_at=self.started_at,
            last_activity_at=self.last_activity_at,
        )
        self.past_sessions[archived.session_id] = archived

        self.events = []
        self.session_id = self._new_id()
        self.started_at = None
        self.last_activity_at = None

        logger.debug(
            "Archived session %s with %d events", archived.session_id, archived.event_count
        )
        return archived

    def consolidate(self) -> list[UserEvent]:
        """
        All events: archived sessions in archival order, then the current session.

        Within each session the original append order is preserved, so the
        result is in overall append order.
        """
        all_events: list[UserEvent] = []
        for session in self.past_sessions.values():
            all_events.extend(session.events)
        all_events.extend(self.events)
        return all_events

    def recent_events(self, count: int = 5) -> list[UserEvent]:
        """
        Get the newest events across all sessions.

        Args:
            count: Maximum number of events to return

        Returns:
            Events sorted by timestamp, most recent first
        """
        ordered = sorted(self.consolidate(), key=lambda e: e.utc_timestamp, reverse=True)
        return ordered[:count]

    # ==========================================================================
    # Persistence
    # ==========================================================================

    def _metadata(self) -> dict[str, str]:
        metadata = {}
        if self.started_at is not None:
            metadata["session_started_at"] = format_utc(self.started_at)
        if self.last_activity_at is not None:
            metadata["last_activity_at"] = format_utc(self.last_activity_at)
        return metadata

    def persist(self, derived: DerivedLocationState | None = None) -> bool:
        """
        Write the current state to the key-value store.

        Every key is written independently; a failed write is logged and the
        remaining writes still run.

        Args:
            derived: Derived locations to cache for external readers

        Returns:
            True if every write succeeded
        """
        writes: list[tuple[str, Any]] = [
            (THIS_SESSION_KEY, _EVENTS_ADAPTER.dump_json(self.events, by_alias=True).decode()),
            (
                PAST_SESSIONS_KEY,
                _SESSIONS_ADAPTER.dump_json(self.past_sessions, by_alias=True).decode(),
            ),
            (SESSION_ID_KEY, self.session_id),
            (SESSION_METADATA_KEY, self._metadata()),
        ]
        if derived is not None and derived.latest_device_location is not None:
            writes.append((LAST_DEVICE_LOCATION_KEY, json.dumps(derived.latest_device_location)))
        if derived is not None and derived.latest_search_location is not None:
            writes.append((LAST_SEARCH_LOCATION_KEY, json.dumps(derived.latest_search_location)))

        ok = True
        for key, value in writes:
            try:
                self._store.save(key, value)
            except Exception as e:
                logger.warning("Failed to persist %s: %s", key, e)
                ok = False

        logger.debug(
            "Saved events: %d in current session, %d past sessions",
            len(self.events),
            len(self.past_sessions),
        )
        return ok

    def _load_key(self, key: str) -> Any | None:
        try:
            return self._store.load(key)
        except Exception as e:
            logger.warning("Failed to load %s: %s", key, e)
            return None

    def load(self) -> None:
        """
        Restore state from the key-value store.

        Missing or corrupt keys fall back to defaults independently: empty
        current session, empty archive, a fresh session id, no timestamps.
        """
        raw_events = self._load_key(THIS_SESSION_KEY)
        self.events = []
        if raw_events is not None:
            try:
                self.events = _EVENTS_ADAPTER.validate_json(raw_events)
            except (ValidationError, TypeError) as e:
                logger.warning("Discarding corrupt %s: %s", THIS_SESSION_KEY, e)

        raw_sessions = self._load_key(PAST_SESSIONS_KEY)
        self.past_sessions = {}
        if raw_sessions is not None:
            try:
                self.past_sessions = _SESSIONS_ADAPTER.validate_json(raw_sessions)
            except (ValidationError, TypeError) as e:
                logger.warning("Discarding corrupt %s: %s", PAST_SESSIONS_KEY, e)

        session_id = self._load_key(SESSION_ID_KEY)
        if isinstance(session_id, str) and session_id:
            self.session_id = session_id
        else:
            self.session_id = self._new_id()

        metadata = self._load_key(SESSION_METADATA_KEY)
        if not isinstance(metadata, dict):
            metadata = {}
        self.started_at = parse_iso8601(metadata.get("session_started_at"))
        self.last_activity_at = parse_iso8601(metadata.get("last_activity_at"))

        logger.debug(
            "Loaded events: %d in current session, %d past sessions",
            len(self.events),
            len(self.past_sessions),
        )

    def clear(self) -> None:
        """Delete all persisted keys and reset to a fresh, empty session."""
        for key in ALL_KEYS:
            try:
                self._store.delete(key)
            except Exception as e:
                logger.warning("Failed to delete %s: %s", key, e)

        self.events = []
        self.past_sessions = {}
        self.session_id = self._new_id()
        self.started_at = None
        self.last_activity_at = None
