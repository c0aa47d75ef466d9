# ==============================================================================
# Event Manager
# ==============================================================================
"""
Single owner of event, session and derived location state.

Handles the complete event lifecycle:
1. Archive the current session if it timed out
2. Append the event
3. Re-derive latest locations for location events
4. Dispatch to the backend
5. Persist, even when dispatch fails

All mutations run under one asyncio.Lock. Inside it only the transport send
is awaited; reaction responses are drained by the dispatcher after the lock
is released. Reads used by the send gate are
synchronous, so on the event loop they never see a half-applied mutation.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from datetime import datetime, timedelta
from typing import Any

from tracklog.base import KeyValueStore, ServerSentEvent, Transport
from tracklog.core.location_deriver import derive_locations, latest_device_send_time
from tracklog.core.models import (
    DerivedLocationState,
    EventType,
    LocationKind,
    SendDecision,
    SessionData,
    UserEvent,
)
from tracklog.core.send_gate import LocationSendGate
from tracklog.core.session_lifecycle import SessionLifecycle
from tracklog.core.timestamps import utc_now
from tracklog.infrastructure.event_store import EventStore
from tracklog.services.dispatcher import EventDispatcher
from tracklog.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

RECENT_EVENTS_LOGGED = 5


class EventManager:
    """
    Records user events, derives locations and decides location sends.

    Create with from_settings() for the configured thresholds, or pass the
    collaborators directly.
    """

    def __init__(
        self,
        event_store: EventStore,
        dispatcher: EventDispatcher,
        lifecycle: SessionLifecycle | None = None,
        send_gate: LocationSendGate | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the manager.

        Args:
            event_store: Event log and its persistence
            dispatcher: Routes events to the backend
            lifecycle: Session timeout rules (defaults: 30 min idle, 240 min max)
            send_gate: Location dedup gate (defaults: 200 m, 12 h)
            clock: Source of the current time
        """
        self.event_store = event_store
        self.dispatcher = dispatcher
        self.lifecycle = lifecycle or SessionLifecycle()
        self.send_gate = send_gate or LocationSendGate()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._derived = DerivedLocationState()

    @classmethod
    def from_settings(
        cls,
        store: KeyValueStore,
        transport: Transport | None = None,
        settings: Settings | None = None,
        load: bool = True,
    ) -> "EventManager":
        """
        Build a manager wired from application settings.

        Args:
            store: Durable key-value store
            transport: Outbound transport; None disables sending
            settings: Settings to use (defaults to get_settings())
            load: Restore persisted state immediately

        Returns:
            Configured EventManager
        """
        settings = settings or get_settings()
        manager = cls(
            event_store=EventStore(store),
            dispatcher=EventDispatcher(
                transport,
                chat_endpoint=settings.gateway.chat_endpoint,
                orchestration_endpoint=settings.gateway.orchestration_endpoint,
            ),
            lifecycle=SessionLifecycle(
                inactivity_timeout_minutes=settings.session.inactivity_timeout_minutes,
                max_duration_minutes=settings.session.max_duration_minutes,
            ),
            send_gate=LocationSendGate(
                distance_threshold_m=settings.location.distance_threshold_m,
                resend_interval=timedelta(hours=settings.location.resend_interval_hours),
            ),
        )
        if load:
            manager.load()
        return manager

    # ==========================================================================
    # State (read-only views)
    # ==========================================================================

    def now(self) -> datetime:
        """Current time from the manager's clock."""
        return self._clock()

    @property
    def session_id(self) -> str:
        return self.event_store.session_id

    @property
    def this_session(self) -> list[UserEvent]:
        return list(self.event_store.events)

    @property
    def past_sessions(self) -> dict[str, SessionData]:
        return dict(self.event_store.past_sessions)

    @property
    def derived(self) -> DerivedLocationState:
        return self._derived

    @property
    def latest_device_location(self) -> dict[str, Any] | None:
        return self._derived.latest_device_location

    @property
    def latest_search_location(self) -> dict[str, Any] | None:
        return self._derived.latest_search_location

    # ==========================================================================
    # Event Workflow
    # ==========================================================================

    async def add_event(
        self, event: UserEvent, skip_backend_send: bool = False
    ) -> AsyncIterator[ServerSentEvent] | None:
        """
        Record an event and send it to the backend.

        Args:
            event: Event to add
            skip_backend_send: Record and persist a chat_sent event without
                               sending it. Other event types are sent anyway.

        Returns:
            Response stream for chat_sent and location events, else None

        Raises:
            Exception: Transport errors. The event stays recorded and state is
                       still persisted.
        """
        async with self._lock:
            now = self._clock()
            if self.lifecycle.is_expired(
                self.event_store.started_at, self.event_store.last_activity_at, now
            ):
                self.event_store.archive_current_session()

            stored = self.event_store.append(event, now=now)

            if stored.is_location_event:
                self._refresh_locations()

            try:
                if skip_backend_send and stored.evt_type == EventType.CHAT_SENT.value:
                    return None
                return await self.dispatcher.dispatch(stored)
            finally:
                self._persist()

    async def archive_session(self) -> SessionData | None:
        """
        Archive the current session now and persist.

        Returns:
            The archived session, or None if the current session was empty
        """
        async with self._lock:
            archived = self.event_store.archive_current_session()
            if archived is not None:
                self._persist()
            return archived

    def load(self) -> None:
        """Restore persisted state and re-derive locations."""
        self.event_store.load()
        self._refresh_locations()

    async def clear(self) -> None:
        """Delete all persisted state and start a fresh session."""
        async with self._lock:
            self.event_store.clear()
            self._derived = DerivedLocationState()

    # ==========================================================================
    # Location Send Gate
    # ==========================================================================

    def last_device_send_time(self) -> datetime | None:
        """Timestamp of the newest location_detected event, if parsable."""
        return latest_device_send_time(self.event_store.consolidate())

    def location_send_decision(
        self, location: dict[str, Any], kind: LocationKind
    ) -> SendDecision:
        """
        Decide whether a location observation should be sent.

        Args:
            location: Candidate location map with a "coordinate" entry
            kind: Device-observed or search-originated

        Returns:
            SendDecision from the send gate
        """
        return self.send_gate.decide(
            location,
            kind,
            self._derived,
            self.last_device_send_time(),
            now=self._clock(),
        )

    # ==========================================================================
    # Internals
    # ==========================================================================

    def _refresh_locations(self) -> None:
        self._derived = derive_locations(self.event_store.consolidate())

    def _persist(self) -> None:
        self.event_store.persist(self._derived)
        if logger.isEnabledFor(logging.DEBUG):
            recent = self.event_store.recent_events(RECENT_EVENTS_LOGGED)
            for position, event in enumerate(recent, start=1):
                logger.debug(
                    "Event %d/%d | %s | %s | session: %s",
                    position,
                    len(recent),
                    event.utc_timestamp,
                    event.evt_type,
                    (event.session_id or "nil")[-4:],
                )
