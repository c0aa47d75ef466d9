# ==============================================================================
# Tests for Event Manager
# ==============================================================================
"""
Unit tests for the EventManager event workflow.

Tests cover:
- Events are bound to the session, dispatched and persisted
- Inactivity and max-age timeouts archive the session before the append
- Location events refresh derived locations
- Dispatch failures still leave the event recorded and persisted
- skip_backend_send holds back chat_sent only
- Concurrent callers are serialized; reaction drains and cancelled streams
  never block or corrupt later events
- Loading, manual archival and clearing
- Send decisions against recorded history
"""

import asyncio
import json

import pytest

from tracklog.base import ServerSentEvent
from tracklog.core.models import EventType, LocationKind, SendDecision, UserEvent
from tracklog.infrastructure.event_store import (
    LAST_DEVICE_LOCATION_KEY,
    THIS_SESSION_KEY,
    EventStore,
)
from tracklog.services.dispatcher import EventDispatcher
from tracklog.services.event_manager import EventManager
from tracklog.utils.config import SessionSettings, Settings


def _loc(lat, lng, **extra):
    return {"coordinate": {"lat": lat, "lng": lng}, **extra}


def _add(manager, evt_type, data=None, **kwargs):
    event = UserEvent.build(evt_type, data or {}, now=manager.now())
    return asyncio.run(manager.add_event(event, **kwargs))


# ==============================================================================
# add_event
# ==============================================================================


class TestAddEvent:
    """Tests for recording and sending events."""

    def test_records_dispatches_and_persists(self, manager, transport, memory_store):
        _add(manager, EventType.CHAT_SENT, {"text": "hi"})

        assert len(manager.this_session) == 1
        assert manager.this_session[0].session_id == manager.session_id
        assert transport.calls == [("/v1/chat", "chat_sent", {"text": "hi"})]
        blob = json.loads(memory_store.load(THIS_SESSION_KEY))
        assert blob[0]["evt_data"] == {"text": "hi"}

    def test_returns_stream_for_chat_sent(self, manager):
        stream = _add(manager, EventType.CHAT_SENT, {"text": "hi"})
        assert stream is not None

    def test_returns_none_for_chat_received(self, manager, transport):
        assert _add(manager, EventType.CHAT_RECEIVED, {"text": "hello"}) is None
        assert transport.calls == []
        assert len(manager.this_session) == 1

    def test_skip_backend_send(self, manager, transport, memory_store):
        result = _add(manager, EventType.CHAT_SENT, {"text": "hi"}, skip_backend_send=True)
        assert result is None
        assert transport.calls == []
        assert memory_store.exists(THIS_SESSION_KEY)

    def test_skip_backend_send_still_sends_location(self, manager, transport, memory_store):
        stream = _add(
            manager, EventType.LOCATION_DETECTED, _loc(10.0, 10.0), skip_backend_send=True
        )
        assert stream is not None
        assert transport.calls == [("/v1/orchestor", "location_detected", _loc(10.0, 10.0))]
        assert json.loads(memory_store.load(LAST_DEVICE_LOCATION_KEY)) == _loc(10.0, 10.0)

    def test_transport_failure_still_persisted(self, manager, transport, memory_store):
        transport.error = ConnectionError("gateway down")

        with pytest.raises(ConnectionError):
            _add(manager, EventType.LOCATION_DETECTED, _loc(10.0, 10.0))

        assert len(manager.this_session) == 1
        assert manager.latest_device_location == _loc(10.0, 10.0)
        assert json.loads(memory_store.load(LAST_DEVICE_LOCATION_KEY)) == _loc(10.0, 10.0)

    def test_location_event_refreshes_derived(self, manager):
        _add(manager, EventType.LOCATION_DETECTED, _loc(1.0, 1.0))
        assert manager.latest_device_location == _loc(1.0, 1.0)
        assert manager.latest_search_location == _loc(1.0, 1.0)

        _add(manager, EventType.LOCATION_SEARCHED, _loc(2.0, 2.0))
        assert manager.latest_device_location == _loc(1.0, 1.0)
        assert manager.latest_search_location == _loc(2.0, 2.0)


# ==============================================================================
# Session Timeouts
# ==============================================================================


class TestSessionTimeouts:
    """Tests for automatic archival on the next event."""

    def test_inactivity_archives_previous_session(self, manager, clock):
        _add(manager, EventType.CHAT_SENT)
        first_session = manager.session_id

        clock.advance(minutes=31)
        _add(manager, EventType.CHAT_SENT)

        assert list(manager.past_sessions) == [first_session]
        assert manager.past_sessions[first_session].event_count == 1
        assert manager.session_id != first_session
        assert len(manager.this_session) == 1
        assert manager.this_session[0].session_id == manager.session_id

    def test_within_timeout_keeps_session(self, manager, clock):
        _add(manager, EventType.CHAT_SENT)
        session_id = manager.session_id
        clock.advance(minutes=30)
        _add(manager, EventType.CHAT_SENT)

        assert manager.session_id == session_id
        assert manager.past_sessions == {}

    def test_max_age_archives_busy_session(self, manager, clock):
        """Events every 20 minutes still roll over once the session passes 240 minutes."""
        for _ in range(13):
            _add(manager, EventType.CHAT_SENT)
            clock.advance(minutes=20)
        assert manager.past_sessions == {}

        _add(manager, EventType.CHAT_SENT)

        archived = list(manager.past_sessions.values())
        assert len(archived) == 1
        assert archived[0].event_count == 13
        assert len(manager.this_session) == 1

    def test_derived_locations_survive_archival(self, manager, clock):
        _add(manager, EventType.LOCATION_DETECTED, _loc(1.0, 1.0))
        clock.advance(hours=2)
        _add(manager, EventType.CHAT_SENT)
        assert manager.latest_device_location == _loc(1.0, 1.0)

    def test_archive_session_manually(self, manager):
        assert asyncio.run(manager.archive_session()) is None

        _add(manager, EventType.CHAT_SENT)
        archived = asyncio.run(manager.archive_session())

        assert archived.event_count == 1
        assert manager.this_session == []

    def test_custom_timeouts_from_settings(self, memory_store, clock):
        settings = Settings(session=SessionSettings(inactivity_timeout_minutes=5))
        manager = EventManager.from_settings(memory_store, settings=settings, load=False)
        manager._clock = clock

        _add(manager, EventType.CHAT_RECEIVED)
        clock.advance(minutes=6)
        _add(manager, EventType.CHAT_RECEIVED)

        assert len(manager.past_sessions) == 1


# ==============================================================================
# Load / Clear
# ==============================================================================


class TestLoadAndClear:
    """Tests for restoring and resetting state."""

    def test_load_restores_state_and_locations(self, manager, memory_store, clock):
        _add(manager, EventType.LOCATION_DETECTED, _loc(1.0, 1.0))
        clock.advance(minutes=45)
        _add(manager, EventType.LOCATION_SEARCHED, _loc(2.0, 2.0))

        restored = EventManager(EventStore(memory_store), EventDispatcher(None), clock=clock)
        restored.load()

        assert restored.session_id == manager.session_id
        assert restored.this_session == manager.this_session
        assert restored.past_sessions == manager.past_sessions
        assert restored.latest_device_location == _loc(1.0, 1.0)
        assert restored.latest_search_location == _loc(2.0, 2.0)

    def test_clear(self, manager, memory_store):
        _add(manager, EventType.LOCATION_DETECTED, _loc(1.0, 1.0))
        old_session = manager.session_id

        asyncio.run(manager.clear())

        assert manager.this_session == []
        assert manager.latest_device_location is None
        assert manager.session_id != old_session
        assert not memory_store.exists(THIS_SESSION_KEY)


# ==============================================================================
# Send Decisions
# ==============================================================================


class TestSendDecision:
    """Tests for send decisions against recorded history."""

    def test_first_location(self, manager):
        decision = manager.location_send_decision(_loc(10.0, 10.0), LocationKind.DEVICE)
        assert decision == SendDecision.SEND_NEW

    def test_nearby_device_location_skipped(self, manager, clock):
        _add(manager, EventType.LOCATION_DETECTED, _loc(10.0, 10.0))
        clock.advance(hours=1)
        decision = manager.location_send_decision(_loc(10.0, 10.0001), LocationKind.DEVICE)
        assert decision == SendDecision.SKIP

    def test_stale_device_location_resent(self, manager, clock):
        _add(manager, EventType.LOCATION_DETECTED, _loc(10.0, 10.0))
        clock.advance(hours=13)
        decision = manager.location_send_decision(_loc(10.0, 10.0001), LocationKind.DEVICE)
        assert decision == SendDecision.RESEND_SAME_LOCATION_NEW_TIME

    def test_last_device_send_time(self, manager, clock):
        assert manager.last_device_send_time() is None
        _add(manager, EventType.LOCATION_DETECTED, _loc(10.0, 10.0))
        sent_at = clock()
        clock.advance(hours=1)
        assert manager.last_device_send_time() == sent_at


# ==============================================================================
# Concurrency
# ==============================================================================


def _build(manager, evt_type, data=None):
    return UserEvent.build(evt_type, data or {}, now=manager.now())


class TestConcurrency:
    """Tests for the single-writer workflow under concurrent callers."""

    def test_concurrent_events_are_serialized(self, manager, transport, memory_store):
        async def scenario():
            transport.hold_send = asyncio.Event()
            first = asyncio.create_task(
                manager.add_event(_build(manager, EventType.CHAT_SENT, {"text": "one"}))
            )
            second = asyncio.create_task(
                manager.add_event(_build(manager, EventType.CHAT_SENT, {"text": "two"}))
            )
            for _ in range(3):
                await asyncio.sleep(0)
            while_sending = (
                len(manager.this_session),
                len(transport.calls),
                memory_store.exists(THIS_SESSION_KEY),
            )
            transport.hold_send.set()
            await asyncio.gather(first, second)
            return while_sending

        assert asyncio.run(scenario()) == (1, 1, False)
        assert [event.data["text"] for event in manager.this_session] == ["one", "two"]
        assert [call[2]["text"] for call in transport.calls] == ["one", "two"]
        blob = json.loads(memory_store.load(THIS_SESSION_KEY))
        assert [event["evt_data"]["text"] for event in blob] == ["one", "two"]

    def test_cancelled_chat_stream_leaves_state_intact(self, manager, transport, memory_store):
        transport.chunks = [ServerSentEvent(data=text) for text in ("a", "b", "c")]
        received = []

        async def scenario():
            transport.hold_stream = asyncio.Event()
            stream = await manager.add_event(
                _build(manager, EventType.CHAT_SENT, {"text": "hi"})
            )

            async def consume():
                async for chunk in stream:
                    received.append(chunk.data)

            consumer = asyncio.create_task(consume())
            for _ in range(3):
                await asyncio.sleep(0)
            consumer.cancel()
            with pytest.raises(asyncio.CancelledError):
                await consumer
            await manager.add_event(_build(manager, EventType.CHAT_RECEIVED, {"text": "yo"}))

        asyncio.run(scenario())

        assert received == ["a"]
        assert transport.drained == 0
        assert [event.evt_type for event in manager.this_session] == ["chat_sent", "chat_received"]
        blob = json.loads(memory_store.load(THIS_SESSION_KEY))
        assert [event["evt_type"] for event in blob] == ["chat_sent", "chat_received"]

    def test_slow_reaction_drain_does_not_block_next_event(
        self, manager, transport, memory_store
    ):
        transport.chunks = [ServerSentEvent(data=str(i)) for i in range(4)]

        async def scenario():
            transport.hold_stream = asyncio.Event()
            await manager.add_event(_build(manager, EventType.CHAT_LIKED, {"message_id": "m1"}))
            await asyncio.sleep(0)
            persisted = json.loads(memory_store.load(THIS_SESSION_KEY))
            await asyncio.wait_for(
                manager.add_event(
                    _build(manager, EventType.CHAT_RECEIVED, {"text": "hello"}),
                    skip_backend_send=True,
                ),
                timeout=1,
            )
            while_draining = (
                len(persisted),
                transport.drained,
                manager.dispatcher.pending_drains,
            )
            transport.hold_stream.set()
            await manager.dispatcher.wait_for_drains()
            return while_draining

        assert asyncio.run(scenario()) == (1, 0, 1)
        assert transport.drained == 1
        assert [event.evt_type for event in manager.this_session] == [
            "chat_liked",
            "chat_received",
        ]
