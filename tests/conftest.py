# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- fakeredis-backed ValkeyKeyValueStore and a dict-backed store
- A controllable clock
- A recording Transport fake that streams canned server-sent events
- An EventManager wired to all of the above
"""

from datetime import datetime, timedelta, timezone

import fakeredis
import pytest

from tracklog.base import ServerSentEvent, Transport
from tracklog.infrastructure.event_store import EventStore
from tracklog.infrastructure.store import InMemoryKeyValueStore, ValkeyKeyValueStore
from tracklog.services.dispatcher import EventDispatcher
from tracklog.services.event_manager import EventManager

START_TIME = datetime(2026, 1, 28, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


class FakeTransport(Transport):
    """Transport that records every send and streams canned chunks.

    Attributes:
        calls: (endpoint, event_type, payload) per send
        drained: Number of streams iterated to the end
        hold_send: When set to an asyncio.Event, send() waits for it
        hold_stream: When set to an asyncio.Event, streams wait for it after
                     each chunk
        stream_error: Raised by a stream after its last chunk
    """

    def __init__(self, chunks=None, error: Exception | None = None):
        self.calls = []
        self.chunks = chunks if chunks is not None else [ServerSentEvent(data='{"ok": true}')]
        self.error = error
        self.drained = 0
        self.hold_send = None
        self.hold_stream = None
        self.stream_error = None

    async def send(self, endpoint, event_type, payload):
        self.calls.append((endpoint, event_type, payload))
        if self.hold_send is not None:
            await self.hold_send.wait()
        if self.error is not None:
            raise self.error
        return self._stream()

    async def _stream(self):
        for chunk in self.chunks:
            yield chunk
            if self.hold_stream is not None:
                await self.hold_stream.wait()
        if self.stream_error is not None:
            raise self.stream_error
        self.drained += 1


async def collect(stream):
    """Drain an async iterator into a list."""
    return [chunk async for chunk in stream]


@pytest.fixture()
def fake_redis():
    """A clean fakeredis instance for each test.

    Uses decode_responses=True to match the real ValkeyKeyValueStore behavior.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def fake_store(fake_redis):
    """A ValkeyKeyValueStore with its internal client replaced by fakeredis."""
    store = ValkeyKeyValueStore.__new__(ValkeyKeyValueStore)
    store._client = fake_redis
    store._url = "redis://fake:6379"
    store._prefix = "tracklog:"
    return store


@pytest.fixture()
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def manager(memory_store, transport, clock):
    """An EventManager with default thresholds on an in-memory store."""
    return EventManager(
        event_store=EventStore(memory_store),
        dispatcher=EventDispatcher(transport),
        clock=clock,
    )
