# ==============================================================================
# Event Dispatcher
# ==============================================================================
"""
Route events to their backend endpoint.

Routing by event type:
- chat_sent                              -> chat endpoint, stream returned
- chat_liked, chat_disliked, chat_bookmarked -> chat endpoint, stream drained in the background
- location_detected, location_searched   -> orchestration endpoint, stream returned
- chat_received                          -> not sent (recorded locally only)
- anything else                          -> dropped with a warning

The transport is injected; the dispatcher does not own it. Background drains
are tracked until they finish and their errors are logged.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from tracklog.base import ServerSentEvent, Transport
from tracklog.core.models import (
    CHAT_REACTION_EVENT_TYPES,
    LOCATION_EVENT_TYPES,
    EventType,
    UserEvent,
)

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Sends events through a Transport to the endpoint for their type."""

    def __init__(
        self,
        transport: Transport | None,
        chat_endpoint: str = "/v1/chat",
        orchestration_endpoint: str = "/v1/orchestor",
    ):
        """
        Initialize the dispatcher.

        Args:
            transport: Outbound transport; None disables sending
            chat_endpoint: Endpoint for chat-family events
            orchestration_endpoint: Endpoint for location-family events
        """
        self.transport = transport
        self.chat_endpoint = chat_endpoint
        self.orchestration_endpoint = orchestration_endpoint
        self._drains: set[asyncio.Task] = set()

    def route(self, evt_type: str) -> str | None:
        """
        Get the endpoint for an event type.

        Returns:
            Endpoint path, or None if the type is not sent to the backend
        """
        if evt_type == EventType.CHAT_SENT.value or evt_type in CHAT_REACTION_EVENT_TYPES:
            return self.chat_endpoint
        if evt_type in LOCATION_EVENT_TYPES:
            return self.orchestration_endpoint
        return None

    async def dispatch(self, event: UserEvent) -> AsyncIterator[ServerSentEvent] | None:
        """
        Send an event to its backend endpoint.

        Only the send itself is awaited. Reaction responses are consumed by a
        background task; chat_sent and location events hand their response
        stream back to the caller.

        Args:
            event: Event to send

        Returns:
            Response stream for chat_sent and location events, else None

        Raises:
            Exception: Transport errors propagate to the caller
        """
        if event.evt_type == EventType.CHAT_RECEIVED.value:
            return None

        endpoint = self.route(event.evt_type)
        if endpoint is None:
            logger.warning("Unknown event type for backend send: %s", event.evt_type)
            return None

        if self.transport is None:
            logger.warning("Cannot send %s event: no transport configured", event.evt_type)
            return None

        stream = await self.transport.send(endpoint, event.evt_type, event.data)
        logger.debug("Sent %s event to %s", event.evt_type, endpoint)

        if event.evt_type in CHAT_REACTION_EVENT_TYPES:
            self.drain_in_background(stream, event.evt_type)
            return None

        return stream

    # ==========================================================================
    # Background Drains
    # ==========================================================================

    @property
    def pending_drains(self) -> int:
        return len(self._drains)

    def drain_in_background(
        self, stream: AsyncIterator[ServerSentEvent], evt_type: str
    ) -> asyncio.Task:
        """
        Consume a response stream in a task of its own.

        The task is held until it completes. It first runs at the caller's
        next await point, so anything the caller does before awaiting again
        happens before the drain starts.

        Args:
            stream: Response stream to consume
            evt_type: Event type, used in the task name

        Returns:
            The drain task
        """
        task = asyncio.create_task(self._drain(stream), name=f"drain-{evt_type}")
        self._drains.add(task)
        task.add_done_callback(self._drain_done)
        return task

    async def _drain(self, stream: AsyncIterator[ServerSentEvent]) -> None:
        async for _ in stream:
            pass

    def _drain_done(self, task: asyncio.Task) -> None:
        self._drains.discard(task)
        if task.cancelled():
            logger.debug("Drain %s cancelled", task.get_name())
            return
        error = task.exception()
        if error is not None:
            logger.warning("Drain %s failed: %s", task.get_name(), error)

    async def wait_for_drains(self) -> None:
        """Wait until every background drain has finished."""
        while self._drains:
            await asyncio.gather(*list(self._drains), return_exceptions=True)
