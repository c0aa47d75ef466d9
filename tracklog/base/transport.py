# ==============================================================================
# Transport Abstract Base Class
# ==============================================================================
"""
Abstract interface for the outbound event transport.

The transport posts an event to a backend endpoint and hands back the
server-sent response as an async iterator of chunks. Consumption is
caller-driven; the stream may run until the server sends a terminal chunk.

Retry policy belongs to implementations, not to callers.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel


class ServerSentEvent(BaseModel):
    """
    A single server-sent event chunk.

    Attributes:
        event: Event name, if the server sent one
        data: Raw data field
        id: Event id, if the server sent one
    """

    event: str | None = None
    data: str = ""
    id: str | None = None

    model_config = {"frozen": True}

    def parse_json(self) -> Any:
        """
        Parse the data field as JSON.

        Raises:
            json.JSONDecodeError: If data is not valid JSON
        """
        return json.loads(self.data)


class Transport(ABC):
    """Outbound gateway for user events."""

    @abstractmethod
    async def send(
        self, endpoint: str, event_type: str, payload: dict[str, Any]
    ) -> AsyncIterator[ServerSentEvent]:
        """
        Send an event to a backend endpoint.

        Args:
            endpoint: Backend path (e.g. "/v1/chat")
            event_type: Event type string
            payload: Event data map

        Returns:
            Async iterator over the server's response chunks

        Raises:
            Exception: Implementation-specific transport errors, either when
                       opening the stream or while iterating it
        """
        ...
