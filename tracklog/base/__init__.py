# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes for the collaborators the core depends on.

- KeyValueStore: durable storage for sessions, metadata and location caches
- Transport: outbound gateway returning server-sent response streams

The device geolocation provider has no contract here; location maps reach
the core as plain dicts.
"""

from tracklog.base.key_value_store import KeyValueStore
from tracklog.base.transport import ServerSentEvent, Transport

__all__ = [
    "KeyValueStore",
    "ServerSentEvent",
    "Transport",
]
