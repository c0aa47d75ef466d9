# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations:
- store/ - KeyValueStore adapters (Valkey, in-memory)
- event_store.py - Event log persistence on top of a KeyValueStore
"""

from tracklog.infrastructure.event_store import EventStore
from tracklog.infrastructure.store import (
    InMemoryKeyValueStore,
    ValkeyKeyValueStore,
    get_valkey_store,
)

__all__ = [
    # Event store
    "EventStore",
    # Key-value stores
    "InMemoryKeyValueStore",
    "ValkeyKeyValueStore",
    "get_valkey_store",
]
