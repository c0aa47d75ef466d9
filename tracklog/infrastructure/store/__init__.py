# ==============================================================================
# Key-Value Store Infrastructure
# ==============================================================================
"""
KeyValueStore implementations for the ports-and-adapters architecture.

Available implementations:
- ValkeyKeyValueStore: Valkey/Redis-based store with JSON serialization
- InMemoryKeyValueStore: dict-backed store for embedding and tests
"""

from tracklog.infrastructure.store.memory import InMemoryKeyValueStore
from tracklog.infrastructure.store.valkey import ValkeyKeyValueStore, get_valkey_store

__all__ = [
    "InMemoryKeyValueStore",
    "ValkeyKeyValueStore",
    "get_valkey_store",
]
