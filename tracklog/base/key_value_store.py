# ==============================================================================
# Key-Value Store Abstract Base Class
# ==============================================================================
"""
Abstract interface for the durable key-value store that holds event state.

This is NOT a transactional store: every key is written independently and
nothing is assumed across keys.

Implementations: Valkey, in-memory, etc.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """
    Durable key-value storage.

    Values are strings or simple JSON-serializable records (dicts, lists,
    numbers). Implementations handle serialization internally.
    """

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        """
        Store a value, replacing any previous value.

        Args:
            key: Storage key
            value: String or JSON-serializable value
        """
        ...

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """
        Get a stored value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None if not found or unreadable
        """
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        """
        Check whether a key holds a value.

        Args:
            key: Storage key

        Returns:
            True if the key exists
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a key.

        Args:
            key: Storage key to delete

        Returns:
            True if key was deleted, False if not found
        """
        ...
