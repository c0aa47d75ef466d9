# ==============================================================================
# In-Memory Key-Value Store
# ==============================================================================
"""
Dict-backed KeyValueStore for embedding and tests.

Values are round-tripped through JSON on save so that callers see the same
shapes they would get back from Valkey (tuples become lists, etc.).
"""

import json
from typing import Any

from tracklog.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """KeyValueStore that keeps JSON-encoded values in a dict."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def exists(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        """List stored keys."""
        return list(self._data)
