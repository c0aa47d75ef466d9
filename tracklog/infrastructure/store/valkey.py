# ==============================================================================
# Valkey Key-Value Store Implementation
# ==============================================================================
"""
Valkey/Redis implementation of the KeyValueStore interface.

Every tracklog key is namespaced under a prefix (``tracklog:`` by default)
so the store can share a database with other applications. Values are
stored as JSON text.
"""

import json
import logging
from typing import Any

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

from tracklog.base import KeyValueStore
from tracklog.utils.config import get_settings
from tracklog.utils.retry import VALKEY_BACKOFF_CAP, VALKEY_CLIENT_RETRIES, retry_store

logger = logging.getLogger(__name__)


def connect(
    url: str,
    socket_timeout: int = 10,
    retries: int = VALKEY_CLIENT_RETRIES,
    health_check_interval: int = 30,
) -> redis.Redis:
    """
    Open a Valkey client that decodes responses to str.

    Args:
        url: redis:// or rediss:// connection URL
        socket_timeout: Connect and read timeout in seconds
        retries: Client-level retries on socket errors
        health_check_interval: Seconds between connection health checks

    Returns:
        Connected redis.Redis client (connections are opened lazily)
    """
    return redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        retry=Retry(ExponentialBackoff(cap=VALKEY_BACKOFF_CAP, base=1), retries=retries),
        retry_on_error=[RedisTimeoutError, RedisConnectionError],
        health_check_interval=health_check_interval,
    )


class ValkeyKeyValueStore(KeyValueStore):
    """
    KeyValueStore backed by Valkey.

    save() and load() are retried on connection errors and timeouts; a value
    that is not valid JSON reads back as None.
    """

    def __init__(
        self,
        url: str | None = None,
        key_prefix: str | None = None,
        socket_timeout: int = 10,
        retries: int | None = None,
    ):
        """
        Initialize the store.

        Args:
            url: Connection URL (default: from VALKEY_* settings)
            key_prefix: Namespace for all keys (default: from settings)
            socket_timeout: Socket timeout in seconds
            retries: Client-level retries (default: VALKEY_CLIENT_RETRIES)
        """
        settings = get_settings().valkey
        self._url = url or settings.url
        self._prefix = settings.key_prefix if key_prefix is None else key_prefix
        self._client = connect(
            self._url,
            socket_timeout=socket_timeout,
            retries=VALKEY_CLIENT_RETRIES if retries is None else retries,
        )

    @property
    def client(self) -> redis.Redis:
        """Get the underlying Redis client for advanced operations."""
        return self._client

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    @retry_store(logger)
    def save(self, key: str, value: Any) -> None:
        self._client.set(self._key(key), json.dumps(value))

    @retry_store(logger)
    def load(self, key: str) -> Any | None:
        raw = self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored value for %s is not valid JSON", key)
            return None

    def exists(self, key: str) -> bool:
        return self._client.exists(self._key(key)) > 0

    def delete(self, key: str) -> bool:
        return self._client.delete(self._key(key)) > 0

    def keys(self) -> list[str]:
        """List stored keys (without prefix)."""
        return [
            name[len(self._prefix):] for name in self._client.scan_iter(f"{self._prefix}*")
        ]

    def ping(self) -> bool:
        """
        Check if Valkey is reachable.

        Returns:
            True if ping succeeds, False otherwise
        """
        try:
            return bool(self._client.ping())
        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.debug("Valkey ping failed: %s", e)
            return False

    def close(self) -> None:
        """Close the connection pool."""
        self._client.close()


def get_valkey_store() -> ValkeyKeyValueStore:
    """
    Get a ValkeyKeyValueStore configured from settings.

    For long-lived applications, create a single instance and reuse it.
    """
    return ValkeyKeyValueStore()
