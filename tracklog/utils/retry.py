# ==============================================================================
# Retry Configuration
# ==============================================================================
"""
Retry policy for key-value store calls.

Store reads and writes sit on the event path, so retries stay short:
3 attempts with 1s then 2s backoff. The redis-py client retries socket
errors on its own first; this layer covers failures that outlast it.
"""

import logging
from typing import Tuple, Type

from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# ==============================================================================
# Retry Constants
# ==============================================================================

STORE_RETRY_ATTEMPTS = 3
STORE_RETRY_WAIT_MIN = 1  # seconds
STORE_RETRY_WAIT_MAX = 4  # seconds

# Retries done inside the redis-py client before an error reaches tenacity
VALKEY_CLIENT_RETRIES = 3
VALKEY_BACKOFF_CAP = 8  # seconds

STORE_RETRY_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    RedisConnectionError,
    RedisTimeoutError,
)


# ==============================================================================
# Retry Decorator
# ==============================================================================


def _log_store_retry(logger: logging.Logger):
    def _log(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        operation = getattr(retry_state.fn, "__name__", "store call")
        logger.warning(
            "Store %s failed (attempt %d/%d): %s",
            operation,
            retry_state.attempt_number,
            STORE_RETRY_ATTEMPTS,
            exception,
        )

    return _log


def retry_store(logger: logging.Logger, exception_types=STORE_RETRY_EXCEPTIONS):
    """
    Create a retry decorator for store operations.

    The last error is re-raised once attempts run out.

    Args:
        logger: Logger for retry warnings
        exception_types: Exception types worth retrying

    Example:
        @retry_store(logger)
        def save(self, key, value):
            ...
    """
    return retry(
        stop=stop_after_attempt(STORE_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=STORE_RETRY_WAIT_MIN, max=STORE_RETRY_WAIT_MAX),
        retry=retry_if_exception_type(exception_types),
        before_sleep=_log_store_retry(logger),
        reraise=True,
    )
