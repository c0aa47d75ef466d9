# ==============================================================================
# Timestamp Helpers
# ==============================================================================
"""
ISO8601 formatting and parsing for event timestamps.

Event timestamps are UTC strings like ``2026-01-28T09:15:00Z``. Parsing
accepts values with or without fractional seconds and with either a ``Z``
suffix or a numeric offset; naive values are read as UTC.
"""

from datetime import datetime, timezone

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_PARSE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_utc(value: datetime) -> str:
    """Format a datetime as a second-precision UTC ISO8601 string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(UTC_FORMAT)


def parse_iso8601(value: str | None) -> datetime | None:
    """
    Parse an ISO8601 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp string, e.g. "2026-01-28T09:15:00Z" or
               "2026-01-28T09:15:00.123456+00:00"

    Returns:
        Aware datetime in UTC, or None if the value cannot be parsed
    """
    if not isinstance(value, str) or not value:
        return None
    for fmt in _PARSE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None
