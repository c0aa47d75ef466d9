# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and status icons
- Store and EventManager factories (patched in tests)
- Formatting helpers for sessions and locations
"""

from datetime import datetime
from typing import Any

from tracklog.base import KeyValueStore
from tracklog.core.geo import extract_coordinate
from tracklog.services.event_manager import EventManager

# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"
    CIRCLE = "●"
    ARROW = "→"


# Module-level aliases for convenience
C, I = Colors, Icons


# ==============================================================================
# Factories
# ==============================================================================


def get_store() -> KeyValueStore:
    """Get the configured key-value store."""
    from tracklog.infrastructure.store import ValkeyKeyValueStore

    return ValkeyKeyValueStore()


def load_manager(store: KeyValueStore | None = None) -> EventManager:
    """Build an EventManager on the configured store and load persisted state.

    The CLI never sends events, so no transport is attached.
    """
    return EventManager.from_settings(store or get_store(), transport=None)


# ==============================================================================
# Formatting Helpers
# ==============================================================================


def format_time(value: datetime | None) -> str:
    """Format an optional datetime for display."""
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_location(location: dict[str, Any] | None) -> str:
    """Format a location map as "lat, lng" (plus name if present)."""
    if location is None:
        return "-"
    point = extract_coordinate(location)
    coords = f"{point.lat:.6f}, {point.lng:.6f}" if point else "unknown coordinate"
    name = location.get("name") or location.get("locality")
    if isinstance(name, str) and name:
        return f"{name} ({coords})"
    return coords
