# ==============================================================================
# Tracklog Utilities
# ==============================================================================
"""
Shared utilities for tracklog.

This module exports configuration for use throughout the package.
"""

from tracklog.utils.config import (
    GatewaySettings,
    LocationSettings,
    SessionSettings,
    Settings,
    ValkeySettings,
    get_settings,
)

__all__ = [
    "GatewaySettings",
    "LocationSettings",
    "SessionSettings",
    "Settings",
    "ValkeySettings",
    "get_settings",
]
