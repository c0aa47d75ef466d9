# ==============================================================================
# Tracklog
# ==============================================================================
"""
Client-side event, session and location layer.

Records user events into sessions, derives the latest device and search
locations from event history, gates redundant location sends and dispatches
events to the backend.
"""

__version__ = "0.1.0"
