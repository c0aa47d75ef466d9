# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for tracklog.

Commands are organized into separate modules:
- shared.py: Colors, icons, store and manager factories
- status.py: Current session and location summary
- events.py: Recent event listing
- session.py: Manual session archival
- location.py: Send gate dry-run for a coordinate
- config.py: Configuration display
- data.py: Data reset
"""

from tracklog.cli.shared import (
    C,
    Colors,
    I,
    Icons,
    format_location,
    format_time,
    get_store,
    load_manager,
)

__all__ = [
    "C",
    "Colors",
    "I",
    "Icons",
    "format_location",
    "format_time",
    "get_store",
    "load_manager",
]
