# ==============================================================================
# Status Command
# ==============================================================================
"""
Show the current session and derived locations stored in Valkey.
"""

import json
from typing import Annotated

import typer

from tracklog.cli.shared import C, format_location, format_time, get_store, load_manager
from tracklog.core.timestamps import format_utc
from tracklog.services.tracking_service import TrackingService


def show_status(
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show current session, archived sessions and latest locations.

    Examples:
        tracklog status
        tracklog status --json
    """
    kv_store = get_store()
    manager = load_manager(kv_store)
    store = manager.event_store
    total_events = len(store.consolidate())
    tracking_mode = TrackingService(kv_store).stored_mode()

    if json_output:
        print(
            json.dumps(
                {
                    "session_id": store.session_id,
                    "started_at": format_utc(store.started_at) if store.started_at else None,
                    "last_activity_at": (
                        format_utc(store.last_activity_at) if store.last_activity_at else None
                    ),
                    "current_session_events": len(store.events),
                    "past_sessions": len(store.past_sessions),
                    "total_events": total_events,
                    "latest_device_location": manager.latest_device_location,
                    "latest_search_location": manager.latest_search_location,
                    "tracking_mode": tracking_mode.value if tracking_mode else None,
                },
                indent=2,
            )
        )
        return

    print()
    print(f"{C.BOLD}Session{C.RESET}")
    print(f"  ID:            {C.WHITE}{store.session_id}{C.RESET}")
    print(f"  Started:       {C.WHITE}{format_time(store.started_at)}{C.RESET}")
    print(f"  Last activity: {C.WHITE}{format_time(store.last_activity_at)}{C.RESET}")
    print(f"  Events:        {C.WHITE}{len(store.events)}{C.RESET}")
    print()
    print(f"{C.BOLD}History{C.RESET}")
    print(f"  Past sessions: {C.WHITE}{len(store.past_sessions)}{C.RESET}")
    print(f"  Total events:  {C.WHITE}{total_events}{C.RESET}")
    print()
    print(f"{C.BOLD}Locations{C.RESET}")
    print(f"  Device:        {C.WHITE}{format_location(manager.latest_device_location)}{C.RESET}")
    print(f"  Search:        {C.WHITE}{format_location(manager.latest_search_location)}{C.RESET}")
    mode = tracking_mode.value if tracking_mode else "unknown"
    print(f"  Tracking:      {C.WHITE}{mode}{C.RESET}")
    print()
