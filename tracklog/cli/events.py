# ==============================================================================
# Events Commands
# ==============================================================================
"""
Event inspection commands for the tracklog CLI.

Lists the most recent events across the current and archived sessions.
"""

import json
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from tracklog.cli.shared import C, I, load_manager


def events_list(
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, help="Number of events to show")
    ] = 5,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List the most recent events, newest first.

    Examples:
        tracklog events list
        tracklog events list --limit 20 --json
    """
    manager = load_manager()
    recent = manager.event_store.recent_events(limit)

    if json_output:
        print(json.dumps([event.to_payload() for event in recent], indent=2))
        return

    if not recent:
        print(f"\n  {C.BRIGHT_YELLOW}{I.WARN} No events recorded{C.RESET}\n")
        return

    total = len(manager.event_store.consolidate())
    console = Console()
    table = Table(
        title=f"Recent events ({len(recent)} of {total})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right")
    table.add_column("Time (UTC)")
    table.add_column("Type")
    table.add_column("Session")
    table.add_column("Data")

    for position, event in enumerate(recent, start=1):
        data = json.dumps(event.data, separators=(",", ":"))
        if len(data) > 40:
            data = data[:37] + "..."
        table.add_row(
            str(position),
            event.utc_timestamp,
            event.evt_type,
            (event.session_id or "-")[-4:],
            data,
        )

    console.print(table)
