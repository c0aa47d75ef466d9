# ==============================================================================
# Data Commands
# ==============================================================================
"""
Data management commands for the tracklog CLI.
"""

import asyncio
from typing import Annotated

import typer

from tracklog.cli.shared import C, I, get_store, load_manager
from tracklog.services.tracking_service import TRACKING_MODE_KEY


# ==============================================================================
# Commands
# ==============================================================================


def data_reset(
    confirm: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt")] = False,
) -> None:
    """Delete all stored events, sessions, location caches and tracking mode.

    A new empty session is started afterwards.

    Examples:
        tracklog data reset       # With confirmation prompt
        tracklog data reset -y    # Skip confirmation
    """
    if not confirm:
        typer.confirm(
            "This will DELETE all recorded events and sessions. Are you sure?",
            abort=True,
        )
        print()

    store = get_store()
    try:
        manager = load_manager(store)
        asyncio.run(manager.clear())
        store.delete(TRACKING_MODE_KEY)
    except Exception as e:
        print(f"{C.BRIGHT_RED}{I.CROSS} Failed to reset data: {e}{C.RESET}")
        raise typer.Exit(1)

    print(f"{C.BRIGHT_GREEN}{I.CHECK} All data reset successfully{C.RESET}")
