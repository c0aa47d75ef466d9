# ==============================================================================
# Session Commands
# ==============================================================================
"""
Session management commands for the tracklog CLI.
"""

import asyncio

from tracklog.cli.shared import C, I, load_manager


def session_archive() -> None:
    """Archive the current session now and start a new one.

    Does nothing if the current session has no events.

    Examples:
        tracklog session archive
    """
    manager = load_manager()
    archived = asyncio.run(manager.archive_session())

    if archived is None:
        print(f"{C.BRIGHT_YELLOW}{I.WARN} Current session is empty, nothing to archive{C.RESET}")
        return

    print(
        f"{C.BRIGHT_GREEN}{I.CHECK} Archived session {C.WHITE}{archived.session_id}{C.RESET}"
        f"{C.BRIGHT_GREEN} ({archived.event_count} events){C.RESET}"
    )
    print(f"  New session: {C.WHITE}{manager.session_id}{C.RESET}")
