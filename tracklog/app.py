# ==============================================================================
# Tracklog CLI
# ==============================================================================
"""
Command-line interface for inspecting and managing tracklog state.

Usage:
    tracklog --help
    tracklog status
    tracklog events list --limit 10
    tracklog session archive
    tracklog location check 52.52 13.405 --kind device
    tracklog config show
    tracklog data reset -y
"""

import logging

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
import os

import typer

from tracklog.utils.config import get_settings

if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="tracklog",
    help="Event, session and location tracking CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def configure_logging() -> None:
    """Event, session and location tracking CLI"""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


events_app = typer.Typer(
    help="Event history operations",
    no_args_is_help=True,
)
app.add_typer(events_app, name="events")

# Register events commands from cli.events module
from tracklog.cli.events import events_list

events_app.command("list")(events_list)

session_app = typer.Typer(
    help="Session management operations",
    no_args_is_help=True,
)
app.add_typer(session_app, name="session")

from tracklog.cli.session import session_archive

session_app.command("archive")(session_archive)

location_app = typer.Typer(
    help="Location send gate operations",
    no_args_is_help=True,
)
app.add_typer(location_app, name="location")

from tracklog.cli.location import location_check

location_app.command("check")(location_check)

data_app = typer.Typer(
    help="Data management operations",
    no_args_is_help=True,
)
app.add_typer(data_app, name="data")

from tracklog.cli.data import data_reset

data_app.command("reset")(data_reset)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from tracklog.cli.config import config_show

config_app.command("show")(config_show)


# Status command is imported from tracklog.cli.status
from tracklog.cli.status import show_status

app.command("status")(show_status)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
