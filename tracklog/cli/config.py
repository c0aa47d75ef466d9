# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the tracklog CLI.
"""

import json
from typing import Annotated

import typer

from tracklog.cli.shared import C
from tracklog.utils.config import get_settings


# ==============================================================================
# Commands
# ==============================================================================


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()

    if json_output:
        config = {
            "valkey": {
                "host": settings.valkey.host,
                "port": settings.valkey.port,
                "db": settings.valkey.db,
                "ssl_enabled": settings.valkey.ssl,
                "password": settings.valkey.password,
                "key_prefix": settings.valkey.key_prefix,
            },
            "session": {
                "inactivity_timeout_minutes": settings.session.inactivity_timeout_minutes,
                "max_duration_minutes": settings.session.max_duration_minutes,
            },
            "location": {
                "distance_threshold_m": settings.location.distance_threshold_m,
                "resend_interval_hours": settings.location.resend_interval_hours,
                "tracking_accuracy_m": settings.location.tracking_accuracy_m,
                "tracking_distance_filter_m": settings.location.tracking_distance_filter_m,
            },
            "gateway": {
                "chat_endpoint": settings.gateway.chat_endpoint,
                "orchestration_endpoint": settings.gateway.orchestration_endpoint,
            },
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    print()
    print(f"{C.BOLD}Configuration{C.RESET}")
    print()

    print(f"{C.CYAN}Valkey{C.RESET}")
    print(f"  Host:       {C.WHITE}{settings.valkey.host}{C.RESET}")
    print(f"  Port:       {C.WHITE}{settings.valkey.port}{C.RESET}")
    print(f"  Database:   {C.WHITE}{settings.valkey.db}{C.RESET}")
    valkey_ssl = "enabled" if settings.valkey.ssl else "disabled"
    print(f"  SSL:        {C.WHITE}{valkey_ssl}{C.RESET}")
    print(f"  Prefix:     {C.WHITE}{settings.valkey.key_prefix}{C.RESET}")
    print()

    print(f"{C.CYAN}Session{C.RESET}")
    print(
        f"  Idle:       {C.WHITE}{settings.session.inactivity_timeout_minutes} minutes{C.RESET}"
    )
    print(f"  Max age:    {C.WHITE}{settings.session.max_duration_minutes} minutes{C.RESET}")
    print()

    print(f"{C.CYAN}Location{C.RESET}")
    print(f"  Threshold:  {C.WHITE}{settings.location.distance_threshold_m:g} m{C.RESET}")
    print(f"  Resend:     {C.WHITE}{settings.location.resend_interval_hours:g} hours{C.RESET}")
    print(f"  Accuracy:   {C.WHITE}{settings.location.tracking_accuracy_m:g} m{C.RESET}")
    print(f"  Filter:     {C.WHITE}{settings.location.tracking_distance_filter_m:g} m{C.RESET}")
    print()

    print(f"{C.CYAN}Gateway{C.RESET}")
    print(f"  Chat:       {C.WHITE}{settings.gateway.chat_endpoint}{C.RESET}")
    print(f"  Location:   {C.WHITE}{settings.gateway.orchestration_endpoint}{C.RESET}")
    print()
