# ==============================================================================
# Location Commands
# ==============================================================================
"""
Location commands for the tracklog CLI.

Evaluates the send gate for a coordinate against stored history without
recording or sending anything.
"""

import json
from typing import Annotated

import typer

from tracklog.cli.shared import C, I, format_location, load_manager
from tracklog.core.geo import extract_coordinate, haversine_m
from tracklog.core.models import LocationKind, SendDecision
from tracklog.services.location_reporter import coordinate_location

DECISION_STYLE = {
    SendDecision.SKIP: (C.BRIGHT_YELLOW, I.CIRCLE),
    SendDecision.RESEND_SAME_LOCATION_NEW_TIME: (C.CYAN, I.ARROW),
    SendDecision.SEND_NEW: (C.BRIGHT_GREEN, I.CHECK),
}


def location_check(
    lat: Annotated[float, typer.Argument(help="Latitude in decimal degrees")],
    lng: Annotated[float, typer.Argument(help="Longitude in decimal degrees")],
    kind: Annotated[
        LocationKind, typer.Option("--kind", "-k", help="Location kind to evaluate")
    ] = LocationKind.DEVICE,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show what the send gate would decide for a coordinate.

    Examples:
        tracklog location check 52.52 13.405
        tracklog location check 52.52 13.405 --kind search
        tracklog location check -- -33.86 151.21
    """
    manager = load_manager()
    candidate = coordinate_location(lat, lng)
    decision = manager.location_send_decision(candidate, kind)

    prior = manager.derived.for_kind(kind)
    prior_point = extract_coordinate(prior) if prior else None
    distance_m = (
        haversine_m(prior_point, extract_coordinate(candidate)) if prior_point else None
    )

    if json_output:
        print(
            json.dumps(
                {
                    "kind": kind.value,
                    "candidate": candidate["coordinate"],
                    "prior": prior,
                    "distance_m": round(distance_m, 2) if distance_m is not None else None,
                    "decision": decision.value,
                },
                indent=2,
            )
        )
        return

    color, icon = DECISION_STYLE[decision]
    print()
    print(f"  Kind:      {C.WHITE}{kind.value}{C.RESET}")
    print(f"  Candidate: {C.WHITE}{lat:.6f}, {lng:.6f}{C.RESET}")
    print(f"  Prior:     {C.WHITE}{format_location(prior)}{C.RESET}")
    if distance_m is not None:
        print(f"  Distance:  {C.WHITE}{distance_m:,.1f} m{C.RESET}")
    print()
    print(f"{color}{icon} {decision.value}{C.RESET}")
    print()
