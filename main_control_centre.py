"""Mini README: Entry point CLI for the Flight Path dashboard.

This script exposes a Typer CLI that starts the FastAPI dashboard with
configurable host, port, and production flags, and offers an offline
``optimise`` command that reorders an exported flight plan with the
nearest-neighbour route builder.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from flightpath.configuration import get_settings
from flightpath.export import MissionExporter
from flightpath.logging_utils import configure_root_logger, level_for_environment
from flightpath.mission import InvalidMissionFile
from flightpath.route_planning import build_route, path_length

cli = typer.Typer(help="Launch the Flight Path dashboard and work with flight plans.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI dashboard using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(level_for_environment(settings.environment))

    # Browsers cannot open 0.0.0.0 directly, so point operators at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Flight Path on "
        f"{effective_host}:{effective_port}.\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
        + (
            " (use your machine's IP address for remote access)."
            if effective_host in {"0.0.0.0", "::"}
            else ""
        )
    )
    uvicorn.run(
        "flightpath.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def optimise(
    plan_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Exported flight plan."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Where to write the reordered plan (defaults to in place)."
    ),
) -> None:
    """Reorder an exported plan into a nearest-neighbour route."""

    configure_root_logger()
    exporter = MissionExporter()
    try:
        document = exporter.load(plan_file)
    except InvalidMissionFile as error:
        typer.secho(f"Cannot read {plan_file}: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error

    if len(document.waypoints) < 3:
        typer.secho(
            "You need at least 3 waypoints to optimize a path", fg=typer.colors.YELLOW, err=True
        )
        raise typer.Exit(code=1)

    before = path_length(document.waypoints)
    ordered = build_route(document.waypoints)
    after = path_length(ordered)

    destination = output or plan_file
    destination.write_text(
        exporter.dumps(ordered, document.parameters, document.created_datetime),
        encoding="utf-8",
    )
    typer.echo(
        f"Reordered {len(ordered)} waypoints: {before / 1000:.2f} km -> {after / 1000:.2f} km"
    )
    typer.echo(f"Wrote {destination}")


if __name__ == "__main__":
    cli()
