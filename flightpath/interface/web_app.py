"""Mini README: FastAPI-powered flight planning dashboard.

Structure:
    * create_application - application factory wiring routes and templates.
    * Board state - a single in-memory ``WaypointBoard`` per application.

Operators place waypoints on the simulated map, edit coordinates, reorder the
route with the nearest-neighbour optimiser, export or import plans and watch
simulated telemetry. Domain errors from the mission layer are mapped onto
400/404 responses carrying the same message the dashboard shows as a toast.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from ..configuration import FlightPathSettings, get_settings
from ..export import MissionExporter, export_filename
from ..logging_utils import get_logger
from ..mission import (
    FlightPathError,
    MissionParameters,
    WaypointBoard,
    WaypointNotFound,
)
from ..route_planning import RoutePlanner
from ..telemetry import TelemetrySimulator
from ..utils.geojson import bounds_from_geojson, route_to_geojson

LOGGER = get_logger(__name__)

MAX_TICK_SECONDS = 3600
MAX_REPLAY_FRAMES = 1000


def _board_payload(board: WaypointBoard) -> Dict[str, Any]:
    latest = board.notifications[-1].as_dict() if board.notifications else None
    return {
        "waypoints": [waypoint.as_dict() for waypoint in board.waypoints],
        "status": board.status.value,
        "notification": latest,
    }


def _error_status(error: FlightPathError) -> int:
    return 404 if isinstance(error, WaypointNotFound) else 400


def create_application(settings: Optional[FlightPathSettings] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    app = FastAPI(title="Flight Path Navigator", version="0.1.0")
    templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

    telemetry_rng = (
        random.Random(settings.telemetry_seed) if settings.telemetry_seed is not None else None
    )
    board = WaypointBoard(
        planner=RoutePlanner(),
        telemetry=TelemetrySimulator(telemetry_rng),
        default_altitude=settings.default_altitude,
        map_centre=(settings.map_centre_lat, settings.map_centre_lng),
        map_span=settings.map_span_degrees,
    )
    exporter = MissionExporter()
    app.state.board = board

    @app.exception_handler(FlightPathError)
    async def flight_path_error_handler(request: Request, error: FlightPathError) -> JSONResponse:
        LOGGER.warning("Rejected %s %s: %s", request.method, request.url.path, error)
        return JSONResponse({"detail": str(error)}, status_code=_error_status(error))

    @app.get("/", response_class=HTMLResponse)
    async def dashboard(request: Request) -> HTMLResponse:
        """Render the dashboard with the current board and telemetry."""

        LOGGER.debug("Rendering dashboard with %s waypoints", len(board))
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "waypoints": board.waypoints,
                "parameters": board.parameters,
                "statistics": board.flight_statistics(),
                "telemetry": board.telemetry.as_dict(),
                "status": board.status.value,
                "map_centre": board.map_centre,
                "map_span": board.map_span,
            },
        )

    @app.get("/waypoints")
    async def list_waypoints() -> JSONResponse:
        return JSONResponse(_board_payload(board))

    @app.post("/waypoints")
    async def add_waypoint(
        lat: float = Form(...),
        lng: float = Form(...),
        alt: Optional[float] = Form(None),
    ) -> JSONResponse:
        waypoint = board.add_waypoint(lat, lng, alt)
        return JSONResponse({"waypoint": waypoint.as_dict(), **_board_payload(board)}, status_code=201)

    @app.post("/waypoints/map-click")
    async def add_waypoint_from_click(
        x: float = Form(...),
        y: float = Form(...),
        width: float = Form(...),
        height: float = Form(...),
    ) -> JSONResponse:
        """Create a waypoint where the operator clicked on the map surface."""

        waypoint = board.add_from_map_click(x, y, width, height)
        return JSONResponse({"waypoint": waypoint.as_dict(), **_board_payload(board)}, status_code=201)

    @app.post("/waypoints/{waypoint_id}")
    async def update_waypoint(
        waypoint_id: str,
        field: str = Form(...),
        value: str = Form(""),
    ) -> JSONResponse:
        try:
            waypoint = board.update_waypoint(waypoint_id, field, value)
        except ValueError as error:
            if isinstance(error, FlightPathError):
                raise
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse({"waypoint": waypoint.as_dict(), **_board_payload(board)})

    @app.delete("/waypoints/{waypoint_id}")
    async def delete_waypoint(waypoint_id: str) -> JSONResponse:
        board.delete_waypoint(waypoint_id)
        return JSONResponse(_board_payload(board))

    @app.delete("/waypoints")
    async def clear_waypoints() -> JSONResponse:
        board.clear()
        return JSONResponse(_board_payload(board))

    @app.post("/optimize-path")
    async def optimize_path() -> JSONResponse:
        """Reorder the board with the nearest-neighbour route builder."""

        board.optimise()
        payload = _board_payload(board)
        payload["statistics"] = board.flight_statistics()
        return JSONResponse(payload)

    @app.get("/route.geojson")
    async def route_geojson() -> JSONResponse:
        return JSONResponse(route_to_geojson(board.waypoints), media_type="application/geo+json")

    @app.post("/map/frame")
    async def frame_map(area_geojson: str = Form(...)) -> JSONResponse:
        try:
            bounds = bounds_from_geojson(area_geojson)
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        board.frame(bounds)
        return JSONResponse({"map_centre": list(board.map_centre), "map_span": board.map_span})

    @app.get("/mission/parameters")
    async def get_parameters() -> JSONResponse:
        return JSONResponse(board.parameters.model_dump())

    @app.post("/mission/parameters")
    async def update_parameters(
        speed: Optional[float] = Form(None),
        max_altitude: Optional[float] = Form(None),
        return_to_home: Optional[bool] = Form(None),
        avoid_obstacles: Optional[bool] = Form(None),
    ) -> JSONResponse:
        """Apply any submitted parameter changes, keeping the rest."""

        changes = {
            name: value
            for name, value in {
                "speed": speed,
                "max_altitude": max_altitude,
                "return_to_home": return_to_home,
                "avoid_obstacles": avoid_obstacles,
            }.items()
            if value is not None
        }
        try:
            board.parameters = MissionParameters(**{**board.parameters.model_dump(), **changes})
        except ValidationError as error:
            raise HTTPException(status_code=400, detail=error.errors(include_url=False)) from error
        LOGGER.info("Mission parameters updated: %s", changes)
        return JSONResponse(board.parameters.model_dump())

    @app.post("/mission/start")
    async def start_mission() -> JSONResponse:
        board.start_mission()
        return JSONResponse(_board_payload(board))

    @app.post("/mission/pause")
    async def pause_mission() -> JSONResponse:
        board.pause_mission()
        return JSONResponse(_board_payload(board))

    @app.post("/mission/return-home")
    async def return_home() -> JSONResponse:
        board.return_to_home()
        return JSONResponse(_board_payload(board))

    @app.get("/mission/commands")
    async def mission_commands() -> JSONResponse:
        """Preview the commands an upload would send for the current order."""

        return JSONResponse({"commands": board.command_preview()})

    @app.get("/mission/statistics")
    async def mission_statistics() -> JSONResponse:
        return JSONResponse(board.flight_statistics())

    @app.get("/mission/export")
    async def export_mission() -> Response:
        """Download the current plan as a JSON attachment."""

        created_at = datetime.now(timezone.utc)
        body = exporter.dumps(board.waypoints, board.parameters, created_at)
        filename = export_filename(created_at)
        LOGGER.info("Exporting %s waypoints as %s", len(board), filename)
        return Response(
            content=body,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/mission/export")
    async def export_mission_to_disk() -> JSONResponse:
        """Write the current plan into the configured export directory."""

        path = exporter.export(
            board.waypoints, board.parameters, output_directory=settings.export_directory
        )
        return JSONResponse({"path": str(path)}, status_code=201)

    @app.post("/mission/import")
    async def import_mission(plan: UploadFile = File(...)) -> JSONResponse:
        data = await plan.read()
        document = exporter.load(data)
        board.replace_waypoints(document.waypoints)
        board.parameters = document.parameters
        LOGGER.info("Imported plan %s with %s waypoints", plan.filename, len(document.waypoints))
        return JSONResponse({**_board_payload(board), "parameters": board.parameters.model_dump()})

    @app.get("/telemetry")
    async def telemetry() -> JSONResponse:
        return JSONResponse(board.telemetry.as_dict())

    @app.post("/telemetry/tick")
    async def telemetry_tick(
        seconds: int = Form(1, ge=1, le=MAX_TICK_SECONDS),
    ) -> JSONResponse:
        """Advance the simulated feed, as the dashboard timer does once a second."""

        for _ in range(seconds):
            board.telemetry.tick()
        return JSONResponse(board.telemetry.as_dict())

    def _replay_payload() -> Dict[str, Any]:
        position = board.replay_position()
        return {
            "progress": board.replay.progress,
            "finished": board.replay.finished,
            "position": list(position) if position else None,
        }

    @app.get("/path-replay")
    async def path_replay() -> JSONResponse:
        """Report the drone's drawn position along the current order."""

        return JSONResponse(_replay_payload())

    @app.post("/path-replay")
    async def advance_path_replay(
        frames: int = Form(1, ge=1, le=MAX_REPLAY_FRAMES),
    ) -> JSONResponse:
        """Advance the replay animation by a number of frames."""

        board.replay.advance(frames)
        return JSONResponse(_replay_payload())

    @app.post("/path-replay/reset")
    async def reset_path_replay() -> JSONResponse:
        board.replay.reset()
        return JSONResponse(_replay_payload())

    return app
