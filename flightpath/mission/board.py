"""Mini README: In-memory waypoint board backing the dashboard.

Structure:
    * MissionStatus - lifecycle of the simulated mission.
    * Notification - title/description pair shown as a toast.
    * WaypointBoard - ordered waypoint list plus mission state.

The board is the controlling layer between the interface and the route
builder. Operator checks live here: optimising needs three waypoints and
starting a mission needs two. The route builder is only ever asked to
reorder, and the resulting order replaces the board's list wholesale.
"""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Tuple

from ..logging_utils import get_logger
from ..route_planning import RoutePlanner, Waypoint, haversine_distance, path_length
from ..telemetry import PathReplay, TelemetrySimulator
from .errors import (
    FlightPathError,
    InsufficientWaypoints,
    InvalidMapClick,
    InvalidMissionFile,
    WaypointNotFound,
)
from .parameters import MissionParameters

LOGGER = get_logger(__name__)

MIN_WAYPOINTS_TO_OPTIMISE = 3
MIN_WAYPOINTS_TO_START = 2
COORDINATE_PRECISION = 6
MAX_NOTIFICATIONS = 50


class MissionStatus(str, Enum):
    """Lifecycle states of the simulated mission."""

    STANDBY = "standby"
    ACTIVE = "active"
    PAUSED = "paused"
    RETURNING = "returning"


@dataclass(slots=True)
class Notification:
    """Short message surfaced to the operator after an action."""

    title: str
    description: str
    variant: str = "default"

    def as_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description, "variant": self.variant}


def parse_coordinate(raw: object) -> float:
    """Parse form input, falling back to 0 for anything that is not a finite number."""

    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


class WaypointBoard:
    """Operator's working list of waypoints and mission state."""

    def __init__(
        self,
        *,
        planner: Optional[RoutePlanner] = None,
        parameters: Optional[MissionParameters] = None,
        telemetry: Optional[TelemetrySimulator] = None,
        default_altitude: float = 50.0,
        map_centre: Tuple[float, float] = (40.7128, -74.0060),
        map_span: float = 0.1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.planner = planner or RoutePlanner()
        self.parameters = parameters or MissionParameters()
        self.telemetry = telemetry or TelemetrySimulator()
        self.replay = PathReplay()
        self.default_altitude = default_altitude
        self.map_centre = map_centre
        self.map_span = map_span
        self.status = MissionStatus.STANDBY
        self.notifications: Deque[Notification] = deque(maxlen=MAX_NOTIFICATIONS)
        self._clock = clock
        self._waypoints: List[Waypoint] = []

    @property
    def waypoints(self) -> List[Waypoint]:
        return list(self._waypoints)

    def __len__(self) -> int:
        return len(self._waypoints)

    def _notify(self, title: str, description: str, variant: str = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications.append(notification)
        return notification

    def _next_id(self) -> str:
        base = f"wp-{int(self._clock() * 1000)}"
        taken = {waypoint.waypoint_id for waypoint in self._waypoints}
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _index_of(self, waypoint_id: str) -> int:
        for index, waypoint in enumerate(self._waypoints):
            if waypoint.waypoint_id == waypoint_id:
                return index
        raise WaypointNotFound(waypoint_id)

    def add_waypoint(
        self, latitude: float, longitude: float, altitude: Optional[float] = None
    ) -> Waypoint:
        """Append a new waypoint with a freshly generated id.

        Coordinates go through the same rule as form edits, so a non-finite
        value is stored as 0.
        """

        waypoint = Waypoint(
            waypoint_id=self._next_id(),
            latitude=round(parse_coordinate(latitude), COORDINATE_PRECISION),
            longitude=round(parse_coordinate(longitude), COORDINATE_PRECISION),
            altitude=self.default_altitude if altitude is None else parse_coordinate(altitude),
        )
        self._waypoints.append(waypoint)
        LOGGER.info("Added waypoint %s at %s, %s", waypoint.waypoint_id, waypoint.latitude, waypoint.longitude)
        self._notify(
            "Waypoint Added",
            f"Waypoint {len(self._waypoints)} added at "
            f"{waypoint.latitude:.6f}, {waypoint.longitude:.6f}",
        )
        return waypoint

    def project_click(self, x: float, y: float, width: float, height: float) -> Tuple[float, float]:
        """Convert a click on the simulated map surface into (lat, lng)."""

        if width <= 0 or height <= 0:
            raise InvalidMapClick(f"Map surface must have a positive size, got {width}x{height}")
        centre_lat, centre_lng = self.map_centre
        latitude = centre_lat + ((y - height / 2) / height) * self.map_span
        longitude = centre_lng + ((x - width / 2) / width) * self.map_span
        return latitude, longitude

    def add_from_map_click(self, x: float, y: float, width: float, height: float) -> Waypoint:
        latitude, longitude = self.project_click(x, y, width, height)
        return self.add_waypoint(latitude, longitude)

    def update_waypoint(self, waypoint_id: str, field_name: str, raw_value: object) -> Waypoint:
        """Edit one coordinate of a waypoint from raw form input."""

        index = self._index_of(waypoint_id)
        updated = self._waypoints[index].with_field(field_name, parse_coordinate(raw_value))
        self._waypoints[index] = updated
        LOGGER.debug("Updated waypoint %s field %s -> %s", waypoint_id, field_name, updated)
        return updated

    def delete_waypoint(self, waypoint_id: str) -> Waypoint:
        removed = self._waypoints.pop(self._index_of(waypoint_id))
        LOGGER.info("Deleted waypoint %s", waypoint_id)
        return removed

    def clear(self) -> None:
        LOGGER.info("Clearing %s waypoints", len(self._waypoints))
        self._waypoints.clear()
        self.replay.reset()

    def replace_waypoints(self, waypoints: List[Waypoint]) -> None:
        """Swap in an imported list, keeping the supplied ids and order."""

        for waypoint in waypoints:
            if not waypoint.is_finite:
                raise InvalidMissionFile(f"Waypoint {waypoint.waypoint_id} has non-finite coordinates")
        self._waypoints = list(waypoints)
        self.replay.reset()
        LOGGER.info("Loaded %s waypoints", len(self._waypoints))

    def optimise(self) -> List[Waypoint]:
        """Reorder the board into a nearest-neighbour route."""

        if len(self._waypoints) < MIN_WAYPOINTS_TO_OPTIMISE:
            self._notify(
                "Cannot optimize path",
                f"You need at least {MIN_WAYPOINTS_TO_OPTIMISE} waypoints to optimize a path",
                variant="destructive",
            )
            raise InsufficientWaypoints(
                "optimize a path", MIN_WAYPOINTS_TO_OPTIMISE, len(self._waypoints)
            )
        flight_path = self.planner.optimise(self._waypoints)
        self._waypoints = list(flight_path.waypoints)
        self.replay.reset()
        self._notify("Path optimized", "Flight path has been optimized for efficiency")
        return self.waypoints

    def start_mission(self) -> None:
        if len(self._waypoints) < MIN_WAYPOINTS_TO_START:
            self._notify(
                "Cannot start mission",
                f"You need at least {MIN_WAYPOINTS_TO_START} waypoints to start a mission",
                variant="destructive",
            )
            raise InsufficientWaypoints(
                "start a mission", MIN_WAYPOINTS_TO_START, len(self._waypoints)
            )
        self.status = MissionStatus.ACTIVE
        self.replay.reset()
        self.telemetry.start()
        self._notify("Mission started", "Drone is executing the flight plan")

    def pause_mission(self) -> None:
        if self.status not in (MissionStatus.ACTIVE, MissionStatus.RETURNING):
            raise FlightPathError("There is no mission in flight to pause")
        self.status = MissionStatus.PAUSED
        self.telemetry.stop("Mission paused")
        self._notify("Mission paused", "Drone is holding position")

    def return_to_home(self) -> None:
        if self.status is MissionStatus.STANDBY:
            raise FlightPathError("There is no mission in flight to recall")
        self.status = MissionStatus.RETURNING
        self.telemetry.active = True
        self.telemetry.set_flight_mode("Return to Home")
        self._notify("Returning home", "Drone is flying back to the launch point")

    def flight_statistics(self) -> Dict[str, Optional[float]]:
        """Distance and time estimates for the current order."""

        count = len(self._waypoints)
        if count == 0:
            return {"waypoints": 0, "total_distance_km": None, "estimated_minutes": None}
        distance_m = path_length(self._waypoints)
        if self.parameters.return_to_home and count > 1:
            distance_m += haversine_distance(self._waypoints[-1], self._waypoints[0])
        return {
            "waypoints": count,
            "total_distance_km": distance_m / 1000.0,
            "estimated_minutes": distance_m / self.parameters.speed / 60.0,
        }

    def frame(self, bounds: Tuple[float, float, float, float]) -> None:
        """Centre the simulated map on a bounding box."""

        lat_min, lon_min, lat_max, lon_max = bounds
        self.map_centre = ((lat_min + lat_max) / 2, (lon_min + lon_max) / 2)
        span = max(lat_max - lat_min, lon_max - lon_min)
        if span > 0:
            self.map_span = span
        LOGGER.info("Framed map at %s with span %s", self.map_centre, self.map_span)

    def command_preview(self) -> List[dict]:
        """Commands that would be uploaded for the current order and parameters."""

        flight_path = self.planner.as_flown(self._waypoints)
        return flight_path.as_commands(
            self.parameters.speed,
            self.parameters.max_altitude,
            return_home=self.parameters.return_to_home,
        )

    def replay_position(self) -> Optional[Tuple[float, float]]:
        return self.replay.position(self._waypoints)
