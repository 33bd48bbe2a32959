"""Mini README: Domain errors raised by the mission control layer.

The route builder itself never raises; these exceptions cover the operator
facing checks (too few waypoints, unknown ids, unreadable plan files) and are
translated into HTTP responses by the web interface.
"""

from __future__ import annotations


class FlightPathError(Exception):
    """Base class for mission control errors."""


class InsufficientWaypoints(FlightPathError):
    """Raised when an action needs more waypoints than are placed."""

    def __init__(self, action: str, required: int, actual: int) -> None:
        self.action = action
        self.required = required
        self.actual = actual
        super().__init__(f"You need at least {required} waypoints to {action}")


class WaypointNotFound(FlightPathError, KeyError):
    """Raised when a waypoint id is not on the board."""

    def __init__(self, waypoint_id: str) -> None:
        self.waypoint_id = waypoint_id
        super().__init__(f"Waypoint {waypoint_id} is not registered")

    def __str__(self) -> str:
        return str(self.args[0])


class InvalidMapClick(FlightPathError, ValueError):
    """Raised when a click cannot be projected onto the map surface."""


class InvalidMissionFile(FlightPathError, ValueError):
    """Raised when an imported flight plan cannot be parsed."""
