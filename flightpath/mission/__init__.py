"""Mini README: Mission control layer for the dashboard.

Exports the waypoint board (the operator's working list), mission parameters
and the domain errors raised when an action cannot be carried out.
"""

from .board import Notification, WaypointBoard
from .errors import (
    FlightPathError,
    InsufficientWaypoints,
    InvalidMapClick,
    InvalidMissionFile,
    WaypointNotFound,
)
from .parameters import MissionParameters

__all__ = [
    "FlightPathError",
    "InsufficientWaypoints",
    "InvalidMapClick",
    "InvalidMissionFile",
    "MissionParameters",
    "Notification",
    "WaypointBoard",
    "WaypointNotFound",
]
