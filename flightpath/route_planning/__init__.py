"""Mini README: Route planning subsystem for waypoint missions.

Exports the waypoint model, the haversine distance and the nearest-neighbour
route builder, plus the planner service used by the interfaces.
"""

from .geometry import EARTH_RADIUS_M, Waypoint, haversine_distance, interpolate, path_length
from .planner import (
    FlightPath,
    RoutePlanner,
    build_distance_matrix,
    build_route,
    nearest_neighbour_order,
)

__all__ = [
    "EARTH_RADIUS_M",
    "FlightPath",
    "RoutePlanner",
    "Waypoint",
    "build_distance_matrix",
    "build_route",
    "haversine_distance",
    "interpolate",
    "nearest_neighbour_order",
    "path_length",
]
