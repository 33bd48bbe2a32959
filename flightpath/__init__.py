"""Mini README: Core package initializer for the Flight Path planner.

This module exposes convenience imports so interfaces and scripts can reach
the route builder without knowing the exact module structure. Importing the
package stays cheap: the web interface is only loaded when requested.
"""

from .logging_utils import get_logger
from .route_planning import Waypoint, build_route, haversine_distance

__all__ = ["Waypoint", "build_route", "get_logger", "haversine_distance"]
