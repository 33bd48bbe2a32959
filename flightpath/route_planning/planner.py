"""Mini README: Waypoint ordering and flight path containers.

Structure:
    * build_distance_matrix - all-pairs haversine distances as a numpy array.
    * nearest_neighbour_order - greedy index walk over a distance matrix.
    * build_route - reorder waypoints into a nearest-neighbour tour.
    * FlightPath - container aggregating waypoints and metadata.
    * RoutePlanner - wraps the board order, optimised or not, into a FlightPath.

The tour always starts at the first waypoint supplied and repeatedly steps to
the closest unvisited one. It is a heuristic: the result depends on the input
order and is not guaranteed to be the shortest possible route. Cost is
quadratic in the number of waypoints, fine for the tens of points an operator
places by hand.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..logging_utils import get_logger
from .geometry import Waypoint, haversine_distance, path_length

LOGGER = get_logger(__name__)

MIN_WAYPOINTS_TO_REORDER = 3


def build_distance_matrix(waypoints: Sequence[Waypoint]) -> np.ndarray:
    """Return the full ``n x n`` distance matrix in metres."""

    count = len(waypoints)
    matrix = np.zeros((count, count), dtype=float)
    for i in range(count):
        for j in range(count):
            if i != j:
                matrix[i, j] = haversine_distance(waypoints[i], waypoints[j])
    return matrix


def nearest_neighbour_order(matrix: np.ndarray, start: int = 0) -> List[int]:
    """Visit every index greedily, always moving to the nearest unvisited one.

    Candidates are scanned in ascending index order with a strict comparison,
    so among equally distant candidates the lowest index wins.
    """

    count = matrix.shape[0]
    if count == 0:
        return []

    path = [start]
    visited = {start}
    while len(path) < count:
        current = path[-1]
        best_distance = math.inf
        best_index = -1
        for candidate in range(count):
            if candidate in visited:
                continue
            distance = matrix[current, candidate]
            if distance < best_distance:
                best_distance = distance
                best_index = candidate
        if best_index == -1:
            # NaN distances never compare smaller; fall back to scan order.
            best_index = next(index for index in range(count) if index not in visited)
        visited.add(best_index)
        path.append(best_index)
    return path


def build_route(waypoints: Sequence[Waypoint]) -> List[Waypoint]:
    """Reorder waypoints into a nearest-neighbour tour from the first one.

    Sequences shorter than three waypoints are returned unchanged.
    """

    if len(waypoints) < MIN_WAYPOINTS_TO_REORDER:
        return list(waypoints)

    matrix = build_distance_matrix(waypoints)
    order = nearest_neighbour_order(matrix, start=0)
    LOGGER.debug("Nearest-neighbour order for %s waypoints: %s", len(waypoints), order)
    return [waypoints[index] for index in order]


@dataclass(slots=True)
class FlightPath:
    """Ordered collection of waypoints forming a mission path."""

    waypoints: List[Waypoint] = field(default_factory=list)
    description: str = ""

    @property
    def total_distance_m(self) -> float:
        return path_length(self.waypoints)

    def as_commands(
        self,
        cruise_speed: float,
        max_altitude: Optional[float] = None,
        *,
        return_home: bool = False,
    ) -> List[dict]:
        """Upload preview: one ``navigate_to`` per leg, then ``return_home`` if requested.

        Altitudes above ``max_altitude`` are capped and flagged so the operator
        can see which waypoints the ceiling will flatten.
        """

        commands: List[dict] = []
        previous: Optional[Waypoint] = None
        for sequence, waypoint in enumerate(self.waypoints, start=1):
            altitude = waypoint.altitude
            capped = max_altitude is not None and altitude > max_altitude
            leg_m = haversine_distance(previous, waypoint) if previous else 0.0
            commands.append(
                {
                    "sequence": sequence,
                    "action": "navigate_to",
                    "waypoint_id": waypoint.waypoint_id,
                    "latitude": waypoint.latitude,
                    "longitude": waypoint.longitude,
                    "altitude": max_altitude if capped else altitude,
                    "altitude_capped": capped,
                    "cruise_speed": cruise_speed,
                    "leg_distance_m": leg_m,
                    "leg_seconds": leg_m / cruise_speed,
                }
            )
            previous = waypoint
        if return_home and previous is not None and len(self.waypoints) > 1:
            home = self.waypoints[0]
            leg_m = haversine_distance(previous, home)
            commands.append(
                {
                    "sequence": len(commands) + 1,
                    "action": "return_home",
                    "waypoint_id": home.waypoint_id,
                    "latitude": home.latitude,
                    "longitude": home.longitude,
                    "cruise_speed": cruise_speed,
                    "leg_distance_m": leg_m,
                    "leg_seconds": leg_m / cruise_speed,
                }
            )
        return commands


class RoutePlanner:
    """Wrap waypoint sequences into flight paths for the dashboard."""

    def optimise(self, waypoints: Sequence[Waypoint]) -> FlightPath:
        """Return the nearest-neighbour ordering of ``waypoints``."""

        before = path_length(waypoints)
        ordered = build_route(waypoints)
        after = path_length(ordered)
        LOGGER.info(
            "Optimised %s waypoints: %.1f m -> %.1f m", len(ordered), before, after
        )
        return FlightPath(waypoints=ordered, description="Nearest-neighbour route")

    def as_flown(self, waypoints: Iterable[Waypoint]) -> FlightPath:
        """Wrap the operator's order unchanged, as flown when nobody optimises."""

        return FlightPath(waypoints=list(waypoints), description="Operator order")
