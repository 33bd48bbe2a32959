"""Mini README: Tests for the nearest-neighbour route builder.

Covers the distance matrix, the greedy walk (including tie-breaking), and
the properties operators rely on: the first waypoint stays first, nothing
is added or dropped, and the same input always gives the same route.
"""

from __future__ import annotations

import math
import random

import numpy as np
import pytest

from flightpath.route_planning import (
    FlightPath,
    RoutePlanner,
    Waypoint,
    build_distance_matrix,
    build_route,
    haversine_distance,
    nearest_neighbour_order,
)


def _wp(waypoint_id: str, latitude: float, longitude: float, altitude: float = 50.0) -> Waypoint:
    return Waypoint(waypoint_id=waypoint_id, latitude=latitude, longitude=longitude, altitude=altitude)


def _random_waypoints(count: int, seed: int) -> list[Waypoint]:
    rng = random.Random(seed)
    return [
        _wp(f"wp-{index}", rng.uniform(40.66, 40.76), rng.uniform(-74.06, -73.96), rng.uniform(10, 120))
        for index in range(count)
    ]


def test_short_inputs_are_returned_unchanged() -> None:
    a = _wp("a", 0.0, 0.0)
    b = _wp("b", 0.0, 10.0)
    assert build_route([]) == []
    assert build_route([a]) == [a]
    assert build_route([b, a]) == [b, a]


def test_nearest_unvisited_point_is_visited_next() -> None:
    a = _wp("a", 0.0, 0.0)
    b = _wp("b", 0.0, 1.0)
    c = _wp("c", 10.0, 10.0)
    route = build_route([a, c, b])
    assert [waypoint.waypoint_id for waypoint in route] == ["a", "b", "c"]


def test_equal_distances_prefer_the_lower_index() -> None:
    start = _wp("start", 0.0, 0.0)
    west = _wp("west", 0.0, -1.0)
    east = _wp("east", 0.0, 1.0)
    assert haversine_distance(start, west) == haversine_distance(start, east)

    route = build_route([start, west, east])
    assert [waypoint.waypoint_id for waypoint in route] == ["start", "west", "east"]
    route = build_route([start, east, west])
    assert [waypoint.waypoint_id for waypoint in route] == ["start", "east", "west"]


def test_greedy_walk_on_handmade_matrix() -> None:
    matrix = np.array(
        [
            [0.0, 5.0, 2.0, 2.0],
            [5.0, 0.0, 1.0, 3.0],
            [2.0, 1.0, 0.0, 4.0],
            [2.0, 3.0, 4.0, 0.0],
        ]
    )
    assert nearest_neighbour_order(matrix) == [0, 2, 1, 3]
    assert nearest_neighbour_order(np.zeros((0, 0))) == []


def test_distance_matrix_is_symmetric_with_zero_diagonal() -> None:
    waypoints = _random_waypoints(6, seed=3)
    matrix = build_distance_matrix(waypoints)
    assert matrix.shape == (6, 6)
    assert np.all(np.diag(matrix) == 0.0)
    assert np.array_equal(matrix, matrix.T)
    assert matrix[1, 4] == pytest.approx(haversine_distance(waypoints[1], waypoints[4]))


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_route_is_a_permutation_starting_at_first_waypoint(seed: int) -> None:
    waypoints = _random_waypoints(12, seed=seed)
    route = build_route(waypoints)
    assert len(route) == len(waypoints)
    assert sorted(waypoint.waypoint_id for waypoint in route) == sorted(
        waypoint.waypoint_id for waypoint in waypoints
    )
    assert route[0] is waypoints[0]
    assert build_route(waypoints) == route


def test_waypoints_are_not_modified() -> None:
    waypoints = _random_waypoints(5, seed=11)
    snapshot = [waypoint.as_dict() for waypoint in waypoints]
    route = build_route(waypoints)
    assert [waypoint.as_dict() for waypoint in waypoints] == snapshot
    assert {id(waypoint) for waypoint in route} == {id(waypoint) for waypoint in waypoints}


def test_duplicate_ids_are_kept() -> None:
    waypoints = [_wp("dup", 0.0, 0.0), _wp("dup", 0.0, 2.0), _wp("other", 0.0, 1.0)]
    route = build_route(waypoints)
    assert [waypoint.waypoint_id for waypoint in route] == ["dup", "other", "dup"]


def test_non_finite_coordinates_still_yield_a_permutation() -> None:
    waypoints = [_wp("nan", math.nan, 0.0), _wp("b", 0.0, 1.0), _wp("c", 0.0, 2.0)]
    route = build_route(waypoints)
    assert [waypoint.waypoint_id for waypoint in route] == ["nan", "b", "c"]


def test_planner_wraps_route_in_flight_path() -> None:
    planner = RoutePlanner()
    a = _wp("a", 0.0, 0.0)
    b = _wp("b", 0.0, 1.0)
    c = _wp("c", 0.0, 3.0)
    path = planner.optimise([a, c, b])
    assert isinstance(path, FlightPath)
    assert path.waypoints == [a, b, c]
    assert path.total_distance_m == pytest.approx(haversine_distance(a, c))
    assert planner.as_flown([a, c, b]).waypoints == [a, c, b]
    assert planner.as_flown([]).waypoints == []


def test_commands_cap_altitude_and_return_home() -> None:
    a = _wp("a", 0.0, 0.0, altitude=50.0)
    b = _wp("b", 0.0, 1.0, altitude=300.0)
    path = FlightPath(waypoints=[a, b])
    leg = haversine_distance(a, b)

    commands = path.as_commands(cruise_speed=5.0, max_altitude=120.0, return_home=True)
    assert [command["action"] for command in commands] == ["navigate_to", "navigate_to", "return_home"]
    assert [command["sequence"] for command in commands] == [1, 2, 3]
    assert commands[0]["leg_distance_m"] == 0.0
    assert commands[1]["altitude"] == 120.0
    assert commands[1]["altitude_capped"] is True
    assert commands[0]["altitude_capped"] is False
    assert commands[1]["leg_seconds"] == pytest.approx(leg / 5.0)
    assert commands[2]["waypoint_id"] == "a"
    assert commands[2]["leg_distance_m"] == pytest.approx(leg)

    uncapped = path.as_commands(cruise_speed=5.0)
    assert len(uncapped) == 2
    assert uncapped[1]["altitude"] == 300.0
    assert FlightPath(waypoints=[a]).as_commands(5.0, return_home=True)[-1]["action"] == "navigate_to"
