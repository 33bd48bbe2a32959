"""Mini README: Tests for the FastAPI dashboard routes.

Each test builds a fresh application so the in-memory board starts empty.
Responses are checked for the behaviour the browser relies on: board
payloads, 400/404 mapping of operator errors, and plan downloads.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from flightpath.configuration import FlightPathSettings
from flightpath.interface import create_application


@pytest.fixture()
def client(tmp_path) -> TestClient:
    settings = FlightPathSettings(_env_file=None, export_directory=tmp_path, telemetry_seed=3)
    return TestClient(create_application(settings))


def _add(client: TestClient, lat: float, lng: float) -> str:
    response = client.post("/waypoints", data={"lat": lat, "lng": lng})
    assert response.status_code == 201
    return response.json()["waypoint"]["id"]


def _ids(response) -> list[str]:
    return [waypoint["id"] for waypoint in response.json()["waypoints"]]


def test_dashboard_renders(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "Flight Path Navigator" in response.text
    assert "No waypoints added yet" in response.text


def test_dashboard_exposes_mission_controls(client: TestClient) -> None:
    waypoint_id = _add(client, 40.7128, -74.006)
    page = client.get("/").text
    for action in ("/optimize-path", "/mission/start", "/mission/pause", "/mission/return-home"):
        assert f'data-action="{action}"' in page
    assert 'href="/mission/export"' in page
    assert 'id="import-plan"' in page
    assert 'id="parameters-form"' in page
    assert f'class="delete-waypoint" data-id="{waypoint_id}"' in page
    for field in ("lat", "lng", "alt"):
        assert f'data-id="{waypoint_id}" data-field="{field}"' in page


def test_map_click_creates_waypoint(client: TestClient) -> None:
    response = client.post("/waypoints/map-click", data={"x": 400, "y": 300, "width": 800, "height": 600})
    assert response.status_code == 201
    payload = response.json()
    assert payload["waypoint"]["lat"] == pytest.approx(40.7128)
    assert payload["waypoint"]["alt"] == 50.0
    assert payload["notification"]["title"] == "Waypoint Added"

    response = client.post("/waypoints/map-click", data={"x": 1, "y": 1, "width": 0, "height": 600})
    assert response.status_code == 400


def test_optimize_path_uses_nearest_neighbour(client: TestClient) -> None:
    start = _add(client, 0.0, 0.0)
    far = _add(client, 10.0, 10.0)
    near = _add(client, 0.0, 1.0)

    response = client.post("/optimize-path")
    assert response.status_code == 200
    assert _ids(response) == [start, near, far]
    assert response.json()["statistics"]["waypoints"] == 3
    assert _ids(client.get("/waypoints")) == [start, near, far]


def test_optimize_path_needs_three_waypoints(client: TestClient) -> None:
    _add(client, 0.0, 0.0)
    _add(client, 0.0, 1.0)
    response = client.post("/optimize-path")
    assert response.status_code == 400
    assert response.json()["detail"] == "You need at least 3 waypoints to optimize a path"


def test_edit_and_delete_waypoints(client: TestClient) -> None:
    waypoint_id = _add(client, 1.0, 1.0)
    response = client.post(f"/waypoints/{waypoint_id}", data={"field": "alt", "value": "90"})
    assert response.status_code == 200
    assert response.json()["waypoint"]["alt"] == 90.0

    response = client.post(f"/waypoints/{waypoint_id}", data={"field": "lat", "value": "oops"})
    assert response.json()["waypoint"]["lat"] == 0.0

    assert client.post(f"/waypoints/{waypoint_id}", data={"field": "heading", "value": "1"}).status_code == 400
    assert client.post("/waypoints/unknown", data={"field": "lat", "value": "1"}).status_code == 404

    assert client.delete(f"/waypoints/{waypoint_id}").json()["waypoints"] == []
    assert client.delete(f"/waypoints/{waypoint_id}").status_code == 404

    _add(client, 2.0, 2.0)
    assert client.delete("/waypoints").json()["waypoints"] == []


def test_mission_parameters_are_validated(client: TestClient) -> None:
    assert client.get("/mission/parameters").json()["speed"] == 5.0
    response = client.post("/mission/parameters", data={"speed": 7, "return_to_home": "false"})
    assert response.status_code == 200
    assert response.json()["speed"] == 7.0
    assert response.json()["return_to_home"] is False
    assert response.json()["max_altitude"] == 120.0
    assert client.post("/mission/parameters", data={"speed": 20}).status_code == 400


def test_mission_lifecycle_and_telemetry(client: TestClient) -> None:
    assert client.post("/mission/start").status_code == 400
    assert client.post("/mission/pause").status_code == 400
    _add(client, 0.0, 0.0)
    _add(client, 0.0, 0.01)

    response = client.post("/mission/start")
    assert response.status_code == 200
    assert response.json()["status"] == "active"

    telemetry = client.post("/telemetry/tick", data={"seconds": 3}).json()
    assert telemetry["status"] == "Live"
    assert telemetry["flight_time"] == 3
    assert telemetry["flight_time_display"] == "0:03"
    assert client.post("/telemetry/tick", data={"seconds": 0}).status_code == 422
    assert client.post("/telemetry/tick", data={"seconds": 10**9}).status_code == 422
    assert client.get("/telemetry").json()["flight_time"] == 3

    assert client.post("/mission/return-home").json()["status"] == "returning"
    assert client.get("/telemetry").json()["flight_mode"] == "Return to Home"
    assert client.post("/mission/pause").json()["status"] == "paused"


def test_path_replay_and_geojson(client: TestClient) -> None:
    assert client.get("/path-replay").json()["position"] is None
    _add(client, 0.0, 0.0)
    _add(client, 0.0, 10.0)
    assert client.get("/path-replay", params={"frames": 100}).json()["progress"] == 0.0
    assert client.get("/path-replay").json()["position"] == pytest.approx([0.0, 0.0])

    replay = client.post("/path-replay", data={"frames": 100}).json()
    assert replay["finished"] is True
    assert replay["position"] == pytest.approx([0.0, 10.0])
    assert client.get("/path-replay").json()["progress"] == 1.0
    assert client.post("/path-replay", data={"frames": 0}).status_code == 422
    assert client.post("/path-replay", data={"frames": 10**6}).status_code == 422
    assert client.post("/path-replay/reset").json()["progress"] == 0.0

    collection = client.get("/route.geojson").json()
    assert collection["features"][-1]["geometry"]["type"] == "LineString"


def test_frame_map_from_polygon(client: TestClient) -> None:
    polygon = {"type": "Polygon", "coordinates": [[[20.0, 10.0], [20.2, 10.0], [20.2, 10.4], [20.0, 10.4]]]}
    response = client.post("/map/frame", data={"area_geojson": json.dumps(polygon)})
    assert response.status_code == 200
    assert response.json()["map_centre"] == pytest.approx([10.2, 20.1])
    assert client.post("/map/frame", data={"area_geojson": "{}"}).status_code == 400


def test_export_and_import_round_trip(client: TestClient, tmp_path) -> None:
    first = _add(client, 40.7128, -74.006)
    second = _add(client, 40.72, -74.01)

    response = client.get("/mission/export")
    assert response.status_code == 200
    assert 'filename="flight-plan-' in response.headers["content-disposition"]
    document = response.json()
    assert [entry["id"] for entry in document["waypoints"]] == [first, second]
    assert document["parameters"]["maxAltitude"] == 120.0

    saved = client.post("/mission/export")
    assert saved.status_code == 201
    assert saved.json()["path"].startswith(str(tmp_path))

    client.delete("/waypoints")
    document["parameters"]["speed"] = 9
    response = client.post(
        "/mission/import",
        files={"plan": ("plan.json", json.dumps(document), "application/json")},
    )
    assert response.status_code == 200
    assert _ids(response) == [first, second]
    assert response.json()["parameters"]["speed"] == 9.0

    response = client.post("/mission/import", files={"plan": ("plan.json", "nope", "application/json")})
    assert response.status_code == 400


@pytest.mark.parametrize("bad", ["nan", "inf", "-inf"])
def test_non_finite_coordinates_do_not_break_the_board(client: TestClient, bad: str) -> None:
    response = client.post("/waypoints", data={"lat": bad, "lng": "1", "alt": bad})
    assert response.status_code == 201
    assert response.json()["waypoint"]["lat"] == 0.0
    assert response.json()["waypoint"]["alt"] == 0.0

    _add(client, 0.0, 2.0)
    _add(client, 0.0, 3.0)
    for path in ("/waypoints", "/mission/statistics", "/mission/export", "/mission/commands"):
        assert client.get(path).status_code == 200
    assert client.post("/optimize-path").status_code == 200


def test_import_with_non_finite_coordinates_is_rejected(client: TestClient) -> None:
    kept = _add(client, 1.0, 1.0)
    for body in (
        '{"waypoints": [{"id": "a", "lat": NaN, "lng": 0}]}',
        '{"waypoints": [{"id": "a", "lat": 0, "lng": 1e999}]}',
    ):
        response = client.post("/mission/import", files={"plan": ("plan.json", body, "application/json")})
        assert response.status_code == 400
        assert _ids(client.get("/waypoints")) == [kept]


def test_mission_commands_follow_parameters(client: TestClient) -> None:
    assert client.get("/mission/commands").json() == {"commands": []}
    first = _add(client, 0.0, 0.0)
    _add(client, 0.0, 0.01)
    client.post("/mission/parameters", data={"speed": 8, "return_to_home": "true"})
    commands = client.get("/mission/commands").json()["commands"]
    assert [command["action"] for command in commands] == ["navigate_to", "navigate_to", "return_home"]
    assert commands[-1]["waypoint_id"] == first
    assert {command["cruise_speed"] for command in commands} == {8.0}
