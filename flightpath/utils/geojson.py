"""Mini README: GeoJSON helper utilities for Flight Path.

Helpers convert the board's waypoint order into a FeatureCollection for map
overlays and validate polygon payloads used to frame the map. They import
nothing from the web framework so tests and the CLI can reuse them.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Sequence, Tuple

from ..route_planning import Waypoint


def route_to_geojson(waypoints: Sequence[Waypoint]) -> Dict[str, Any]:
    """Return ordered Point features plus a LineString for the flown route."""

    features = [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [waypoint.longitude, waypoint.latitude]},
            "properties": {"id": waypoint.waypoint_id, "order": index + 1, "alt": waypoint.altitude},
        }
        for index, waypoint in enumerate(waypoints)
    ]
    if len(waypoints) >= 2:
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[waypoint.longitude, waypoint.latitude] for waypoint in waypoints],
                },
                "properties": {"kind": "route"},
            }
        )
    return {"type": "FeatureCollection", "features": features}


def bounds_from_geojson(area_geojson: str) -> Tuple[float, float, float, float]:
    """Validate GeoJSON and return bounding coordinates as (lat_min, lon_min, lat_max, lon_max)."""

    try:
        geojson = json.loads(area_geojson)
    except json.JSONDecodeError as error:
        raise ValueError("GeoJSON payload is invalid JSON") from error

    if not isinstance(geojson, dict):
        raise ValueError("GeoJSON payload must be an object")

    if geojson.get("type") == "Feature":
        geometry = geojson.get("geometry", {})
    else:
        geometry = geojson

    if geometry.get("type") != "Polygon":
        raise ValueError("Only polygon GeoJSON payloads are supported")

    coordinates = geometry.get("coordinates")
    if not coordinates:
        raise ValueError("Polygon coordinates are required")

    flattened = [point for ring in coordinates for point in ring]
    lons = [float(point[0]) for point in flattened]
    lats = [float(point[1]) for point in flattened]
    return (min(lats), min(lons), max(lats), max(lons))
