"""Mini README: Waypoint model and great-circle distance helpers.

Structure:
    * Waypoint - immutable GPS coordinate with identity and altitude.
    * haversine_distance - great-circle distance in metres.
    * path_length - length of a waypoint sequence flown in order.
    * interpolate - linear position between two waypoints for replays.

Distances use a spherical Earth of radius ``EARTH_RADIUS_M``. No range
validation is performed: out-of-range coordinates yield a meaningless but
finite result, and producing sensible waypoints is the caller's concern.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Mapping, Tuple

EARTH_RADIUS_M = 6_371_000.0

_FIELD_ALIASES = {
    "lat": "latitude",
    "latitude": "latitude",
    "lng": "longitude",
    "lon": "longitude",
    "longitude": "longitude",
    "alt": "altitude",
    "altitude": "altitude",
    "elevation": "altitude",
}


@dataclass(frozen=True, slots=True)
class Waypoint:
    """Single identifiable waypoint.

    ``waypoint_id`` is assigned by whoever creates the waypoint and is carried
    through every reordering untouched.
    """

    waypoint_id: str
    latitude: float
    longitude: float
    altitude: float = 50.0

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(value) for value in (self.latitude, self.longitude, self.altitude))

    def with_field(self, name: str, value: float) -> "Waypoint":
        """Return a copy with one coordinate field replaced."""

        try:
            attribute = _FIELD_ALIASES[name.lower()]
        except KeyError as error:
            raise ValueError(f"Unknown waypoint field '{name}'") from error
        return replace(self, **{attribute: float(value)})

    def as_dict(self) -> Dict[str, object]:
        """Serialise using the dashboard's short keys."""

        return {
            "id": self.waypoint_id,
            "lat": self.latitude,
            "lng": self.longitude,
            "alt": self.altitude,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "Waypoint":
        """Parse a dictionary produced by :meth:`as_dict`."""

        try:
            waypoint = cls(
                waypoint_id=str(payload["id"]),
                latitude=float(payload["lat"]),  # type: ignore[arg-type]
                longitude=float(payload["lng"]),  # type: ignore[arg-type]
                altitude=float(payload.get("alt", 50.0)),  # type: ignore[arg-type]
            )
        except (KeyError, TypeError, ValueError) as error:
            raise ValueError(f"Malformed waypoint payload: {payload!r}") from error
        if not waypoint.is_finite:
            raise ValueError(f"Waypoint {waypoint.waypoint_id} has non-finite coordinates")
        return waypoint


def haversine_distance(a: Waypoint, b: Waypoint) -> float:
    """Return the great-circle distance between two waypoints in metres."""

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def path_length(waypoints: Iterable[Waypoint]) -> float:
    """Sum the leg distances of a route flown in the given order."""

    ordered = list(waypoints)
    return sum(
        haversine_distance(current, following)
        for current, following in zip(ordered, ordered[1:])
    )


def interpolate(a: Waypoint, b: Waypoint, fraction: float) -> Tuple[float, float]:
    """Linear (lat, lng) position ``fraction`` of the way from ``a`` to ``b``."""

    return (
        a.latitude + (b.latitude - a.latitude) * fraction,
        a.longitude + (b.longitude - a.longitude) * fraction,
    )

