"""Mini README: Mission parameter model shown on the parameters tab.

Bounds match the dashboard sliders: speed 1-10 m/s, maximum altitude
10-400 m. ``as_export`` produces the camelCase keys used in exported plans.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class MissionParameters(BaseModel):
    """Flight parameters applied to the whole mission."""

    speed: float = Field(5.0, ge=1.0, le=10.0, description="Cruise speed in m/s.")
    max_altitude: float = Field(120.0, ge=10.0, le=400.0, description="Ceiling in metres.")
    return_to_home: bool = True
    avoid_obstacles: bool = True

    def as_export(self) -> Dict[str, Any]:
        return {
            "speed": self.speed,
            "maxAltitude": self.max_altitude,
            "returnToHome": self.return_to_home,
            "avoidObstacles": self.avoid_obstacles,
        }

    @classmethod
    def from_export(cls, payload: Dict[str, Any]) -> "MissionParameters":
        """Build parameters from the camelCase export keys."""

        return cls(
            speed=payload.get("speed", 5.0),
            max_altitude=payload.get("maxAltitude", 120.0),
            return_to_home=payload.get("returnToHome", True),
            avoid_obstacles=payload.get("avoidObstacles", True),
        )
