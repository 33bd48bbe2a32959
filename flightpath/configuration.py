"""Mini README: Centralised configuration for the Flight Path dashboard.

Structure:
    * FlightPathSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the interface and CLI.

Usage:
    Values are read from ``FLIGHTPATH_*`` environment variables or a local
    ``.env`` file. The simulated map projection (centre and span) lives here
    so the dashboard and tests agree on where a click lands.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlightPathSettings(BaseSettings):
    """Runtime configuration for the flight planning dashboard."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTPATH_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    export_directory: Path = Field(
        Path("exports"),
        description="Directory where exported flight plans are written.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the dashboard to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the dashboard exposes.",
        ge=1,
        le=65535,
    )
    default_altitude: float = Field(
        50.0,
        description="Altitude in metres assigned to waypoints created from a map click.",
    )
    map_centre_lat: float = Field(40.7128, ge=-90.0, le=90.0)
    map_centre_lng: float = Field(-74.0060, ge=-180.0, le=180.0)
    map_span_degrees: float = Field(
        0.1,
        gt=0.0,
        description="Degrees of latitude/longitude covered by the simulated map surface.",
    )
    telemetry_seed: Optional[int] = Field(
        None,
        description="Seed for the telemetry simulator. Leave unset for live jitter.",
    )

    @field_validator("export_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        """Expand user directories; creation is deferred until an export happens."""

        return Path(value).expanduser()


@lru_cache()
def get_settings() -> FlightPathSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FlightPathSettings()
