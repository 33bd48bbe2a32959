"""Mini README: Simulated telemetry for the dashboard's telemetry panel."""

from .simulator import (
    LogEntry,
    PathReplay,
    TelemetrySimulator,
    TelemetrySnapshot,
    battery_level,
    format_flight_time,
)

__all__ = [
    "LogEntry",
    "PathReplay",
    "TelemetrySimulator",
    "TelemetrySnapshot",
    "battery_level",
    "format_flight_time",
]
