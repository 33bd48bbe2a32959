"""Mini README: Simulated telemetry feed and path replay for the dashboard.

Structure:
    * TelemetrySnapshot - values rendered on the telemetry panel.
    * TelemetrySimulator - advances the snapshot one second per ``tick``.
    * PathReplay - animation progress used to draw the drone along the route.
    * format_flight_time / battery_level - display helpers.

Nothing here reads or changes waypoint order. The replay only interpolates
along whatever sequence it is handed, and the simulator is pure jitter driven
by an injectable ``random.Random`` so tests can seed it.
"""

from __future__ import annotations

import math
import random
from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from ..route_planning import Waypoint, interpolate

LOGGER = get_logger(__name__)

MAX_ALTITUDE_M = 120.0
MAX_SPEED_MPS = 10.0
BATTERY_DRAIN_PER_TICK = 0.1
REPLAY_STEP = 0.016
MAX_LOG_ENTRIES = 100

INITIAL_LOG_MESSAGES = (
    "System initialized",
    "Waiting for GPS lock...",
    "GPS lock acquired",
    "Ready for flight operations",
)


@dataclass(slots=True)
class TelemetrySnapshot:
    """Telemetry values at one instant."""

    altitude: float = 0.0
    speed: float = 0.0
    battery: float = 85.0
    signal_strength: float = 92.0
    gps_signal: str = "Good"
    heading: float = 0.0
    distance_to_home: float = 0.0
    flight_time: int = 0
    flight_mode: str = "Position Hold"

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(slots=True)
class LogEntry:
    """Timestamped line for the system log panel."""

    message: str
    logged_at: datetime = field(default_factory=datetime.now)

    def as_dict(self) -> Dict[str, str]:
        return {"time": self.logged_at.strftime("%H:%M:%S"), "message": self.message}


def format_flight_time(seconds: int) -> str:
    """Render elapsed seconds as ``m:ss``."""

    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


def battery_level(percent: float) -> str:
    """Classify battery charge for colour coding."""

    if percent > 50:
        return "good"
    if percent > 20:
        return "warning"
    return "critical"


class TelemetrySimulator:
    """Produce plausible telemetry while a mission is active."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self.snapshot = TelemetrySnapshot()
        self.active = False
        self.logs: Deque[LogEntry] = deque(
            (LogEntry(message, logged_at=clock()) for message in INITIAL_LOG_MESSAGES),
            maxlen=MAX_LOG_ENTRIES,
        )

    @property
    def status(self) -> str:
        return "Live" if self.active else "Standby"

    def log(self, message: str) -> None:
        self.logs.append(LogEntry(message, logged_at=self._clock()))
        LOGGER.debug("Telemetry log: %s", message)

    def start(self) -> None:
        self.active = True
        self.log("Mission started")

    def stop(self, reason: str = "Mission paused") -> None:
        self.active = False
        self.log(reason)

    def set_flight_mode(self, mode: str) -> None:
        self.snapshot.flight_mode = mode
        self.log(f"Flight mode set to {mode}")

    def _signed(self, scale: float, threshold: float = 0.5) -> float:
        direction = 1 if self._rng.random() > threshold else -1
        return direction * self._rng.random() * scale

    def tick(self) -> TelemetrySnapshot:
        """Advance the simulation by one second; inactive feeds do not move."""

        if not self.active:
            return self.snapshot

        current = self.snapshot
        current.altitude = min(MAX_ALTITUDE_M, max(0.0, current.altitude + self._signed(5.0)))
        current.speed = max(0.0, min(MAX_SPEED_MPS, current.speed + self._signed(1.0)))
        current.battery = max(0.0, current.battery - BATTERY_DRAIN_PER_TICK)
        current.heading = (current.heading + self._rng.random() * 10) % 360
        current.distance_to_home = max(
            0.0, current.distance_to_home + self._signed(10.0, threshold=0.7)
        )
        current.flight_time += 1
        return current

    def as_dict(self) -> Dict[str, object]:
        payload = self.snapshot.as_dict()
        payload.update(
            {
                "status": self.status,
                "flight_time_display": format_flight_time(self.snapshot.flight_time),
                "battery_level": battery_level(self.snapshot.battery),
                "logs": [entry.as_dict() for entry in self.logs],
            }
        )
        return payload


class PathReplay:
    """Animation progress along the current waypoint sequence."""

    def __init__(self, step: float = REPLAY_STEP) -> None:
        self.step_size = step
        self.progress = 0.0

    def reset(self) -> None:
        self.progress = 0.0

    def advance(self, frames: int = 1) -> float:
        self.progress = min(1.0, self.progress + self.step_size * frames)
        return self.progress

    @property
    def finished(self) -> bool:
        return self.progress >= 1.0

    def position(self, waypoints: Sequence[Waypoint]) -> Optional[Tuple[float, float]]:
        """Interpolated (lat, lng) of the drone, or ``None`` below two waypoints."""

        count = len(waypoints)
        if count < 2:
            return None
        scaled = self.progress * (count - 1)
        segment = min(math.floor(scaled), count - 1)
        fraction = scaled % 1
        following = min(segment + 1, count - 1)
        return interpolate(waypoints[segment], waypoints[following], fraction)
