"""Mini README: Export and import flight plans as JSON documents.

Structure:
    * MissionDocument - parsed plan: waypoints, parameters, creation time.
    * MissionExporter - builds, writes and reads plan documents.

A plan is a point-in-time snapshot of the board::

    {"waypoints": [{"id", "lat", "lng", "alt"}, ...],
     "parameters": {"speed", "maxAltitude", "returnToHome", "avoidObstacles"},
     "createdAt": "<ISO-8601>"}

Files are named ``flight-plan-YYYY-MM-DD.json`` after the creation date.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..logging_utils import get_logger
from ..mission.errors import InvalidMissionFile
from ..mission.parameters import MissionParameters
from ..route_planning import Waypoint

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class MissionDocument:
    """Flight plan loaded from an export."""

    waypoints: List[Waypoint]
    parameters: MissionParameters
    created_at: Optional[str] = None

    @property
    def created_datetime(self) -> Optional[datetime]:
        """Parsed ``createdAt``; browser exports end in ``Z`` rather than an offset."""

        if not isinstance(self.created_at, str) or not self.created_at:
            return None
        text = self.created_at
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            LOGGER.warning("Ignoring unreadable createdAt %r", self.created_at)
            return None


def export_filename(created_at: datetime) -> str:
    return f"flight-plan-{created_at.date().isoformat()}.json"


class MissionExporter:
    """Serialise the board to disk and read plans back."""

    def build_document(
        self,
        waypoints: Sequence[Waypoint],
        parameters: MissionParameters,
        created_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        created_at = created_at or datetime.now(timezone.utc)
        return {
            "waypoints": [waypoint.as_dict() for waypoint in waypoints],
            "parameters": parameters.as_export(),
            "createdAt": created_at.isoformat(),
        }

    def dumps(
        self,
        waypoints: Sequence[Waypoint],
        parameters: MissionParameters,
        created_at: Optional[datetime] = None,
    ) -> str:
        return json.dumps(self.build_document(waypoints, parameters, created_at), indent=2)

    def export(
        self,
        waypoints: Sequence[Waypoint],
        parameters: MissionParameters,
        *,
        output_directory: Path,
        created_at: Optional[datetime] = None,
    ) -> Path:
        """Write the plan into ``output_directory`` and return the file path."""

        created_at = created_at or datetime.now(timezone.utc)
        output_directory.mkdir(parents=True, exist_ok=True)
        destination = output_directory / export_filename(created_at)
        LOGGER.info("Exporting flight plan with %s waypoints to %s", len(waypoints), destination)
        destination.write_text(self.dumps(waypoints, parameters, created_at), encoding="utf-8")
        return destination

    def load(self, source: Union[str, bytes, Path]) -> MissionDocument:
        """Parse an exported plan from a path, or from raw JSON text."""

        if isinstance(source, Path):
            try:
                source = source.read_text(encoding="utf-8")
            except OSError as error:
                raise InvalidMissionFile(f"Cannot read flight plan: {error}") from error
        try:
            document = json.loads(source)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise InvalidMissionFile("Flight plan is not valid JSON") from error
        if not isinstance(document, dict) or not isinstance(document.get("waypoints"), list):
            raise InvalidMissionFile("Flight plan must contain a 'waypoints' list")

        try:
            waypoints = [Waypoint.from_dict(entry) for entry in document["waypoints"]]
        except (ValueError, AttributeError) as error:
            raise InvalidMissionFile(str(error)) from error
        try:
            parameters = MissionParameters.from_export(document.get("parameters") or {})
        except (ValidationError, AttributeError) as error:
            raise InvalidMissionFile(f"Invalid mission parameters: {error}") from error

        LOGGER.debug("Loaded flight plan with %s waypoints", len(waypoints))
        return MissionDocument(
            waypoints=waypoints,
            parameters=parameters,
            created_at=document.get("createdAt"),
        )
