"""Mini README: Export utilities for flight plans.

Exposes the JSON plan exporter used by the dashboard's Export and Import
buttons and by the command line optimiser.
"""

from .mission_exporter import MissionDocument, MissionExporter, export_filename

__all__ = ["MissionDocument", "MissionExporter", "export_filename"]
