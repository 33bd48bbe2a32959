"""Mini README: Utility helper functions for Flight Path.

Currently exports GeoJSON helpers used to draw routes on map overlays.
"""

from .geojson import bounds_from_geojson, route_to_geojson

__all__ = ["bounds_from_geojson", "route_to_geojson"]
