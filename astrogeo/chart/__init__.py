"""Chart value types."""

from __future__ import annotations

from .models import ChartLocation, ChartSnapshot, GeoPoint, PlanetPosition

__all__ = ["ChartLocation", "ChartSnapshot", "GeoPoint", "PlanetPosition"]
