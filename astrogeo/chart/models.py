"""Immutable chart records produced by chart evaluators."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from ..core.angles import normalize_degrees, normalize_longitude
from ..core.time import ensure_utc

__all__ = [
    "ChartLocation",
    "ChartSnapshot",
    "GeoPoint",
    "PlanetPosition",
    "coerce_cusps",
]


@dataclass(frozen=True)
class PlanetPosition:
    """Ecliptic position and daily motion of a single body."""

    name: str
    longitude: float
    latitude: float = 0.0
    velocity: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "longitude", normalize_degrees(self.longitude))

    @property
    def is_retrograde(self) -> bool:
        return self.velocity < 0.0

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, Any]) -> PlanetPosition:
        """Build a position from an evaluator payload entry.

        ``latitude`` defaults to ``0.0`` when the evaluator omits it and
        ``velocity`` also accepts the ``speed`` alias.
        """

        if "longitude" not in data or data["longitude"] is None:
            raise ValueError(f"position for {name!r} is missing a longitude")
        latitude = data.get("latitude")
        velocity = data.get("velocity", data.get("speed"))
        return cls(
            name=str(data.get("name") or name),
            longitude=float(data["longitude"]),
            latitude=float(latitude) if latitude is not None else 0.0,
            velocity=float(velocity) if velocity is not None else 0.0,
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "longitude": self.longitude,
            "latitude": self.latitude,
            "velocity": self.velocity,
        }


@dataclass(frozen=True)
class ChartLocation:
    """Observer location used for house calculations."""

    latitude: float
    longitude: float
    house_system: str = "placidus"

    def as_dict(self) -> dict[str, object]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "houseSystem": self.house_system,
        }


@dataclass(frozen=True)
class GeoPoint:
    """Point on the globe; ``longitude`` lives in ``(-180, 180]``."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "longitude", normalize_longitude(self.longitude))

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.latitude, "lon": self.longitude}


@dataclass(frozen=True)
class ChartSnapshot:
    """Evaluated chart for a single instant. Never mutated after construction."""

    timestamp: datetime
    location: ChartLocation
    planets: Mapping[str, PlanetPosition]
    house_cusps: tuple[float, ...] = field(default_factory=tuple)
    ascendant: float | None = None
    midheaven: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        object.__setattr__(self, "planets", MappingProxyType(dict(self.planets)))
        object.__setattr__(
            self,
            "house_cusps",
            tuple(normalize_degrees(float(cusp)) for cusp in self.house_cusps),
        )

    def planet(self, key: str) -> PlanetPosition | None:
        """Return the position stored under ``key`` (case-insensitive fallback)."""

        if key in self.planets:
            return self.planets[key]
        lowered = key.lower()
        for name, position in self.planets.items():
            if name.lower() == lowered:
                return position
        return None

    def as_dict(self) -> dict[str, object]:
        return {
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "location": self.location.as_dict(),
            "planets": {key: pos.as_dict() for key, pos in self.planets.items()},
            "houses": list(self.house_cusps),
            "ascendant": self.ascendant,
            "midheaven": self.midheaven,
        }


def coerce_cusps(values: Sequence[float] | None) -> tuple[float, ...]:
    if not values:
        return ()
    return tuple(float(value) for value in values)
