"""Eclipse event records consumed by the activation classifier."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .core.angles import normalize_degrees
from .core.time import ensure_utc

__all__ = [
    "AffectedPlanet",
    "EclipseEvent",
]


@dataclass(frozen=True)
class AffectedPlanet:
    """Natal body lying within orb of an eclipse degree."""

    planet: str
    natal_longitude: float
    orb: float
    aspect: str
    planet_key: str | None = None
    natal_sign: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "planet": self.planet,
            "planet_key": self.planet_key,
            "natal_longitude": self.natal_longitude,
            "natal_sign": self.natal_sign,
            "orb": self.orb,
            "aspect": self.aspect,
        }


@dataclass(frozen=True)
class EclipseEvent:
    """A solar or lunar eclipse, optionally annotated with natal impact."""

    date: datetime
    eclipse_type: str
    kind: str
    longitude: float | None = None
    affected_planets: tuple[AffectedPlanet, ...] = field(default_factory=tuple)
    house: int | None = None
    has_impact: bool = False

    def __post_init__(self) -> None:
        if self.eclipse_type not in {"solar", "lunar"}:
            raise ValueError(f"eclipse_type must be 'solar' or 'lunar', got {self.eclipse_type!r}")
        object.__setattr__(self, "date", ensure_utc(self.date))
        if self.longitude is not None:
            object.__setattr__(self, "longitude", normalize_degrees(self.longitude))
        object.__setattr__(self, "affected_planets", tuple(self.affected_planets))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EclipseEvent:
        """Build an event from a catalog entry (ISO dates accepted)."""

        raw_date = data["date"]
        if isinstance(raw_date, str):
            raw_date = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
        longitude = data.get("longitude")
        affected = tuple(
            item
            if isinstance(item, AffectedPlanet)
            else AffectedPlanet(
                planet=str(item.get("planet") or item.get("planetKey")),
                natal_longitude=float(item.get("natal_longitude", item.get("natalLongitude", 0.0))),
                orb=float(item.get("orb", 0.0)),
                aspect=str(item.get("aspect", "applying")),
                planet_key=item.get("planet_key", item.get("planetKey")),
                natal_sign=item.get("natal_sign", item.get("natalSign")),
            )
            for item in data.get("affected_planets", data.get("affectedPlanets", ())) or ()
        )
        house = data.get("house")
        return cls(
            date=raw_date,
            eclipse_type=str(data.get("eclipse_type", data.get("type"))),
            kind=str(data.get("kind", "")),
            longitude=float(longitude) if longitude is not None else None,
            affected_planets=affected,
            house=int(house) if house is not None else None,
            has_impact=bool(data.get("has_impact", data.get("hasImpact", False))),
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "date": self.date.isoformat().replace("+00:00", "Z"),
            "type": self.eclipse_type,
            "kind": self.kind,
            "longitude": self.longitude,
            "affected_planets": [item.as_dict() for item in self.affected_planets],
            "house": self.house,
            "has_impact": self.has_impact,
        }
