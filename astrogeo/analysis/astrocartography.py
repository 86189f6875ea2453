"""Astrocartography linework for a fixed birth instant.

For every body we solve where on the globe it sits on the eastern horizon
(rise), western horizon (set), upper meridian (culminate) or lower meridian
(anti-culminate).  Horizon lines come from the semi-diurnal arc relation
``cos H = -tan φ · tan δ``; meridian lines are vertical because the hour
angle is zero (or 180°) independent of latitude.

The generator emits raw samples.  Adjacent longitudes may jump across the
antimeridian; :func:`split_antimeridian` is the consumer-side helper that
breaks polylines before they are drawn.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Union

from ..chart.models import ChartSnapshot, GeoPoint, PlanetPosition
from ..config.settings import AstroCartoCfg
from ..core.angles import normalize_longitude
from ..core.coordinates import ecliptic_to_equatorial
from ..core.time import ensure_utc, julian_day
from ..ephemeris.sidereal import gmst as greenwich_sidereal_time
from .interpretations import line_interpretation

__all__ = [
    "LINE_TYPES",
    "AstrocartographyLine",
    "AstrocartographyResult",
    "BodyLines",
    "LineType",
    "LinesComputed",
    "LinesFailed",
    "compute_body_lines",
    "generate_lines",
    "latitude_samples",
    "lines_to_geojson",
    "split_antimeridian",
]

LOG = logging.getLogger(__name__)

LineType = Literal["rise", "set", "culminate", "anticulminate"]
LINE_TYPES: tuple[LineType, ...] = ("rise", "set", "culminate", "anticulminate")

_BIRTH_KEYS: tuple[str, ...] = ("birth_instant", "birthInstant", "birthDate", "date")


@dataclass(frozen=True)
class AstrocartographyLine:
    """Polyline of points (latitude ascending) where ``body`` is angular."""

    body: str
    line_type: LineType
    points: tuple[GeoPoint, ...]

    def as_dict(self) -> dict[str, object]:
        return {
            "body": self.body,
            "line_type": self.line_type,
            "points": [point.as_dict() for point in self.points],
        }


@dataclass(frozen=True)
class BodyLines:
    """The four angular lines of a single body."""

    body: str
    right_ascension: float
    declination: float
    rise: AstrocartographyLine
    set: AstrocartographyLine
    culminate: AstrocartographyLine
    anticulminate: AstrocartographyLine

    def line(self, line_type: LineType) -> AstrocartographyLine:
        return getattr(self, line_type)

    def __iter__(self):
        return iter(tuple(self.line(kind) for kind in LINE_TYPES))

    def as_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            kind: [point.as_dict() for point in self.line(kind).points] for kind in LINE_TYPES
        }
        payload["metadata"] = {"ra_deg": self.right_ascension, "decl_deg": self.declination}
        return payload


@dataclass(frozen=True)
class LinesComputed:
    body: str
    lines: BodyLines
    ok: Literal[True] = True


@dataclass(frozen=True)
class LinesFailed:
    body: str
    reason: str
    ok: Literal[False] = False


BodyLinesResult = Union[LinesComputed, LinesFailed]


@dataclass(frozen=True)
class AstrocartographyResult:
    """Per-body outcomes for one chart plus the shared sidereal context."""

    moment: datetime
    julian_day: float
    gmst: float
    results: tuple[BodyLinesResult, ...] = field(default_factory=tuple)

    @property
    def lines(self) -> dict[str, BodyLines]:
        return {item.body: item.lines for item in self.results if isinstance(item, LinesComputed)}

    @property
    def failures(self) -> dict[str, str]:
        return {item.body: item.reason for item in self.results if isinstance(item, LinesFailed)}

    def as_dict(self) -> dict[str, object]:
        return {
            "moment": self.moment.isoformat().replace("+00:00", "Z"),
            "julian_day": self.julian_day,
            "gmst_deg": self.gmst,
            "lines": {body: lines.as_dict() for body, lines in self.lines.items()},
            "failures": self.failures,
        }


def latitude_samples(lat_min: float, lat_max: float, step: float) -> tuple[float, ...]:
    """Inclusive latitude grid from ``lat_min`` to ``lat_max``."""

    if step <= 0.0:
        raise ValueError("latitude step must be positive")
    count = int(math.floor((lat_max - lat_min) / step + 1e-9))
    return tuple(lat_min + index * step for index in range(count + 1))


def _horizon_line(
    body: str,
    line_type: LineType,
    ra_deg: float,
    decl_deg: float,
    gst_deg: float,
    latitudes: Sequence[float],
) -> AstrocartographyLine:
    sign = -1.0 if line_type == "rise" else 1.0
    tan_delta = math.tan(math.radians(decl_deg))
    points: list[GeoPoint] = []
    for lat in latitudes:
        cos_h = -math.tan(math.radians(lat)) * tan_delta
        if abs(cos_h) > 1.0:
            # circumpolar or never rises at this latitude
            continue
        hour_angle = sign * math.degrees(math.acos(cos_h))
        points.append(GeoPoint(latitude=lat, longitude=(ra_deg + hour_angle) - gst_deg))
    return AstrocartographyLine(body=body, line_type=line_type, points=tuple(points))


def _meridian_line(
    body: str,
    line_type: LineType,
    longitude: float,
    latitudes: Sequence[float],
) -> AstrocartographyLine:
    points = tuple(GeoPoint(latitude=lat, longitude=longitude) for lat in latitudes)
    return AstrocartographyLine(body=body, line_type=line_type, points=points)


def compute_body_lines(
    body: str,
    longitude: float,
    latitude: float,
    gst_deg: float,
    *,
    settings: AstroCartoCfg | None = None,
) -> BodyLines:
    """Return the four angular lines of one body for a given sidereal time.

    Raises :class:`ValueError` for non-finite coordinates.
    """

    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        raise ValueError(f"non-finite ecliptic position for {body}: ({longitude}, {latitude})")

    cfg = settings or AstroCartoCfg()
    equatorial = ecliptic_to_equatorial(longitude, latitude)
    ra_deg = equatorial.right_ascension
    decl_deg = equatorial.declination

    horizon_lats = latitude_samples(cfg.lat_min, cfg.lat_max, cfg.horizon_step_deg)
    meridian_lats = latitude_samples(cfg.lat_min, cfg.lat_max, cfg.meridian_step_deg)

    mc_long = normalize_longitude(ra_deg - gst_deg)
    ic_long = normalize_longitude(mc_long + 180.0)

    return BodyLines(
        body=body,
        right_ascension=ra_deg,
        declination=decl_deg,
        rise=_horizon_line(body, "rise", ra_deg, decl_deg, gst_deg, horizon_lats),
        set=_horizon_line(body, "set", ra_deg, decl_deg, gst_deg, horizon_lats),
        culminate=_meridian_line(body, "culminate", mc_long, meridian_lats),
        anticulminate=_meridian_line(body, "anticulminate", ic_long, meridian_lats),
    )


def _coerce_moment(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"cannot interpret birth instant {value!r}")


def _resolve_chart(
    chart: ChartSnapshot | Mapping[str, Any],
    birth_instant: datetime | None,
) -> tuple[Mapping[str, Any], datetime]:
    if isinstance(chart, ChartSnapshot):
        return chart.planets, ensure_utc(birth_instant or chart.timestamp)
    if not isinstance(chart, Mapping) or not isinstance(chart.get("planets"), Mapping):
        raise ValueError("chart must provide a planets mapping")
    if birth_instant is not None:
        return chart["planets"], ensure_utc(birth_instant)
    for key in _BIRTH_KEYS:
        if chart.get(key) is not None:
            return chart["planets"], _coerce_moment(chart[key])
    raise ValueError("chart does not carry a birth instant")


def _display_name(key: str, entry: Any) -> str:
    if isinstance(entry, PlanetPosition):
        return entry.name
    if isinstance(entry, Mapping) and entry.get("name"):
        return str(entry["name"])
    return key


def _position_of(key: str, entry: Any) -> PlanetPosition:
    if isinstance(entry, PlanetPosition):
        return entry
    if isinstance(entry, Mapping):
        return PlanetPosition.from_mapping(key, entry)
    raise ValueError(f"unsupported position entry for {key!r}: {type(entry).__name__}")


def generate_lines(
    chart: ChartSnapshot | Mapping[str, Any],
    *,
    birth_instant: datetime | None = None,
    bodies: Iterable[str] | None = None,
    settings: AstroCartoCfg | None = None,
) -> AstrocartographyResult:
    """Compute rise/set/culminate/anti-culminate lines for every enabled body.

    ``chart`` is either a :class:`ChartSnapshot` (its timestamp is the birth
    instant) or a mapping with ``planets`` and a birth instant under one of
    ``birth_instant``/``birthInstant``/``birthDate``/``date``.  A body whose
    geometry fails is reported as :class:`LinesFailed` and the remaining
    bodies are still computed.
    """

    cfg = settings or AstroCartoCfg()
    planets, moment = _resolve_chart(chart, birth_instant)
    enabled = bodies if bodies is not None else cfg.bodies
    wanted = {name.lower() for name in enabled} if enabled is not None else None

    jd_ut = julian_day(moment)
    gst_deg = greenwich_sidereal_time(jd_ut)
    LOG.debug("Astrocartography for %s (JD %.6f, GMST %.6f°)", moment.isoformat(), jd_ut, gst_deg)

    results: list[BodyLinesResult] = []
    for key, entry in planets.items():
        name = _display_name(str(key), entry)
        if wanted is not None and name.lower() not in wanted and str(key).lower() not in wanted:
            continue
        try:
            position = _position_of(name, entry)
            lines = compute_body_lines(
                name, position.longitude, position.latitude, gst_deg, settings=cfg
            )
        except (ValueError, TypeError, ArithmeticError) as exc:
            LOG.warning("Skipping astrocartography lines for %s: %s", name, exc)
            results.append(LinesFailed(body=name, reason=str(exc)))
            continue
        results.append(LinesComputed(body=name, lines=lines))

    return AstrocartographyResult(
        moment=moment,
        julian_day=jd_ut,
        gmst=gst_deg,
        results=tuple(results),
    )


def split_antimeridian(points: Sequence[GeoPoint]) -> list[list[GeoPoint]]:
    """Break a polyline wherever consecutive longitudes jump by more than 180°."""

    segments: list[list[GeoPoint]] = []
    current: list[GeoPoint] = []
    for point in points:
        if current and abs(point.longitude - current[-1].longitude) > 180.0:
            segments.append(current)
            current = []
        current.append(point)
    if current:
        segments.append(current)
    return segments


def lines_to_geojson(result: AstrocartographyResult) -> dict[str, object]:
    """Render computed lines as a GeoJSON FeatureCollection.

    Each line becomes a ``MultiLineString`` already split at the antimeridian.
    Feature properties carry the line's short reading.
    Lines without points are omitted.
    """

    features: list[dict[str, object]] = []
    for body, body_lines in result.lines.items():
        for line in body_lines:
            segments = split_antimeridian(line.points)
            if not segments:
                continue
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "MultiLineString",
                        "coordinates": [
                            [[point.longitude, point.latitude] for point in segment]
                            for segment in segments
                        ],
                    },
                    "properties": {
                        "body": body,
                        "kind": line.line_type,
                        "ra_deg": body_lines.right_ascension,
                        "decl_deg": body_lines.declination,
                        "interpretation": line_interpretation(body, line.line_type),
                    },
                }
            )
    return {
        "type": "FeatureCollection",
        "features": features,
        "metadata": {
            "moment": result.moment.isoformat().replace("+00:00", "Z"),
            "gmst_deg": result.gmst,
            "failures": result.failures,
        },
    }
