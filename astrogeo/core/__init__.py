"""Core angle, time and coordinate primitives."""

from __future__ import annotations

from .angles import normalize_degrees, normalize_longitude, signed_delta
from .coordinates import MEAN_OBLIQUITY_DEG, EquatorialPosition, ecliptic_to_equatorial
from .time import datetime_from_julian_day, ensure_utc, julian_day

__all__ = [
    "MEAN_OBLIQUITY_DEG",
    "EquatorialPosition",
    "datetime_from_julian_day",
    "ecliptic_to_equatorial",
    "ensure_utc",
    "julian_day",
    "normalize_degrees",
    "normalize_longitude",
    "signed_delta",
]
