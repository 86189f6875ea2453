"""Mean sidereal time helpers."""

from __future__ import annotations

from ..core.angles import normalize_degrees
from ..core.time import J2000_JD

__all__ = ["gmst", "local_sidereal_time"]


def gmst(jd_ut: float) -> float:
    """Return Greenwich Mean Sidereal Time in degrees ``[0, 360)`` for ``jd_ut``."""

    days = jd_ut - J2000_JD
    t = days / 36525.0
    value = (
        280.46061837
        + 360.98564736629 * days
        + 0.000387933 * t * t
        - (t * t * t) / 38710000.0
    )
    return normalize_degrees(value)


def local_sidereal_time(gmst_deg: float, longitude: float) -> float:
    """Local sidereal time for an east-positive geographic ``longitude``."""

    return normalize_degrees(gmst_deg + longitude)
