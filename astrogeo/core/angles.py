"""Angle utilities shared across the geometry and timing modules.

Every longitude handled by :mod:`astrogeo` is stored modulo 360 and every
comparison goes through :func:`signed_delta`, so the 359°→1° seam never
produces a spurious 358° separation.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "ZODIAC_SIGNS",
    "normalize_degrees",
    "normalize_longitude",
    "sign_index",
    "sign_name",
    "signed_delta",
]


EPSILON_DEG: Final[float] = 1e-9

ZODIAC_SIGNS: Final[tuple[str, ...]] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Values within ``1e-9`` of ``360`` are coerced to ``0`` so callers can
    rely on a consistent wrap-around contract. ``NaN`` propagates unchanged.
    """

    wrapped = float(angle) % 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped


def normalize_longitude(value: float) -> float:
    """Return a geographic longitude wrapped to ``(-180, 180]``."""

    wrapped = (float(value) + 180.0) % 360.0 - 180.0
    if wrapped == -180.0:
        return 180.0
    return wrapped


def signed_delta(a: float, b: float) -> float:
    """Shortest signed arc ``a - b`` in degrees, wrapped to ``(-180, 180]``."""

    delta = (normalize_degrees(a) - normalize_degrees(b) + 180.0) % 360.0 - 180.0
    if delta == -180.0:
        return 180.0
    return delta


def sign_index(longitude: float) -> int:
    """Zero-based zodiac sign index (0 = Aries) for an ecliptic ``longitude``."""

    return int(normalize_degrees(longitude) // 30.0) % 12


def sign_name(longitude: float) -> str:
    return ZODIAC_SIGNS[sign_index(longitude)]
