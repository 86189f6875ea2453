"""Ecliptic to equatorial frame conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from .angles import normalize_degrees

__all__ = [
    "MEAN_OBLIQUITY_DEG",
    "EquatorialPosition",
    "ecliptic_to_equatorial",
]

# Fixed mean obliquity of the ecliptic (J2000-ish); precession is ignored.
MEAN_OBLIQUITY_DEG: Final[float] = 23.4397


@dataclass(frozen=True, slots=True)
class EquatorialPosition:
    """Right ascension and declination in degrees."""

    right_ascension: float
    declination: float


def ecliptic_to_equatorial(longitude: float, latitude: float = 0.0) -> EquatorialPosition:
    """Convert ecliptic ``(λ, β)`` to equatorial ``(α, δ)``.

    Right ascension is returned in ``[0, 360)`` and declination in
    ``[-90, 90]``. Inputs are not validated; ``NaN`` propagates.
    """

    lam = math.radians(longitude)
    beta = math.radians(latitude)
    eps = math.radians(MEAN_OBLIQUITY_DEG)

    ra = math.atan2(
        math.sin(lam) * math.cos(eps) - math.tan(beta) * math.sin(eps),
        math.cos(lam),
    )
    dec = math.asin(
        math.sin(beta) * math.cos(eps) + math.cos(beta) * math.sin(eps) * math.sin(lam)
    )
    return EquatorialPosition(
        right_ascension=normalize_degrees(math.degrees(ra)),
        declination=math.degrees(dec),
    )
