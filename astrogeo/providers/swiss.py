"""Chart evaluator backed by the Swiss Ephemeris.

This adapter satisfies the :class:`~astrogeo.providers.evaluator.ChartEvaluator`
contract so callers without their own ephemeris can still drive the return
solver.  All astronomy is delegated to ``pyswisseph``; blocking calls run in
a worker thread so the solver's awaits stay cooperative.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..ephemeris.swe import has_swe, swe

__all__ = ["DEFAULT_BODIES", "SwissChartEvaluator"]

LOG = logging.getLogger(__name__)

# Evaluator body key -> Swiss Ephemeris constant name.
DEFAULT_BODIES: Mapping[str, str] = {
    "SUN": "SUN",
    "MOON": "MOON",
    "MERCURY": "MERCURY",
    "VENUS": "VENUS",
    "MARS": "MARS",
    "JUPITER": "JUPITER",
    "SATURN": "SATURN",
    "URANUS": "URANUS",
    "NEPTUNE": "NEPTUNE",
    "PLUTO": "PLUTO",
    "NORTH_NODE": "TRUE_NODE",
    "CHIRON": "CHIRON",
}

_HOUSE_SYSTEM_CODES: Mapping[str, bytes] = {
    "placidus": b"P",
    "koch": b"K",
    "equal": b"E",
    "whole_sign": b"W",
    "porphyry": b"O",
    "regiomontanus": b"R",
    "campanus": b"C",
}

_DISPLAY_NAMES: Mapping[str, str] = {
    "NORTH_NODE": "North Node",
}


class SwissChartEvaluator:
    """Evaluate charts with ``pyswisseph``.

    ``ephemeris_path`` defaults to ``SE_EPHE_PATH``; without either, Swiss
    Ephemeris falls back to its built-in Moshier model.
    """

    def __init__(
        self,
        *,
        ephemeris_path: str | os.PathLike[str] | None = None,
        bodies: Mapping[str, str] | None = None,
    ) -> None:
        if not has_swe():
            raise RuntimeError(
                "SwissChartEvaluator requires pyswisseph. Install astrogeo with "
                "the 'swiss' extra."
            )
        self._bodies = dict(bodies or DEFAULT_BODIES)
        self.ephemeris_path = self._configure_ephemeris_path(ephemeris_path)

    @staticmethod
    def _configure_ephemeris_path(ephemeris_path: str | os.PathLike[str] | None) -> str | None:
        if ephemeris_path is not None:
            swe.set_ephe_path(str(ephemeris_path))
            return str(ephemeris_path)
        env_path = os.environ.get("SE_EPHE_PATH")
        if env_path and Path(env_path).exists():
            swe.set_ephe_path(env_path)
            return env_path
        return None

    async def evaluate(
        self, instant: Mapping[str, int], location: Mapping[str, object]
    ) -> dict[str, Any]:
        return await asyncio.to_thread(self.evaluate_sync, instant, location)

    def evaluate_sync(
        self, instant: Mapping[str, int], location: Mapping[str, object]
    ) -> dict[str, Any]:
        hour = (
            float(instant.get("hour", 0))
            + float(instant.get("minute", 0)) / 60.0
            + float(instant.get("second", 0)) / 3600.0
        )
        jd_ut = swe.julday(int(instant["year"]), int(instant["month"]), int(instant["day"]), hour)
        flags = swe.FLG_SWIEPH | swe.FLG_SPEED

        planets: dict[str, dict[str, Any]] = {}
        for key, constant in self._bodies.items():
            code = getattr(swe, constant, None)
            if code is None:
                LOG.debug("Swiss Ephemeris build lacks %s; skipping %s", constant, key)
                continue
            try:
                values, _ = swe.calc_ut(jd_ut, int(code), flags)
            except swe.Error as exc:
                # asteroid bodies need their own ephemeris files
                LOG.warning("Swiss Ephemeris could not compute %s: %s", key, exc)
                continue
            planets[key] = {
                "name": _DISPLAY_NAMES.get(key, key.title()),
                "longitude": float(values[0]) % 360.0,
                "latitude": float(values[1]),
                "velocity": float(values[3]),
            }

        latitude = float(location["latitude"])  # type: ignore[arg-type]
        longitude = float(location["longitude"])  # type: ignore[arg-type]
        system = str(location.get("houseSystem") or "placidus")
        cusps, angles = self._houses(jd_ut, latitude, longitude, system)

        return {
            "success": True,
            "planets": planets,
            "houses": [float(value) for value in cusps[-12:]],
            "ascendant": float(angles[0]),
            "midheaven": float(angles[1]),
        }

    @staticmethod
    def _houses(
        jd_ut: float, latitude: float, longitude: float, system: str
    ) -> tuple[tuple[float, ...], tuple[float, ...]]:
        code = _HOUSE_SYSTEM_CODES.get(system.lower())
        if code is None:
            raise ValueError(f"Unsupported house system '{system}'")
        try:
            return swe.houses_ex(jd_ut, latitude, longitude, code)
        except Exception as exc:
            # Quadrant systems fail at extreme latitudes; fall back to Whole Sign.
            if code == b"W":
                raise
            LOG.warning(
                "House system %s failed at latitude %.4f (%s); falling back to whole_sign",
                system,
                latitude,
                exc,
            )
            return swe.houses_ex(jd_ut, latitude, longitude, b"W")
