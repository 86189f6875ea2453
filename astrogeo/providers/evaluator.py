"""Contract for the externally supplied chart evaluator.

The geometry engine never computes ephemerides itself.  Whoever calls the
return solver injects an *evaluator*: an async callable (or an object with an
async ``evaluate`` method) that, for a UTC instant and an observer location,
returns body longitudes, velocities, house cusps and angles.  The payload
shape mirrors what the desktop front-end already produces::

    {
        "success": True,
        "planets": {"SUN": {"longitude": 280.1, "velocity": 1.019}, ...},
        "houses": [..12 cusps..],
        "ascendant": 101.4,
        "midheaven": 10.2,
    }

An evaluator may also hand back a ready-made :class:`ChartSnapshot`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable

from ..chart.models import ChartLocation, ChartSnapshot, PlanetPosition, coerce_cusps
from ..core.time import ensure_utc

__all__ = [
    "ChartEvaluator",
    "EvaluatorError",
    "EvaluatorLike",
    "evaluate_chart",
    "instant_payload",
    "parse_chart_payload",
]

LOG = logging.getLogger(__name__)


class EvaluatorError(RuntimeError):
    """Raised when the injected chart evaluator fails or returns unusable data."""


@runtime_checkable
class ChartEvaluator(Protocol):
    """Object form of the evaluator contract."""

    async def evaluate(
        self, instant: Mapping[str, int], location: Mapping[str, object]
    ) -> Mapping[str, Any] | ChartSnapshot: ...


EvaluatorLike = Union[
    ChartEvaluator,
    Callable[
        [Mapping[str, int], Mapping[str, object]],
        Awaitable[Mapping[str, Any] | ChartSnapshot],
    ],
]


def instant_payload(moment: datetime) -> dict[str, int]:
    """Break ``moment`` into the UTC calendar fields evaluators expect."""

    utc = ensure_utc(moment)
    return {
        "year": utc.year,
        "month": utc.month,
        "day": utc.day,
        "hour": utc.hour,
        "minute": utc.minute,
        "second": utc.second,
    }


def parse_chart_payload(
    payload: Mapping[str, Any] | ChartSnapshot,
    *,
    moment: datetime,
    location: ChartLocation,
) -> ChartSnapshot:
    """Normalise an evaluator payload into a :class:`ChartSnapshot`.

    Raises :class:`EvaluatorError` when the payload reports ``success=False``
    or lacks a planet mapping, and :class:`ValueError` for malformed entries.
    """

    if isinstance(payload, ChartSnapshot):
        return payload
    if not isinstance(payload, Mapping):
        raise EvaluatorError(f"evaluator returned {type(payload).__name__}, expected a mapping")
    if not payload.get("success", True):
        reason = payload.get("error") or "evaluator reported failure"
        raise EvaluatorError(f"chart evaluation failed at {moment.isoformat()}: {reason}")

    raw_planets = payload.get("planets")
    if not isinstance(raw_planets, Mapping):
        raise EvaluatorError(f"chart evaluation at {moment.isoformat()} returned no planets")

    planets: dict[str, PlanetPosition] = {}
    for key, entry in raw_planets.items():
        if isinstance(entry, PlanetPosition):
            planets[str(key)] = entry
        elif isinstance(entry, Mapping):
            planets[str(key)] = PlanetPosition.from_mapping(str(key), entry)
        else:
            raise ValueError(f"planet entry {key!r} must be a mapping")

    ascendant = payload.get("ascendant")
    midheaven = payload.get("midheaven")
    return ChartSnapshot(
        timestamp=moment,
        location=location,
        planets=planets,
        house_cusps=coerce_cusps(payload.get("houses")),
        ascendant=float(ascendant) if ascendant is not None else None,
        midheaven=float(midheaven) if midheaven is not None else None,
    )


async def evaluate_chart(
    evaluator: EvaluatorLike,
    moment: datetime,
    location: ChartLocation,
) -> ChartSnapshot:
    """Invoke ``evaluator`` for ``moment`` and return a parsed snapshot."""

    instant = instant_payload(moment)
    call = evaluator.evaluate if isinstance(evaluator, ChartEvaluator) else evaluator
    try:
        result = call(instant, location.as_dict())
        if inspect.isawaitable(result):
            result = await result
    except EvaluatorError:
        raise
    except Exception as exc:
        raise EvaluatorError(
            f"chart evaluator raised while evaluating {moment.isoformat()}: {exc}"
        ) from exc

    LOG.debug("Evaluated chart at %s", moment.isoformat())
    return parse_chart_payload(result, moment=ensure_utc(moment), location=location)
