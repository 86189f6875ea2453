"""Solar and lunar return charts built on :func:`find_return`."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from ...chart.models import ChartLocation, ChartSnapshot
from ...config.settings import ReturnsCfg
from ...core.time import ensure_utc
from ...providers.evaluator import EvaluatorLike
from .finder import ReturnEvaluationError, ReturnResult, find_return

__all__ = [
    "ReturnChart",
    "calculate_lunar_return",
    "calculate_solar_return",
    "guess_window",
]

# Mean sidereal periods in days.
_MEAN_PERIODS_DAYS: dict[str, float] = {
    "sun": 365.2422,
    "moon": 27.321661,
    "mercury": 87.9691,
    "venus": 224.7008,
    "mars": 686.980,
    "jupiter": 4332.589,
    "saturn": 10759.22,
    "uranus": 30688.5,
    "neptune": 60182.0,
    "pluto": 90560.0,
}


@dataclass(frozen=True)
class ReturnChart:
    """A solved return together with the natal chart it refers to."""

    return_type: str
    result: ReturnResult
    natal: ChartSnapshot

    @property
    def timestamp(self) -> datetime:
        return self.result.timestamp

    @property
    def chart(self) -> ChartSnapshot:
        return self.result.chart

    def as_dict(self) -> dict[str, Any]:
        return {
            "return_type": self.return_type,
            "return": self.result.as_dict(),
            "natal": self.natal.as_dict(),
        }


def guess_window(body: str, around: datetime) -> tuple[datetime, datetime]:
    """Return a coarse window of ±45% of ``body``'s mean period around ``around``.

    Useful for slow bodies where no calendar heuristic exists.  Bodies that
    station inside the window still need a tighter, caller-chosen bracket.
    """

    period = _MEAN_PERIODS_DAYS.get(body.lower(), 365.2422)
    half_span = max(period * 0.45, 5.0)
    center = ensure_utc(around)
    return (center - timedelta(days=half_span), center + timedelta(days=half_span))


def _natal_longitude(natal: ChartSnapshot, body_key: str) -> float:
    position = natal.planet(body_key)
    if position is None:
        raise ReturnEvaluationError(f"natal chart has no position for {body_key!r}")
    return position.longitude


def _birthday_in(year: int, natal_moment: datetime) -> datetime:
    # Feb 29 rolls over to Mar 1 in common years.
    first = datetime(year, natal_moment.month, 1, tzinfo=UTC)
    return first + timedelta(days=natal_moment.day - 1)


async def calculate_solar_return(
    natal: ChartSnapshot,
    return_year: int,
    location: ChartLocation,
    evaluator: EvaluatorLike,
    *,
    body_key: str = "SUN",
    settings: ReturnsCfg | None = None,
) -> ReturnChart:
    """Solve the Sun's return to its natal longitude in ``return_year``.

    The search spans two days either side of the birthday, which always
    brackets exactly one solar crossing.
    """

    target = _natal_longitude(natal, body_key)
    birthday = _birthday_in(return_year, natal.timestamp)
    start = birthday - timedelta(days=2)
    end = birthday + timedelta(days=2, hours=23, minutes=59, seconds=59)
    result = await find_return(
        target, start, end, evaluator, body_key, location, settings=settings
    )
    return ReturnChart(return_type="solar", result=result, natal=natal)


async def calculate_lunar_return(
    natal: ChartSnapshot,
    year: int,
    month: int,
    location: ChartLocation,
    evaluator: EvaluatorLike,
    *,
    body_key: str = "MOON",
    settings: ReturnsCfg | None = None,
) -> ReturnChart:
    """Solve the Moon's return to its natal longitude during ``year``/``month``.

    The whole calendar month is searched.  Months longer than the sidereal
    month can hold two returns; the solver then settles on one of them.
    """

    target = _natal_longitude(natal, body_key)
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=UTC)
    end = datetime(year, month, last_day, 23, 59, 59, tzinfo=UTC)
    result = await find_return(
        target, start, end, evaluator, body_key, location, settings=settings
    )
    return ReturnChart(return_type="lunar", result=result, natal=natal)
