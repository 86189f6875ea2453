"""Bisection return finder driven by an injected chart evaluator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ...chart.models import ChartLocation, ChartSnapshot
from ...config.settings import ReturnsCfg
from ...core.angles import normalize_degrees, signed_delta
from ...core.time import ensure_utc
from ...providers.evaluator import EvaluatorError, EvaluatorLike, evaluate_chart

__all__ = [
    "ReturnEvaluationError",
    "ReturnResult",
    "ReturnSolverError",
    "find_return",
]

LOG = logging.getLogger(__name__)


class ReturnSolverError(RuntimeError):
    """Base class for failures raised by the return solver."""


class ReturnEvaluationError(ReturnSolverError, EvaluatorError):
    """The evaluator failed or omitted the tracked body; the solve is aborted."""


@dataclass(frozen=True)
class ReturnResult:
    """Instant at which ``body`` regained ``target_longitude``."""

    timestamp: datetime
    chart: ChartSnapshot
    body: str
    target_longitude: float
    delta_deg: float
    iterations: int
    evaluations: int
    converged: bool

    def as_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "body": self.body,
            "target_longitude": self.target_longitude,
            "delta_deg": self.delta_deg,
            "iterations": self.iterations,
            "evaluations": self.evaluations,
            "converged": self.converged,
            "chart": self.chart.as_dict(),
        }


async def _sample(
    evaluator: EvaluatorLike,
    moment: datetime,
    location: ChartLocation,
    body_key: str,
) -> tuple[ChartSnapshot, float, float]:
    try:
        chart = await evaluate_chart(evaluator, moment, location)
    except (EvaluatorError, ValueError) as exc:
        raise ReturnEvaluationError(str(exc)) from exc
    position = chart.planet(body_key)
    if position is None:
        raise ReturnEvaluationError(
            f"evaluator returned no position for {body_key!r} at {moment.isoformat()}"
        )
    return chart, position.longitude, position.velocity


async def find_return(
    target_longitude: float,
    window_start: datetime,
    window_end: datetime,
    evaluator: EvaluatorLike,
    body_key: str,
    location: ChartLocation,
    *,
    settings: ReturnsCfg | None = None,
) -> ReturnResult:
    """Locate the instant ``body_key`` returns to ``target_longitude``.

    The window is halved until the transiting longitude sits within
    ``settings.precision_deg`` of the target.  Motion direction is read from
    the body's velocity at each midpoint so retrograde stretches pull the
    bracket the other way.

    The window must contain exactly one crossing.  That is *not* checked: a
    window without a crossing, or one straddling a station, converges to an
    arbitrary instant.  When the iteration budget or the one-second floor is
    reached the last midpoint is returned with ``converged=False``.

    Raises :class:`ReturnEvaluationError` when the evaluator fails or omits
    ``body_key``.
    """

    cfg = settings or ReturnsCfg()
    start = ensure_utc(window_start)
    end = ensure_utc(window_end)
    if end <= start:
        raise ValueError("window_end must be after window_start")

    target = normalize_degrees(target_longitude)
    evaluations = 0
    iteration = 0

    while True:
        mid = start + (end - start) / 2
        chart, longitude, velocity = await _sample(evaluator, mid, location, body_key)
        evaluations += 1
        iteration += 1
        diff = signed_delta(longitude, target)
        LOG.debug(
            "return bisection %s #%d mid=%s lon=%.6f diff=%.6f vel=%.6f",
            body_key,
            iteration,
            mid.isoformat(),
            longitude,
            diff,
            velocity,
        )

        if abs(diff) < cfg.precision_deg:
            return ReturnResult(
                timestamp=mid,
                chart=chart,
                body=body_key,
                target_longitude=target,
                delta_deg=diff,
                iterations=iteration,
                evaluations=evaluations,
                converged=True,
            )

        behind = diff < 0.0
        if velocity < 0.0:
            behind = not behind
        if behind:
            start = mid
        else:
            end = mid

        narrow = (end - start).total_seconds() < cfg.min_window_seconds
        if narrow or iteration >= cfg.max_iterations:
            LOG.warning(
                "%s return did not reach %.4f° (diff %.6f°) after %d iterations; "
                "returning best effort at %s",
                body_key,
                cfg.precision_deg,
                diff,
                iteration,
                mid.isoformat(),
            )
            return ReturnResult(
                timestamp=mid,
                chart=chart,
                body=body_key,
                target_longitude=target,
                delta_deg=diff,
                iterations=iteration,
                evaluations=evaluations,
                converged=False,
            )
