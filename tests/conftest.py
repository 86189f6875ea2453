from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime

import pytest

from astrogeo.chart.models import ChartLocation


class LinearEvaluator:
    """Deterministic evaluator moving ``body`` at a constant daily rate.

    ``anchor_longitude`` is reached exactly at ``anchor``.  Every call is
    recorded so tests can inspect how often the solver sampled.
    """

    def __init__(
        self,
        body: str,
        anchor: datetime,
        anchor_longitude: float,
        velocity: float,
        *,
        extra: Mapping[str, Mapping[str, float]] | None = None,
    ) -> None:
        self.body = body
        self.anchor = anchor
        self.anchor_longitude = anchor_longitude
        self.velocity = velocity
        self.extra = dict(extra or {})
        self.calls: list[tuple[dict[str, int], dict[str, object]]] = []

    def longitude_at(self, moment: datetime) -> float:
        days = (moment - self.anchor).total_seconds() / 86400.0
        return (self.anchor_longitude + self.velocity * days) % 360.0

    async def evaluate(self, instant, location):
        self.calls.append((dict(instant), dict(location)))
        moment = datetime(
            instant["year"],
            instant["month"],
            instant["day"],
            instant["hour"],
            instant["minute"],
            instant.get("second", 0),
            tzinfo=UTC,
        )
        planets = {
            self.body: {"longitude": self.longitude_at(moment), "velocity": self.velocity}
        }
        planets.update(self.extra)
        return {
            "success": True,
            "planets": planets,
            "houses": [float(index * 30) for index in range(12)],
            "ascendant": 0.0,
            "midheaven": 270.0,
        }


@pytest.fixture
def location() -> ChartLocation:
    return ChartLocation(latitude=51.5, longitude=-0.12)


@pytest.fixture
def linear_evaluator():
    def factory(body, anchor, anchor_longitude, velocity, **kwargs):
        return LinearEvaluator(body, anchor, anchor_longitude, velocity, **kwargs)

    return factory
