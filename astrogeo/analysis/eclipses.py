"""Eclipse activation status and Saros grouping relative to a natal chart.

Statuses are derived, never stored: they depend only on the distance
between the eclipse and a reference date, so callers recompute them whenever
"today" moves.  Saros grouping is a greedy first-fit pass in catalog order.
It is not a globally optimal clustering and must not be turned into one,
otherwise group membership stops matching what users have already seen.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Literal

from ..chart.models import ChartSnapshot
from ..config.settings import EclipseCfg
from ..core.angles import sign_name, signed_delta
from ..core.time import SECONDS_PER_DAY, ensure_utc
from ..events import AffectedPlanet, EclipseEvent

__all__ = [
    "ACTIVATION_STATUSES",
    "ActivationStats",
    "ActivationStatus",
    "EclipseActivation",
    "EclipseProximity",
    "MissingChartDataError",
    "SarosGroup",
    "activation_stats",
    "assess_impact",
    "classify_activations",
    "default_search_window",
    "determine_activation_status",
    "determine_house",
    "eclipse_proximity",
    "group_by_saros",
]

LOG = logging.getLogger(__name__)

ActivationStatus = Literal["future", "approaching", "active", "integrating", "complete"]
ACTIVATION_STATUSES: tuple[ActivationStatus, ...] = (
    "future",
    "approaching",
    "active",
    "integrating",
    "complete",
)

_EXACT_ORB_DEG = 1.0


class MissingChartDataError(ValueError):
    """Raised when a natal chart lacks the planet mapping classification needs."""


@dataclass(frozen=True)
class EclipseActivation:
    """An impactful eclipse with its status relative to a reference date."""

    eclipse: EclipseEvent
    status: ActivationStatus
    saros_group_id: int | None = None

    @property
    def date(self) -> datetime:
        return self.eclipse.date

    def as_dict(self) -> dict[str, object]:
        payload = self.eclipse.as_dict()
        payload["status"] = self.status
        payload["saros_group_id"] = self.saros_group_id
        return payload


@dataclass(frozen=True)
class SarosGroup:
    """Chronologically ordered eclipses sharing a Saros relationship."""

    group_id: int
    members: tuple[EclipseActivation, ...]

    @property
    def first_date(self) -> datetime:
        return self.members[0].date

    def as_dict(self) -> dict[str, object]:
        return {
            "group_id": self.group_id,
            "members": [member.as_dict() for member in self.members],
        }


@dataclass(frozen=True)
class ActivationStats:
    total: int
    by_status: Mapping[str, int] = field(default_factory=dict)
    by_type: Mapping[str, int] = field(default_factory=dict)
    by_house: Mapping[int, int] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "by_type": dict(self.by_type),
            "by_house": {str(house): count for house, count in self.by_house.items()},
        }


@dataclass(frozen=True)
class EclipseProximity:
    """Nearest catalog eclipse to a birth instant.

    ``eclipse``, ``hours_from_birth`` and ``before_or_after`` are only set
    when the nearest eclipse falls inside ``search_threshold_hours``.
    """

    born_during_eclipse: bool
    search_threshold_hours: float
    eclipse: EclipseEvent | None = None
    hours_from_birth: float | None = None
    before_or_after: Literal["before", "after"] | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "born_during_eclipse": self.born_during_eclipse,
            "search_threshold_hours": self.search_threshold_hours,
            "eclipse": self.eclipse.as_dict() if self.eclipse is not None else None,
            "hours_from_birth": self.hours_from_birth,
            "before_or_after": self.before_or_after,
        }


def _days_between(later: datetime, earlier: datetime) -> float:
    return (ensure_utc(later) - ensure_utc(earlier)).total_seconds() / SECONDS_PER_DAY


def determine_activation_status(
    eclipse_date: datetime,
    reference_date: datetime,
    *,
    settings: EclipseCfg | None = None,
) -> ActivationStatus:
    """Classify ``eclipse_date`` relative to ``reference_date``.

    Months are 30-day blocks.  An eclipse on the reference date is
    ``active``, not ``approaching``.
    """

    cfg = settings or EclipseCfg()
    months_before = _days_between(eclipse_date, reference_date) / cfg.days_per_month
    months_after = -months_before

    if 0.0 < months_before <= cfg.approaching_months:
        return "approaching"
    if 0.0 <= months_after <= cfg.active_months:
        return "active"
    if cfg.active_months < months_after <= cfg.integrating_months:
        return "integrating"
    if months_after > cfg.integrating_months:
        return "complete"
    return "future"


def determine_house(longitude: float, cusps: Sequence[float]) -> int | None:
    """Return the 1-based house holding ``longitude``; ``None`` without 12 cusps."""

    if len(cusps) != 12:
        return None
    for index, cusp in enumerate(cusps):
        following = cusps[(index + 1) % 12]
        if following > cusp:
            if cusp <= longitude < following:
                return index + 1
        elif longitude >= cusp or longitude < following:
            return index + 1
    return 1


def _chart_parts(natal_chart: ChartSnapshot | Mapping[str, Any]) -> tuple[Mapping[str, Any], tuple[float, ...]]:
    if isinstance(natal_chart, ChartSnapshot):
        return natal_chart.planets, natal_chart.house_cusps
    planets = natal_chart.get("planets") if isinstance(natal_chart, Mapping) else None
    if not isinstance(planets, Mapping):
        raise MissingChartDataError("a natal chart with a planets mapping is required")
    houses = natal_chart.get("houses") or natal_chart.get("house_cusps") or ()
    return planets, tuple(float(cusp) for cusp in houses)


def _natal_longitude(entry: Any) -> float | None:
    value = getattr(entry, "longitude", None)
    if value is None and isinstance(entry, Mapping):
        value = entry.get("longitude")
    return float(value) if value is not None else None


def _natal_sign(entry: Any, longitude: float) -> str:
    sign = getattr(entry, "sign", None)
    if sign is None and isinstance(entry, Mapping):
        sign = entry.get("sign")
    return str(sign) if sign else sign_name(longitude)


def _natal_name(key: str, entry: Any) -> str:
    name = getattr(entry, "name", None)
    if name is None and isinstance(entry, Mapping):
        name = entry.get("name")
    return str(name or key)


def assess_impact(
    natal_chart: ChartSnapshot | Mapping[str, Any],
    eclipse: EclipseEvent,
    orb: float = 3.0,
) -> EclipseEvent:
    """Annotate ``eclipse`` with the natal bodies and house it touches.

    Eclipses without a longitude are returned unchanged, keeping whatever
    impact flag the catalog supplied.  Whenever the natal chart carries 12
    house cusps the eclipse lands in some house and therefore counts as
    impactful.
    """

    if eclipse.longitude is None:
        return eclipse
    planets, cusps = _chart_parts(natal_chart)

    affected: list[AffectedPlanet] = []
    for key, entry in planets.items():
        natal_lon = _natal_longitude(entry)
        if natal_lon is None:
            continue
        distance = abs(signed_delta(eclipse.longitude, natal_lon))
        if distance <= orb:
            affected.append(
                AffectedPlanet(
                    planet=_natal_name(str(key), entry),
                    natal_longitude=natal_lon,
                    orb=distance,
                    aspect="exact" if distance < _EXACT_ORB_DEG else "applying",
                    planet_key=str(key),
                    natal_sign=_natal_sign(entry, natal_lon),
                )
            )
    affected.sort(key=lambda item: item.orb)

    house = determine_house(eclipse.longitude, cusps) if cusps else None
    return replace(
        eclipse,
        affected_planets=tuple(affected),
        house=house,
        has_impact=bool(affected) or house is not None,
    )


def _saros_partition(
    dates: Sequence[datetime],
    period_days: float,
    tolerance_days: float,
) -> list[list[int]]:
    groups: list[list[int]] = []
    for index, moment in enumerate(dates):
        for group in groups:
            days = abs(_days_between(moment, dates[group[0]]))
            cycles = math.floor(days / period_days + 0.5)
            deviation = abs(days - cycles * period_days)
            if cycles > 0 and deviation < tolerance_days:
                group.append(index)
                break
        else:
            groups.append([index])

    for group in groups:
        group.sort(key=lambda idx: dates[idx])
    groups.sort(key=lambda group: dates[group[0]])
    return groups


def group_by_saros(
    activations: Sequence[EclipseActivation],
    *,
    settings: EclipseCfg | None = None,
) -> list[SarosGroup]:
    """Greedy first-fit Saros grouping in the order ``activations`` are given.

    Each activation joins the first existing group whose *first* member lies
    within tolerance of a whole (non-zero) number of Saros periods away;
    otherwise it starts a new group.  Groups are returned sorted by their
    earliest member, members chronologically, and each member carries its
    group's id.
    """

    cfg = settings or EclipseCfg()
    partition = _saros_partition(
        [activation.date for activation in activations],
        cfg.saros_period_days,
        cfg.saros_tolerance_days,
    )
    return [
        SarosGroup(
            group_id=group_id,
            members=tuple(
                replace(activations[idx], saros_group_id=group_id) for idx in indices
            ),
        )
        for group_id, indices in enumerate(partition)
    ]


def default_search_window(
    reference_date: datetime,
    *,
    settings: EclipseCfg | None = None,
) -> tuple[datetime, datetime]:
    """Whole calendar years around ``reference_date``: 1 January of the first to 31 December of the last."""

    cfg = settings or EclipseCfg()
    year = ensure_utc(reference_date).year
    return (
        datetime(year - cfg.search_years_back, 1, 1, tzinfo=UTC),
        datetime(year + cfg.search_years_ahead, 12, 31, 23, 59, 59, tzinfo=UTC),
    )


def classify_activations(
    natal_chart: ChartSnapshot | Mapping[str, Any],
    eclipse_catalog: Iterable[EclipseEvent | Mapping[str, Any]],
    reference_date: datetime,
    orb: float | None = None,
    *,
    status: ActivationStatus | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    settings: EclipseCfg | None = None,
) -> list[EclipseActivation]:
    """Return activations for every impactful eclipse in ``eclipse_catalog``.

    Only eclipses dated within ``start``..``end`` (inclusive) are considered;
    missing bounds come from :func:`default_search_window`.  Raises
    :class:`MissingChartDataError` before doing any work when ``natal_chart``
    has no planet mapping.  Results keep catalog order and carry their Saros
    group id; ``status`` optionally filters the output.
    """

    _chart_parts(natal_chart)

    cfg = settings or EclipseCfg()
    orb_deg = cfg.orb_deg if orb is None else orb
    default_start, default_end = default_search_window(reference_date, settings=cfg)
    window_start = ensure_utc(start) if start is not None else default_start
    window_end = ensure_utc(end) if end is not None else default_end
    if window_end < window_start:
        raise ValueError("search window end must not precede its start")

    activations: list[EclipseActivation] = []
    for entry in eclipse_catalog:
        event = entry if isinstance(entry, EclipseEvent) else EclipseEvent.from_mapping(entry)
        if not window_start <= event.date <= window_end:
            continue
        event = assess_impact(natal_chart, event, orb_deg)
        if not event.has_impact:
            continue
        activations.append(
            EclipseActivation(
                eclipse=event,
                status=determine_activation_status(event.date, reference_date, settings=cfg),
            )
        )

    partition = _saros_partition(
        [activation.date for activation in activations],
        cfg.saros_period_days,
        cfg.saros_tolerance_days,
    )
    for group_id, indices in enumerate(partition):
        for idx in indices:
            activations[idx] = replace(activations[idx], saros_group_id=group_id)

    LOG.debug(
        "Classified %d impactful eclipses into %d Saros groups", len(activations), len(partition)
    )
    if status is not None:
        return [activation for activation in activations if activation.status == status]
    return activations


def activation_stats(activations: Iterable[EclipseActivation]) -> ActivationStats:
    """Count activations by status, eclipse type and natal house."""

    by_status: dict[str, int] = {name: 0 for name in ACTIVATION_STATUSES}
    by_type: dict[str, int] = {"solar": 0, "lunar": 0}
    by_house: dict[int, int] = {}
    total = 0
    for activation in activations:
        total += 1
        by_status[activation.status] = by_status.get(activation.status, 0) + 1
        eclipse_type = activation.eclipse.eclipse_type
        by_type[eclipse_type] = by_type.get(eclipse_type, 0) + 1
        house = activation.eclipse.house
        if house is not None:
            by_house[house] = by_house.get(house, 0) + 1
    return ActivationStats(total=total, by_status=by_status, by_type=by_type, by_house=by_house)


def eclipse_proximity(
    birth_instant: datetime,
    eclipse_catalog: Iterable[EclipseEvent | Mapping[str, Any]],
    max_hours: float | None = None,
    *,
    settings: EclipseCfg | None = None,
) -> EclipseProximity:
    """Report whether ``birth_instant`` lies within ``max_hours`` of an eclipse.

    The nearest eclipse wins; on a tie the earlier catalog entry is kept.
    ``before_or_after`` describes the eclipse relative to the birth.
    """

    cfg = settings or EclipseCfg()
    threshold = cfg.proximity_hours if max_hours is None else float(max_hours)
    if threshold < 0.0:
        raise ValueError("max_hours must be non-negative")
    birth = ensure_utc(birth_instant)

    nearest: EclipseEvent | None = None
    nearest_offset = math.inf
    for entry in eclipse_catalog:
        event = entry if isinstance(entry, EclipseEvent) else EclipseEvent.from_mapping(entry)
        offset = (event.date - birth).total_seconds() / 3600.0
        if abs(offset) < abs(nearest_offset):
            nearest, nearest_offset = event, offset

    if nearest is None or abs(nearest_offset) > threshold:
        return EclipseProximity(born_during_eclipse=False, search_threshold_hours=threshold)
    LOG.debug("Birth falls %.2f hours from the %s eclipse", nearest_offset, nearest.date.isoformat())
    return EclipseProximity(
        born_during_eclipse=True,
        search_threshold_hours=threshold,
        eclipse=nearest,
        hours_from_birth=abs(nearest_offset),
        before_or_after="before" if nearest_offset < 0.0 else "after",
    )
