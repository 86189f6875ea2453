"""Time conversion helpers used across astrogeo.

Chart evaluators and callers hand us ``datetime`` objects in whatever
timezone they happen to carry.  Everything downstream works in UTC Julian
days, so the conversion lives here in one place.  Naive datetimes are
interpreted as UTC rather than local wall-clock time.
"""

from __future__ import annotations

import datetime as _dt
from typing import Final

__all__ = [
    "SECONDS_PER_DAY",
    "J2000_JD",
    "datetime_from_julian_day",
    "ensure_utc",
    "julian_day",
]


SECONDS_PER_DAY: Final[float] = 86_400.0
J2000_JD: Final[float] = 2_451_545.0

_UNIX_EPOCH_JD: Final[float] = 2_440_587.5
_UNIX_EPOCH: Final[_dt.datetime] = _dt.datetime(1970, 1, 1, tzinfo=_dt.UTC)


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC."""

    tzinfo = moment.tzinfo
    if tzinfo is None:
        return moment.replace(tzinfo=_dt.UTC)
    return moment.astimezone(_dt.UTC)


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian day for a UTC ``moment`` (Gregorian calendar).

    The integral part follows the Fliegel–Van Flandern day-number formula,
    which is anchored at noon; the fractional day is therefore offset by
    twelve hours.
    """

    moment = ensure_utc(moment)
    a = (14 - moment.month) // 12
    y = moment.year + 4800 - a
    m = moment.month + 12 * a - 3

    jdn = (
        moment.day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )
    seconds = moment.second + moment.microsecond / 1e6
    return jdn + (moment.hour - 12) / 24.0 + moment.minute / 1440.0 + seconds / SECONDS_PER_DAY


def datetime_from_julian_day(jd_ut: float) -> _dt.datetime:
    """Inverse of :func:`julian_day` returning an aware UTC datetime."""

    seconds = (jd_ut - _UNIX_EPOCH_JD) * SECONDS_PER_DAY
    return _UNIX_EPOCH + _dt.timedelta(seconds=seconds)
