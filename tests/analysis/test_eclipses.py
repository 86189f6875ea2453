from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from astrogeo.analysis.eclipses import (
    EclipseActivation,
    MissingChartDataError,
    activation_stats,
    assess_impact,
    classify_activations,
    default_search_window,
    determine_activation_status,
    determine_house,
    eclipse_proximity,
    group_by_saros,
)
from astrogeo.config.settings import EclipseCfg
from astrogeo.events import EclipseEvent

SAROS = 6585.32
ECLIPSE = datetime(2024, 4, 8, 18, 17, tzinfo=UTC)
BASE = datetime(2000, 1, 1, tzinfo=UTC)

NATAL = {
    "planets": {
        "SUN": {"name": "Sun", "longitude": 100.0},
        "MOON": {"name": "Moon", "longitude": 200.0},
        "VENUS": {"name": "Venus", "longitude": 101.2},
    }
}
WHOLE_SIGN_CUSPS = [float(index * 30) for index in range(12)]


def _activation(moment: datetime, eclipse_type: str = "solar") -> EclipseActivation:
    event = EclipseEvent(date=moment, eclipse_type=eclipse_type, kind="total", has_impact=True)
    return EclipseActivation(eclipse=event, status="complete")


@pytest.mark.parametrize(
    ("reference", "expected"),
    [
        (ECLIPSE, "active"),
        (ECLIPSE + timedelta(days=300), "complete"),
        (ECLIPSE - timedelta(days=60), "approaching"),
        (ECLIPSE + timedelta(days=120), "integrating"),
        (ECLIPSE - timedelta(days=150), "future"),
        (ECLIPSE + timedelta(days=30), "active"),
        (ECLIPSE + timedelta(days=180), "integrating"),
        (ECLIPSE - timedelta(days=90), "approaching"),
    ],
)
def test_activation_status(reference: datetime, expected: str) -> None:
    assert determine_activation_status(ECLIPSE, reference) == expected


def test_activation_status_follows_settings() -> None:
    cfg = EclipseCfg(approaching_months=6.0)
    assert determine_activation_status(ECLIPSE, ECLIPSE - timedelta(days=150), settings=cfg) == "approaching"


def test_determine_house_handles_wrapping_cusps() -> None:
    cusps = [(350.0 + index * 30) % 360 for index in range(12)]
    assert determine_house(5.0, cusps) == 1
    assert determine_house(351.0, cusps) == 1
    assert determine_house(25.0, cusps) == 2
    assert determine_house(300.0, WHOLE_SIGN_CUSPS) == 11
    assert determine_house(300.0, WHOLE_SIGN_CUSPS[:6]) is None


def test_assess_impact_lists_planets_by_orb() -> None:
    event = EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=100.5)
    assessed = assess_impact(NATAL, event, orb=3.0)

    assert [item.planet for item in assessed.affected_planets] == ["Sun", "Venus"]
    assert [item.aspect for item in assessed.affected_planets] == ["exact", "exact"]
    assert [item.planet_key for item in assessed.affected_planets] == ["SUN", "VENUS"]
    assert [item.natal_sign for item in assessed.affected_planets] == ["Cancer", "Cancer"]
    assert assessed.has_impact is True
    assert assessed.house is None


def test_assess_impact_across_the_seam() -> None:
    natal = {"planets": {"MARS": {"name": "Mars", "longitude": 359.0}}}
    event = EclipseEvent(date=ECLIPSE, eclipse_type="lunar", kind="partial", longitude=1.5)
    assessed = assess_impact(natal, event)

    assert len(assessed.affected_planets) == 1
    assert assessed.affected_planets[0].aspect == "applying"
    assert assessed.affected_planets[0].planet_key == "MARS"
    assert assessed.affected_planets[0].natal_sign == "Pisces"
    assert abs(assessed.affected_planets[0].orb - 2.5) < 1e-9


def test_assess_impact_without_longitude_keeps_catalog_flag() -> None:
    event = EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="annular", has_impact=True)
    assert assess_impact(NATAL, event) is event


def test_houses_make_every_placed_eclipse_impactful() -> None:
    natal = dict(NATAL, houses=WHOLE_SIGN_CUSPS)
    event = EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=300.0)
    assessed = assess_impact(natal, event)

    assert assessed.affected_planets == ()
    assert assessed.house == 11
    assert assessed.has_impact is True


def test_saros_grouping_within_tolerance() -> None:
    activations = [
        _activation(BASE),
        _activation(BASE + timedelta(days=SAROS + 3)),
        _activation(BASE + timedelta(days=2 * SAROS - 4)),
        _activation(BASE + timedelta(days=SAROS + 6)),
        _activation(BASE + timedelta(days=100)),
    ]
    groups = group_by_saros(activations)

    assert [len(group.members) for group in groups] == [3, 1, 1]
    assert groups[0].first_date == BASE
    assert [member.date for member in groups[1].members] == [BASE + timedelta(days=100)]
    assert [member.date for member in groups[2].members] == [BASE + timedelta(days=SAROS + 6)]
    for group in groups:
        assert all(member.saros_group_id == group.group_id for member in group.members)
    assert [group.group_id for group in groups] == [0, 1, 2]


def test_saros_grouping_depends_on_input_order() -> None:
    a = _activation(BASE)
    b = _activation(BASE + timedelta(days=SAROS + 4.5))
    c = _activation(BASE + timedelta(days=2 * SAROS - 4))

    assert [len(group.members) for group in group_by_saros([a, b, c])] == [3]

    groups = group_by_saros([b, c, a])
    assert [[member.date for member in group.members] for group in groups] == [
        [a.date, b.date],
        [c.date],
    ]


def test_group_members_are_chronological() -> None:
    late = _activation(BASE + timedelta(days=2 * SAROS))
    early = _activation(BASE)
    groups = group_by_saros([late, early])
    assert [member.date for member in groups[0].members] == [early.date, late.date]


def test_classify_requires_planets() -> None:
    with pytest.raises(MissingChartDataError):
        classify_activations({"houses": WHOLE_SIGN_CUSPS}, [], ECLIPSE)
    with pytest.raises(MissingChartDataError):
        classify_activations(None, [], ECLIPSE)  # type: ignore[arg-type]


def test_classify_filters_and_annotates() -> None:
    catalog = [
        {"date": "2024-04-08T18:17:00Z", "type": "solar", "kind": "total", "longitude": 101.5},
        {"date": "2024-03-25T07:00:00Z", "type": "lunar", "kind": "penumbral", "longitude": 300.0},
        {"date": "2023-12-15T00:00:00Z", "type": "solar", "kind": "annular", "hasImpact": True},
        {"date": "2023-10-28T20:14:00Z", "type": "lunar", "kind": "partial", "hasImpact": False},
        {
            "date": "2042-04-20T02:17:00Z",
            "type": "solar",
            "kind": "total",
            "longitude": 199.0,
        },
    ]
    reference = datetime(2024, 5, 1, tzinfo=UTC)
    activations = classify_activations(
        NATAL, catalog, reference, end=datetime(2045, 1, 1, tzinfo=UTC)
    )

    assert [activation.eclipse.kind for activation in activations] == ["total", "annular", "total"]
    first = activations[0]
    assert first.status == "active"
    assert [item.planet for item in first.eclipse.affected_planets] == ["Venus", "Sun"]
    assert activations[1].status == "integrating"
    assert activations[2].status == "future"
    assert activations[2].eclipse.affected_planets[0].planet == "Moon"
    assert activations[0].saros_group_id == activations[2].saros_group_id
    assert activations[1].saros_group_id != activations[0].saros_group_id


def test_classify_status_filter_and_orb() -> None:
    catalog = [
        EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=105.0),
        EclipseEvent(date=ECLIPSE + timedelta(days=400), eclipse_type="lunar", kind="total", longitude=200.5),
    ]
    reference = ECLIPSE + timedelta(days=10)

    assert len(classify_activations(NATAL, catalog, reference)) == 1
    widened = classify_activations(NATAL, catalog, reference, orb=5.0)
    assert [activation.status for activation in widened] == ["active", "future"]
    only_future = classify_activations(NATAL, catalog, reference, orb=5.0, status="future")
    assert [activation.eclipse.eclipse_type for activation in only_future] == ["lunar"]


def test_activation_stats_counts() -> None:
    natal = dict(NATAL, houses=WHOLE_SIGN_CUSPS)
    catalog = [
        EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=15.0),
        EclipseEvent(date=ECLIPSE + timedelta(days=14), eclipse_type="lunar", kind="total", longitude=195.0),
        EclipseEvent(date=ECLIPSE - timedelta(days=400), eclipse_type="lunar", kind="partial", longitude=200.0),
    ]
    activations = classify_activations(natal, catalog, ECLIPSE + timedelta(days=20))
    stats = activation_stats(activations)

    assert stats.total == 3
    assert stats.by_status["active"] == 2
    assert stats.by_status["complete"] == 1
    assert stats.by_type == {"solar": 1, "lunar": 2}
    assert stats.by_house == {1: 1, 7: 2}
    assert stats.as_dict()["by_house"] == {"1": 1, "7": 2}


def test_activation_serialises_with_group() -> None:
    catalog = [{"date": "2024-04-08T18:17:00Z", "type": "solar", "kind": "total", "longitude": 100.0}]
    payload = classify_activations(NATAL, catalog, ECLIPSE)[0].as_dict()
    assert payload["status"] == "active"
    assert payload["saros_group_id"] == 0
    assert payload["type"] == "solar"
    assert payload["date"] == "2024-04-08T18:17:00Z"


def test_natal_sign_prefers_chart_value() -> None:
    natal = {"planets": {"SUN": {"name": "Sun", "longitude": 100.0, "sign": "Cancer (sidereal)"}}}
    event = EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=100.0)
    assert assess_impact(natal, event).affected_planets[0].natal_sign == "Cancer (sidereal)"


def test_default_search_window_spans_whole_years() -> None:
    start, end = default_search_window(datetime(2024, 5, 1, 12, tzinfo=UTC))
    assert start == datetime(2014, 1, 1, tzinfo=UTC)
    assert end == datetime(2034, 12, 31, 23, 59, 59, tzinfo=UTC)

    narrow = EclipseCfg(search_years_back=0, search_years_ahead=1)
    assert default_search_window(ECLIPSE, settings=narrow) == (
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC),
    )


def test_classify_skips_eclipses_outside_default_window() -> None:
    catalog = [
        EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=100.0),
        EclipseEvent(date=datetime(2042, 4, 20, 2, 17, tzinfo=UTC), eclipse_type="solar", kind="total", longitude=100.0),
        EclipseEvent(date=datetime(2006, 3, 29, 10, 11, tzinfo=UTC), eclipse_type="solar", kind="total", longitude=100.0),
    ]
    activations = classify_activations(NATAL, catalog, ECLIPSE)
    assert [activation.date for activation in activations] == [ECLIPSE]


def test_classify_honours_explicit_window() -> None:
    catalog = [
        EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total", longitude=100.0),
        EclipseEvent(date=ECLIPSE + timedelta(days=400), eclipse_type="lunar", kind="total", longitude=200.0),
    ]
    later_only = classify_activations(NATAL, catalog, ECLIPSE, start=ECLIPSE + timedelta(seconds=1))
    assert [activation.eclipse.eclipse_type for activation in later_only] == ["lunar"]

    inclusive = classify_activations(NATAL, catalog, ECLIPSE, start=ECLIPSE, end=ECLIPSE)
    assert [activation.eclipse.eclipse_type for activation in inclusive] == ["solar"]

    with pytest.raises(ValueError):
        classify_activations(NATAL, catalog, ECLIPSE, start=ECLIPSE, end=ECLIPSE - timedelta(days=1))


def test_birth_close_to_an_eclipse() -> None:
    catalog = [
        {"date": "2023-10-14T17:59:00Z", "type": "solar", "kind": "annular"},
        {"date": "2024-04-08T18:17:00Z", "type": "solar", "kind": "total"},
        {"date": "2024-03-25T07:00:00Z", "type": "lunar", "kind": "penumbral"},
    ]
    after_birth = eclipse_proximity(ECLIPSE - timedelta(hours=3), catalog)
    assert after_birth.born_during_eclipse is True
    assert after_birth.eclipse is not None and after_birth.eclipse.date == ECLIPSE
    assert after_birth.hours_from_birth == pytest.approx(3.0)
    assert after_birth.before_or_after == "after"
    assert after_birth.search_threshold_hours == 12.0

    before_birth = eclipse_proximity(ECLIPSE + timedelta(hours=11, minutes=30), catalog)
    assert before_birth.before_or_after == "before"
    assert before_birth.hours_from_birth == pytest.approx(11.5)

    at_limit = eclipse_proximity(ECLIPSE + timedelta(hours=12), catalog)
    assert at_limit.born_during_eclipse is True


def test_birth_outside_threshold() -> None:
    catalog = [EclipseEvent(date=ECLIPSE, eclipse_type="solar", kind="total")]
    result = eclipse_proximity(ECLIPSE + timedelta(hours=13), catalog)
    assert result.born_during_eclipse is False
    assert result.eclipse is None
    assert result.hours_from_birth is None
    assert result.before_or_after is None

    widened = eclipse_proximity(ECLIPSE + timedelta(hours=13), catalog, max_hours=24.0)
    assert widened.born_during_eclipse is True
    assert widened.as_dict()["search_threshold_hours"] == 24.0
    assert widened.as_dict()["eclipse"]["date"] == "2024-04-08T18:17:00Z"  # type: ignore[index]

    cfg = EclipseCfg(proximity_hours=1.0)
    assert eclipse_proximity(ECLIPSE + timedelta(hours=2), catalog, settings=cfg).born_during_eclipse is False


def test_proximity_with_empty_catalog() -> None:
    result = eclipse_proximity(ECLIPSE, [])
    assert result.born_during_eclipse is False
    assert result.as_dict() == {
        "born_during_eclipse": False,
        "search_threshold_hours": 12.0,
        "eclipse": None,
        "hours_from_birth": None,
        "before_or_after": None,
    }
    with pytest.raises(ValueError):
        eclipse_proximity(ECLIPSE, [], max_hours=-1.0)
