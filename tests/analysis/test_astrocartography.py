from __future__ import annotations

import logging
import math
from datetime import UTC, datetime

import pytest

from astrogeo.analysis.astrocartography import (
    LinesComputed,
    LinesFailed,
    compute_body_lines,
    generate_lines,
    latitude_samples,
    lines_to_geojson,
    split_antimeridian,
)
from astrogeo.analysis.interpretations import UNKNOWN_INTERPRETATION, line_interpretation
from astrogeo.chart.models import ChartLocation, ChartSnapshot, GeoPoint, PlanetPosition
from astrogeo.config.settings import AstroCartoCfg

J2000 = datetime(2000, 1, 1, 12, tzinfo=UTC)
J2000_GMST = 280.46061837


def _chart_payload(**overrides):
    payload = {
        "birthDate": "2000-01-01T12:00:00Z",
        "planets": {
            "sun": {"name": "Sun", "longitude": 0.0},
            "mars": {"name": "Mars", "longitude": 10.0, "latitude": 1.5},
        },
    }
    payload.update(overrides)
    return payload


def test_vernal_point_at_zero_sidereal_time() -> None:
    lines = compute_body_lines("Sun", 0.0, 0.0, 0.0)

    assert math.isclose(lines.right_ascension, 0.0, abs_tol=1e-9)
    assert all(point.longitude == 0.0 for point in lines.culminate.points)
    assert all(point.longitude == 180.0 for point in lines.anticulminate.points)
    assert all(math.isclose(point.longitude, -90.0, abs_tol=1e-9) for point in lines.rise.points)
    assert all(math.isclose(point.longitude, 90.0, abs_tol=1e-9) for point in lines.set.points)


def test_default_latitude_grids() -> None:
    lines = compute_body_lines("Sun", 0.0, 0.0, 0.0)

    assert [point.latitude for point in lines.rise.points] == list(latitude_samples(-80.0, 80.0, 1.0))
    assert len(lines.rise.points) == 161
    assert [point.latitude for point in lines.culminate.points] == [
        float(lat) for lat in range(-80, 81, 5)
    ]


def test_horizon_points_only_where_the_body_crosses_the_horizon() -> None:
    lines = compute_body_lines("Sun", 90.0, 0.0, 100.0)
    tan_delta = math.tan(math.radians(lines.declination))
    expected = [
        lat
        for lat in latitude_samples(-80.0, 80.0, 1.0)
        if abs(-math.tan(math.radians(lat)) * tan_delta) <= 1.0
    ]

    assert [point.latitude for point in lines.rise.points] == expected
    assert [point.latitude for point in lines.set.points] == expected
    assert len(expected) == 133


def test_meridian_lines_are_antipodal() -> None:
    lines = compute_body_lines("Venus", 250.0, -3.0, 17.25)
    for upper, lower in zip(lines.culminate.points, lines.anticulminate.points):
        separation = abs(upper.longitude - lower.longitude)
        assert math.isclose(separation, 180.0, abs_tol=1e-9)


def test_non_finite_position_is_rejected() -> None:
    with pytest.raises(ValueError):
        compute_body_lines("Moon", float("nan"), 0.0, 0.0)


def test_generate_lines_from_snapshot_uses_gmst() -> None:
    chart = ChartSnapshot(
        timestamp=J2000,
        location=ChartLocation(latitude=0.0, longitude=0.0),
        planets={"SUN": PlanetPosition(name="Sun", longitude=0.0)},
    )
    result = generate_lines(chart)

    assert result.julian_day == 2451545.0
    assert math.isclose(result.gmst, J2000_GMST, abs_tol=1e-9)
    sun = result.lines["Sun"]
    assert math.isclose(sun.culminate.points[0].longitude, 360.0 - J2000_GMST, abs_tol=1e-9)
    assert math.isclose(
        sun.anticulminate.points[0].longitude, 180.0 - J2000_GMST, abs_tol=1e-9
    )


def test_one_bad_body_does_not_sink_the_rest(caplog) -> None:
    planets = {
        "sun": {"name": "Sun", "longitude": 0.0},
        "ghost": {"name": "Ghost"},
        "moon": {"name": "Moon", "longitude": float("nan")},
        "mars": {"name": "Mars", "longitude": 10.0},
    }
    with caplog.at_level(logging.WARNING, logger="astrogeo.analysis.astrocartography"):
        result = generate_lines(_chart_payload(planets=planets))

    assert [item.body for item in result.results] == ["Sun", "Ghost", "Moon", "Mars"]
    assert isinstance(result.results[0], LinesComputed)
    assert isinstance(result.results[1], LinesFailed)
    assert result.results[1].ok is False
    assert set(result.failures) == {"Ghost", "Moon"}
    assert set(result.lines) == {"Sun", "Mars"}
    assert any("Ghost" in record.getMessage() for record in caplog.records)


def test_body_filter_matches_names_and_keys() -> None:
    assert set(generate_lines(_chart_payload(), bodies=["Sun"]).lines) == {"Sun"}
    assert set(generate_lines(_chart_payload(), bodies=["MARS"]).lines) == {"Mars"}
    cfg = AstroCartoCfg(bodies=["mars"])
    assert set(generate_lines(_chart_payload(), settings=cfg).lines) == {"Mars"}


def test_explicit_birth_instant_overrides_payload() -> None:
    later = datetime(2000, 1, 2, 12, tzinfo=UTC)
    result = generate_lines(_chart_payload(), birth_instant=later)
    assert result.moment == later
    assert result.julian_day == 2451546.0


def test_missing_birth_instant_or_planets() -> None:
    payload = _chart_payload()
    del payload["birthDate"]
    with pytest.raises(ValueError, match="birth instant"):
        generate_lines(payload)
    with pytest.raises(ValueError, match="planets"):
        generate_lines({"birthDate": "2000-01-01T12:00:00Z"})


def test_coarser_grid_from_settings() -> None:
    cfg = AstroCartoCfg(lat_min=-60.0, lat_max=60.0, horizon_step_deg=10.0, meridian_step_deg=20.0)
    lines = generate_lines(_chart_payload(), settings=cfg).lines["Sun"]
    assert [point.latitude for point in lines.culminate.points] == [
        -60.0,
        -40.0,
        -20.0,
        0.0,
        20.0,
        40.0,
        60.0,
    ]
    assert len(lines.rise.points) == 13


def test_latitude_samples_requires_positive_step() -> None:
    with pytest.raises(ValueError):
        latitude_samples(-80.0, 80.0, 0.0)


def test_split_antimeridian_breaks_large_jumps() -> None:
    points = [
        GeoPoint(0.0, 170.0),
        GeoPoint(1.0, 179.0),
        GeoPoint(2.0, -179.0),
        GeoPoint(3.0, -170.0),
    ]
    segments = split_antimeridian(points)
    assert [[point.latitude for point in segment] for segment in segments] == [
        [0.0, 1.0],
        [2.0, 3.0],
    ]
    assert split_antimeridian([]) == []


def test_geojson_feature_collection() -> None:
    result = generate_lines(_chart_payload(), bodies=["Sun"])
    collection = lines_to_geojson(result)

    assert collection["type"] == "FeatureCollection"
    features = collection["features"]
    assert [feature["properties"]["kind"] for feature in features] == [
        "rise",
        "set",
        "culminate",
        "anticulminate",
    ]
    for feature in features:
        assert feature["geometry"]["type"] == "MultiLineString"
        assert feature["properties"]["body"] == "Sun"
        assert feature["properties"]["interpretation"] == line_interpretation("Sun", feature["properties"]["kind"])
        lon, lat = feature["geometry"]["coordinates"][0][0]
        assert -180.0 < lon <= 180.0
        assert lat == -80.0
    assert collection["metadata"]["moment"] == "2000-01-01T12:00:00Z"


def test_result_as_dict_shape() -> None:
    payload = generate_lines(_chart_payload()).as_dict()
    sun = payload["lines"]["Sun"]
    assert set(sun) == {"rise", "set", "culminate", "anticulminate", "metadata"}
    assert set(sun["culminate"][0]) == {"lat", "lon"}
    assert payload["failures"] == {}


def test_line_interpretations() -> None:
    assert line_interpretation("Venus", "set").startswith("Places where love, romance")
    assert line_interpretation("NORTH_NODE", "culminate") == line_interpretation("North Node", "mc")
    assert line_interpretation("sun", "Ascendant") == line_interpretation("Sun", "rise")
    assert line_interpretation("Chiron", "anticulminate").startswith("Regions where family wounds")
    assert line_interpretation("Ceres", "rise") == UNKNOWN_INTERPRETATION
    assert line_interpretation("Moon", "zenith") == UNKNOWN_INTERPRETATION
