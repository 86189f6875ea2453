"""Typer application for the astrogeo CLI."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import List, Optional

import typer

from astrogeo.analysis.astrocartography import generate_lines, lines_to_geojson
from astrogeo.analysis.eclipses import (
    ACTIVATION_STATUSES,
    activation_stats,
    classify_activations,
    eclipse_proximity,
    group_by_saros,
)
from astrogeo.boot import configure_logging
from astrogeo.chart.models import ChartLocation
from astrogeo.config import Settings, default_settings, load_settings
from astrogeo.core.time import ensure_utc, julian_day
from astrogeo.engine.returns import ReturnSolverError, find_return
from astrogeo.ephemeris.sidereal import gmst, local_sidereal_time

app = typer.Typer(help="Astronomical geometry and timing utilities.")


@app.callback()
def _main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (defaults to $ASTROGEO_LOG_LEVEL or INFO)."
    ),
) -> None:
    configure_logging(level=log_level)


def _settings(config: Optional[Path]) -> Settings:
    return load_settings(config) if config else default_settings()


def _read_json(path: Path) -> object:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read JSON from {path}: {exc}") from exc


def _parse_moment(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid ISO-8601 timestamp: {value}") from exc
    return ensure_utc(parsed)


def _emit(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("lines")
def lines_command(
    chart: Path = typer.Argument(..., help="Chart JSON with 'planets' and a birth instant."),
    body: List[str] = typer.Option([], "--body", "-b", help="Restrict to these bodies (repeatable)."),
    geojson: bool = typer.Option(False, "--geojson", help="Emit a GeoJSON FeatureCollection."),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    """Compute astrocartography lines for a chart."""

    data = _read_json(chart)
    if not isinstance(data, dict):
        raise typer.BadParameter("chart JSON must be an object")
    settings = _settings(config)
    try:
        result = generate_lines(
            data, bodies=body or None, settings=settings.astrocartography
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _emit(lines_to_geojson(result) if geojson else result.as_dict())


@app.command("eclipses")
def eclipses_command(
    natal: Path = typer.Argument(..., help="Natal chart JSON with 'planets' (and optional 'houses')."),
    catalog: Path = typer.Argument(..., help="JSON list of eclipse events."),
    reference: Optional[str] = typer.Option(None, "--reference", help="Reference date (ISO-8601, default now)."),
    orb: Optional[float] = typer.Option(None, "--orb", help="Orb in degrees."),
    status: Optional[str] = typer.Option(None, "--status", help="Only show this status."),
    start: Optional[str] = typer.Option(None, "--start", help="Search window start (ISO-8601)."),
    end: Optional[str] = typer.Option(None, "--end", help="Search window end (ISO-8601)."),
    saros: bool = typer.Option(False, "--saros", help="Group output by Saros cycle."),
    stats: bool = typer.Option(False, "--stats", help="Append activation statistics."),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    """Classify eclipse activations against a natal chart."""

    if status is not None and status not in ACTIVATION_STATUSES:
        raise typer.BadParameter(f"status must be one of {', '.join(ACTIVATION_STATUSES)}")
    natal_data = _read_json(natal)
    events = _read_json(catalog)
    if not isinstance(events, list):
        raise typer.BadParameter("eclipse catalog must be a JSON list")
    settings = _settings(config)
    moment = _parse_moment(reference) if reference else datetime.now(UTC)

    try:
        activations = classify_activations(
            natal_data,  # type: ignore[arg-type]
            events,
            moment,
            orb,
            status=status,  # type: ignore[arg-type]
            start=_parse_moment(start) if start else None,
            end=_parse_moment(end) if end else None,
            settings=settings.eclipses,
        )
    except (ValueError, KeyError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    payload: dict[str, object] = {"reference": moment.isoformat().replace("+00:00", "Z")}
    if saros:
        groups = group_by_saros(activations, settings=settings.eclipses)
        payload["groups"] = [group.as_dict() for group in groups]
    else:
        payload["activations"] = [activation.as_dict() for activation in activations]
    if stats:
        payload["stats"] = activation_stats(activations).as_dict()
    _emit(payload)


@app.command("proximity")
def proximity_command(
    birth: str = typer.Argument(..., help="Birth instant (ISO-8601)."),
    catalog: Path = typer.Argument(..., help="JSON list of eclipse events."),
    max_hours: Optional[float] = typer.Option(None, "--max-hours", help="Threshold in hours."),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    """Report whether a birth fell close to an eclipse."""

    events = _read_json(catalog)
    if not isinstance(events, list):
        raise typer.BadParameter("eclipse catalog must be a JSON list")
    settings = _settings(config)
    try:
        result = eclipse_proximity(
            _parse_moment(birth), events, max_hours, settings=settings.eclipses
        )
    except (ValueError, KeyError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    _emit(result.as_dict())


@app.command("sidereal")
def sidereal_command(
    timestamp: str = typer.Argument(..., help="UTC instant (ISO-8601)."),
    longitude: float = typer.Option(0.0, "--longitude", help="East-positive longitude for LST."),
) -> None:
    """Print Julian day, GMST and local sidereal time."""

    moment = _parse_moment(timestamp)
    jd = julian_day(moment)
    gst = gmst(jd)
    _emit(
        {
            "timestamp": moment.isoformat().replace("+00:00", "Z"),
            "julian_day": jd,
            "gmst_deg": gst,
            "lst_deg": local_sidereal_time(gst, longitude),
        }
    )


@app.command("return")
def return_command(
    body: str = typer.Argument(..., help="Evaluator body key, e.g. SUN or MOON."),
    target: float = typer.Argument(..., help="Target ecliptic longitude in degrees."),
    start: str = typer.Option(..., "--start", help="Window start (ISO-8601)."),
    end: str = typer.Option(..., "--end", help="Window end (ISO-8601)."),
    latitude: float = typer.Option(0.0, "--lat", help="Observer latitude."),
    longitude: float = typer.Option(0.0, "--lon", help="Observer longitude."),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
) -> None:
    """Solve a return with the Swiss Ephemeris evaluator (needs pyswisseph)."""

    from astrogeo.providers.swiss import SwissChartEvaluator

    settings = _settings(config)
    try:
        evaluator = SwissChartEvaluator()
    except RuntimeError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    location = ChartLocation(
        latitude=latitude,
        longitude=longitude,
        house_system=settings.returns.house_system,
    )
    try:
        result = asyncio.run(
            find_return(
                target,
                _parse_moment(start),
                _parse_moment(end),
                evaluator,
                body.upper(),
                location,
                settings=settings.returns,
            )
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except ReturnSolverError as exc:
        typer.echo(f"Return solve failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _emit(result.as_dict())
