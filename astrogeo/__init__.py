"""astrogeo: return solving, astrocartography and eclipse activation.

The package derives new timing and location facts from celestial positions
supplied by an external chart evaluator.  The curated surface below is what
callers are expected to import.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _get_version

from .analysis.astrocartography import (
    AstrocartographyResult,
    BodyLines,
    LinesComputed,
    LinesFailed,
    generate_lines,
    lines_to_geojson,
    split_antimeridian,
)
from .analysis.eclipses import (
    EclipseActivation,
    EclipseProximity,
    MissingChartDataError,
    SarosGroup,
    activation_stats,
    assess_impact,
    classify_activations,
    determine_activation_status,
    eclipse_proximity,
    group_by_saros,
)
from .chart.models import ChartLocation, ChartSnapshot, GeoPoint, PlanetPosition
from .core.coordinates import EquatorialPosition, ecliptic_to_equatorial
from .core.time import julian_day
from .engine.returns import (
    ReturnChart,
    ReturnEvaluationError,
    ReturnResult,
    ReturnSolverError,
    calculate_lunar_return,
    calculate_solar_return,
    find_return,
)
from .ephemeris.sidereal import gmst, local_sidereal_time
from .events import AffectedPlanet, EclipseEvent
from .providers.evaluator import ChartEvaluator, EvaluatorError

try:
    __version__ = _get_version("astrogeo")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved astrogeo package version."""

    return __version__


__all__ = [
    "__version__",
    "get_version",
    "AffectedPlanet",
    "AstrocartographyResult",
    "BodyLines",
    "ChartEvaluator",
    "ChartLocation",
    "ChartSnapshot",
    "EclipseActivation",
    "EclipseEvent",
    "EclipseProximity",
    "EquatorialPosition",
    "EvaluatorError",
    "GeoPoint",
    "LinesComputed",
    "LinesFailed",
    "MissingChartDataError",
    "PlanetPosition",
    "ReturnChart",
    "ReturnEvaluationError",
    "ReturnResult",
    "ReturnSolverError",
    "SarosGroup",
    "activation_stats",
    "assess_impact",
    "calculate_lunar_return",
    "calculate_solar_return",
    "classify_activations",
    "determine_activation_status",
    "eclipse_proximity",
    "ecliptic_to_equatorial",
    "find_return",
    "generate_lines",
    "gmst",
    "group_by_saros",
    "julian_day",
    "lines_to_geojson",
    "local_sidereal_time",
    "split_antimeridian",
]
