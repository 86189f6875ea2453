"""Astrocartography and eclipse activation analysis."""

from __future__ import annotations

from .astrocartography import (
    LINE_TYPES,
    AstrocartographyLine,
    AstrocartographyResult,
    BodyLines,
    LinesComputed,
    LinesFailed,
    compute_body_lines,
    generate_lines,
    lines_to_geojson,
    split_antimeridian,
)
from .eclipses import (
    ACTIVATION_STATUSES,
    ActivationStats,
    EclipseActivation,
    EclipseProximity,
    MissingChartDataError,
    SarosGroup,
    activation_stats,
    assess_impact,
    classify_activations,
    default_search_window,
    determine_activation_status,
    determine_house,
    eclipse_proximity,
    group_by_saros,
)
from .interpretations import LINE_INTERPRETATIONS, line_interpretation

__all__ = [
    "ACTIVATION_STATUSES",
    "LINE_INTERPRETATIONS",
    "LINE_TYPES",
    "ActivationStats",
    "AstrocartographyLine",
    "AstrocartographyResult",
    "BodyLines",
    "EclipseActivation",
    "EclipseProximity",
    "LinesComputed",
    "LinesFailed",
    "MissingChartDataError",
    "SarosGroup",
    "activation_stats",
    "assess_impact",
    "classify_activations",
    "compute_body_lines",
    "default_search_window",
    "determine_activation_status",
    "determine_house",
    "eclipse_proximity",
    "generate_lines",
    "group_by_saros",
    "line_interpretation",
    "lines_to_geojson",
    "split_antimeridian",
]
