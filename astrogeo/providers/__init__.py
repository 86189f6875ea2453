"""Chart evaluator contract and adapters."""

from __future__ import annotations

from .evaluator import (
    ChartEvaluator,
    EvaluatorError,
    EvaluatorLike,
    evaluate_chart,
    instant_payload,
    parse_chart_payload,
)

__all__ = [
    "ChartEvaluator",
    "EvaluatorError",
    "EvaluatorLike",
    "evaluate_chart",
    "instant_payload",
    "parse_chart_payload",
]
