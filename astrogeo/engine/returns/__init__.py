"""Return solving primitives."""

from __future__ import annotations

from .charts import ReturnChart, calculate_lunar_return, calculate_solar_return, guess_window
from .finder import (
    ReturnEvaluationError,
    ReturnResult,
    ReturnSolverError,
    find_return,
)

__all__ = [
    "ReturnChart",
    "ReturnEvaluationError",
    "ReturnResult",
    "ReturnSolverError",
    "calculate_lunar_return",
    "calculate_solar_return",
    "find_return",
    "guess_window",
]
