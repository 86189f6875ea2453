"""Sidereal time helpers."""

from __future__ import annotations

from .sidereal import gmst, local_sidereal_time

__all__ = ["gmst", "local_sidereal_time"]
