"""Logging setup for astrogeo command line entry points.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whichever entry point runs.
"""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "resolve_level"]

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"
_ENV_VARS = ("ASTROGEO_LOG_LEVEL", "LOG_LEVEL")


def resolve_level(value: str | int | None) -> int:
    """Map a level name or number to a ``logging`` level, defaulting to INFO."""

    if isinstance(value, int):
        return value
    candidate = (value or "").strip()
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper()) if candidate else None
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str | int | None = None, **kwargs: Any) -> int:
    """Install a root handler and return the effective level.

    ``level`` overrides ``ASTROGEO_LOG_LEVEL``/``LOG_LEVEL``; extra keyword
    arguments go to :func:`logging.basicConfig`.
    """

    if level is None:
        level = next((os.environ[name] for name in _ENV_VARS if os.environ.get(name)), None)
    effective = resolve_level(level)
    logging.basicConfig(
        level=effective,
        format=kwargs.pop("format", _FORMAT),
        datefmt=kwargs.pop("datefmt", _DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    return effective
