"""Optional ``pyswisseph`` import, resolved on first attribute access."""

from __future__ import annotations

import functools
import importlib
import importlib.util
from types import ModuleType
from typing import Any

__all__ = ["has_swe", "load_swisseph", "swe"]

_INSTALL_HINT = (
    "pyswisseph is not installed. Install astrogeo with the 'swiss' extra "
    "(pip install 'astrogeo[swiss]'); set SE_EPHE_PATH to use Swiss "
    "Ephemeris data files instead of the built-in Moshier model."
)


@functools.cache
def load_swisseph() -> ModuleType:
    """Import and return :mod:`swisseph`; ``RuntimeError`` when unavailable."""

    try:
        return importlib.import_module("swisseph")
    except ImportError as exc:  # pragma: no cover - depends on environment
        raise RuntimeError(_INSTALL_HINT) from exc


class _LazySwisseph:
    """Forwards attribute lookups to :mod:`swisseph`, importing it on demand."""

    __slots__ = ()

    def __getattr__(self, name: str) -> Any:
        return getattr(load_swisseph(), name)

    def __repr__(self) -> str:
        return "<lazy swisseph>"


swe = _LazySwisseph()


def has_swe() -> bool:
    """Return ``True`` when ``swisseph`` can be imported."""

    return importlib.util.find_spec("swisseph") is not None
