"""Configuration helpers exposed at :mod:`astrogeo.config`."""

from __future__ import annotations

from .settings import (
    AstroCartoCfg,
    EclipseCfg,
    ReturnsCfg,
    Settings,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "AstroCartoCfg",
    "EclipseCfg",
    "ReturnsCfg",
    "Settings",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
