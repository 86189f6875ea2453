"""Configuration models and helpers for astrogeo settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "config.yaml"

# -------------------- Settings Schema --------------------


class ReturnsCfg(BaseModel):
    """Return solver precision and iteration budget."""

    precision_deg: float = Field(default=0.01, gt=0.0)
    max_iterations: int = Field(default=50, ge=1)
    min_window_seconds: float = Field(default=1.0, ge=0.0)
    house_system: Literal[
        "placidus",
        "whole_sign",
        "equal",
        "koch",
        "porphyry",
        "regiomontanus",
        "campanus",
    ] = "placidus"


class AstroCartoCfg(BaseModel):
    """Latitude sweep for astrocartography linework."""

    bodies: Optional[List[str]] = None
    lat_min: float = -80.0
    lat_max: float = 80.0
    horizon_step_deg: float = Field(default=1.0, gt=0.0)
    meridian_step_deg: float = Field(default=5.0, gt=0.0)

    @field_validator("lat_min", "lat_max")
    @classmethod
    def _exclude_poles(cls, value: float) -> float:
        numeric = float(value)
        if not -90.0 < numeric < 90.0:
            raise ValueError("latitude bounds must exclude the poles")
        return numeric

    @model_validator(mode="after")
    def _ordered_bounds(self) -> "AstroCartoCfg":
        if self.lat_min >= self.lat_max:
            raise ValueError("lat_min must be below lat_max")
        return self


class EclipseCfg(BaseModel):
    """Eclipse activation windows and Saros grouping constants."""

    orb_deg: float = Field(default=3.0, ge=0.0)
    days_per_month: float = Field(default=30.0, gt=0.0)
    approaching_months: float = Field(default=3.0, gt=0.0)
    active_months: float = Field(default=1.0, ge=0.0)
    integrating_months: float = Field(default=6.0, gt=0.0)
    saros_period_days: float = Field(default=6585.32, gt=0.0)
    saros_tolerance_days: float = Field(default=5.0, gt=0.0)
    search_years_back: int = Field(default=10, ge=0)
    search_years_ahead: int = Field(default=10, ge=0)
    proximity_hours: float = Field(default=12.0, ge=0.0)

    @model_validator(mode="after")
    def _ordered_windows(self) -> "EclipseCfg":
        if self.active_months > self.integrating_months:
            raise ValueError("active_months cannot exceed integrating_months")
        return self


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    returns: ReturnsCfg = Field(default_factory=ReturnsCfg)
    astrocartography: AstroCartoCfg = Field(default_factory=AstroCartoCfg)
    eclipses: EclipseCfg = Field(default_factory=EclipseCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Directory holding ``config.yaml``; ``ASTROGEO_HOME`` wins on every platform."""

    override = os.environ.get("ASTROGEO_HOME")
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        local = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(local) / "Astrogeo"
    return Path.home() / ".astrogeo"


def config_path() -> Path:
    """Path of the settings file; the config home is created on demand."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write ``settings`` as YAML and return the file written."""

    target = Path(path) if path is not None else config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = settings.model_dump(mode="json")
    target.write_text(
        yaml.safe_dump(payload, sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    return target


def _read_payload(source: Path) -> dict[str, Any]:
    raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{source} must contain a YAML mapping, got {type(raw).__name__}")
    version = raw.get("schema_version", CURRENT_SETTINGS_SCHEMA_VERSION)
    if isinstance(version, int) and version > CURRENT_SETTINGS_SCHEMA_VERSION:
        raise ValueError(
            f"{source} uses settings schema {version}; this astrogeo understands "
            f"up to {CURRENT_SETTINGS_SCHEMA_VERSION}"
        )
    return raw


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from ``path`` (default :func:`config_path`).

    A missing file is created with defaults.  Keys left out of the file keep
    their default values.
    """

    source = Path(path) if path is not None else config_path()
    if not source.exists():
        defaults = Settings()
        save_settings(defaults, source)
        return defaults
    return Settings.model_validate(_read_payload(source))
