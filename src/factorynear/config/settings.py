# src/factorynear/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/factorynear/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `FACTORYNEAR_DATASET_PATH`, `FACTORYNEAR_LOG_LEVEL`)
- an external YAML file via `FACTORYNEAR_CONFIG_PATH`

Design rule:
- Tuning knobs (radius, display cap, fallback coordinate, risk codes) live in YAML,
  not hard-coded in filtering or location logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any
from factorynear.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `factorynear.config`."""
    text = resources.files("factorynear.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "FactoryNear"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class DatasetSettings(BaseModel):
    path: str = "data/factories.geojson"
    url: str | None = None


class FallbackCoordinate(BaseModel):
    latitude: float = 14.0504
    longitude: float = 101.3678


class LocationSettings(BaseModel):
    fallback: FallbackCoordinate = Field(default_factory=FallbackCoordinate)
    high_accuracy: bool = True
    timeout_seconds: float = Field(10, gt=0)
    max_cache_age_seconds: float = Field(300, ge=0)
    source_url: str | None = None


class FilteringSettings(BaseModel):
    radius_km: float = Field(10, gt=0)
    km_per_degree: float = Field(111, gt=0)
    display_cap: int = Field(20, ge=1)


class RiskSettings(BaseModel):
    category_codes: list[str] = Field(default_factory=list)
    criteria: str = ""


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    filtering: FilteringSettings = Field(default_factory=FilteringSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("FACTORYNEAR_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    dataset_path = os.getenv("FACTORYNEAR_DATASET_PATH")
    if dataset_path:
        data.setdefault("dataset", {})["path"] = dataset_path

    dataset_url = os.getenv("FACTORYNEAR_DATASET_URL")
    if dataset_url:
        data.setdefault("dataset", {})["url"] = dataset_url

    location_url = os.getenv("FACTORYNEAR_LOCATION_URL")
    if location_url:
        data.setdefault("location", {})["source_url"] = location_url

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("FACTORYNEAR_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
