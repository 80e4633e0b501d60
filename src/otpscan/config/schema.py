"""Typed configuration schema and loader for the otpscan package."""

from __future__ import annotations

import os
from collections.abc import Mapping
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, confloat, conint

LOCALE_ENV = "OTPSCAN_LOCALE"

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class LimitsSettings(BaseModel):
    """Input bounds applied before any pattern scan."""

    max_message_length: conint(ge=1) = 10000

    model_config = ConfigDict(extra="forbid")


class ScoringSettings(BaseModel):
    """Window sizes used by the context-sensitive scoring signals."""

    money_radius: conint(ge=0) = 25
    phone_prefix_window: conint(ge=0) = 5

    model_config = ConfigDict(extra="forbid")


class CalibrationSettings(BaseModel):
    """Mapping from raw candidate score to calibrated confidence."""

    score_scale: confloat(gt=0.0) = 8.0
    otp_threshold: confloat(ge=0.0, le=1.0) = 0.6
    keyword_boost: confloat(ge=0.0, le=1.0) = 0.15
    safety_boost: confloat(ge=0.0, le=1.0) = 0.15
    parcel_boost: confloat(ge=0.0, le=1.0) = 0.15

    model_config = ConfigDict(extra="forbid")


class ConfigModel(BaseModel):
    """Top-level configuration model."""

    schema_version: conint(ge=1)
    locale: str
    limits: LimitsSettings
    scoring: ScoringSettings
    calibration: CalibrationSettings

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Loader utilities
# ---------------------------------------------------------------------------


def deep_merge_dicts(a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping ``b`` onto ``a`` returning a new dict."""

    result: dict[str, Any] = dict(a)
    for key, b_val in b.items():
        if key in result and isinstance(result[key], dict) and isinstance(b_val, dict):
            result[key] = deep_merge_dicts(result[key], b_val)
        else:
            result[key] = b_val
    return result


def load_defaults() -> dict[str, Any]:
    """Return the packaged ``defaults.yml`` as a plain mapping."""

    with (
        importlib_resources.files("otpscan.config")
        .joinpath("defaults.yml")
        .open("r", encoding="utf-8") as f
    ):
        return yaml.safe_load(f) or {}


def load_config(
    path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ConfigModel:
    """Load configuration from defaults and optional user overrides.

    Precedence of sources: package ``defaults.yml`` < user-provided YAML <
    ``OTPSCAN_LOCALE`` environment variable.
    """

    defaults = load_defaults()

    if path is not None:
        with Path(path).open("r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        merged = deep_merge_dicts(defaults, overrides)
    else:
        merged = defaults

    cfg = ConfigModel.model_validate(merged)

    environ = env if env is not None else os.environ
    locale = environ.get(LOCALE_ENV, "").strip()
    if locale:
        cfg.locale = locale

    return cfg


__all__ = [
    "LOCALE_ENV",
    "CalibrationSettings",
    "ConfigModel",
    "LimitsSettings",
    "ScoringSettings",
    "deep_merge_dicts",
    "load_config",
    "load_defaults",
]
